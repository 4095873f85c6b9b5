"""
Language identifiers understood by the framework layer.

The identifiers follow the editor convention (``javascriptreact`` rather
than ``jsx``) so buffers coming from an editor need no translation.
"""

from pathlib import Path
from typing import Optional, Union

JAVASCRIPT = 'javascript'
TYPESCRIPT = 'typescript'
JAVASCRIPT_REACT = 'javascriptreact'
TYPESCRIPT_REACT = 'typescriptreact'
VUE = 'vue'
VUE_HTML = 'vue-html'
HTML = 'html'
EJS = 'ejs'

SCRIPT_LANGUAGES = (JAVASCRIPT, TYPESCRIPT, JAVASCRIPT_REACT, TYPESCRIPT_REACT)
JSX_LANGUAGES = (JAVASCRIPT_REACT, TYPESCRIPT_REACT)
MARKUP_LANGUAGES = (VUE, VUE_HTML, HTML, EJS)

EXTENSION_LANGUAGES = {
    '.js': JAVASCRIPT,
    '.mjs': JAVASCRIPT,
    '.cjs': JAVASCRIPT,
    '.ts': TYPESCRIPT,
    '.mts': TYPESCRIPT,
    '.cts': TYPESCRIPT,
    '.jsx': JAVASCRIPT_REACT,
    '.tsx': TYPESCRIPT_REACT,
    '.vue': VUE,
    '.html': HTML,
    '.htm': HTML,
    '.ejs': EJS,
}


def guess_language_id(path: Union[str, Path, None]) -> Optional[str]:
    if not path:
        return None
    return EXTENSION_LANGUAGES.get(Path(path).suffix.lower())


def is_markup(language_id: str) -> bool:
    return language_id in MARKUP_LANGUAGES


def is_jsx(language_id: str) -> bool:
    return language_id in JSX_LANGUAGES
