"""
Plain i18next, including the jQuery/DOM ``data-i18n`` attribute binding.
"""

from typing import List, Optional, Sequence

from ...utils.languages import HTML, JAVASCRIPT, JAVASCRIPT_REACT, TYPESCRIPT, TYPESCRIPT_REACT
from ..document import TextDocument
from ..models import (
    DetectionResult,
    SOURCE_HTML_ATTRIBUTE,
    SOURCE_HTML_INLINE,
    SOURCE_JS_STRING,
    SOURCE_JS_TEMPLATE,
)
from .base import Framework, detect_by_language, quote_params


def refactor_templates(
    keypath: str,
    args: Sequence[str] = (),
    document: Optional[TextDocument] = None,
    detection: Optional[DetectionResult] = None,
) -> List[str]:
    params = quote_params(keypath, args, brackets='{}')
    source = detection.source if detection else None

    if source == SOURCE_HTML_INLINE:
        return [f'<span data-i18n="{keypath}"></span>']
    if source == SOURCE_HTML_ATTRIBUTE:
        return [f"i18next.t({params})"]
    if source in (SOURCE_JS_STRING, SOURCE_JS_TEMPLATE):
        return [f"i18next.t({params})", f"t({params})"]

    return [
        f"i18next.t({params})",
        f"t({params})",
        f'data-i18n="{keypath}"',
        keypath,
    ]


I18NEXT_FRAMEWORK = Framework(
    id='i18next',
    display='i18next',
    language_ids=(JAVASCRIPT, TYPESCRIPT, JAVASCRIPT_REACT, TYPESCRIPT_REACT, HTML),
    usage_match_regex=(
        r'\b(?:i18next|i18n)\.t\(\s*[\'"`]({key})[\'"`]',
        r'\bt\(\s*[\'"`]({key})[\'"`]',
        r'\bdata-i18n=[\'"]({key})[\'"]',
    ),
    refactor_templates=refactor_templates,
    detect_hard_strings=detect_by_language,
    package_json=('i18next', 'jquery-i18next', 'loc-i18next'),
)
