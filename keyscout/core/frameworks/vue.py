"""
vue-i18n, vuex-i18n, vue-i18next and nuxt-i18n.
"""

from typing import List, Optional, Sequence

from ...utils.languages import (
    EJS,
    JAVASCRIPT,
    JAVASCRIPT_REACT,
    TYPESCRIPT,
    TYPESCRIPT_REACT,
    VUE,
    VUE_HTML,
)
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
    params = quote_params(keypath, args)
    source = detection.source if detection else None

    if source == SOURCE_HTML_INLINE:
        return [f"{{{{ $t({params}) }}}}"]
    if source == SOURCE_HTML_ATTRIBUTE:
        return [f"$t({params})"]
    if source in (SOURCE_JS_STRING, SOURCE_JS_TEMPLATE):
        return [f"this.$t({params})", f"i18n.t({params})", f"t({params})"]

    return [
        f"{{{{ $t({params}) }}}}",
        f"this.$t({params})",
        f"$t({params})",
        f"i18n.t({params})",
        # vue-i18n-next
        f"{{{{ t({params}) }}}}",
        f"t({params})",
        keypath,
    ]


VUE_FRAMEWORK = Framework(
    id='vue',
    display='Vue',
    language_ids=(VUE, VUE_HTML, JAVASCRIPT, TYPESCRIPT, JAVASCRIPT_REACT, TYPESCRIPT_REACT, EJS),
    # for visualizing the regex, https://regexper.com/ helps
    usage_match_regex=(
        r'(?:i18n(?:-\w+)?[ (\n]\s*(?:key)?path=|v-t=[\'"`{]|(?:this\.|\$|i18n\.|\b)(?:t|tc|te)\()'
        r'\s*[\'"`]({key})[\'"`]',
    ),
    refactor_templates=refactor_templates,
    detect_hard_strings=detect_by_language,
    attribute_binding=':{name}="{expression}"',
    package_json=('vue-i18n', 'vuex-i18n', '@panter/vue-i18next', 'nuxt-i18n'),
)
