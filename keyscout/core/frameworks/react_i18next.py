"""
react-i18next (and next-i18next, which shares its API).

Besides the usual ``t('key')`` calls, keys can be scoped by a ``keyPrefix``
passed to ``useTranslation`` or ``getFixedT``; see
``KeyDetector.detected_key`` for how that prefix is applied.
"""

from typing import List, Optional, Sequence

from ...utils.languages import JAVASCRIPT, JAVASCRIPT_REACT, TYPESCRIPT, TYPESCRIPT_REACT
from ..document import TextDocument
from ..models import DetectionResult, SOURCE_JS_STRING, SOURCE_JS_TEMPLATE, SOURCE_JSX_TEXT
from .base import Framework, detect_by_language, quote_params


def refactor_templates(
    keypath: str,
    args: Sequence[str] = (),
    document: Optional[TextDocument] = None,
    detection: Optional[DetectionResult] = None,
) -> List[str]:
    params = quote_params(keypath, args, brackets='{}')
    source = detection.source if detection else None

    if source == SOURCE_JSX_TEXT:
        return [f"{{t({params})}}"]
    if source in (SOURCE_JS_STRING, SOURCE_JS_TEMPLATE):
        if detection.attribute:
            return [f"{{t({params})}}"]
        return [f"t({params})", f"i18n.t({params})"]

    return [
        f"{{t({params})}}",
        f"t({params})",
        f"i18n.t({params})",
        keypath,
    ]


REACT_I18NEXT_FRAMEWORK = Framework(
    id='react-i18next',
    display='React I18next',
    language_ids=(JAVASCRIPT, TYPESCRIPT, JAVASCRIPT_REACT, TYPESCRIPT_REACT),
    usage_match_regex=(
        r'\bt\(\s*[\'"`]({key})[\'"`]',
        r'\bi18nKey=\{?\s*[\'"`]({key})[\'"`]',
    ),
    refactor_templates=refactor_templates,
    detect_hard_strings=detect_by_language,
    key_prefix_regex=(
        r'useTranslation\(\s*(?:[\'"`][^\'"`]*[\'"`]|\[[^\]]*\])?\s*,?\s*\{[^}]*?\bkeyPrefix:\s*[\'"`]([^\'"`]+)[\'"`]',
        r'getFixedT\(\s*[^,()]*,\s*[^,()]*,\s*[\'"`]([^\'"`]+)[\'"`]',
    ),
    attribute_binding='{name}={{{expression}}}',
    package_json=('react-i18next', 'next-i18next'),
)
