r"""
User-defined frameworks.

A custom framework is declared in the configuration file:

    {
        "id": "my-i18n",
        "languageIds": ["javascript", "typescript"],
        "usageMatchRegex": ["\\btranslate\\(\\s*['\"]({key})['\"]"],
        "refactorTemplates": ["translate('$1')", "$1"],
        "keyPrefixRegex": [],
        "packageJSON": ["my-i18n"]
    }

``$1`` in a refactor template is replaced by the key path. Both camelCase
and snake_case field names are accepted.
"""

from typing import Any, Dict, List, Optional, Sequence

from ..document import TextDocument
from ..exceptions import FrameworkConfigError
from ..models import DetectionResult
from .base import Framework, detect_by_language

KEYPATH_PLACEHOLDER = '$1'


def _field(data: Dict[str, Any], camel: str, snake: str, default=None):
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _as_list(value, name: str, framework_id: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise FrameworkConfigError(f"Custom framework '{framework_id}': '{name}' must be a list of strings")
    return list(value)


def make_refactor_templates(templates: Sequence[str]):
    templates = tuple(templates)

    def refactor_templates(
        keypath: str,
        args: Sequence[str] = (),
        document: Optional[TextDocument] = None,
        detection: Optional[DetectionResult] = None,
    ) -> List[str]:
        return [t.replace(KEYPATH_PLACEHOLDER, keypath) for t in templates]

    return refactor_templates


def framework_from_config(data: Dict[str, Any]) -> Framework:
    """Build and validate a framework from a configuration dictionary."""
    if not isinstance(data, dict):
        raise FrameworkConfigError("Custom framework definition must be an object")

    framework_id = data.get('id') or 'custom'
    templates = _as_list(_field(data, 'refactorTemplates', 'refactor_templates'), 'refactorTemplates', framework_id)
    if not templates:
        templates = [KEYPATH_PLACEHOLDER]

    return Framework(
        id=framework_id,
        display=data.get('display') or framework_id,
        language_ids=tuple(_as_list(_field(data, 'languageIds', 'language_ids'), 'languageIds', framework_id)),
        usage_match_regex=tuple(
            _as_list(_field(data, 'usageMatchRegex', 'usage_match_regex'), 'usageMatchRegex', framework_id)
        ),
        refactor_templates=make_refactor_templates(templates),
        detect_hard_strings=detect_by_language,
        key_prefix_regex=tuple(
            _as_list(_field(data, 'keyPrefixRegex', 'key_prefix_regex'), 'keyPrefixRegex', framework_id)
        ),
        attribute_binding=_field(data, 'attributeBinding', 'attribute_binding', '{name}="{expression}"'),
        package_json=tuple(_as_list(_field(data, 'packageJSON', 'package_json'), 'packageJSON', framework_id)),
    )
