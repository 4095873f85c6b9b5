"""
Framework policy layer
======================

The registry answers "which frameworks apply to this buffer" and runs all
of them: several i18n libraries can claim the same language, so detection
merges every matching framework's results instead of stopping at the first.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Pattern, Sequence, Set, Tuple, Union

from ..document import TextDocument
from ..models import DetectionReport, DetectionResult
from ..parsers.utils import dedupe_detections, trim_detection
from .base import Framework, detect_by_language, detect_markup, detect_script
from .custom import framework_from_config
from .i18next import I18NEXT_FRAMEWORK
from .react_i18next import REACT_I18NEXT_FRAMEWORK
from .vue import VUE_FRAMEWORK

BUILTIN_FRAMEWORKS: Tuple[Framework, ...] = (
    VUE_FRAMEWORK,
    REACT_I18NEXT_FRAMEWORK,
    I18NEXT_FRAMEWORK,
)

PACKAGE_JSON = 'package.json'
DEPENDENCY_SECTIONS = ('dependencies', 'devDependencies', 'peerDependencies')

logger = logging.getLogger(__name__)


def find_package_json(start: Union[str, Path]) -> Optional[Path]:
    """The nearest ``package.json`` in ``start`` or one of its parents."""
    start = Path(start)
    if start.is_file():
        start = start.parent
    for directory in (start, *start.parents):
        candidate = directory / PACKAGE_JSON
        if candidate.is_file():
            return candidate
    return None


def read_dependencies(package_json: Union[str, Path]) -> Set[str]:
    """Package names declared in any dependency section of ``package_json``."""
    try:
        with open(package_json, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {package_json}: {e}")
        return set()
    if not isinstance(data, dict):
        return set()

    names = set()
    for section in DEPENDENCY_SECTIONS:
        deps = data.get(section)
        if isinstance(deps, dict):
            names.update(deps)
    return names


class FrameworkRegistry:
    def __init__(self, frameworks: Optional[Iterable[Framework]] = None, enabled: Optional[Sequence[str]] = None):
        self.logger = logging.getLogger(__name__)
        frameworks = list(BUILTIN_FRAMEWORKS if frameworks is None else frameworks)
        if enabled:
            wanted = set(enabled)
            frameworks = [f for f in frameworks if f.id in wanted]
        self._frameworks: Dict[str, Framework] = {}
        for framework in frameworks:
            self.register(framework)

    @classmethod
    def from_config(cls, config, project_root: Optional[Union[str, Path]] = None) -> 'FrameworkRegistry':
        """Built-ins filtered by ``enabled_frameworks``, plus custom frameworks.

        Without ``enabled_frameworks``, a ``package.json`` found from
        ``project_root`` upwards narrows the built-ins to the ones the project
        depends on. If it names none of them, every built-in stays enabled.

        Raises ``FrameworkConfigError`` when a custom framework is invalid.
        """
        settings = config.extraction
        enabled = settings.enabled_frameworks
        if not enabled and project_root is not None:
            package_json = find_package_json(project_root)
            if package_json is not None:
                enabled = [f.id for f in cls.detect_frameworks(package_json)]
                if enabled:
                    logger.info("Frameworks detected from %s: %s", package_json, ", ".join(enabled))
        registry = cls(enabled=enabled)
        for data in settings.custom_frameworks:
            registry.register(framework_from_config(data))
        return registry

    @staticmethod
    def detect_frameworks(
        package_json: Union[str, Path],
        frameworks: Iterable[Framework] = BUILTIN_FRAMEWORKS,
    ) -> List[Framework]:
        """Frameworks whose packages ``package_json`` depends on."""
        dependencies = read_dependencies(package_json)
        return [f for f in frameworks if f.is_used_by(dependencies)]

    def register(self, framework: Framework) -> None:
        if framework.id in self._frameworks:
            self.logger.warning("Framework %s registered twice, keeping the latest", framework.id)
        self._frameworks[framework.id] = framework

    @property
    def frameworks(self) -> List[Framework]:
        return list(self._frameworks.values())

    def get(self, framework_id: str) -> Optional[Framework]:
        return self._frameworks.get(framework_id)

    def get_frameworks_by_lang(self, language_id: str) -> List[Framework]:
        return [f for f in self._frameworks.values() if f.supports(language_id)]

    def get_usage_regexes(self, language_id: str) -> List[Pattern]:
        """Usage regexes of every matching framework, in registration order, without repeats."""
        seen = set()
        regexes = []
        for framework in self.get_frameworks_by_lang(language_id):
            for regex in framework.usage_regexes:
                if regex.pattern in seen:
                    continue
                seen.add(regex.pattern)
                regexes.append(regex)
        return regexes

    def get_key_prefix_regexes(self, language_id: str) -> List[Pattern]:
        return [
            regex
            for framework in self.get_frameworks_by_lang(language_id)
            for regex in framework.key_prefix_regexes
        ]

    def detect_hard_strings(self, document: TextDocument, config=None) -> DetectionReport:
        """Run every framework claiming the document's language and merge the results.

        An unsupported language is reported through ``supported=False``.
        """
        frameworks = [
            f for f in self.get_frameworks_by_lang(document.language_id)
            if f.detect_hard_strings is not None
        ]
        if not frameworks:
            self.logger.warning("Extraction is not supported for language '%s'", document.language_id)
            return DetectionReport(language_id=document.language_id, supported=False)

        results: List[DetectionResult] = []
        for framework in frameworks:
            found = [trim_detection(r) for r in framework.detect(document, config) if r]
            results.extend(r for r in found if r is not None)

        merged = dedupe_detections(results)
        self.logger.debug(
            "Detected %s hard strings in %s with %s",
            len(merged), document.file_path or '<memory>', ", ".join(f.id for f in frameworks),
        )
        return DetectionReport(
            language_id=document.language_id,
            frameworks=tuple(f.id for f in frameworks),
            results=tuple(merged),
            supported=True,
        )


__all__ = [
    'Framework', 'FrameworkRegistry', 'BUILTIN_FRAMEWORKS',
    'VUE_FRAMEWORK', 'REACT_I18NEXT_FRAMEWORK', 'I18NEXT_FRAMEWORK',
    'framework_from_config', 'detect_by_language', 'detect_markup', 'detect_script',
    'find_package_json', 'read_dependencies',
]
