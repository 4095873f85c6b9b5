"""
Framework capability record.

A framework is data: the languages it claims, its usage patterns, how a key
is rendered back into code, and which detectors to run. No variant
overrides control flow, so there is no class hierarchy, only records
validated once at construction.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Pattern, Sequence, Tuple

from ...utils.config import ConfigManager, JsParserOptions
from ...utils.languages import is_jsx, is_markup
from ..document import TextDocument
from ..exceptions import FrameworkConfigError
from ..models import DetectionResult, RuleSet
from ..parsers import babel, html
from ..parsers.utils import shift_detection_position
from ..rules import (
    DEFAULT_DYNAMIC_EXTRACTION_RULES,
    DEFAULT_EXTRACTION_RULES,
    KEY_PLACEHOLDER,
    build_usage_regex,
)

logger = logging.getLogger(__name__)

SCRIPT_BLOCK_RE = re.compile(r'(<script[^>]*?>)([\s\S]*?)</script>', re.I)
SCRIPT_LANG_RE = re.compile(r'\blang\s*=\s*["\']?([\w-]+)', re.I)

RefactorTemplates = Callable[..., List[str]]
HardStringDetector = Callable[['Framework', TextDocument, Optional[ConfigManager]], List[DetectionResult]]


@dataclass(frozen=True)
class Framework:
    id: str
    display: str
    language_ids: Tuple[str, ...]
    usage_match_regex: Tuple[str, ...]
    refactor_templates: RefactorTemplates
    detect_hard_strings: Optional[HardStringDetector] = None
    key_prefix_regex: Tuple[str, ...] = ()
    attribute_binding: str = '{name}="{expression}"'
    package_json: Tuple[str, ...] = ()
    ruleset: RuleSet = field(init=False, repr=False, compare=False)
    key_prefix_regexes: Tuple[Pattern, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ('id', 'display'):
            if not getattr(self, name):
                raise FrameworkConfigError(f"Framework is missing required field '{name}'")
        for name in ('language_ids', 'usage_match_regex', 'key_prefix_regex', 'package_json'):
            value = getattr(self, name)
            if isinstance(value, str):
                value = (value,)
            object.__setattr__(self, name, tuple(value or ()))
        if not self.language_ids:
            raise FrameworkConfigError(f"Framework '{self.id}' declares no language ids")
        if not self.usage_match_regex:
            raise FrameworkConfigError(f"Framework '{self.id}' declares no usage regex")
        for pattern in self.usage_match_regex:
            if KEY_PLACEHOLDER not in pattern:
                raise FrameworkConfigError(
                    f"Usage regex of framework '{self.id}' has no {KEY_PLACEHOLDER} placeholder: {pattern}"
                )
        if not callable(self.refactor_templates):
            raise FrameworkConfigError(f"Framework '{self.id}' has no refactor templates")
        if self.detect_hard_strings is not None and not callable(self.detect_hard_strings):
            raise FrameworkConfigError(f"Framework '{self.id}' hard-string detector is not callable")

        try:
            usage = build_usage_regex(self.usage_match_regex)
            prefixes = tuple(re.compile(p) for p in self.key_prefix_regex)
        except re.error as exc:
            raise FrameworkConfigError(f"Framework '{self.id}' has an invalid regex: {exc}") from exc

        object.__setattr__(self, 'ruleset', RuleSet(
            usage_match_regex=usage,
            extraction_rules=DEFAULT_EXTRACTION_RULES,
            dynamic_extraction_rules=DEFAULT_DYNAMIC_EXTRACTION_RULES,
        ))
        object.__setattr__(self, 'key_prefix_regexes', prefixes)

    @property
    def usage_regexes(self) -> Tuple[Pattern, ...]:
        return self.ruleset.usage_match_regex

    def supports(self, language_id: str) -> bool:
        return language_id in self.language_ids

    def is_used_by(self, dependencies) -> bool:
        """True when any of the framework's packages is among ``dependencies``."""
        return any(name in dependencies for name in self.package_json)

    def render(
        self,
        keypath: str,
        args: Sequence[str] = (),
        document: Optional[TextDocument] = None,
        detection: Optional[DetectionResult] = None,
    ) -> List[str]:
        return list(self.refactor_templates(keypath, list(args), document, detection))

    def bind_attribute(self, name: str, expression: str) -> str:
        return self.attribute_binding.format(name=name, expression=expression)

    def detect(self, document: TextDocument, config: Optional[ConfigManager] = None) -> List[DetectionResult]:
        if self.detect_hard_strings is None:
            return []
        return list(self.detect_hard_strings(self, document, config) or [])


def quote_params(keypath: str, args: Sequence[str] = (), brackets: str = '[]') -> str:
    params = f"'{keypath}'"
    if args:
        params += f", {brackets[0]}{', '.join(args)}{brackets[1]}"
    return params


def _js_options(config: Optional[ConfigManager], jsx: bool) -> JsParserOptions:
    base = config.js_options if config is not None else JsParserOptions()
    if base.jsx is not None:
        return base
    return replace(base, jsx=jsx)


def detect_script(
    framework: Framework,
    text: str,
    config: Optional[ConfigManager] = None,
    jsx: bool = False,
) -> List[DetectionResult]:
    rules = framework.ruleset
    return babel.detect(
        text,
        rules.extraction_rules,
        rules.dynamic_extraction_rules,
        _js_options(config, jsx),
        usage_regexes=rules.usage_match_regex,
    )


def detect_markup(
    framework: Framework,
    text: str,
    config: Optional[ConfigManager] = None,
) -> List[DetectionResult]:
    """Markup candidates plus every ``<script>`` block, shifted into place."""
    rules = framework.ruleset
    html_options = config.html_options if config is not None else None
    result = html.detect(text, rules.extraction_rules, rules.dynamic_extraction_rules, html_options)

    blocks = 0
    for match in SCRIPT_BLOCK_RE.finditer(text):
        blocks += 1
        lang = SCRIPT_LANG_RE.search(match.group(1))
        jsx = bool(lang) and lang.group(1).lower() in ('jsx', 'tsx')
        index = match.start() + len(match.group(1))
        result.extend(shift_detection_position(
            detect_script(framework, match.group(2), config, jsx=jsx),
            index,
        ))

    opened = len(re.findall(r'<script\b', text, re.I))
    if opened > blocks:
        logger.debug("Skipped %s unterminated <script> block(s)", opened - blocks)
    return result


def detect_by_language(
    framework: Framework,
    document: TextDocument,
    config: Optional[ConfigManager] = None,
) -> List[DetectionResult]:
    text = document.get_text()
    if is_markup(document.language_id):
        return detect_markup(framework, text, config)
    return detect_script(framework, text, config, jsx=is_jsx(document.language_id))
