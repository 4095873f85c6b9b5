"""
Value objects shared by the key extractor, the string detectors and the
framework layer.

None of these carry a reference back to the buffer they were computed from;
offsets are only meaningful against the buffer version that produced them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern, Tuple


SOURCE_HTML_INLINE = 'html-inline'
SOURCE_HTML_ATTRIBUTE = 'html-attribute'
SOURCE_JS_STRING = 'js-string'
SOURCE_JS_TEMPLATE = 'js-template'
SOURCE_JSX_TEXT = 'jsx-text'

ALL_SOURCES = (
    SOURCE_HTML_INLINE,
    SOURCE_HTML_ATTRIBUTE,
    SOURCE_JS_STRING,
    SOURCE_JS_TEMPLATE,
    SOURCE_JSX_TEXT,
)


@dataclass(frozen=True)
class TextRange:
    """Half-open ``[start, end)`` offset interval; also used as a scope range."""
    start: int
    end: int

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end

    def shift(self, offset: int) -> 'TextRange':
        return TextRange(self.start + offset, self.end + offset)


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position


@dataclass(frozen=True)
class KeyMatch:
    """A translation key referenced by a usage match.

    ``start``/``end`` bound the raw key text in the buffer; ``key`` may carry
    an inferred prefix and therefore be longer than the span.
    """
    key: str
    start: int
    end: int

    @property
    def range(self) -> TextRange:
        return TextRange(self.start, self.end)


@dataclass(frozen=True)
class KeyAndRange:
    range: Range
    key: str


@dataclass(frozen=True)
class DetectionResult:
    """A hard-coded string that could be moved into a translation catalog."""
    text: str
    start: int
    end: int
    source: str
    quote: str = ''
    dynamic: bool = False
    full_text: str = ''
    full_start: int = -1
    full_end: int = -1
    attribute: Optional[str] = None

    @property
    def range(self) -> TextRange:
        return TextRange(self.start, self.end)

    @property
    def full_range(self) -> TextRange:
        if self.full_start < 0:
            return self.range
        return TextRange(self.full_start, self.full_end)

    def identity(self) -> Tuple[int, int, str]:
        return (self.start, self.end, self.text)


@dataclass(frozen=True)
class DetectionReport:
    language_id: str
    frameworks: Tuple[str, ...] = ()
    results: Tuple[DetectionResult, ...] = ()
    supported: bool = True

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)


RULE_INCLUDE = 'include'
RULE_EXCLUDE = 'exclude'


@dataclass(frozen=True)
class ExtractionRule:
    """A single include/exclude decision for candidate strings.

    Exactly one of ``pattern`` (searched against the text) or ``predicate``
    must be given. ``sources`` limits the rule to some detection sources;
    empty means every source.
    """
    name: str
    verdict: str = RULE_EXCLUDE
    pattern: Optional[Pattern] = None
    predicate: Optional[Callable[[str], bool]] = None
    sources: Tuple[str, ...] = ()

    def __post_init__(self):
        if (self.pattern is None) == (self.predicate is None):
            raise ValueError(f"Rule {self.name!r} needs exactly one of pattern or predicate")
        if self.verdict not in (RULE_INCLUDE, RULE_EXCLUDE):
            raise ValueError(f"Rule {self.name!r} has unknown verdict {self.verdict!r}")
        if isinstance(self.pattern, str):
            object.__setattr__(self, 'pattern', re.compile(self.pattern))

    def applies_to(self, source: str) -> bool:
        return not self.sources or source in self.sources

    def fires(self, text: str) -> bool:
        if self.pattern is not None:
            return self.pattern.search(text) is not None
        return bool(self.predicate(text))


@dataclass(frozen=True)
class RuleSet:
    usage_match_regex: Tuple[Pattern, ...] = ()
    extraction_rules: Tuple[ExtractionRule, ...] = ()
    dynamic_extraction_rules: Tuple[ExtractionRule, ...] = field(default_factory=tuple)

    def with_usage(self, regexes: List[Pattern]) -> 'RuleSet':
        return RuleSet(tuple(regexes), self.extraction_rules, self.dynamic_extraction_rules)
