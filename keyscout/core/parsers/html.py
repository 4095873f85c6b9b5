"""Markup hard-string detector.

The scanner walks the buffer character by character, the way an HTML
tokenizer would, but only far enough to know where element text and
attribute values start and end. It is not a validating parser: stray ``<``
characters are kept as text, unknown constructs are skipped.

Handled:
- element text content  -> ``html-inline``
- attribute values      -> ``html-attribute``
- ``<!-- -->``, ``<!DOCTYPE>``, ``<?xml?>`` and EJS ``<% %>`` are skipped
- ``<script>``/``<style>`` bodies are raw text and never scanned here
- text inside ``ignored_tags`` is skipped
- ``{{ }}`` interpolation marks a candidate as dynamic
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

from ...utils.config import HtmlParserOptions
from ..models import (
    DetectionResult,
    ExtractionRule,
    SOURCE_HTML_ATTRIBUTE,
    SOURCE_HTML_INLINE,
)
from ..rules import DEFAULT_DYNAMIC_EXTRACTION_RULES, DEFAULT_EXTRACTION_RULES, has_interpolation
from .utils import should_extract, trim_detection

logger = logging.getLogger(__name__)

RAW_TEXT_TAGS = ('script', 'style')
WHITESPACE = ' \t\r\n\f'

TAG_NAME_RE = re.compile(r'<([A-Za-z][\w:.-]*)')
CLOSE_TAG_RE = re.compile(r'</([A-Za-z][\w:.-]*)\s*>')


@dataclass
class Attribute:
    name: str
    value: Optional[str]
    value_start: int
    value_end: int
    quote: str
    full_start: int
    full_end: int


@dataclass
class Node:
    kind: str  # 'text' or 'attribute'
    start: int
    end: int
    attribute: Optional[Attribute] = None


class MarkupScanner:
    """Iterates text runs and attributes of a markup buffer in document order."""

    def __init__(self, content: str, ignored_tags: Sequence[str] = ()) -> None:
        self.content = content
        self.ignored_tags = {t.lower() for t in ignored_tags}
        self._ignore_stack: List[str] = []

    def __iter__(self) -> Iterator[Node]:
        text = self.content
        n = len(text)
        i = 0
        text_start = 0
        while i < n:
            lt = text.find('<', i)
            if lt == -1:
                break
            nxt = text[lt + 1:lt + 2]

            if text.startswith('<!--', lt):
                yield from self._text(text_start, lt)
                close = text.find('-->', lt + 4)
                i = text_start = n if close == -1 else close + 3
                continue
            if text.startswith('<%', lt):
                yield from self._text(text_start, lt)
                close = text.find('%>', lt + 2)
                i = text_start = n if close == -1 else close + 2
                continue
            if nxt in ('!', '?'):
                yield from self._text(text_start, lt)
                close = text.find('>', lt)
                i = text_start = n if close == -1 else close + 1
                continue

            if nxt == '/':
                m = CLOSE_TAG_RE.match(text, lt)
                if not m:
                    i = lt + 1
                    continue
                yield from self._text(text_start, lt)
                self._close(m.group(1).lower())
                i = text_start = m.end()
                continue

            m = TAG_NAME_RE.match(text, lt)
            if not m:
                i = lt + 1
                continue

            yield from self._text(text_start, lt)
            name = m.group(1).lower()
            parsed = self._read_attributes(m.end())
            if parsed is None:
                logger.debug("Unterminated <%s> tag at offset %s, rest of buffer skipped", name, lt)
                return
            attributes, end, self_closing = parsed
            if not self._ignore_stack:
                for attr in attributes:
                    yield Node('attribute', attr.value_start, attr.value_end, attr)
            i = text_start = end

            if name in RAW_TEXT_TAGS and not self_closing:
                close = re.compile(r'</%s\s*>' % re.escape(name), re.I).search(text, end)
                if close is None:
                    logger.debug("Unterminated <%s> block at offset %s, skipped", name, lt)
                    return
                i = text_start = close.end()
            elif name in self.ignored_tags and not self_closing:
                self._ignore_stack.append(name)

        yield from self._text(text_start, n)

    def _text(self, start: int, end: int) -> Iterator[Node]:
        if end > start and not self._ignore_stack:
            yield Node('text', start, end)

    def _close(self, name: str) -> None:
        if name in self._ignore_stack:
            while self._ignore_stack and self._ignore_stack.pop() != name:
                pass

    def _read_attributes(self, pos: int):
        """Parse attributes from ``pos``; returns ``(attributes, end, self_closing)``."""
        text = self.content
        n = len(text)
        attributes: List[Attribute] = []
        j = pos
        while j < n:
            while j < n and text[j] in WHITESPACE:
                j += 1
            if j >= n:
                break
            ch = text[j]
            if ch == '>':
                return attributes, j + 1, False
            if text.startswith('/>', j):
                return attributes, j + 2, True
            if ch in '/=':
                j += 1
                continue

            name_start = j
            while j < n and text[j] not in WHITESPACE and text[j] not in '/>=':
                j += 1
            name = text[name_start:j]

            k = j
            while k < n and text[k] in WHITESPACE:
                k += 1
            if k >= n or text[k] != '=':
                attributes.append(Attribute(name, None, j, j, '', name_start, j))
                continue

            k += 1
            while k < n and text[k] in WHITESPACE:
                k += 1
            if k < n and text[k] in ('"', "'"):
                quote = text[k]
                close = text.find(quote, k + 1)
                if close == -1:
                    return None
                attributes.append(Attribute(name, text[k + 1:close], k + 1, close, quote, name_start, close + 1))
                j = close + 1
            else:
                value_start = k
                while k < n and text[k] not in WHITESPACE and text[k] != '>':
                    k += 1
                attributes.append(Attribute(name, text[value_start:k], value_start, k, '', name_start, k))
                j = k
        return None


def _is_translatable_attribute(name: str, options: HtmlParserOptions) -> bool:
    lowered = name.lower()
    if lowered.startswith((':', '@', '#', 'v-', 'data-', 'x-')):
        return False
    if lowered.startswith('on') and len(lowered) > 2:
        return False
    if options.attributes is not None:
        return lowered in {a.lower() for a in options.attributes}
    return lowered not in {a.lower() for a in options.excluded_attributes}


def _accept(result: Optional[DetectionResult], rules, dynamic_rules) -> Optional[DetectionResult]:
    if result is None:
        return None
    table = dynamic_rules if result.dynamic else rules
    if not should_extract(result.text, result.source, table):
        return None
    return result


def detect(
    text: str,
    rules: Sequence[ExtractionRule] = DEFAULT_EXTRACTION_RULES,
    dynamic_rules: Sequence[ExtractionRule] = DEFAULT_DYNAMIC_EXTRACTION_RULES,
    options: Optional[HtmlParserOptions] = None,
) -> List[DetectionResult]:
    options = options or HtmlParserOptions()
    results: List[DetectionResult] = []

    for node in MarkupScanner(text, options.ignored_tags):
        if node.kind == 'text':
            if not options.inline_text:
                continue
            raw = text[node.start:node.end]
            candidate = trim_detection(DetectionResult(
                text=raw,
                start=node.start,
                end=node.end,
                source=SOURCE_HTML_INLINE,
                dynamic=has_interpolation(raw),
            ))
        else:
            attr = node.attribute
            if attr.value is None or not _is_translatable_attribute(attr.name, options):
                continue
            candidate = trim_detection(DetectionResult(
                text=attr.value,
                start=attr.value_start,
                end=attr.value_end,
                source=SOURCE_HTML_ATTRIBUTE,
                quote=attr.quote,
                dynamic=has_interpolation(attr.value),
                full_text=text[attr.full_start:attr.full_end],
                full_start=attr.full_start,
                full_end=attr.full_end,
                attribute=attr.name,
            ))

        accepted = _accept(candidate, rules, dynamic_rules)
        if accepted is not None:
            results.append(accepted)

    logger.debug("Markup detector found %s candidates", len(results))
    return results
