"""
Scope filter: which parts of a buffer detection may look at.

A scope list is a sorted list of non-overlapping half-open ``TextRange``.
``None`` always means "the whole buffer". A match counts as in scope only
if it lies entirely inside a single range; anything straddling a boundary is
dropped.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, TypeVar

from ..utils.languages import is_markup
from .models import TextRange
from .parsers.grammar import KIND_COMMENT, scan_html_comments, scan_script

logger = logging.getLogger(__name__)

T = TypeVar('T')


def normalize(ranges: Iterable[TextRange]) -> List[TextRange]:
    """Sort ranges and merge the ones that touch or overlap."""
    merged: List[TextRange] = []
    for r in sorted((r for r in ranges if r.end > r.start), key=lambda r: (r.start, r.end)):
        if merged and r.start <= merged[-1].end:
            last = merged[-1]
            merged[-1] = TextRange(last.start, max(last.end, r.end))
        else:
            merged.append(r)
    return merged


def invert(ranges: Iterable[TextRange], length: int) -> List[TextRange]:
    result: List[TextRange] = []
    cursor = 0
    for r in normalize(ranges):
        if r.start > cursor:
            result.append(TextRange(cursor, r.start))
        cursor = max(cursor, r.end)
    if cursor < length:
        result.append(TextRange(cursor, length))
    return result


def subtract(scopes: Sequence[TextRange], holes: Iterable[TextRange]) -> List[TextRange]:
    holes = normalize(holes)
    result: List[TextRange] = []
    for scope in normalize(scopes):
        cursor = scope.start
        for hole in holes:
            if hole.end <= cursor or hole.start >= scope.end:
                continue
            if hole.start > cursor:
                result.append(TextRange(cursor, hole.start))
            cursor = max(cursor, hole.end)
        if cursor < scope.end:
            result.append(TextRange(cursor, scope.end))
    return result


def in_scopes(start: int, end: int, scopes: Optional[Sequence[TextRange]]) -> bool:
    if scopes is None:
        return True
    return any(scope.contains(start, end) for scope in scopes)


def filter_by_scopes(items: Iterable[T], scopes: Optional[Sequence[TextRange]]) -> List[T]:
    """Keep items (anything with ``start``/``end``) lying wholly inside a scope."""
    if scopes is None:
        return list(items)
    return [item for item in items if in_scopes(item.start, item.end, scopes)]


def script_comment_ranges(text: str) -> List[TextRange]:
    return [
        TextRange(start, end)
        for kind, _, start, end in scan_script(text)
        if kind == KIND_COMMENT
    ]


def element_ranges(text: str, tag: str) -> List[TextRange]:
    """Inner ranges of every top-level ``<tag ...>...</tag>`` element.

    Same-name nesting (``<template>`` inside ``<template>``) is tracked by
    depth; an element that never closes is skipped.
    """
    tag_re = re.compile(r'<(/?)%s\b[^>]*?(/?)>' % re.escape(tag), re.I)
    ranges: List[TextRange] = []
    depth = 0
    inner_start = 0
    for m in tag_re.finditer(text):
        closing, self_closing = m.group(1), m.group(2)
        if self_closing and not closing:
            continue
        if not closing:
            if depth == 0:
                inner_start = m.end()
            depth += 1
        elif depth:
            depth -= 1
            if depth == 0:
                ranges.append(TextRange(inner_start, m.start()))
    if depth:
        logger.debug("Unterminated <%s> element at offset %s, skipped", tag, inner_start)
    return ranges


def comment_ranges(text: str, language_id: str = '') -> List[TextRange]:
    if not is_markup(language_id):
        return script_comment_ranges(text)
    ranges = [TextRange(start, end) for start, end in scan_html_comments(text)]
    for block in element_ranges(text, 'script'):
        ranges.extend(r.shift(block.start) for r in script_comment_ranges(text[block.start:block.end]))
    return normalize(ranges)


def eligible_ranges(
    text: str,
    language_id: str = '',
    include_tags: Optional[Sequence[str]] = None,
    exclude_comments: bool = True,
) -> List[TextRange]:
    """Scopes for ``text``: the given elements (or everything), minus comments."""
    if include_tags:
        scopes = normalize(r for tag in include_tags for r in element_ranges(text, tag))
    else:
        scopes = [TextRange(0, len(text))]
    if exclude_comments:
        scopes = subtract(scopes, comment_ranges(text, language_id))
    return scopes
