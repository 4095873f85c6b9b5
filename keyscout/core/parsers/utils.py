"""
Helpers shared by the string detectors.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence

from ..models import DetectionResult, ExtractionRule, RULE_INCLUDE


def shift_detection_position(results: Iterable[DetectionResult], offset: int) -> List[DetectionResult]:
    """Move results found in an embedded block back into the outer buffer.

    Apply once per nesting level; nested blocks compose by summing offsets.
    """
    if not offset:
        return list(results)
    shifted = []
    for r in results:
        full_start = r.full_start + offset if r.full_start >= 0 else r.full_start
        full_end = r.full_end + offset if r.full_start >= 0 else r.full_end
        shifted.append(replace(
            r,
            start=r.start + offset,
            end=r.end + offset,
            full_start=full_start,
            full_end=full_end,
        ))
    return shifted


def trim_detection(result: Optional[DetectionResult]) -> Optional[DetectionResult]:
    """Narrow the range to the text without surrounding whitespace."""
    if result is None:
        return None
    text = result.text
    stripped = text.strip()
    if not stripped:
        return None
    if stripped == text:
        return result
    lead = len(text) - len(text.lstrip())
    start = result.start + lead
    return replace(result, text=stripped, start=start, end=start + len(stripped))


def should_extract(text: str, source: str, rules: Sequence[ExtractionRule]) -> bool:
    for rule in rules:
        if rule.applies_to(source) and rule.fires(text):
            return rule.verdict == RULE_INCLUDE
    return True


def dedupe_detections(results: Iterable[DetectionResult]) -> List[DetectionResult]:
    """Drop repeats of the same (range, text), keeping the first; sort by start."""
    seen = set()
    unique = []
    for r in results:
        if r.identity() in seen:
            continue
        seen.add(r.identity())
        unique.append(r)
    unique.sort(key=lambda r: (r.start, r.end))
    return unique
