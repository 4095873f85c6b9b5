"""
Raw usage-match scanning.

``scan_usage`` is the single place where a usage regex is turned into key
spans. Given a match whose group 1 is the key, the key ends one character
before the match end (the closing delimiter) and starts ``len(key)`` before
that. Range-based edits downstream rely on exactly this convention.
"""

from __future__ import annotations

from typing import List, Optional, Pattern, Sequence

from .models import KeyMatch, TextRange
from .scope import in_scopes


def _overlaps(a: KeyMatch, b: KeyMatch) -> bool:
    return a.start < b.end and b.start < a.end


def scan_usage(
    text: str,
    regexes: Sequence[Pattern],
    scopes: Optional[Sequence[TextRange]] = None,
) -> List[KeyMatch]:
    """Find every key referenced by ``regexes`` in ``text``.

    Regexes are tried in priority order; a match whose key span overlaps one
    accepted from an earlier regex is dropped. Empty and whitespace-only keys
    are dropped. The result is sorted by start offset.
    """
    accepted: List[KeyMatch] = []
    for regex in regexes:
        for match in regex.finditer(text):
            key = match.group(1)
            if not key or not key.strip():
                continue
            if not in_scopes(match.start(), match.end(), scopes):
                continue
            end = match.end() - 1
            start = end - len(key)
            candidate = KeyMatch(key, start, end)
            if any(_overlaps(candidate, other) for other in accepted):
                continue
            accepted.append(candidate)
    accepted.sort(key=lambda k: (k.start, k.end))
    return accepted
