"""
In-memory text buffer.

Editors hand us their own document objects; this class is the minimal
equivalent used by the CLI and the tests: full text, language id, path,
line/column <-> offset conversion and a change event.
"""

from __future__ import annotations

import bisect
import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from ..utils.encoding import read_text_safely
from ..utils.languages import guess_language_id
from .models import Position, Range, TextRange


class TextDocument:
    def __init__(self, text: str, language_id: str = '', file_path: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self.language_id = language_id or guess_language_id(file_path) or ''
        self.file_path = str(file_path) if file_path else None
        self.version = 1
        self._listeners: List[Callable[['TextDocument'], None]] = []
        self._set(text)

    @classmethod
    def from_file(cls, path: Union[str, Path], language_id: Optional[str] = None) -> Optional['TextDocument']:
        text = read_text_safely(Path(path))
        if text is None:
            return None
        return cls(text, language_id or guess_language_id(path) or '', str(path))

    def _set(self, text: str) -> None:
        self._text = text or ''
        self._line_starts = [0]
        for idx, ch in enumerate(self._text):
            if ch == '\n':
                self._line_starts.append(idx + 1)

    # ---------------------------------------------------------------- reading

    def get_text(self, text_range: Optional[Union[TextRange, Range]] = None) -> str:
        if text_range is None:
            return self._text
        if isinstance(text_range, Range):
            return self._text[self.offset_at(text_range.start):self.offset_at(text_range.end)]
        return self._text[text_range.start:text_range.end]

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def offset_at(self, position: Position) -> int:
        """Clamp ``position`` into the buffer and return its offset."""
        line = min(max(position.line, 0), len(self._line_starts) - 1)
        start = self._line_starts[line]
        if line + 1 < len(self._line_starts):
            line_end = self._line_starts[line + 1] - 1
        else:
            line_end = len(self._text)
        return min(start + max(position.character, 0), line_end)

    def position_at(self, offset: int) -> Position:
        offset = min(max(offset, 0), len(self._text))
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return Position(line, offset - self._line_starts[line])

    def range_at(self, start: int, end: int) -> Range:
        return Range(self.position_at(start), self.position_at(end))

    # ---------------------------------------------------------------- writing

    def on_did_change(self, callback: Callable[['TextDocument'], None]) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(callback)

        def dispose() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return dispose

    def set_text(self, text: str) -> None:
        self._set(text)
        self._changed()

    def apply_edit(self, start: int, end: int, new_text: str) -> None:
        self.set_text(self._text[:start] + new_text + self._text[end:])

    def _changed(self) -> None:
        self.version += 1
        self.logger.debug("Document %s changed (version %s)", self.file_path, self.version)
        for listener in list(self._listeners):
            listener(self)

    def __repr__(self) -> str:
        return f"TextDocument({self.file_path or '<memory>'!r}, {self.language_id!r}, v{self.version})"
