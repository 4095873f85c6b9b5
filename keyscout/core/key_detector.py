"""
Key extractor.

Finds translation keys referenced by usage matches, either in raw text or in
a ``TextDocument``. Results for documents with a path are cached per path
and version until the document reports a change.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple, Union

from ..utils.config import ConfigManager, ExtractionSettings
from ..utils.encoding import read_text_safely
from .document import TextDocument
from .frameworks import FrameworkRegistry
from .models import KeyAndRange, KeyMatch, Position, TextRange
from .rules import DEFAULT_RULESET, to_regex
from .scope import eligible_ranges
from .usage import scan_usage


class KeyCache:
    """Last computed key matches per file path, tagged with the buffer version.

    Entries are dropped, never patched, when the buffer changes; dropping an
    entry that is not there is a no-op. A lookup with a different version is
    a miss even if no change notification was received.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[Optional[int], List[KeyMatch]]] = {}
        self._lock = threading.Lock()

    def get(self, path: str, version: Optional[int] = None) -> Optional[List[KeyMatch]]:
        with self._lock:
            entry = self._entries.get(path)
        if entry is None:
            return None
        cached_version, keys = entry
        if version is not None and cached_version != version:
            return None
        return keys

    def set(self, path: str, keys: List[KeyMatch], version: Optional[int] = None) -> None:
        with self._lock:
            self._entries[path] = (version, keys)

    def invalidate(self, path: str) -> None:
        with self._lock:
            self._entries.pop(path, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class KeyDetector:
    def __init__(
        self,
        registry: Optional[FrameworkRegistry] = None,
        config: Optional[ConfigManager] = None,
        cache: Optional[KeyCache] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.registry = registry or (FrameworkRegistry.from_config(config) if config else FrameworkRegistry())
        self.cache = cache if cache is not None else KeyCache()
        self._watchers: Dict[str, Callable[[], None]] = {}

    @property
    def settings(self) -> ExtractionSettings:
        if self.config is None:
            return ExtractionSettings()
        return self.config.extraction

    # ------------------------------------------------------------ text API

    def get_key_by_content(self, text: str) -> List[str]:
        """Unique keys referenced in ``text``, in order of first appearance."""
        keys = []
        seen = set()
        for match in self.get_keys(text):
            if match.key not in seen:
                seen.add(match.key)
                keys.append(match.key)
        return keys

    def get_key_by_file(self, file_path: Union[str, Path]) -> List[str]:
        text = read_text_safely(Path(file_path))
        if text is None:
            return []
        return self.get_key_by_content(text)

    def get_keys(
        self,
        document: Union[TextDocument, str],
        regexes: Optional[Sequence[Union[str, Pattern]]] = None,
        scopes: Optional[Sequence[TextRange]] = None,
    ) -> List[KeyMatch]:
        """Every key occurrence, sorted by position.

        ``regexes`` default to the usage regexes of the frameworks claiming
        the document's language (the generic pattern for plain text).
        Without explicit ``scopes``, comments of a document with a known
        language are skipped unless ``ignore_comments`` is off.
        Only the default query on a document with a path is cached, and a
        cached entry is reused only for the same document version.
        """
        if isinstance(document, str):
            text, language_id, path, version = document, '', None, None
        else:
            text, language_id, path = document.get_text(), document.language_id, document.file_path
            version = document.version

        cacheable = path is not None and regexes is None and scopes is None
        if cacheable:
            cached = self.cache.get(path, version)
            if cached is not None:
                return cached

        if regexes is None:
            usage = self._usage_regexes(language_id)
        else:
            usage = [to_regex(r) for r in regexes]
        if scopes is None and language_id and self.settings.ignore_comments:
            scopes = eligible_ranges(text, language_id)
        prefix_regexes = self._key_prefix_regexes(language_id)

        keys = []
        for match in scan_usage(text, usage, scopes):
            key = self.detected_key(match.key, text, prefix_regexes)
            if not self.is_valid_key(key):
                continue
            # the span stays on the raw key even when a prefix was added
            keys.append(KeyMatch(key, match.start, match.end))

        self.logger.debug("Found %s key usages in %s", len(keys), path or '<text>')
        if cacheable:
            self.cache.set(path, keys, version)
        return keys

    def detected_key(
        self,
        raw_key: str,
        document_text: str,
        prefix_regexes: Optional[Sequence[Pattern]] = None,
    ) -> str:
        """Apply the buffer's ``keyPrefix`` declaration to ``raw_key``.

        The first declaration found anywhere in the buffer applies to every
        key in it; declarations are not scope-aware.
        """
        if not self.settings.key_prefix_inference:
            return raw_key
        if prefix_regexes is None:
            prefix_regexes = self._key_prefix_regexes('')
        for regex in prefix_regexes:
            m = regex.search(document_text)
            if m and m.group(1):
                return f"{m.group(1)}.{raw_key}"
        return raw_key

    def is_valid_key(self, key: str) -> bool:
        return bool(key and key.strip())

    # ------------------------------------------------------- position API

    def get_key_and_range(self, document: TextDocument, position: Position) -> Optional[KeyAndRange]:
        offset = document.offset_at(position)
        for match in self.get_keys(document):
            if match.start <= offset <= match.end:
                return KeyAndRange(document.range_at(match.start, match.end), match.key)
        return None

    def get_key_range(self, document: TextDocument, position: Position) -> Optional[KeyAndRange]:
        return self.get_key_and_range(document, position)

    def get_key(self, document: TextDocument, position: Position) -> Optional[str]:
        found = self.get_key_and_range(document, position)
        return found.key if found else None

    # ------------------------------------------------------------- cache

    def watch(self, document: TextDocument) -> None:
        """Drop the cached keys of ``document`` whenever it changes."""
        path = document.file_path
        if path is None or path in self._watchers:
            return
        self._watchers[path] = document.on_did_change(lambda doc: self.invalidate(path))

    def unwatch(self, path: str) -> None:
        dispose = self._watchers.pop(path, None)
        if dispose is not None:
            dispose()
        self.cache.invalidate(path)

    def invalidate(self, path: str) -> None:
        self.logger.debug("Invalidating cached keys for %s", path)
        self.cache.invalidate(path)

    # ----------------------------------------------------------- helpers

    def _usage_regexes(self, language_id: str) -> List[Pattern]:
        if language_id:
            regexes = self.registry.get_usage_regexes(language_id)
            if regexes:
                return regexes
        return list(DEFAULT_RULESET.usage_match_regex)

    def _key_prefix_regexes(self, language_id: str) -> List[Pattern]:
        if language_id:
            return self.registry.get_key_prefix_regexes(language_id)
        seen = []
        for framework in self.registry.frameworks:
            for regex in framework.key_prefix_regexes:
                if regex not in seen:
                    seen.append(regex)
        return seen
