"""
File Cache
==========

Thread-safe cache of fully parsed, metric-annotated recordings.

This module provides the FileCache class, which sits between the query
service and the parser. A file is parsed and analysed once per
modification time; later queries reuse the immutable CacheEntry.

Design Rules:
    - Keyed by path, case-insensitively
    - Freshness checked via st_mtime_ns before any content is read
    - A stale entry is replaced, never patched
    - The lock guards lookup and swap ONLY; loading runs unlocked so a
      long parse never blocks queries for other files
    - Bounded by max_entries with least-recently-used eviction
      (0 = unbounded)

Concurrency Note:
    Two threads that miss on the same path at the same time both load
    it. The redundant work is accepted; the last writer's entry wins
    and is what later callers observe.
"""

import logging
import os
import threading
from collections import OrderedDict
from typing import Callable, Sequence, Union

from pressure_engine.errors import FileNotReadableError
from pressure_engine.models.frame import CacheEntry, Frame


logger = logging.getLogger(__name__)


PathLike = Union[str, os.PathLike]
FrameLoader = Callable[[str], Sequence[Frame]]


class FileCache:
    """
    LRU-bounded map from recording path to its CacheEntry.

    Attributes:
        max_entries: Maximum cached files (0 = unbounded)
        hits: Lookups served from cache
        misses: Lookups that required a load
        evictions: Entries dropped to respect max_entries

    Example:
        cache = FileCache(loader=load_frames, max_entries=32)

        entry = cache.get_or_load("/data/2025-01-14.csv")
        print(entry.frame_count)
    """

    def __init__(
        self,
        loader: FrameLoader,
        max_entries: int = 64,
        stat: Callable[[str], os.stat_result] = os.stat,
    ) -> None:
        """
        Initialize file cache.

        Args:
            loader: Callable returning the analysed frames of a path
            max_entries: LRU bound. Must be >= 0 (0 disables eviction).
            stat: os.stat-compatible callable used for freshness checks
        """
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")

        self._loader = loader
        self._stat = stat
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

        self._hits: int = 0
        self._misses: int = 0
        self._evictions: int = 0

        logger.info(f"FileCache initialized: max_entries={max_entries or 'unbounded'}")

    @staticmethod
    def _key(path: str) -> str:
        return path.casefold()

    @property
    def max_entries(self) -> int:
        """LRU bound (0 = unbounded)."""
        return self._max_entries

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def evictions(self) -> int:
        return self._evictions

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        key = self._key(os.fspath(path))
        with self._lock:
            return key in self._entries

    def last_modified_ns(self, path: PathLike) -> int:
        """
        Read the file's modification time in nanoseconds.

        Raises:
            FileNotReadableError: If the path does not exist or cannot
                be stat'ed
        """
        try:
            return self._stat(os.fspath(path)).st_mtime_ns
        except OSError as e:
            raise FileNotReadableError(path, e.strerror or str(e)) from e

    def get_or_load(self, path: PathLike) -> CacheEntry:
        """
        Return the entry for path, loading it if absent or stale.

        Args:
            path: Resolved path of a recording file

        Returns:
            CacheEntry matching the file's current modification time

        Raises:
            FileNotReadableError: If the file is missing or unreadable
        """
        path = os.fspath(path)
        key = self._key(path)
        mtime_ns = self.last_modified_ns(path)

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.last_modified_ns == mtime_ns:
                self._entries.move_to_end(key)
                self._hits += 1
                return entry
            self._misses += 1
            stale = entry is not None

        if stale:
            logger.info(f"Recording changed on disk, reloading: {path}")

        # Parse + analyse outside the lock
        frames = tuple(self._loader(path))
        entry = CacheEntry(path=path, last_modified_ns=mtime_ns, frames=frames)

        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            self._evict_locked()

        logger.info(f"Loaded {entry.frame_count} frame(s) from {path}")
        return entry

    def _evict_locked(self) -> None:
        """Drop least-recently-used entries beyond max_entries."""
        if self._max_entries == 0:
            return
        while len(self._entries) > self._max_entries:
            _, evicted = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(f"Evicted cached recording: {evicted.path}")

    def invalidate(self, path: PathLike) -> bool:
        """
        Drop the entry for path.

        Returns:
            True if an entry was removed.
        """
        key = self._key(os.fspath(path))
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug(f"Invalidated cached recording: {os.fspath(path)}")
        return removed

    def clear(self) -> int:
        """
        Drop all entries.

        Returns:
            Number of entries removed.
        """
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()
        logger.info(f"FileCache cleared ({cleared} entries)")
        return cleared

    def metrics(self) -> dict:
        """
        Get cache metrics for observability.

        Returns:
            Dict with size, max_entries, hits, misses, evictions
        """
        with self._lock:
            return {
                "size": len(self._entries),
                "max_entries": self._max_entries,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
