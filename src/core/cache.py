"""In-memory mirror of a remote item collection.

The cache holds items keyed by a caller-supplied identity function and
tracks whether it is fully populated (a complete replica of the remote
collection) or partial (only some items are known). Entries carry
created/accessed/modified timestamps that drive the eviction methods.

The cache never talks to the remote collection itself; callers keep it in
sync through add/update/delete and replace_all.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar

from core.clock import SystemClock
from core.entry import CacheEntry
from core.errors import NotFullyPopulatedError, PollingTimeoutError, SynchronizationInconsistencyError
from core.interfaces import Clock, IdentityExtractor
from core.waiting import WaitCoordinator

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ItemCache(Generic[T]):
    """Thread-safe cache of uniquely identifiable items.

    Construct with `items=None` for a partial cache, or pass the complete
    remote collection (possibly empty) for a fully populated one.

    State rules:
      - Only replace_all (or construction with items) makes the cache fully
        populated.
      - add never changes the state.
      - update/delete of a key missing from a fully populated cache drops it
        to partial and raises SynchronizationInconsistencyError.
      - Any eviction that removes at least one entry drops it to partial;
        evict_all always does, even on an empty cache.
      - A replace_all that fails on a bad item changes nothing.
    """

    def __init__(
        self,
        identity: IdentityExtractor[T],
        items: Optional[Iterable[T]] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> None:
        self._identity = identity
        self._clock: Clock = clock or SystemClock()
        self._entries: Dict[Hashable, CacheEntry[T]] = {}
        self._populated = False

        self._lock = threading.Lock()
        self._waiter = WaitCoordinator(self._lock)

        if items is not None:
            self._entries = self._build(items)
            self._populated = True

    # --- queries ---

    def is_fully_populated(self) -> bool:
        with self._lock:
            return self._populated

    def contains(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def __contains__(self, key: Hashable) -> bool:
        return self.contains(key)

    def get(self, key: Hashable) -> Optional[T]:
        """Return the cached item for `key`, marking it accessed.

        A miss returns None in either state; only the caller can decide
        whether a miss on a partial cache warrants a remote lookup.
        """
        with self._lock:
            return self._touch(key)

    def get_blocking(self, key: Hashable, timeout_ms: int) -> Optional[T]:
        """Like get, but wait up to `timeout_ms` for `key` to be inserted.

        Still missing at the deadline returns None rather than raising.
        """
        with self._lock:
            self._waiter.wait_until(lambda: key in self._entries, timeout_ms)
            return self._touch(key)

    def size(self) -> int:
        with self._lock:
            self._require_populated("size")
            return len(self._entries)

    def all(self) -> List[T]:
        with self._lock:
            self._require_populated("all")
            return self._items()

    def all_blocking(self, timeout_ms: int) -> List[T]:
        """Return all items, waiting up to `timeout_ms` for a replace_all."""
        with self._lock:
            if not self._waiter.wait_until(lambda: self._populated, timeout_ms):
                raise PollingTimeoutError(f"Cache not fully populated within {timeout_ms} ms")
            return self._items()

    # --- mutations ---

    def add(self, item: T) -> None:
        with self._lock:
            self._put_new(item)
            self._waiter.notify_all()

    def update(self, item: T) -> None:
        with self._lock:
            key = self._identity(item)
            current = self._entries.get(key)
            if current is not None:
                self._entries[key] = current.with_modification(item, self._clock.now_ms())
                self._waiter.notify_all()
                return

            self._put_new(item)
            self._waiter.notify_all()
            if self._populated:
                self._populated = False
                logger.warning("Update of uncached key %r; cache is no longer fully populated", key)
                raise SynchronizationInconsistencyError(
                    key, f"Attempt to update missing item {key!r} in a fully populated cache"
                )

    def delete(self, key: Hashable) -> None:
        with self._lock:
            if key in self._entries:
                del self._entries[key]
                self._waiter.notify_all()
                return

            if self._populated:
                self._populated = False
                self._waiter.notify_all()
                logger.warning("Delete of uncached key %r; cache is no longer fully populated", key)
                raise SynchronizationInconsistencyError(
                    key, f"Attempt to delete missing item {key!r} from a fully populated cache"
                )

    def replace_all(self, items: Iterable[T]) -> None:
        """Replace the contents with the complete remote collection."""
        with self._lock:
            # Build first so a bad item leaves the current contents and state intact
            self._entries = self._build(items)
            self._populated = True
            logger.debug("Cache replaced with %d items", len(self._entries))
            self._waiter.notify_all()

    # --- eviction ---

    def evict_unaccessed(self, max_age_ms: int) -> int:
        """Evict entries never accessed, or last accessed more than `max_age_ms` ago."""
        return self._evict(lambda e, cutoff: e.accessed is None or e.accessed < cutoff, max_age_ms)

    def evict_unmodified(self, max_age_ms: int) -> int:
        """Evict entries never modified, or last modified more than `max_age_ms` ago."""
        return self._evict(lambda e, cutoff: e.modified is None or e.modified < cutoff, max_age_ms)

    def evict_by_age(self, max_age_ms: int) -> int:
        """Evict entries created more than `max_age_ms` ago."""
        return self._evict(lambda e, cutoff: e.created < cutoff, max_age_ms)

    def evict_all(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            # Evicting everything always retracts the full claim, even when empty
            self._populated = False
            if removed:
                logger.debug("Evicted %d items", removed)
            return removed

    # --- internals (lock held) ---

    def _touch(self, key: Hashable) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        self._entries[key] = entry.with_access(self._clock.now_ms())
        return entry.item

    def _put_new(self, item: T) -> None:
        self._entries[self._identity(item)] = CacheEntry(item=item, created=self._clock.now_ms())

    def _build(self, items: Iterable[T]) -> Dict[Hashable, CacheEntry[T]]:
        now = self._clock.now_ms()
        return {self._identity(item): CacheEntry(item=item, created=now) for item in items}

    def _items(self) -> List[T]:
        return [entry.item for entry in self._entries.values()]

    def _require_populated(self, operation: str) -> None:
        if not self._populated:
            raise NotFullyPopulatedError(f"Attempt to call {operation}() on a partial cache")

    def _evict(self, selector: Callable[[CacheEntry[T], int], bool], max_age_ms: int) -> int:
        with self._lock:
            cutoff = self._clock.now_ms() - int(max_age_ms)
            doomed = [key for key, entry in self._entries.items() if selector(entry, cutoff)]
            for key in doomed:
                del self._entries[key]

            # An eviction that removed nothing leaves a full cache full
            if doomed:
                self._populated = False
                logger.debug("Evicted %d items", len(doomed))
            return len(doomed)
