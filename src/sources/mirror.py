"""Read-through mirror combining the item cache with the remote source.

Decides when a cache answer is authoritative (fully populated cache) and
when the remote collection has to be consulted, and replays remote change
events into the cache.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Hashable, List, Optional

from core.cache import ItemCache
from core.errors import (
    NotFullyPopulatedError,
    PollingTimeoutError,
    SynchronizationInconsistencyError,
    ValidationError,
)
from core.interfaces import Item, ItemSource
from core.models import CacheStatus, ChangeEvent, EvictionPolicy

logger = logging.getLogger(__name__)


class ItemMirror:
    def __init__(self, *, cache: ItemCache[Item], source: ItemSource) -> None:
        self._cache = cache
        self._source = source

    @property
    def cache(self) -> ItemCache[Item]:
        return self._cache

    async def get(self, key: Hashable, *, wait_ms: int = 0) -> Optional[Item]:
        if wait_ms > 0 and not self._cache.is_fully_populated():
            # Blocking wait must not stall the event loop
            item = await asyncio.to_thread(self._cache.get_blocking, key, wait_ms)
        else:
            item = self._cache.get(key)
        if item is not None:
            return item

        # A miss on a complete replica means the item does not exist
        if self._cache.is_fully_populated():
            return None

        item = await self._source.fetch_one(key)
        if item is not None:
            self._cache.add(item)
        return item

    async def list_all(self, *, wait_ms: int = 0) -> List[Item]:
        if self._cache.is_fully_populated():
            try:
                return self._cache.all()
            except NotFullyPopulatedError:
                # Evicted between the check and the read
                pass

        if wait_ms > 0:
            try:
                return await asyncio.to_thread(self._cache.all_blocking, wait_ms)
            except PollingTimeoutError:
                logger.info("Cache not populated after %d ms; fetching from source", wait_ms)

        return await self.refresh()

    async def refresh(self) -> List[Item]:
        items = await self._source.fetch_all()
        self._cache.replace_all(items)
        logger.info("Mirror refreshed with %d items", len(items))
        return list(items)

    def apply(self, event: ChangeEvent) -> bool:
        """Replay a remote change. Returns False if it exposed an inconsistency."""
        try:
            if event.kind == "created":
                self._cache.add(self._require_item(event))
            elif event.kind == "updated":
                self._cache.update(self._require_item(event))
            elif event.kind == "deleted":
                key = str(event.key or "").strip()
                if not key:
                    raise ValidationError("Missing key for deleted event")
                self._cache.delete(key)
            else:
                raise ValidationError(f"Unknown change kind: {event.kind}")
        except SynchronizationInconsistencyError as e:
            logger.warning("Change event %s for %r exposed an out-of-sync cache: %s", event.kind, e.key, e)
            return False
        return True

    def evict(self, policy: EvictionPolicy, max_age_ms: int) -> int:
        if policy == "unaccessed":
            removed = self._cache.evict_unaccessed(max_age_ms)
        elif policy == "unmodified":
            removed = self._cache.evict_unmodified(max_age_ms)
        elif policy == "age":
            removed = self._cache.evict_by_age(max_age_ms)
        elif policy == "all":
            removed = self._cache.evict_all()
        else:
            raise ValidationError(f"Unknown eviction policy: {policy}")

        if removed:
            logger.info("Evicted %d items (policy=%s)", removed, policy)
        return removed

    def status(self) -> CacheStatus:
        try:
            return CacheStatus(fully_populated=True, size=self._cache.size())
        except NotFullyPopulatedError:
            return CacheStatus(fully_populated=False)

    @staticmethod
    def _require_item(event: ChangeEvent) -> Item:
        if event.item is None:
            raise ValidationError(f"Missing item for {event.kind} event")
        return event.item
