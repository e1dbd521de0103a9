from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    # Cached item + millisecond timestamps; replaced, never mutated
    item: T
    created: int
    accessed: Optional[int] = None
    modified: Optional[int] = None

    def with_access(self, at: int) -> "CacheEntry[T]":
        return replace(self, accessed=at)

    def with_modification(self, item: T, at: int) -> "CacheEntry[T]":
        # created and accessed carry over to the new item
        return replace(self, item=item, modified=at)
