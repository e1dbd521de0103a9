"""Core protocol and interface definitions.

Defines the capabilities the cache is built from (Clock, IdentityExtractor)
and the ItemSource protocol the read-through mirror uses to reach the
remote collection.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Hashable, List, Optional, Protocol, TypeVar

T = TypeVar("T")

Item = Dict[str, Any]

# Pure function mapping an item to its unique key
IdentityExtractor = Callable[[T], Hashable]


class Clock(Protocol):
    """Source of non-decreasing millisecond timestamps."""
    def now_ms(self) -> int:
        ...


class ItemSource(Protocol):
    """Contract for the remote collection the cache mirrors."""
    async def fetch_all(self) -> List[Item]:
        ...

    async def fetch_one(self, key: Hashable) -> Optional[Item]:
        ...
