"""Immutable dataclasses shared by the mirror and the MCP tools.

ChangeEvent describes one remote change to replay into the cache;
CacheStatus is the snapshot reported back to tool callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from core.interfaces import Item


ChangeKind = Literal["created", "updated", "deleted"]

EvictionPolicy = Literal["unaccessed", "unmodified", "age", "all"]


@dataclass(frozen=True)
class ChangeEvent:
    """A change observed on the remote collection.

    Field groups:
    - created/updated: item (required)
    - deleted: key (required)
    """

    kind: ChangeKind

    item: Optional[Item] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class CacheStatus:
    fully_populated: bool

    # Only known when fully populated
    size: Optional[int] = None

    def as_dict(self) -> dict:
        return {"fully_populated": self.fully_populated, "size": self.size}
