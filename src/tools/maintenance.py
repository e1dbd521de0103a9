"""MCP tools for keeping the mirror in sync and trimming it.

Registers 'cache_status', 'refresh_items', 'evict_items' and
'apply_change'. Change notifications from the remote collection are fed in
through 'apply_change'.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from config import DEFAULT_EVICT_MAX_AGE_MS
from core.errors import ValidationError
from core.interfaces import Item
from core.models import ChangeEvent, ChangeKind, EvictionPolicy
from sources.mirror import ItemMirror

_CHANGE_KINDS = {"created", "updated", "deleted"}
_POLICIES = {"unaccessed", "unmodified", "age", "all"}


def register(mcp: FastMCP, *, mirror: ItemMirror) -> None:
    @mcp.tool(name="cache_status")
    async def cache_status() -> Dict[str, Any]:
        """Report whether the cache is a complete replica and, if so, its size."""
        return mirror.status().as_dict()

    @mcp.tool(name="refresh_items")
    async def refresh_items() -> Dict[str, Any]:
        """Reload the whole collection from the remote source into the cache."""
        await mirror.refresh()
        return mirror.status().as_dict()

    @mcp.tool(name="evict_items")
    async def evict_items(
        policy: EvictionPolicy = "unaccessed",
        max_age_ms: int = DEFAULT_EVICT_MAX_AGE_MS,
    ) -> Dict[str, Any]:
        """Evict cached items by age.

        Params:
          - policy: "unaccessed" (not read within max_age_ms), "unmodified"
            (not updated within max_age_ms), "age" (cached longer than
            max_age_ms) or "all".
          - max_age_ms: age threshold in milliseconds (ignored for "all").

        Returns:
          {"removed": <count>, "fully_populated": <bool>, "size": <int|null>}
        """
        if policy not in _POLICIES:
            raise ValidationError(f"Unknown eviction policy: {policy}")
        if max_age_ms < 0:
            raise ValidationError("max_age_ms must not be negative")

        removed = mirror.evict(policy, max_age_ms)
        return {"removed": removed, **mirror.status().as_dict()}

    @mcp.tool(name="apply_change")
    async def apply_change(
        kind: ChangeKind,
        item: Optional[Item] = None,
        key: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Replay a change observed on the remote collection.

        Params:
          - kind: "created", "updated" or "deleted".
          - item: the new item state (required for created/updated).
          - key: the removed item's key (required for deleted).

        Returns:
          {"consistent": <bool>, ...status}. consistent is false when the
          change revealed that a fully populated cache had drifted; the
          cache then stops claiming to be complete.
        """
        if kind not in _CHANGE_KINDS:
            raise ValidationError(f"Unknown change kind: {kind}")

        consistent = mirror.apply(ChangeEvent(kind=kind, item=item, key=key))
        return {"consistent": consistent, **mirror.status().as_dict()}
