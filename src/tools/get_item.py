"""MCP tool that reads a single item through the mirror.

Registers the 'get_item' tool which answers from the cache when it can and
falls back to the remote collection on a miss while the cache is partial.
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from config import DEFAULT_WAIT_MS
from core.errors import NotFoundError, ValidationError
from core.interfaces import Item
from sources.mirror import ItemMirror


def register(mcp: FastMCP, *, mirror: ItemMirror) -> None:
    @mcp.tool(name="get_item")
    async def get_item(key: str = "", wait_ms: int = DEFAULT_WAIT_MS) -> Item:
        """Return one item by its unique key.

        Params:
          - key: the item's unique key (required).
          - wait_ms: how long to wait for another caller to cache the item
            before falling back to the remote collection (default from config).

        Raises:
          ValidationError for a missing key or negative wait; NotFoundError
          when neither the cache nor the remote collection has the item.
        """
        key_clean = (key or "").strip()
        if not key_clean:
            raise ValidationError("Missing item key")
        if wait_ms < 0:
            raise ValidationError("wait_ms must not be negative")

        item = await mirror.get(key_clean, wait_ms=wait_ms)
        if item is None:
            raise NotFoundError(f"Item not found: {key_clean}")
        return item
