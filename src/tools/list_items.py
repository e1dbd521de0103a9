"""MCP tool that lists the whole item collection.

Registers the 'list_items' tool which serves a fully populated cache
directly and otherwise populates it from the remote collection.
"""

from __future__ import annotations

from typing import List

from mcp.server.fastmcp import FastMCP

from config import DEFAULT_WAIT_MS
from core.errors import ValidationError
from core.interfaces import Item
from sources.mirror import ItemMirror


def register(mcp: FastMCP, *, mirror: ItemMirror) -> None:
    @mcp.tool(name="list_items")
    async def list_items(wait_ms: int = DEFAULT_WAIT_MS) -> List[Item]:
        """Return every item in the collection (order not significant).

        Params:
          - wait_ms: how long to wait for a concurrent refresh to complete
            before fetching the collection itself (default from config).
        """
        if wait_ms < 0:
            raise ValidationError("wait_ms must not be negative")

        return await mirror.list_all(wait_ms=wait_ms)
