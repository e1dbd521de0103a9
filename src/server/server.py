"""Server bootstrap for the item mirror MCP service.

Creates the FastMCP instance, wires the remote client, cache and mirror,
registers the tools and starts the MCP server (stdio transport).
"""

from mcp.server.fastmcp import FastMCP

from clients.items_client import ItemsClient
from config import (
    HTTP_TIMEOUT,
    HTTP_VERIFY,
    ITEM_ID_FIELD,
    ITEMS_API_TOKEN,
    ITEMS_BASE_URL,
    ITEMS_PATH,
    LOG_LEVEL,
)
from core.cache import ItemCache
from core.identity import field_key
from core.log import configure_logging
from sources.mirror import ItemMirror

from tools.get_item import register as register_get_item
from tools.list_items import register as register_list_items
from tools.maintenance import register as register_maintenance

mcp = FastMCP("item-mirror")


def build_mirror() -> ItemMirror:
    client = ItemsClient(
        base_url=ITEMS_BASE_URL,
        items_path=ITEMS_PATH,
        timeout=HTTP_TIMEOUT,
        verify=HTTP_VERIFY,
        token=ITEMS_API_TOKEN,
    )
    cache = ItemCache(field_key(ITEM_ID_FIELD))
    return ItemMirror(cache=cache, source=client)


def register_tools() -> None:
    # One mirror shared by every tool
    mirror = build_mirror()

    register_get_item(mcp, mirror=mirror)
    register_list_items(mcp, mirror=mirror)
    register_maintenance(mcp, mirror=mirror)


register_tools()


def main() -> None:
    configure_logging(LOG_LEVEL)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
