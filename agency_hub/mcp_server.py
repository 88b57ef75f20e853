# agency_hub/mcp_server.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from mcp.server.fastmcp import FastMCP

from agency_hub.dependencies.services import get_convex_client_cached
from agency_hub.services.clients import ClientDirectoryService
from agency_hub.services.inbox import InboxService

log = logging.getLogger("agency_hub.mcp")

# Name shown to MCP clients
mcp = FastMCP("agency_hub")


@mcp.tool(name="inbox_items", description="List every inbox item across all lead sources, newest first")
async def inbox_items() -> List[Dict[str, Any]]:
    items = await InboxService(get_convex_client_cached()).get_inbox_items()
    log.debug("inbox_items returned %d items", len(items))
    return [item.model_dump(by_alias=True) for item in items]


@mcp.tool(name="inbox_new_count", description="Count inbox items that are still new")
async def inbox_new_count() -> int:
    return await InboxService(get_convex_client_cached()).get_inbox_new_count()


@mcp.tool(name="clients_list", description="List consolidated clients, most recently active first")
async def clients_list() -> List[Dict[str, Any]]:
    clients = await ClientDirectoryService(get_convex_client_cached()).get_all_clients()
    log.debug("clients_list returned %d clients", len(clients))
    return [client.model_dump(by_alias=True) for client in clients]


@mcp.tool(name="client_details", description="Fetch every source record for one client email")
async def client_details(email: str) -> Dict[str, Any]:
    details = await ClientDirectoryService(get_convex_client_cached()).get_client_details(email)
    return details.model_dump(by_alias=True)
