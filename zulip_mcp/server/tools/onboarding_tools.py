"""Helper tools for orientation: connection check and user discovery."""

import asyncio
import logging

from mcp.types import CallToolResult

from zulip_mcp.formatters import filter_users
from zulip_mcp.schemas import SearchUsersParams
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response, success_response
from zulip_mcp.server.state import get_state

logger = logging.getLogger(__name__)

QUICK_TIPS = [
    "Use 'search-users' to find users before sending DMs",
    "Use exact channel names from 'get-subscribed-channels'",
    "Always include 'topic' when sending to channels",
    "For DMs, use actual email addresses (not display names)",
    "Note: 'streams' and 'channels' mean the same thing in Zulip",
]


async def _or_default(label: str, coro, default: dict) -> dict:
    """Await coro, degrading any failure to default."""
    try:
        return await coro
    except Exception as e:
        logger.warning("get-started: %s unavailable: %s", label, e)
        return default


@mcp.tool(name="search-users")
async def search_users(query: str, limit: int = 10) -> CallToolResult:
    """Search users by partial name or email.

    Use this before sending direct messages when you don't know exact
    details. Returns matching users with name, email and ID.

    Args:
        query: Name, email or partial match (case-insensitive).
        limit: Maximum number of results (default: 10).
    """
    async def run():
        params = SearchUsersParams(query=query, limit=limit)
        result = await get_state().client.get_users()
        matches = filter_users(result.get("members", []), params.query, params.limit)
        if not matches:
            return success_response(
                f'No users found matching "{params.query}". '
                "Try a shorter search term or check spelling."
            )
        return json_response({
            "query": params.query,
            "found": len(matches),
            "users": [
                {
                    "name": u.get("full_name"),
                    "email": u.get("email"),
                    "id": u.get("user_id"),
                    "active": u.get("is_active"),
                }
                for u in matches
            ],
        })

    return await execute_tool("searching users", run)


@mcp.tool(name="get-started")
async def get_started() -> CallToolResult:
    """Start here: test the connection and get a workspace overview.

    Lists a few of your channels and whether there is recent activity.
    Each half degrades to empty on failure, so this always answers.
    """
    async def run():
        state = get_state()
        client = state.client
        channels, recent = await asyncio.gather(
            _or_default("subscriptions", client.get_subscriptions(), {"subscriptions": []}),
            _or_default(
                "recent messages",
                client.get_messages(anchor="newest", num_before=3, num_after=0),
                {"messages": []},
            ),
        )
        subs = channels.get("subscriptions") or []
        messages = recent.get("messages") or []
        return json_response({
            "status": "Connected to Zulip",
            "your_email": state.config.email,
            "zulip_url": state.config.url,
            "channels_available": len(subs),
            "sample_channels": [s.get("name") for s in subs[:5]],
            "recent_activity": len(messages) > 0,
            "recent_message_count": len(messages),
            "quick_tips": QUICK_TIPS,
        })

    return await execute_tool("running connection test", run)
