"""MCP tools for channels (Zulip streams) and their topics."""

from typing import Optional

from mcp.types import CallToolResult

from zulip_mcp.formatters import format_channel, format_channel_detail, format_topic
from zulip_mcp.schemas import (
    GetChannelByIdParams,
    GetChannelIdParams,
    GetSubscribedChannelsParams,
    GetTopicsParams,
    ListChannelsParams,
)
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response
from zulip_mcp.server.state import get_state


@mcp.tool(name="get-subscribed-channels")
async def get_subscribed_channels(include_subscribers: Optional[bool] = None) -> CallToolResult:
    """List the channels you are subscribed to.

    Use this to find exact channel names before sending messages.
    In Zulip "streams" and "channels" are the same thing.
    """
    async def run():
        params = GetSubscribedChannelsParams(include_subscribers=include_subscribers)
        result = await get_state().client.get_subscriptions(bool(params.include_subscribers))
        subs = result.get("subscriptions", [])
        return json_response({
            "subscription_count": len(subs),
            "subscriptions": [format_channel(s) for s in subs],
        })

    return await execute_tool("getting subscribed channels", run)


@mcp.tool(name="get-all-channels")
async def get_all_channels(
    include_public: bool = True,
    include_subscribed: bool = True,
    include_all_active: bool = False,
    include_archived: bool = False,
) -> CallToolResult:
    """List every channel visible to you, not only your subscriptions."""
    async def run():
        params = ListChannelsParams(
            include_public=include_public,
            include_subscribed=include_subscribed,
            include_all_active=include_all_active,
            include_archived=include_archived,
        )
        result = await get_state().client.get_all_streams(**params.model_dump())
        streams = result.get("streams", [])
        return json_response({
            "channel_count": len(streams),
            "channels": [format_channel(s) for s in streams],
        })

    return await execute_tool("listing channels", run)


@mcp.tool(name="get-channel-id")
async def get_channel_id(channel_name: str) -> CallToolResult:
    """Get the numeric ID of a channel from its name (case-insensitive)."""
    async def run():
        params = GetChannelIdParams(channel_name=channel_name)
        result = await get_state().client.get_stream_id(params.channel_name)
        return json_response({
            "channel_name": params.channel_name,
            "channel_id": result.get("stream_id"),
        })

    return await execute_tool("getting channel ID", run)


@mcp.tool(name="get-channel-by-id")
async def get_channel_by_id(channel_id: int, include_subscribers: Optional[bool] = None) -> CallToolResult:
    """Get settings and details of a channel from its numeric ID."""
    async def run():
        params = GetChannelByIdParams(channel_id=channel_id, include_subscribers=include_subscribers)
        result = await get_state().client.get_stream(
            params.channel_id, bool(params.include_subscribers)
        )
        return json_response({"channel": format_channel_detail(result["stream"])})

    return await execute_tool("getting channel by ID", run)


@mcp.tool(name="get-topics-in-channel")
async def get_topics_in_channel(channel_id: int) -> CallToolResult:
    """List recent topics in a channel with the latest message ID of each."""
    async def run():
        params = GetTopicsParams(channel_id=channel_id)
        result = await get_state().client.get_stream_topics(params.channel_id)
        topics = result.get("topics", [])
        return json_response({
            "channel_id": params.channel_id,
            "topic_count": len(topics),
            "topics": [format_topic(t) for t in topics],
        })

    return await execute_tool("getting channel topics", run)
