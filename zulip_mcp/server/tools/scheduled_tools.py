"""MCP tools for scheduled messages."""

from typing import Optional

from mcp.types import CallToolResult

from zulip_mcp.formatters import format_scheduled_message, iso_timestamp
from zulip_mcp.schemas import (
    CreateScheduledMessageParams,
    EditScheduledMessageParams,
    MessageKind,
)
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response, success_response
from zulip_mcp.server.state import get_state


@mcp.tool(name="create-scheduled-message")
async def create_scheduled_message(
    type: MessageKind,
    to: str,
    content: str,
    scheduled_delivery_timestamp: int,
    topic: Optional[str] = None,
) -> CallToolResult:
    """Schedule a message to be sent at a future time.

    Args:
        type: "channel" or "direct".
        to: Channel name, or comma-separated user emails for direct messages.
        content: Message content in Zulip Markdown.
        scheduled_delivery_timestamp: Unix timestamp (seconds) to deliver at.
        topic: Topic name; required for channel messages.
    """
    async def run():
        params = CreateScheduledMessageParams(
            type=type,
            to=to,
            content=content,
            scheduled_delivery_timestamp=scheduled_delivery_timestamp,
            topic=topic,
        )
        result = await get_state().client.create_scheduled_message(
            params.type,
            params.to,
            params.content,
            params.scheduled_delivery_timestamp,
            topic=params.topic,
        )
        sched_id = result.get("scheduled_message_id")
        return json_response({
            "success": True,
            "scheduled_message_id": sched_id,
            "delivery_time": iso_timestamp(params.scheduled_delivery_timestamp),
            "message": f"Message scheduled successfully! ID: {sched_id}",
        })

    return await execute_tool("creating scheduled message", run)


@mcp.tool(name="edit-scheduled-message")
async def edit_scheduled_message(
    scheduled_message_id: int,
    type: Optional[MessageKind] = None,
    to: Optional[str] = None,
    content: Optional[str] = None,
    topic: Optional[str] = None,
    scheduled_delivery_timestamp: Optional[int] = None,
) -> CallToolResult:
    """Modify a scheduled message before it is sent. Omitted fields are left unchanged."""
    async def run():
        params = EditScheduledMessageParams(
            scheduled_message_id=scheduled_message_id,
            type=type,
            to=to,
            content=content,
            topic=topic,
            scheduled_delivery_timestamp=scheduled_delivery_timestamp,
        )
        await get_state().client.edit_scheduled_message(
            params.scheduled_message_id,
            type=params.type,
            to=params.to,
            content=params.content,
            topic=params.topic,
            scheduled_delivery_timestamp=params.scheduled_delivery_timestamp,
        )
        return success_response(
            f"Scheduled message {params.scheduled_message_id} updated successfully!"
        )

    return await execute_tool("editing scheduled message", run)


@mcp.tool(name="get-scheduled-messages")
async def get_scheduled_messages() -> CallToolResult:
    """List your scheduled messages that have not been sent yet."""
    async def run():
        result = await get_state().client.get_scheduled_messages()
        scheduled = result.get("scheduled_messages", [])
        return json_response({
            "scheduled_count": len(scheduled),
            "scheduled_messages": [format_scheduled_message(s) for s in scheduled],
        })

    return await execute_tool("getting scheduled messages", run)
