"""MCP tools for message drafts."""

from typing import List, Optional

from mcp.types import CallToolResult

from zulip_mcp.formatters import format_draft
from zulip_mcp.schemas import CreateDraftParams, EditDraftParams, MessageKind
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response, success_response
from zulip_mcp.server.state import get_state


@mcp.tool(name="create-draft")
async def create_draft(
    type: MessageKind,
    to: List[int],
    topic: str,
    content: str,
    timestamp: Optional[int] = None,
) -> CallToolResult:
    """Save a message as a draft for later editing or sending.

    Args:
        type: "channel" or "direct".
        to: User IDs for direct drafts, or a single channel ID for channel drafts.
            Use 'search-users' or 'get-users' to find user IDs.
        topic: Topic for channel drafts (send "" for direct drafts).
        content: Draft content in Zulip Markdown.
        timestamp: Unix timestamp of the draft (defaults to now).
    """
    async def run():
        params = CreateDraftParams(
            type=type, to=to, topic=topic, content=content, timestamp=timestamp
        )
        result = await get_state().client.create_draft(
            params.type, params.to, params.topic, params.content, timestamp=params.timestamp
        )
        ids = result.get("ids", [])
        return json_response({
            "success": True,
            "draft_ids": ids,
            "message": f"Draft created successfully! IDs: {', '.join(str(i) for i in ids)}",
        })

    return await execute_tool("creating draft", run)


@mcp.tool(name="get-drafts")
async def get_drafts() -> CallToolResult:
    """Retrieve all saved message drafts."""
    async def run():
        result = await get_state().client.get_drafts()
        drafts = result.get("drafts", [])
        return json_response({
            "draft_count": len(drafts),
            "drafts": [format_draft(d) for d in drafts],
        })

    return await execute_tool("getting drafts", run)


@mcp.tool(name="edit-draft")
async def edit_draft(
    draft_id: int,
    type: MessageKind,
    to: List[int],
    topic: str,
    content: str,
    timestamp: Optional[int] = None,
) -> CallToolResult:
    """Replace an existing draft's type, recipients, topic and content."""
    async def run():
        params = EditDraftParams(
            draft_id=draft_id,
            type=type,
            to=to,
            topic=topic,
            content=content,
            timestamp=timestamp,
        )
        await get_state().client.edit_draft(
            params.draft_id,
            params.type,
            params.to,
            params.topic,
            params.content,
            timestamp=params.timestamp,
        )
        return success_response(f"Draft {params.draft_id} updated successfully!")

    return await execute_tool("editing draft", run)
