"""MCP tools for messages, reactions, read receipts and uploads."""

from typing import List, Optional, Union

from mcp.types import CallToolResult

from zulip_mcp.formatters import format_message
from zulip_mcp.schemas import (
    EditMessageParams,
    GetMessageParams,
    GetMessagesParams,
    MessageIdParams,
    MessageKind,
    ReactionParams,
    ReactionType,
    SendMessageParams,
    UploadFileParams,
)
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response, success_response
from zulip_mcp.server.state import get_state


@mcp.tool(name="send-message")
async def send_message(
    type: MessageKind,
    to: str,
    content: str,
    topic: Optional[str] = None,
) -> CallToolResult:
    """Send a message to a channel or a direct message to users.

    For channels use exact names from 'get-subscribed-channels'. For direct
    messages use actual email addresses from 'search-users' (not display names).

    Args:
        type: "channel" for channel messages, "direct" for direct messages.
        to: Channel name, or comma-separated user emails for direct messages.
        content: Message content in Zulip Markdown.
        topic: Topic name; required for channel messages.
    """
    async def run():
        params = SendMessageParams(type=type, to=to, content=content, topic=topic)
        result = await get_state().client.send_message(
            params.type, params.to, params.content, params.topic
        )
        return success_response(f"Message sent successfully! Message ID: {result.get('id')}")

    return await execute_tool("sending message", run)


@mcp.tool(name="get-messages")
async def get_messages(
    anchor: Optional[Union[int, str]] = None,
    num_before: Optional[int] = None,
    num_after: Optional[int] = None,
    narrow: Optional[List[List[str]]] = None,
    message_id: Optional[int] = None,
) -> CallToolResult:
    """Get multiple messages with filtering and pagination.

    Args:
        anchor: Message ID, "newest", "oldest" or "first_unread" (default "newest").
        num_before: Messages before the anchor (max 1000, default 20).
        num_after: Messages after the anchor (max 1000, default 0).
        narrow: Filters such as [["stream", "general"], ["topic", "intro"]].
        message_id: Fetch this single message instead; other arguments are ignored.
    """
    async def run():
        params = GetMessagesParams(
            anchor=anchor,
            num_before=num_before,
            num_after=num_after,
            narrow=narrow,
            message_id=message_id,
        )
        client = get_state().client
        if params.message_id is not None:
            result = await client.get_messages(message_id=params.message_id)
        else:
            result = await client.get_messages(
                anchor=params.anchor,
                num_before=params.num_before,
                num_after=params.num_after,
                narrow=params.narrow,
            )
        messages = result.get("messages", [])
        return json_response({
            "message_count": len(messages),
            "messages": [format_message(m) for m in messages],
        })

    return await execute_tool("retrieving messages", run)


@mcp.tool(name="get-message")
async def get_message(
    message_id: int,
    apply_markdown: Optional[bool] = None,
    allow_empty_topic_name: Optional[bool] = None,
) -> CallToolResult:
    """Get full details of one message, including reactions and edit history.

    Args:
        message_id: The message ID.
        apply_markdown: True for rendered HTML content, False for raw Markdown.
        allow_empty_topic_name: Allow empty topic names in the response.
    """
    async def run():
        params = GetMessageParams(
            message_id=message_id,
            apply_markdown=apply_markdown,
            allow_empty_topic_name=allow_empty_topic_name,
        )
        result = await get_state().client.get_message(
            params.message_id,
            apply_markdown=params.apply_markdown,
            allow_empty_topic_name=params.allow_empty_topic_name,
        )
        return json_response({"message": format_message(result["message"], with_history=True)})

    return await execute_tool("getting message", run)


@mcp.tool(name="edit-message")
async def edit_message(
    message_id: int,
    content: Optional[str] = None,
    topic: Optional[str] = None,
) -> CallToolResult:
    """Edit an existing message's content or topic (at least one is required)."""
    async def run():
        params = EditMessageParams(message_id=message_id, content=content, topic=topic)
        await get_state().client.update_message(
            params.message_id, content=params.content, topic=params.topic
        )
        return success_response(f"Message {params.message_id} updated successfully!")

    return await execute_tool("updating message", run)


@mcp.tool(name="delete-message")
async def delete_message(message_id: int) -> CallToolResult:
    """Delete a message by its ID."""
    async def run():
        params = MessageIdParams(message_id=message_id)
        await get_state().client.delete_message(params.message_id)
        return success_response(f"Message {params.message_id} deleted successfully!")

    return await execute_tool("deleting message", run)


@mcp.tool(name="add-emoji-reaction")
async def add_emoji_reaction(
    message_id: int,
    emoji_name: str,
    emoji_code: Optional[str] = None,
    reaction_type: ReactionType = "unicode_emoji",
) -> CallToolResult:
    """Add an emoji reaction to a message.

    Args:
        message_id: The message to react to.
        emoji_name: Emoji name, e.g. "thumbs_up", "heart" or a custom emoji.
        emoji_code: Unicode code point or custom emoji ID.
        reaction_type: "unicode_emoji", "realm_emoji" (organization custom)
            or "zulip_extra_emoji".
    """
    async def run():
        params = ReactionParams(
            message_id=message_id,
            emoji_name=emoji_name,
            emoji_code=emoji_code,
            reaction_type=reaction_type,
        )
        await get_state().client.add_reaction(
            params.message_id,
            params.emoji_name,
            emoji_code=params.emoji_code,
            reaction_type=params.reaction_type,
        )
        return success_response(f"Reaction {params.emoji_name} added to message {params.message_id}!")

    return await execute_tool("adding reaction", run)


@mcp.tool(name="remove-emoji-reaction")
async def remove_emoji_reaction(
    message_id: int,
    emoji_name: str,
    emoji_code: Optional[str] = None,
    reaction_type: ReactionType = "unicode_emoji",
) -> CallToolResult:
    """Remove an emoji reaction from a message."""
    async def run():
        params = ReactionParams(
            message_id=message_id,
            emoji_name=emoji_name,
            emoji_code=emoji_code,
            reaction_type=reaction_type,
        )
        await get_state().client.remove_reaction(
            params.message_id,
            params.emoji_name,
            emoji_code=params.emoji_code,
            reaction_type=params.reaction_type,
        )
        return success_response(f"Reaction {params.emoji_name} removed from message {params.message_id}!")

    return await execute_tool("removing reaction", run)


@mcp.tool(name="get-message-read-receipts")
async def get_message_read_receipts(message_id: int) -> CallToolResult:
    """Get the IDs of users who have read a message."""
    async def run():
        params = MessageIdParams(message_id=message_id)
        result = await get_state().client.get_message_read_receipts(params.message_id)
        user_ids = result.get("user_ids", [])
        return json_response({
            "message_id": params.message_id,
            "read_by_count": len(user_ids),
            "user_ids": user_ids,
        })

    return await execute_tool("getting read receipts", run)


@mcp.tool(name="upload-file")
async def upload_file(filename: str, content: str, content_type: Optional[str] = None) -> CallToolResult:
    """Upload a file or image; returns a URI to embed in messages.

    Args:
        filename: File name including extension, e.g. "report.pdf".
        content: Base64-encoded file content.
        content_type: MIME type, e.g. "image/png".
    """
    async def run():
        params = UploadFileParams(filename=filename, content=content, content_type=content_type)
        result = await get_state().client.upload_file(
            params.filename, params.content, params.content_type
        )
        uri = result.get("uri") or result.get("url")
        return json_response({
            "success": True,
            "uri": uri,
            "message": f"File uploaded successfully! Use this URI in messages: {uri}",
        })

    return await execute_tool("uploading file", run)
