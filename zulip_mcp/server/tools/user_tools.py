"""MCP tools for users, user groups and status."""

from typing import Optional

from mcp.types import CallToolResult

from zulip_mcp.formatters import format_user, format_user_group
from zulip_mcp.schemas import (
    GetUserByEmailParams,
    GetUserParams,
    ListUsersParams,
    ReactionType,
    UpdateStatusParams,
)
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.responses import execute_tool, json_response, success_response
from zulip_mcp.server.state import get_state


@mcp.tool(name="get-users")
async def get_users(
    client_gravatar: Optional[bool] = None,
    include_custom_profile_fields: Optional[bool] = None,
) -> CallToolResult:
    """Get every user in the organization with role, timezone and avatar."""
    async def run():
        params = ListUsersParams(
            client_gravatar=client_gravatar,
            include_custom_profile_fields=include_custom_profile_fields,
        )
        result = await get_state().client.get_users(**params.model_dump())
        members = result.get("members", [])
        return json_response({
            "user_count": len(members),
            "users": [format_user(u) for u in members],
        })

    return await execute_tool("listing users", run)


@mcp.tool(name="get-user")
async def get_user(
    user_id: int,
    client_gravatar: Optional[bool] = None,
    include_custom_profile_fields: Optional[bool] = None,
) -> CallToolResult:
    """Get a full user profile from a user ID (e.g. from 'search-users')."""
    async def run():
        params = GetUserParams(
            user_id=user_id,
            client_gravatar=client_gravatar,
            include_custom_profile_fields=include_custom_profile_fields,
        )
        result = await get_state().client.get_user(
            params.user_id,
            client_gravatar=params.client_gravatar,
            include_custom_profile_fields=params.include_custom_profile_fields,
        )
        return json_response({"user": format_user(result["user"], detailed=True)})

    return await execute_tool("getting user", run)


@mcp.tool(name="get-user-by-email")
async def get_user_by_email(
    email: str,
    client_gravatar: Optional[bool] = None,
    include_custom_profile_fields: Optional[bool] = None,
) -> CallToolResult:
    """Get a full user profile from an exact email address."""
    async def run():
        params = GetUserByEmailParams(
            email=email,
            client_gravatar=client_gravatar,
            include_custom_profile_fields=include_custom_profile_fields,
        )
        result = await get_state().client.get_user_by_email(
            params.email,
            client_gravatar=params.client_gravatar,
            include_custom_profile_fields=params.include_custom_profile_fields,
        )
        return json_response({"user": format_user(result["user"], detailed=True)})

    return await execute_tool("getting user by email", run)


@mcp.tool(name="update-status")
async def update_status(
    status_text: Optional[str] = None,
    away: Optional[bool] = None,
    emoji_name: Optional[str] = None,
    emoji_code: Optional[str] = None,
    reaction_type: Optional[ReactionType] = None,
) -> CallToolResult:
    """Update your status message, status emoji and away flag.

    Examples: unicode emoji (emoji_name "coffee", emoji_code "2615"),
    organization emoji (reaction_type "realm_emoji") or Zulip extra emoji
    (reaction_type "zulip_extra_emoji").
    """
    async def run():
        params = UpdateStatusParams(
            status_text=status_text,
            away=away,
            emoji_name=emoji_name,
            emoji_code=emoji_code,
            reaction_type=reaction_type,
        )
        await get_state().client.update_status(**params.model_dump())
        text = "Status updated successfully!"
        if params.status_text:
            text += f' Message: "{params.status_text}"'
        if params.away is not None:
            text += f" Away: {str(params.away).lower()}"
        return success_response(text)

    return await execute_tool("updating status", run)


@mcp.tool(name="get-user-groups")
async def get_user_groups() -> CallToolResult:
    """List all user groups in the organization with member counts."""
    async def run():
        result = await get_state().client.get_user_groups()
        groups = result.get("user_groups", [])
        return json_response({
            "group_count": len(groups),
            "user_groups": [format_user_group(g) for g in groups],
        })

    return await execute_tool("getting user groups", run)
