"""Read-only MCP resources: directories, guides and organization info."""

import asyncio
import json
import logging

from zulip_mcp.config import TRUTHY_VALUES
from zulip_mcp.formatters import format_channel, format_user_group, format_user_summary
from zulip_mcp.server.mcp_server import mcp
from zulip_mcp.server.state import get_state

logger = logging.getLogger(__name__)

FORMATTING_GUIDE = """# Zulip Message Formatting Guide

## Basic Markdown
- **Bold text**: **bold** or __bold__
- *Italic text*: *italic* or _italic_
- `Code`: `inline code`
- Links: [text](URL)
- ~~Strikethrough~~: ~~strikethrough~~
- Quoted text: > quoted text

## Zulip-Specific Formatting

### Mentions
- `@**Full Name**` - Standard mention (notifies user)
- `@_**Full Name**` - Silent mention (no notification)
- `@*groupname*` - Group mention, `@_*groupname*` silent group mention
- `@**all**`, `@**everyone**` - Everyone in the organization
- `@**channel**` - All subscribers of the current channel
- `@**topic**` - All participants in the current topic

### Channel and Topic Links
- `#**channelname**` - Link to a channel
- `#**channelname>topicname**` - Link to a topic
- `#**channelname>topicname@messageID**` - Link to a message

### Code Blocks
```python
def hello():
    print("Hello, Zulip!")
```

### Spoilers
```spoiler Header text
Hidden content here
```

### Global Times
- `<time:2024-06-02T10:30:00Z>` renders in each reader's timezone

## Tips
- Use mentions sparingly; prefer silent mentions when no reply is needed
- Tag code blocks with a language for syntax highlighting
- Link to topics or messages for context
- Uploaded images are thumbnailed automatically
"""

COMMON_PATTERNS = """# Common Zulip MCP Usage Patterns

## Terminology
"Streams" and "channels" are the same thing in Zulip: named conversation
spaces. Every channel message belongs to a topic.

## Getting Started
1. `get-started` - test the connection and list a few channels
2. `search-users` - find users by name or email
3. `get-user-by-email` / `get-user` - full profile from an email or ID
4. `get-subscribed-channels` - exact channel names before sending

## Sending Direct Messages
```
Step 1: search-users with query="John Doe"
Step 2: send-message with type="direct", to="john.doe@example.com", content="Hello!"
```

## Sending to Channels
```
Step 1: get-subscribed-channels
Step 2: send-message with type="channel", to="general", topic="Hello", content="Hi everyone!"
```

## Common Mistakes
- Using display names for DMs (use emails from search-users)
- Forgetting the topic for channel messages (always required)
- Assuming a channel or user exists (search first)

## Choosing Tools
- `search-users` when exploring; `get-user-by-email` with an exact email;
  `get-user` with an ID from search results
- `get-messages` to browse or search history; `get-message` for one
  message with its reactions and edit history

## Debugging
- "User not found": you used a name instead of an email
- "Channel not found": check spelling with get-subscribed-channels
- "Topic is required": add a topic for channel messages
"""


def _flag(value: str) -> bool:
    return str(value).strip().lower() in TRUTHY_VALUES


async def _users_directory(include_bots: bool) -> str:
    try:
        result = await get_state().client.get_users(
            client_gravatar=True, include_custom_profile_fields=True
        )
    except Exception as e:
        return f"Error fetching users: {e}"
    users = [u for u in result.get("members", []) if include_bots or not u.get("is_bot")]
    return json.dumps({"users": [format_user_summary(u) for u in users]}, indent=2)


async def _channels_directory(include_archived: bool) -> str:
    try:
        result = await get_state().client.get_subscriptions(False)
    except Exception as e:
        return f"Error fetching channels: {e}"
    subs = result.get("subscriptions", [])
    if not include_archived:
        subs = [s for s in subs if not s.get("is_archived")]
    return json.dumps({"channels": [format_channel(s) for s in subs]}, indent=2)


@mcp.resource("zulip://users", name="users-directory", mime_type="application/json")
async def users_directory() -> str:
    """Directory of human users with ID, email, name and role."""
    return await _users_directory(include_bots=False)


@mcp.resource("zulip://users/{include_bots}", name="users-directory-filtered", mime_type="application/json")
async def users_directory_filtered(include_bots: str) -> str:
    """Users directory; pass "true" to include bots."""
    return await _users_directory(include_bots=_flag(include_bots))


@mcp.resource("zulip://channels", name="channels-directory", mime_type="application/json")
async def channels_directory() -> str:
    """Your subscribed channels, archived ones excluded."""
    return await _channels_directory(include_archived=False)


@mcp.resource(
    "zulip://channels/{include_archived}",
    name="channels-directory-filtered",
    mime_type="application/json",
)
async def channels_directory_filtered(include_archived: str) -> str:
    """Subscribed channels; pass "true" to include archived ones."""
    return await _channels_directory(include_archived=_flag(include_archived))


@mcp.resource("zulip://formatting/guide", name="message-formatting-guide", mime_type="text/markdown")
def formatting_guide() -> str:
    """Zulip Markdown, mentions and link syntax."""
    return FORMATTING_GUIDE


@mcp.resource("zulip://patterns/common", name="common-patterns", mime_type="text/markdown")
def common_patterns() -> str:
    """Recommended tool sequences and common mistakes."""
    return COMMON_PATTERNS


@mcp.resource("zulip://organization", name="organization-info", mime_type="application/json")
async def organization_info() -> str:
    """Server settings, realm info and custom emoji, fetched concurrently."""
    client = get_state().client
    try:
        settings, realm, emoji = await asyncio.gather(
            client.get_server_settings(),
            client.get_realm_info(),
            client.get_custom_emoji(),
        )
    except Exception as e:
        logger.warning("organization resource failed: %s", e)
        return f"Error fetching organization info: {e}"
    return json.dumps({
        "server_settings": settings,
        "realm": realm,
        "custom_emoji": emoji.get("emoji", emoji),
    }, indent=2)


@mcp.resource("zulip://user-groups", name="user-groups", mime_type="application/json")
async def user_groups() -> str:
    """All user groups with member counts."""
    try:
        result = await get_state().client.get_user_groups()
    except Exception as e:
        return f"Error fetching user groups: {e}"
    groups = result.get("user_groups", [])
    return json.dumps({"user_groups": [format_user_group(g) for g in groups]}, indent=2)
