"""Uniform MCP result envelopes and the shared tool executor."""

import json
import logging
from typing import Any, Awaitable, Callable

from mcp.types import CallToolResult, TextContent
from pydantic import ValidationError

from zulip_mcp.errors import ZulipError
from zulip_mcp.schemas import format_validation_error

logger = logging.getLogger(__name__)


def success_response(text: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)])


def json_response(payload: Any) -> CallToolResult:
    return success_response(json.dumps(payload, indent=2, ensure_ascii=False))


def error_response(message: str) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


async def execute_tool(
    action: str,
    handler: Callable[[], Awaitable[CallToolResult]],
) -> CallToolResult:
    """Run a tool body, converting every failure into an error envelope.

    Args:
        action: Phrase used in the error text, e.g. "sending message".
        handler: Zero-arg coroutine factory that validates input, calls the
            client and builds the success envelope.
    """
    try:
        return await handler()
    except ValidationError as e:
        return error_response(format_validation_error(e))
    except ZulipError as e:
        logger.warning("Error %s: %s", action, e)
        return error_response(f"Error {action}: {e}")
    except Exception as e:
        logger.exception("Unexpected error %s", action)
        return error_response(f"Error {action}: {str(e) or type(e).__name__}")
