"""Zulip MCP: expose the Zulip REST API as MCP tools and resources."""

from zulip_mcp.config import ConfigError, ZulipConfig, __version__
from zulip_mcp.client import ZulipClient
from zulip_mcp.errors import (
    ZulipAPIError,
    ZulipError,
    ZulipRequestError,
    ZulipUnreachableError,
)

__all__ = [
    "__version__",
    "ConfigError",
    "ZulipConfig",
    "ZulipClient",
    "ZulipError",
    "ZulipAPIError",
    "ZulipRequestError",
    "ZulipUnreachableError",
]
