"""Zulip MCP stdio server: FastMCP entrypoint."""

import logging
import sys

from mcp.server.fastmcp import FastMCP

from zulip_mcp.config import ConfigError, ZulipConfig

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "zulip-mcp-server",
    instructions=(
        "Zulip integration: send and browse messages, manage reactions, drafts and "
        "scheduled messages, look up users, channels (streams) and topics. "
        "Start with 'get-started' to check the connection."
    ),
)

# Import tool modules to register them with mcp
from zulip_mcp.server import resources  # noqa: F401, E402
from zulip_mcp.server.tools import message_tools  # noqa: F401, E402
from zulip_mcp.server.tools import scheduled_tools  # noqa: F401, E402
from zulip_mcp.server.tools import draft_tools  # noqa: F401, E402
from zulip_mcp.server.tools import channel_tools  # noqa: F401, E402
from zulip_mcp.server.tools import user_tools  # noqa: F401, E402
from zulip_mcp.server.tools import onboarding_tools  # noqa: F401, E402


def configure_logging(debug: bool = False) -> None:
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def main():
    """Run the MCP server via stdio transport."""
    try:
        config = ZulipConfig.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error("%s", e)
        sys.exit(1)

    configure_logging(config.debug)

    from zulip_mcp.server.state import init_state

    init_state(config)
    logger.info("Zulip MCP Server running on stdio (%s)", config.url)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
