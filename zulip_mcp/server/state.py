"""Process-wide state for the MCP server: immutable config plus the client."""

from __future__ import annotations

import logging
from typing import Optional

from zulip_mcp.client import ZulipClient
from zulip_mcp.config import ZulipConfig

logger = logging.getLogger(__name__)


class AppState:
    """Holds the configuration read at startup and the client built from it."""

    def __init__(self, config: ZulipConfig, client: Optional[ZulipClient] = None):
        self.config = config
        self.client = client if client is not None else ZulipClient(config)
        logger.debug("Zulip MCP state initialized for %s as %s", config.url, config.email)


# Module-level singleton
_state: Optional[AppState] = None


def init_state(config: ZulipConfig, client: Optional[ZulipClient] = None) -> AppState:
    global _state
    _state = AppState(config, client)
    return _state


def get_state() -> AppState:
    """Return the state, building it from the environment on first use."""
    global _state
    if _state is None:
        _state = AppState(ZulipConfig.from_env())
    return _state
