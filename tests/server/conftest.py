"""Fixtures for tool and resource tests: a mocked client behind the state."""

import pytest
from unittest.mock import AsyncMock

# Registers every tool and resource before the tool modules are imported directly
import zulip_mcp.server.mcp_server  # noqa: F401
from zulip_mcp.client import ZulipClient
from zulip_mcp.config import ZulipConfig
from zulip_mcp.server import state


@pytest.fixture
def config():
    return ZulipConfig(
        url="https://chat.example.com",
        email="bot@example.com",
        api_key="secret",
    )


@pytest.fixture
def client(config):
    mock = AsyncMock(spec=ZulipClient)
    state.init_state(config, client=mock)
    yield mock
    state._state = None
