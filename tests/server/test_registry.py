"""Tests for the tool modules registered on the server."""

import inspect

import pytest
from mcp.types import CallToolResult

from zulip_mcp.config import TRUTHY_VALUES
from zulip_mcp.server import resources
from zulip_mcp.server.tools import (
    channel_tools,
    draft_tools,
    message_tools,
    onboarding_tools,
    scheduled_tools,
    user_tools,
)

TOOL_MODULES = [
    message_tools,
    scheduled_tools,
    draft_tools,
    channel_tools,
    user_tools,
    onboarding_tools,
]


def _tool_functions():
    for module in TOOL_MODULES:
        for name, fn in inspect.getmembers(module, inspect.iscoroutinefunction):
            if fn.__module__ == module.__name__ and not name.startswith("_"):
                yield fn


@pytest.mark.parametrize("fn", list(_tool_functions()), ids=lambda fn: fn.__name__)
def test_tools_return_call_tool_result(fn):
    assert inspect.signature(fn).return_annotation is CallToolResult


def test_every_tool_function_is_counted():
    assert len(list(_tool_functions())) == 27


@pytest.mark.parametrize("value", TRUTHY_VALUES)
def test_resource_flags_match_config(value):
    assert resources._flag(value.upper())


@pytest.mark.parametrize("value", ["", "0", "false", "no"])
def test_resource_flags_false(value):
    assert not resources._flag(value)
