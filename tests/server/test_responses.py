"""Tests for result envelopes and the tool executor."""

import pytest

from zulip_mcp.errors import ZulipAPIError, ZulipUnreachableError
from zulip_mcp.schemas import SearchUsersParams
from zulip_mcp.server.responses import error_response, execute_tool, json_response, success_response


def _text(result):
    return result.content[0].text


class TestEnvelopes:
    def test_success(self):
        result = success_response("ok")
        assert _text(result) == "ok"
        assert not result.isError

    def test_json_pretty(self):
        assert _text(json_response({"a": 1})) == '{\n  "a": 1\n}'

    def test_error_flag(self):
        assert error_response("bad").isError is True


class TestExecuteTool:
    @pytest.mark.asyncio
    async def test_passes_result_through(self):
        async def handler():
            return success_response("done")

        assert _text(await execute_tool("testing", handler)) == "done"

    @pytest.mark.asyncio
    async def test_validation_error(self):
        async def handler():
            SearchUsersParams(query="")

        result = await execute_tool("searching users", handler)
        assert result.isError
        assert _text(result).startswith("Invalid input: query")

    @pytest.mark.asyncio
    async def test_api_error(self):
        async def handler():
            raise ZulipAPIError(400, "No such user")

        result = await execute_tool("sending message", handler)
        assert result.isError
        assert _text(result).startswith("Error sending message: Zulip API Error (400): No such user")
        assert "search-users" in _text(result)

    @pytest.mark.asyncio
    async def test_network_error(self):
        async def handler():
            raise ZulipUnreachableError("https://chat.example.com")

        result = await execute_tool("getting drafts", handler)
        assert "Network Error" in _text(result)

    @pytest.mark.asyncio
    async def test_unexpected_error(self):
        async def handler():
            raise KeyError

        result = await execute_tool("getting user", handler)
        assert result.isError
        assert _text(result) == "Error getting user: KeyError"
