"""Tests for message tools against a mocked client."""

import json

import pytest

from zulip_mcp.errors import ZulipAPIError
from zulip_mcp.server.tools import message_tools


def _text(result):
    return result.content[0].text


class TestSendMessage:
    @pytest.mark.asyncio
    async def test_channel_without_topic_is_rejected_locally(self, client):
        result = await message_tools.send_message(type="channel", to="general", content="hi")
        assert result.isError
        assert "Topic is required" in _text(result)
        client.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_direct_with_display_name(self, client):
        result = await message_tools.send_message(type="direct", to="a@x.com,John", content="hi")
        assert result.isError
        assert "'John'" in _text(result)
        client.send_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_success_reports_id(self, client):
        client.send_message.return_value = {"result": "success", "id": 42}
        result = await message_tools.send_message(
            type="channel", to="general", content="hi", topic="intro"
        )
        assert not result.isError
        assert _text(result) == "Message sent successfully! Message ID: 42"
        client.send_message.assert_awaited_once_with("channel", "general", "hi", "intro")

    @pytest.mark.asyncio
    async def test_api_error_envelope(self, client):
        client.send_message.side_effect = ZulipAPIError(400, "Stream does not exist")
        result = await message_tools.send_message(
            type="channel", to="nope", content="hi", topic="t"
        )
        assert result.isError
        assert "get-subscribed-channels" in _text(result)


class TestGetMessages:
    @pytest.mark.asyncio
    async def test_reshapes_messages(self, client):
        client.get_messages.return_value = {"messages": [
            {"id": 1, "sender_full_name": "Jane", "content": "a", "subject": "t", "timestamp": 0},
            {"id": 2, "sender_full_name": "John", "content": "b", "subject": "t", "timestamp": 0},
        ]}
        result = await message_tools.get_messages(narrow=[["stream", "general"]])
        payload = json.loads(_text(result))
        assert payload["message_count"] == 2
        assert payload["messages"][0]["sender"] == "Jane"
        client.get_messages.assert_awaited_once_with(
            anchor=None, num_before=None, num_after=None, narrow=[["stream", "general"]]
        )

    @pytest.mark.asyncio
    async def test_message_id_wins(self, client):
        client.get_messages.return_value = {"messages": [{"id": 5}]}
        await message_tools.get_messages(anchor="oldest", message_id=5)
        client.get_messages.assert_awaited_once_with(message_id=5)

    @pytest.mark.asyncio
    async def test_page_size_limit(self, client):
        result = await message_tools.get_messages(num_before=5000)
        assert result.isError
        client.get_messages.assert_not_called()


class TestOtherMessageTools:
    @pytest.mark.asyncio
    async def test_get_message_includes_history(self, client):
        client.get_message.return_value = {"message": {"id": 3, "edit_history": []}}
        payload = json.loads(_text(await message_tools.get_message(message_id=3)))
        assert payload["message"]["id"] == 3
        assert payload["message"]["edit_history"] == []

    @pytest.mark.asyncio
    async def test_edit_requires_a_field(self, client):
        result = await message_tools.edit_message(message_id=3)
        assert result.isError
        client.update_message.assert_not_called()

    @pytest.mark.asyncio
    async def test_edit(self, client):
        client.update_message.return_value = {"result": "success"}
        result = await message_tools.edit_message(message_id=3, content="new")
        assert _text(result) == "Message 3 updated successfully!"
        client.update_message.assert_awaited_once_with(3, content="new", topic=None)

    @pytest.mark.asyncio
    async def test_delete(self, client):
        client.delete_message.return_value = {}
        result = await message_tools.delete_message(message_id=3)
        assert _text(result) == "Message 3 deleted successfully!"

    @pytest.mark.asyncio
    async def test_add_reaction(self, client):
        client.add_reaction.return_value = {}
        result = await message_tools.add_emoji_reaction(message_id=3, emoji_name="heart")
        assert not result.isError
        client.add_reaction.assert_awaited_once_with(
            3, "heart", emoji_code=None, reaction_type="unicode_emoji"
        )

    @pytest.mark.asyncio
    async def test_read_receipts(self, client):
        client.get_message_read_receipts.return_value = {"user_ids": [1, 2]}
        payload = json.loads(_text(await message_tools.get_message_read_receipts(message_id=3)))
        assert payload == {"message_id": 3, "read_by_count": 2, "user_ids": [1, 2]}

    @pytest.mark.asyncio
    async def test_upload(self, client):
        client.upload_file.return_value = {"uri": "/user_uploads/1/a.png"}
        result = await message_tools.upload_file(filename="a.png", content="aGk=", content_type="image/png")
        assert json.loads(_text(result))["uri"] == "/user_uploads/1/a.png"
