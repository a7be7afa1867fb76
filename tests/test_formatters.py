"""Tests for payload reshaping helpers."""

import pytest

from zulip_mcp.formatters import (
    derive_role,
    filter_users,
    format_channel,
    format_channel_detail,
    format_message,
    format_scheduled_message,
    format_user,
    format_user_group,
    iso_timestamp,
)

USERS = [
    {"user_id": 1, "full_name": "John Smith", "email": "john@example.com", "is_active": True},
    {"user_id": 2, "full_name": "Jane Doe", "email": "jane@example.com", "is_active": True},
    {"user_id": 3, "full_name": "Bob", "email": "bob.johnson@example.com", "is_active": False},
]


class TestDeriveRole:
    @pytest.mark.parametrize("flags,role", [
        ({"is_owner": True, "is_admin": True}, "owner"),
        ({"is_admin": True, "is_moderator": True}, "admin"),
        ({"is_moderator": True}, "moderator"),
        ({"is_guest": True}, "guest"),
        ({}, "member"),
        ({"is_admin": False}, "member"),
    ])
    def test_priority(self, flags, role):
        assert derive_role(flags) == role


class TestIsoTimestamp:
    def test_epoch(self):
        assert iso_timestamp(0) == "1970-01-01T00:00:00.000Z"

    def test_none(self):
        assert iso_timestamp(None) is None


class TestFilterUsers:
    def test_matches_name_case_insensitive(self):
        assert [u["user_id"] for u in filter_users(USERS, "JANE", 10)] == [2]

    def test_matches_email(self):
        # "john" is in John Smith's name and Bob's email
        assert [u["user_id"] for u in filter_users(USERS, "john", 10)] == [1, 3]

    def test_limit_keeps_order(self):
        assert [u["user_id"] for u in filter_users(USERS, "j", 1)] == [1]

    def test_no_match(self):
        assert filter_users(USERS, "zzz", 10) == []


class TestShapes:
    def test_message(self):
        out = format_message({
            "id": 9,
            "sender_full_name": "Jane Doe",
            "sender_email": "jane@example.com",
            "timestamp": 0,
            "content": "hi",
            "type": "stream",
            "subject": "intro",
            "stream_id": 4,
        })
        assert out["sender"] == "Jane Doe"
        assert out["topic"] == "intro"
        assert out["timestamp"] == "1970-01-01T00:00:00.000Z"
        assert out["reactions"] == []
        assert "edit_history" not in out

    def test_message_with_history(self):
        out = format_message({"id": 9, "edit_history": [{"timestamp": 1}]}, with_history=True)
        assert out["edit_history"] == [{"timestamp": 1}]

    def test_user_detailed(self):
        out = format_user({"user_id": 1, "is_admin": True}, detailed=True)
        assert out["role"] == "admin"
        assert out["profile_data"] == {}

    def test_channel_defaults_archived(self):
        assert format_channel({"stream_id": 1, "name": "general"})["is_archived"] is False

    def test_channel_detail_subscribers(self):
        out = format_channel_detail({"stream_id": 1, "name": "general", "subscribers": [1, 2]})
        assert out["subscribers"] == [1, 2]
        assert out["date_created"] is None

    def test_user_group_member_count(self):
        assert format_user_group({"id": 1, "members": [1, 2, 3]})["member_count"] == 3

    def test_scheduled_delivery_time(self):
        out = format_scheduled_message({"scheduled_message_id": 3, "scheduled_delivery_timestamp": 0})
        assert out["id"] == 3
        assert out["delivery_time"] == "1970-01-01T00:00:00.000Z"
