"""Shape raw Zulip payloads into the compact dicts returned to agents."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Checked in order; first true flag wins
ROLE_FLAGS = (
    ("is_owner", "owner"),
    ("is_admin", "admin"),
    ("is_moderator", "moderator"),
    ("is_guest", "guest"),
)


def derive_role(user: Dict[str, Any]) -> str:
    for flag, role in ROLE_FLAGS:
        if user.get(flag):
            return role
    return "member"


def iso_timestamp(ts: Optional[float]) -> Optional[str]:
    """Epoch seconds -> ISO-8601 UTC with a trailing Z."""
    if ts is None:
        return None
    dt = datetime.fromtimestamp(ts, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_message(msg: Dict[str, Any], with_history: bool = False) -> Dict[str, Any]:
    out = {
        "id": msg.get("id"),
        "sender": msg.get("sender_full_name"),
        "sender_email": msg.get("sender_email"),
        "timestamp": iso_timestamp(msg.get("timestamp")),
        "content": msg.get("content"),
        "type": msg.get("type"),
        "topic": msg.get("topic") or msg.get("subject"),
        "stream_id": msg.get("stream_id"),
        "reactions": msg.get("reactions", []),
    }
    if with_history:
        out["edit_history"] = msg.get("edit_history")
    return out


def format_user(user: Dict[str, Any], detailed: bool = False) -> Dict[str, Any]:
    out = {
        "id": user.get("user_id"),
        "email": user.get("email"),
        "full_name": user.get("full_name"),
        "is_active": user.get("is_active"),
        "is_bot": user.get("is_bot"),
        "role": derive_role(user),
        "date_joined": user.get("date_joined"),
        "timezone": user.get("timezone"),
        "avatar_url": user.get("avatar_url"),
    }
    if detailed:
        out["delivery_email"] = user.get("delivery_email")
        out["profile_data"] = user.get("profile_data") or {}
    return out


def format_user_summary(user: Dict[str, Any]) -> Dict[str, Any]:
    """Directory entry used by search-users and the users resource."""
    return {
        "id": user.get("user_id"),
        "email": user.get("email"),
        "name": user.get("full_name"),
        "is_bot": user.get("is_bot"),
        "is_active": user.get("is_active"),
        "role": derive_role(user),
    }


def format_channel(stream: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": stream.get("stream_id"),
        "name": stream.get("name"),
        "description": stream.get("description"),
        "invite_only": stream.get("invite_only"),
        "is_archived": stream.get("is_archived", False),
        "is_announcement_only": stream.get("is_announcement_only"),
    }


def format_channel_detail(stream: Dict[str, Any]) -> Dict[str, Any]:
    out = format_channel(stream)
    out.update({
        "is_web_public": stream.get("is_web_public"),
        "date_created": iso_timestamp(stream.get("date_created")),
        "message_retention_days": stream.get("message_retention_days"),
    })
    if "subscribers" in stream:
        out["subscribers"] = stream["subscribers"]
    return out


def format_topic(topic: Dict[str, Any]) -> Dict[str, Any]:
    return {"name": topic.get("name"), "max_id": topic.get("max_id")}


def format_user_group(group: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": group.get("id"),
        "name": group.get("name"),
        "description": group.get("description"),
        "member_count": len(group.get("members", [])),
        "is_system_group": group.get("is_system_group", False),
    }


def format_draft(draft: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": draft.get("id"),
        "type": draft.get("type"),
        "to": draft.get("to"),
        "topic": draft.get("topic"),
        "content": draft.get("content"),
        "timestamp": iso_timestamp(draft.get("timestamp")),
    }


def format_scheduled_message(sched: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": sched.get("scheduled_message_id"),
        "type": sched.get("type"),
        "to": sched.get("to"),
        "topic": sched.get("topic"),
        "content": sched.get("content"),
        "delivery_time": iso_timestamp(sched.get("scheduled_delivery_timestamp")),
        "failed": sched.get("failed", False),
    }


def filter_users(users: List[Dict[str, Any]], query: str, limit: int) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on name or email, in list order."""
    needle = query.lower()
    matches = [
        u for u in users
        if needle in (u.get("full_name") or "").lower()
        or needle in (u.get("email") or "").lower()
    ]
    return matches[:limit]
