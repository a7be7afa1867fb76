"""Zulip REST client using aiohttp (basic auth, API v1)."""

import asyncio
import base64
import binascii
import json
import logging
import time
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import aiohttp

from zulip_mcp.config import ZulipConfig
from zulip_mcp.errors import (
    ZulipAPIError,
    ZulipError,
    ZulipRequestError,
    ZulipUnreachableError,
)

logger = logging.getLogger(__name__)

USER_AGENT = "ZulipMCPServer/1.5.0"

DEFAULT_ANCHOR = "newest"
DEFAULT_NUM_BEFORE = 20
DEFAULT_NUM_AFTER = 0

# Public message kind -> wire literal, per endpoint family
SEND_TYPES = {"channel": "stream", "direct": "direct"}
SCHEDULED_TYPES = {"channel": "stream", "direct": "private"}
DRAFT_TYPES = {"channel": "stream", "direct": "private"}


def split_recipients(to: str) -> List[str]:
    """Split a comma-separated address list, trimming each entry."""
    return [addr.strip() for addr in to.split(",")]


def _wire_value(value: Any) -> Union[str, int, float]:
    """Encode a value for a query string or form field the way Zulip reads it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return value
    return str(value)


def _encode(values: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if values is None:
        return None
    return {k: _wire_value(v) for k, v in values.items() if v is not None}


class ZulipClient:
    """Async Zulip API client, one method per remote operation.

    Every method either returns the decoded JSON body or raises a
    ZulipError subclass. A fresh ClientSession is opened per request.
    """

    def __init__(self, config: ZulipConfig):
        self.config = config

    def _session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            auth=aiohttp.BasicAuth(self.config.email, self.config.api_key),
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": USER_AGENT},
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Any = None,
        form: Optional[Dict[str, Any]] = None,
        data: Optional[aiohttp.FormData] = None,
    ) -> Dict[str, Any]:
        url = f"{self.config.api_base}{path}"
        kwargs: Dict[str, Any] = {}
        if params is not None:
            kwargs["params"] = _encode(params)
        if json_body is not None:
            kwargs["json"] = json_body
            encoding = "json"
        elif form is not None:
            kwargs["data"] = _encode(form)
            encoding = "form"
        elif data is not None:
            kwargs["data"] = data
            encoding = "multipart"
        else:
            encoding = "none"

        logger.debug("zulip request sent: method=%s path=%s encoding=%s", method, path, encoding)
        try:
            async with self._session() as session:
                async with session.request(method, url, **kwargs) as resp:
                    if resp.status >= 400:
                        raise ZulipAPIError(resp.status, await self._error_message(resp))
                    body = await resp.json(content_type=None)
                    logger.debug("zulip response received: path=%s status=%s", path, resp.status)
                    return body if body is not None else {}
        except ZulipAPIError as e:
            logger.debug("zulip error raised: kind=api path=%s status=%s", path, e.status)
            raise
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            logger.debug("zulip error raised: kind=unreachable path=%s reason=%s", path, e)
            raise ZulipUnreachableError(self.config.url, str(e)) from e
        except (aiohttp.ClientError, TypeError, ValueError) as e:
            logger.debug("zulip error raised: kind=request path=%s reason=%s", path, e)
            raise ZulipRequestError(str(e) or type(e).__name__) from e

    @staticmethod
    async def _error_message(resp) -> str:
        text = await resp.text()
        try:
            data = json.loads(text)
        except ValueError:
            return text or "Unknown error"
        if isinstance(data, dict):
            return data.get("msg") or data.get("message") or "Unknown error"
        return text or "Unknown error"

    # ── Messages ──────────────────────────────────────────────

    async def send_message(
        self,
        type: str,
        to: str,
        content: str,
        topic: Optional[str] = None,
    ) -> Dict[str, Any]:
        """POST /messages as JSON, falling back once to form encoding.

        The fallback fires only on a remote rejection; unreachable and
        local errors propagate from the first attempt.
        """
        payload: Dict[str, Any] = {"type": SEND_TYPES[type], "content": content}
        if type == "direct":
            payload["to"] = split_recipients(to)
        else:
            payload["to"] = to
            if topic:
                payload["topic"] = topic

        try:
            return await self._request("POST", "/messages", json_body=payload)
        except ZulipAPIError as e:
            logger.info("JSON send rejected (%s), retrying form-encoded", e.status)

        # form encoding serialises the recipient list as a JSON string
        return await self._request("POST", "/messages", form=payload)

    async def get_messages(
        self,
        anchor: Optional[Union[int, str]] = None,
        num_before: Optional[int] = None,
        num_after: Optional[int] = None,
        narrow: Optional[List[List[str]]] = None,
        message_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        if message_id is not None:
            data = await self._request("GET", f"/messages/{message_id}")
            return {"messages": [data["message"]]}

        params: Dict[str, Any] = {
            "anchor": anchor if anchor is not None else DEFAULT_ANCHOR,
            "num_before": num_before if num_before is not None else DEFAULT_NUM_BEFORE,
            "num_after": num_after if num_after is not None else DEFAULT_NUM_AFTER,
        }
        if narrow:
            params["narrow"] = [list(term) for term in narrow]
        return await self._request("GET", "/messages", params=params)

    async def get_message(
        self,
        message_id: int,
        apply_markdown: Optional[bool] = None,
        allow_empty_topic_name: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = {
            "apply_markdown": apply_markdown,
            "allow_empty_topic_name": allow_empty_topic_name,
        }
        return await self._request("GET", f"/messages/{message_id}", params=params)

    async def update_message(
        self,
        message_id: int,
        content: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> Dict[str, Any]:
        form = {"content": content, "topic": topic}
        return await self._request("PATCH", f"/messages/{message_id}", form=form)

    async def delete_message(self, message_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/messages/{message_id}")

    async def add_reaction(
        self,
        message_id: int,
        emoji_name: str,
        emoji_code: Optional[str] = None,
        reaction_type: str = "unicode_emoji",
    ) -> Dict[str, Any]:
        form = {
            "emoji_name": emoji_name,
            "emoji_code": emoji_code,
            "reaction_type": reaction_type or "unicode_emoji",
        }
        return await self._request("POST", f"/messages/{message_id}/reactions", form=form)

    async def remove_reaction(
        self,
        message_id: int,
        emoji_name: str,
        emoji_code: Optional[str] = None,
        reaction_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        params = {
            "emoji_name": emoji_name,
            "emoji_code": emoji_code or None,
            "reaction_type": reaction_type or None,
        }
        return await self._request("DELETE", f"/messages/{message_id}/reactions", params=params)

    async def get_message_read_receipts(self, message_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/messages/{message_id}/read_receipts")

    # ── Files ─────────────────────────────────────────────────

    async def upload_file(
        self,
        filename: str,
        content: str,
        content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Decode base64 content and POST it as multipart to /user_uploads."""
        try:
            raw = base64.b64decode(content, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ZulipRequestError(f"File content is not valid base64: {e}") from e

        form = aiohttp.FormData()
        form.add_field(
            "file",
            raw,
            filename=filename,
            content_type=content_type or "application/octet-stream",
        )
        return await self._request("POST", "/user_uploads", data=form)

    # ── Scheduled messages ────────────────────────────────────

    async def create_scheduled_message(
        self,
        type: str,
        to: str,
        content: str,
        scheduled_delivery_timestamp: int,
        topic: Optional[str] = None,
    ) -> Dict[str, Any]:
        form: Dict[str, Any] = {
            "type": SCHEDULED_TYPES[type],
            "content": content,
            "scheduled_delivery_timestamp": scheduled_delivery_timestamp,
        }
        if type == "direct":
            form["to"] = split_recipients(to)
        else:
            form["to"] = to
            if topic:
                form["topic"] = topic
        return await self._request("POST", "/scheduled_messages", form=form)

    async def edit_scheduled_message(
        self,
        scheduled_message_id: int,
        type: Optional[str] = None,
        to: Optional[str] = None,
        content: Optional[str] = None,
        topic: Optional[str] = None,
        scheduled_delivery_timestamp: Optional[int] = None,
    ) -> Dict[str, Any]:
        form: Dict[str, Any] = {
            "type": SCHEDULED_TYPES[type] if type else None,
            "content": content,
            "topic": topic,
            "scheduled_delivery_timestamp": scheduled_delivery_timestamp,
        }
        if to is not None:
            form["to"] = split_recipients(to) if type == "direct" else to
        return await self._request(
            "PATCH", f"/scheduled_messages/{scheduled_message_id}", form=form
        )

    async def get_scheduled_messages(self) -> Dict[str, Any]:
        return await self._request("GET", "/scheduled_messages")

    # ── Drafts ────────────────────────────────────────────────

    @staticmethod
    def _draft_object(
        type: str,
        to: List[int],
        topic: str,
        content: str,
        timestamp: Optional[int],
    ) -> Dict[str, Any]:
        return {
            "type": DRAFT_TYPES[type],
            "to": list(to),
            "topic": topic,
            "content": content,
            "timestamp": timestamp if timestamp is not None else int(time.time()),
        }

    async def create_draft(
        self,
        type: str,
        to: List[int],
        topic: str,
        content: str,
        timestamp: Optional[int] = None,
    ) -> Dict[str, Any]:
        """POST /drafts with a single-element array, JSON first then form."""
        drafts = [self._draft_object(type, to, topic, content, timestamp)]
        try:
            return await self._request("POST", "/drafts", json_body={"drafts": drafts})
        except ZulipAPIError as e:
            logger.info("JSON draft rejected (%s), retrying form-encoded", e.status)
        return await self._request("POST", "/drafts", form={"drafts": drafts})

    async def get_drafts(self) -> Dict[str, Any]:
        return await self._request("GET", "/drafts")

    async def edit_draft(
        self,
        draft_id: int,
        type: str,
        to: List[int],
        topic: str,
        content: str,
        timestamp: Optional[int] = None,
    ) -> Dict[str, Any]:
        draft = self._draft_object(type, to, topic, content, timestamp)
        return await self._request("PATCH", f"/drafts/{draft_id}", form={"draft": draft})

    # ── Channels ──────────────────────────────────────────────

    async def get_subscriptions(self, include_subscribers: bool = False) -> Dict[str, Any]:
        params = {"include_subscribers": True} if include_subscribers else {}
        return await self._request("GET", "/users/me/subscriptions", params=params)

    async def get_all_streams(
        self,
        include_public: bool = True,
        include_subscribed: bool = True,
        include_all_active: bool = False,
        include_archived: bool = False,
    ) -> Dict[str, Any]:
        params = {
            "include_public": include_public,
            "include_subscribed": include_subscribed,
            "include_all_active": include_all_active,
            "include_archived": include_archived,
        }
        return await self._request("GET", "/streams", params=params)

    async def get_stream_id(self, stream_name: str) -> Dict[str, Any]:
        return await self._request("GET", "/get_stream_id", params={"stream": stream_name})

    async def get_stream(self, stream_id: int, include_subscribers: bool = False) -> Dict[str, Any]:
        params = {"include_subscribers": True} if include_subscribers else {}
        return await self._request("GET", f"/streams/{stream_id}", params=params)

    async def get_stream_topics(self, stream_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/users/me/{stream_id}/topics")

    # ── Users ─────────────────────────────────────────────────

    async def get_users(
        self,
        client_gravatar: Optional[bool] = None,
        include_custom_profile_fields: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = {
            "client_gravatar": client_gravatar,
            "include_custom_profile_fields": include_custom_profile_fields,
        }
        return await self._request("GET", "/users", params=params)

    async def get_user(
        self,
        user_id: int,
        client_gravatar: Optional[bool] = None,
        include_custom_profile_fields: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = {
            "client_gravatar": client_gravatar,
            "include_custom_profile_fields": include_custom_profile_fields,
        }
        return await self._request("GET", f"/users/{user_id}", params=params)

    async def get_user_by_email(
        self,
        email: str,
        client_gravatar: Optional[bool] = None,
        include_custom_profile_fields: Optional[bool] = None,
    ) -> Dict[str, Any]:
        params = {
            "client_gravatar": client_gravatar,
            "include_custom_profile_fields": include_custom_profile_fields,
        }
        return await self._request("GET", f"/users/{quote(email, safe='')}", params=params)

    async def update_status(
        self,
        status_text: Optional[str] = None,
        away: Optional[bool] = None,
        emoji_name: Optional[str] = None,
        emoji_code: Optional[str] = None,
        reaction_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        # empty emoji fields are dropped; an empty status_text clears the status
        form = {
            "status_text": status_text,
            "away": away,
            "emoji_name": emoji_name or None,
            "emoji_code": emoji_code or None,
            "reaction_type": reaction_type or None,
        }
        return await self._request("POST", "/users/me/status", form=form)

    async def get_user_groups(self) -> Dict[str, Any]:
        return await self._request("GET", "/user_groups")

    # ── Organization ──────────────────────────────────────────

    async def get_server_settings(self) -> Dict[str, Any]:
        return await self._request("GET", "/server_settings")

    async def get_realm_info(self) -> Dict[str, Any]:
        return await self._request("GET", "/realm")

    async def get_custom_emoji(self) -> Dict[str, Any]:
        return await self._request("GET", "/realm/emoji")


__all__ = ["ZulipClient", "ZulipError", "split_recipients"]
