"""Input models for every tool, validated before any network call."""

import re
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

MessageKind = Literal["channel", "direct"]
ReactionType = Literal["unicode_emoji", "realm_emoji", "zulip_extra_emoji"]
Anchor = Union[int, Literal["newest", "oldest", "first_unread"]]

MAX_PAGE = 1000

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def invalid_addresses(to: str) -> List[str]:
    """Return the entries of a comma-separated list that lack an '@'."""
    return [addr.strip() for addr in to.split(",") if "@" not in addr]


def _check_recipient(kind: Optional[str], to: Optional[str], topic: Optional[str], require_topic: bool):
    if kind == "channel" and require_topic and not topic:
        raise ValueError(
            "Topic is required for channel messages. "
            "Think of it as a subject line for your message."
        )
    if kind == "direct" and to is not None:
        bad = invalid_addresses(to)
        if bad:
            raise ValueError(
                f"Invalid email format for direct message recipients: {', '.join(repr(b) for b in bad)}. "
                "Use 'search-users' tool to find correct email addresses. Don't use display names."
            )


def format_validation_error(exc: ValidationError) -> str:
    """Render a pydantic ValidationError as 'Invalid input: field: message; ...'."""
    parts = []
    for err in exc.errors():
        msg = err.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "Invalid input: " + "; ".join(parts)


class _Params(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ── Messages ──────────────────────────────────────────────────


class SendMessageParams(_Params):
    type: MessageKind = Field(..., description="'channel' for channel messages, 'direct' for direct messages")
    to: str = Field(..., min_length=1, description="Channel name, or comma-separated user emails for direct messages")
    content: str = Field(..., description="Message content using Zulip Markdown")
    topic: Optional[str] = Field(None, description="Topic name (required for channel messages)")

    @model_validator(mode="after")
    def _recipients(self):
        _check_recipient(self.type, self.to, self.topic, require_topic=True)
        return self


class GetMessagesParams(_Params):
    anchor: Optional[Anchor] = None
    num_before: Optional[int] = Field(None, ge=0, le=MAX_PAGE)
    num_after: Optional[int] = Field(None, ge=0, le=MAX_PAGE)
    narrow: Optional[List[List[str]]] = None
    message_id: Optional[int] = None

    @field_validator("narrow")
    @classmethod
    def _narrow_pairs(cls, v):
        if v is not None:
            for term in v:
                if len(term) != 2:
                    raise ValueError("each narrow filter must be a [operator, operand] pair")
        return v


class GetMessageParams(_Params):
    message_id: int
    apply_markdown: Optional[bool] = None
    allow_empty_topic_name: Optional[bool] = None


class EditMessageParams(_Params):
    message_id: int
    content: Optional[str] = None
    topic: Optional[str] = None

    @model_validator(mode="after")
    def _something_to_change(self):
        if self.content is None and self.topic is None:
            raise ValueError("At least one of content or topic must be provided for message update")
        return self


class MessageIdParams(_Params):
    message_id: int


class ReactionParams(_Params):
    message_id: int
    emoji_name: str = Field(..., min_length=1)
    emoji_code: Optional[str] = None
    reaction_type: ReactionType = "unicode_emoji"


class UploadFileParams(_Params):
    filename: str = Field(..., min_length=1)
    content: str
    content_type: Optional[str] = None


# ── Scheduled messages ────────────────────────────────────────


class CreateScheduledMessageParams(_Params):
    type: MessageKind
    to: str = Field(..., min_length=1)
    content: str
    scheduled_delivery_timestamp: int = Field(..., ge=0)
    topic: Optional[str] = None

    @model_validator(mode="after")
    def _recipients(self):
        _check_recipient(self.type, self.to, self.topic, require_topic=True)
        return self


class EditScheduledMessageParams(_Params):
    scheduled_message_id: int
    type: Optional[MessageKind] = None
    to: Optional[str] = None
    content: Optional[str] = None
    topic: Optional[str] = None
    scheduled_delivery_timestamp: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _something_to_change(self):
        fields = (self.type, self.to, self.content, self.topic, self.scheduled_delivery_timestamp)
        if all(f is None for f in fields):
            raise ValueError("At least one parameter must be provided to update scheduled message")
        # the recipient format depends on the kind
        if self.to is not None and self.type is None:
            raise ValueError("type is required when changing recipients ('channel' or 'direct')")
        _check_recipient(self.type, self.to, self.topic, require_topic=False)
        return self


# ── Drafts ────────────────────────────────────────────────────


class CreateDraftParams(_Params):
    type: MessageKind
    to: List[int]
    topic: str
    content: str
    timestamp: Optional[int] = Field(None, ge=0)


class EditDraftParams(CreateDraftParams):
    draft_id: int


# ── Channels ──────────────────────────────────────────────────


class GetSubscribedChannelsParams(_Params):
    include_subscribers: Optional[bool] = None


class ListChannelsParams(_Params):
    include_public: bool = True
    include_subscribed: bool = True
    include_all_active: bool = False
    include_archived: bool = False


class GetChannelIdParams(_Params):
    channel_name: str = Field(..., min_length=1)


class GetChannelByIdParams(_Params):
    channel_id: int
    include_subscribers: Optional[bool] = None


class GetTopicsParams(_Params):
    channel_id: int


# ── Users ─────────────────────────────────────────────────────


class SearchUsersParams(_Params):
    query: str = Field(..., min_length=1)
    limit: int = Field(10, ge=1)


class ListUsersParams(_Params):
    client_gravatar: Optional[bool] = None
    include_custom_profile_fields: Optional[bool] = None


class GetUserParams(ListUsersParams):
    user_id: int


class GetUserByEmailParams(ListUsersParams):
    email: str

    @field_validator("email")
    @classmethod
    def _valid_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_RE.match(v):
            raise ValueError(f"{v!r} is not a valid email address")
        return v


class UpdateStatusParams(_Params):
    status_text: Optional[str] = None
    away: Optional[bool] = None
    emoji_name: Optional[str] = None
    emoji_code: Optional[str] = None
    reaction_type: Optional[ReactionType] = None

    @model_validator(mode="after")
    def _something_to_change(self):
        given = [
            self.status_text is not None,
            self.away is not None,
            bool(self.emoji_name),
            bool(self.emoji_code),
            self.reaction_type is not None,
        ]
        if not any(given):
            raise ValueError("At least one parameter must be provided to update status")
        return self
