"""Errors raised by the Zulip client."""

from typing import Optional

# (substrings, hint); first match wins
_HINTS = [
    (
        ("No such user",),
        "Use the 'search-users' tool to find the correct email address.",
    ),
    (
        ("Stream does not exist", "Invalid stream", "Invalid channel", "Channel does not exist"),
        "Use 'get-subscribed-channels' to see available channels and check exact spelling.",
    ),
    (
        ("Invalid email",),
        "Use actual email addresses from 'search-users' tool, not display names.",
    ),
    (
        ("Message not found", "Invalid message"),
        "The message may have been deleted or you may not have access to it.",
    ),
]


def hint_for(message: str) -> Optional[str]:
    for needles, hint in _HINTS:
        if any(n in message for n in needles):
            return hint
    return None


class ZulipError(Exception):
    """Base class for every failure talking to the Zulip server."""


class ZulipAPIError(ZulipError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        self.hint = hint_for(message)
        text = f"Zulip API Error ({status}): {message}"
        if self.hint:
            text = f"{text}. {self.hint}"
        super().__init__(text)


class ZulipUnreachableError(ZulipError):
    """No response was received (DNS, connect or timeout failure)."""

    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        super().__init__(
            f"Network Error: Unable to reach Zulip server at {url}. "
            "Check your ZULIP_URL environment variable."
        )


class ZulipRequestError(ZulipError):
    """The request could not be built locally."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Request Error: {message}")
