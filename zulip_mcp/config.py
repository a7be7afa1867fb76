"""Configuration loaded from the environment (and .env)."""

__version__ = "1.5.0"

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIMEOUT = 30.0

# (env var, description)
REQUIRED_ENV = [
    ("ZULIP_URL", "Your Zulip server URL (e.g., https://your-org.zulipchat.com)"),
    ("ZULIP_EMAIL", "Your bot/user email address"),
    ("ZULIP_API_KEY", "Your API key from Zulip settings"),
]

TRUTHY_VALUES = ("1", "true", "yes", "on")


class ConfigError(Exception):
    """Raised when required settings are missing or malformed."""


def _env_flag(*names: str) -> bool:
    return any(os.getenv(n, "").strip().lower() in TRUTHY_VALUES for n in names)


@dataclass(frozen=True)
class ZulipConfig:
    url: str
    email: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    debug: bool = False

    @property
    def api_base(self) -> str:
        return f"{self.url.rstrip('/')}/api/v1"

    @classmethod
    def from_env(cls) -> "ZulipConfig":
        """Create ZulipConfig from environment variables.

        Raises ConfigError naming every required variable that is unset.
        """
        values = {name: os.getenv(name, "").strip() for name, _ in REQUIRED_ENV}
        missing = [(name, desc) for name, desc in REQUIRED_ENV if not values[name]]
        if missing:
            lines = "\n".join(f"  - {name}: {desc}" for name, desc in missing)
            raise ConfigError(
                "Missing required environment variables. Please set:\n"
                f"{lines}\n"
                "You can set these as environment variables or in a .env file.\n"
                f"Missing: {' '.join(name for name, _ in missing)}"
            )

        raw_timeout = os.getenv("ZULIP_TIMEOUT", "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            raise ConfigError(
                f"ZULIP_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
            ) from None

        return cls(
            url=values["ZULIP_URL"],
            email=values["ZULIP_EMAIL"],
            api_key=values["ZULIP_API_KEY"],
            timeout=timeout,
            debug=_env_flag("ZULIP_MCP_DEBUG", "DEBUG"),
        )
