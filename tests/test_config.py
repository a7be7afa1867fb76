"""Tests for ZulipConfig."""

from dataclasses import FrozenInstanceError

import pytest

from zulip_mcp.config import DEFAULT_TIMEOUT, ConfigError, ZulipConfig


@pytest.fixture
def zulip_env(monkeypatch):
    monkeypatch.setenv("ZULIP_URL", "https://chat.example.com/")
    monkeypatch.setenv("ZULIP_EMAIL", "bot@example.com")
    monkeypatch.setenv("ZULIP_API_KEY", "secret")
    monkeypatch.delenv("ZULIP_TIMEOUT", raising=False)
    monkeypatch.delenv("ZULIP_MCP_DEBUG", raising=False)
    monkeypatch.delenv("DEBUG", raising=False)


class TestFromEnv:
    def test_reads_required(self, zulip_env):
        c = ZulipConfig.from_env()
        assert c.url == "https://chat.example.com/"
        assert c.email == "bot@example.com"
        assert c.api_key == "secret"
        assert c.timeout == DEFAULT_TIMEOUT
        assert c.debug is False

    def test_api_base_strips_trailing_slash(self, zulip_env):
        assert ZulipConfig.from_env().api_base == "https://chat.example.com/api/v1"

    def test_missing_all_listed(self, monkeypatch):
        for name in ("ZULIP_URL", "ZULIP_EMAIL", "ZULIP_API_KEY"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ConfigError) as exc:
            ZulipConfig.from_env()
        msg = str(exc.value)
        assert "ZULIP_URL" in msg
        assert "ZULIP_EMAIL" in msg
        assert "ZULIP_API_KEY" in msg

    def test_missing_one(self, zulip_env, monkeypatch):
        monkeypatch.setenv("ZULIP_API_KEY", "  ")
        with pytest.raises(ConfigError) as exc:
            ZulipConfig.from_env()
        assert "Missing: ZULIP_API_KEY" in str(exc.value)

    def test_debug_flag(self, zulip_env, monkeypatch):
        monkeypatch.setenv("ZULIP_MCP_DEBUG", "yes")
        assert ZulipConfig.from_env().debug is True

    def test_custom_timeout(self, zulip_env, monkeypatch):
        monkeypatch.setenv("ZULIP_TIMEOUT", "5")
        assert ZulipConfig.from_env().timeout == 5.0

    def test_bad_timeout(self, zulip_env, monkeypatch):
        monkeypatch.setenv("ZULIP_TIMEOUT", "soon")
        with pytest.raises(ConfigError) as exc:
            ZulipConfig.from_env()
        assert "'soon'" in str(exc.value)
        # the float() failure is not chained into the report
        assert exc.value.__cause__ is None
        assert exc.value.__suppress_context__ is True


class TestZulipConfig:
    def test_frozen(self):
        c = ZulipConfig(url="https://x", email="a@x.com", api_key="k")
        with pytest.raises(FrozenInstanceError):
            c.url = "https://y"
