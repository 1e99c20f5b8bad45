"""
Settings Tests
"""

import pytest
from pydantic import ValidationError


class TestChannelLists:
    def test_defaults(self, settings):
        assert settings.claude_channels == ("droid", "aws", "super", "ultra")
        assert settings.codex_channels == ("codex",)
        assert settings.gemini_channels == ("gemini",)
        assert settings.default_claude_channel == "droid"

    def test_names_are_trimmed_and_blanks_dropped(self, settings_factory):
        settings = settings_factory(CLAUDE_CHANNELS=" aws , ,droid,")
        assert settings.claude_channels == ("aws", "droid")
        assert settings.default_claude_channel == "aws"

    def test_empty_claude_list_falls_back_to_droid(self, settings_factory):
        assert settings_factory(CLAUDE_CHANNELS="").default_claude_channel == "droid"


class TestTimeout:
    def test_milliseconds_to_seconds(self, settings_factory):
        assert settings_factory(TIMEOUT_MS=2500).timeout_seconds == 2.5

    def test_zero_disables(self, settings_factory):
        assert settings_factory(TIMEOUT_MS=0).timeout_seconds is None


def test_environment_overrides(monkeypatch, settings_factory):
    monkeypatch.setenv("RETRY_MAX", "5")
    monkeypatch.setenv("TARGET_HOST", "other.example")
    settings = settings_factory()
    assert settings.RETRY_MAX == 5
    # explicit values win over the environment
    assert settings.TARGET_HOST == "upstream.test"


def test_invalid_values_rejected(settings_factory):
    with pytest.raises(ValidationError):
        settings_factory(RETRY_MAX=0)


def test_settings_are_frozen(settings):
    with pytest.raises(ValidationError):
        settings.USER_ID = "changed"
