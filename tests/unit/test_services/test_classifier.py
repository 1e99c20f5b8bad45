"""
Request Classifier Unit Tests
"""

import pytest

from cache_proxy.domain.request import ChannelType, ClassifiedRequest
from cache_proxy.services.classifier import classify, first_segment


class TestClassify:
    """Path Classification Tests"""

    @pytest.mark.parametrize("channel", ["droid", "aws", "super", "ultra"])
    def test_claude_channels(self, settings, channel):
        result = classify(f"/{channel}/v1/messages", settings)
        assert result == ClassifiedRequest(type=ChannelType.CLAUDE, channel=channel)

    def test_codex_channel(self, settings):
        result = classify("/codex/v1/responses", settings)
        assert result == ClassifiedRequest(type=ChannelType.CODEX, channel="codex")

    def test_gemini_channel(self, settings):
        result = classify("/gemini/models/gemini-2.5-pro:streamGenerateContent", settings)
        assert result == ClassifiedRequest(type=ChannelType.GEMINI, channel="gemini")

    def test_unknown_channel_keeps_name(self, settings):
        """Unmatched segment is UNKNOWN, not an error"""
        result = classify("/foo/bar", settings)
        assert result == ClassifiedRequest(type=ChannelType.UNKNOWN, channel="foo")
        assert result.is_known is False

    @pytest.mark.parametrize("path", ["/", "", "//droid"])
    def test_no_segment(self, settings, path):
        """Channel is None only when no segment exists"""
        result = classify(path, settings)
        assert result == ClassifiedRequest(type=ChannelType.UNKNOWN, channel=None)

    def test_standard_v1_path_is_unknown(self, settings):
        assert classify("/v1/models", settings).type is ChannelType.UNKNOWN

    def test_segment_match_is_exact(self, settings):
        assert classify("/droids/v1/messages", settings).type is ChannelType.UNKNOWN
        assert classify("/DROID/v1/messages", settings).type is ChannelType.UNKNOWN

    def test_claude_checked_before_codex(self, settings_factory):
        """A name configured for several families resolves to Claude first"""
        settings = settings_factory(CLAUDE_CHANNELS="shared", CODEX_CHANNELS="shared,codex")
        assert classify("/shared/x", settings).type is ChannelType.CLAUDE

    def test_custom_channel_names(self, settings_factory):
        settings = settings_factory(GEMINI_CHANNELS=" gemini , gem ")
        assert classify("/gem/models", settings) == ClassifiedRequest(type=ChannelType.GEMINI, channel="gem")

    def test_deterministic(self, settings):
        assert classify("/aws/v1/messages", settings) == classify("/aws/v1/messages", settings)


class TestFirstSegment:
    """First Segment Extraction Tests"""

    def test_extract(self):
        assert first_segment("/droid/v1/messages") == "droid"
        assert first_segment("/health") == "health"

    def test_missing(self):
        assert first_segment("/") is None
        assert first_segment("relative/path") is None
