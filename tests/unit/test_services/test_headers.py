"""
Outbound Header Builder Unit Tests
"""

from cache_proxy.services.headers import (
    BROWSER_USER_AGENT,
    build_claude_headers,
    build_direct_headers,
    build_get_headers,
    preflight_headers,
)


class TestClaudeHeaders:
    """Claude Header Tests"""

    def test_defaults_when_absent(self, settings):
        headers = build_claude_headers({}, settings)
        assert headers == {
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01",
        }

    def test_passes_through_credentials_and_versions(self, settings):
        inbound = {
            "authorization": "Bearer sk-1",
            "x-api-key": "sk-2",
            "anthropic-version": "2024-01-01",
            "anthropic-beta": "prompt-caching-2024-07-31",
            "cookie": "session=secret",
            "host": "proxy.local",
        }
        headers = build_claude_headers(inbound, settings)

        assert headers["Authorization"] == "Bearer sk-1"
        assert headers["x-api-key"] == "sk-2"
        assert headers["anthropic-version"] == "2024-01-01"
        assert headers["anthropic-beta"] == "prompt-caching-2024-07-31"
        assert "cookie" not in headers and "host" not in headers

    def test_configured_beta_default(self, settings_factory):
        settings = settings_factory(ANTHROPIC_BETA="interleaved-thinking-2025-05-14")
        assert build_claude_headers({}, settings)["anthropic-beta"] == "interleaved-thinking-2025-05-14"


class TestDirectHeaders:
    """Direct Mode Header Tests"""

    def test_only_present_credentials(self, settings):
        assert build_direct_headers({"x-session-key": "s"}, settings) == {"Content-Type": "application/json"}

    def test_goog_api_key(self, settings):
        headers = build_direct_headers({"X-Goog-Api-Key": "AIza", "Authorization": "Bearer t"}, settings)
        assert headers["x-goog-api-key"] == "AIza"
        assert headers["Authorization"] == "Bearer t"
        assert headers["Content-Type"] == "application/json"


class TestGetHeaders:
    """GET Header Tests"""

    def test_browser_defaults(self):
        headers = build_get_headers({})
        assert headers["User-Agent"] == BROWSER_USER_AGENT
        assert headers["Sec-Fetch-Mode"] == "cors"
        assert "Authorization" not in headers

    def test_passthrough(self):
        inbound = {
            "user-agent": "curl/8.0",
            "authorization": "Bearer t",
            "x-api-key": "k",
            "x-goog-api-key": "g",
            "anthropic-version": "2023-06-01",
            "referer": "https://app.example/",
            "origin": "https://app.example",
        }
        headers = build_get_headers(inbound)

        assert headers["User-Agent"] == "curl/8.0"
        assert headers["Authorization"] == "Bearer t"
        assert headers["x-api-key"] == "k"
        assert headers["x-goog-api-key"] == "g"
        assert headers["anthropic-version"] == "2023-06-01"
        assert headers["Referer"] == "https://app.example/"
        assert headers["Origin"] == "https://app.example"


def test_preflight_headers():
    headers = preflight_headers()
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["Access-Control-Max-Age"] == "86400"
    assert "x-goog-api-key" in headers["Access-Control-Allow-Headers"]
