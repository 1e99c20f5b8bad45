"""
Configuration Management Module

Configures proxy parameters via environment variables or .env file.
Settings are loaded once per process and are read-only afterwards.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_names(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


class Settings(BaseSettings):
    """
    Proxy Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    """

    # Application Config
    APP_NAME: str = "Unified Cache Proxy"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Upstream Config
    # Host that every channel is forwarded to (https only)
    TARGET_HOST: str = "code.newcli.com"
    # Injected as metadata.user_id into every Claude request
    USER_ID: str = "openclaw-user"

    # Channel Config
    # Comma-separated channel names, matched against the first path segment.
    # The first Claude channel is the default for standard /v1/* GET paths.
    CLAUDE_CHANNELS: str = "droid,aws,super,ultra"
    CODEX_CHANNELS: str = "codex"
    GEMINI_CHANNELS: str = "gemini"

    # Retry Config (Claude flow only)
    # Total attempts, including the first one
    RETRY_MAX: int = Field(default=3, ge=1)
    # Initial backoff (ms), doubled on every retry
    RETRY_DELAY: int = Field(default=1000, ge=0)
    # Backoff ceiling (ms)
    RETRY_MAX_DELAY: int = Field(default=10000, ge=0)
    # Also retry timeouts and connection errors, which carry no upstream status
    RETRY_TRANSPORT_ERRORS: bool = False

    # HTTP Client Config
    # Budget per attempt (ms) until upstream response headers arrive; 0 disables it
    TIMEOUT_MS: int = Field(default=180000, ge=0)

    # Anthropic header defaults, used when the caller does not send them
    ANTHROPIC_VERSION: str = "2023-06-01"
    ANTHROPIC_BETA: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        frozen=True,
    )

    @property
    def claude_channels(self) -> tuple[str, ...]:
        return _split_names(self.CLAUDE_CHANNELS)

    @property
    def codex_channels(self) -> tuple[str, ...]:
        return _split_names(self.CODEX_CHANNELS)

    @property
    def gemini_channels(self) -> tuple[str, ...]:
        return _split_names(self.GEMINI_CHANNELS)

    @property
    def default_claude_channel(self) -> str:
        """First configured Claude channel, used for standard /v1/* GET paths"""
        channels = self.claude_channels
        return channels[0] if channels else "droid"

    @property
    def timeout_seconds(self) -> float | None:
        if self.TIMEOUT_MS <= 0:
            return None
        return self.TIMEOUT_MS / 1000


@lru_cache()
def get_settings() -> Settings:
    """
    Get proxy configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once per process.

    Returns:
        Settings: Proxy configuration instance
    """
    return Settings()
