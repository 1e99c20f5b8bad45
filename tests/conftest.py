"""
Test Configuration Module
"""

import pytest

from cache_proxy.config import Settings


TEST_TARGET_HOST = "upstream.test"


def make_settings(**overrides) -> Settings:
    """Build settings that ignore the environment's .env file"""
    values = {
        "DEBUG": False,
        "TARGET_HOST": TEST_TARGET_HOST,
        "USER_ID": "test-user",
        "RETRY_DELAY": 0,
        "RETRY_MAX_DELAY": 0,
        "TIMEOUT_MS": 5000,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    """Proxy settings pointing at a fake upstream host"""
    return make_settings()


@pytest.fixture
def settings_factory():
    """Build settings with overrides"""
    return make_settings
