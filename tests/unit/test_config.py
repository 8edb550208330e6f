"""Unit tests for configuration loading"""

import pytest
from pydantic import ValidationError
from roundup_gateway.config import Settings

REQUIRED_ENV = {
    "STARLING_API_BASE": "https://api.starling.test/api/v2",
    "STARLING_OAUTH_URL": "https://api.starling.test/oauth/access-token",
    "STARLING_CLIENT_ID": "client-id",
    "STARLING_CLIENT_SECRET": "client-secret",
    "STARLING_ACCESS_TOKEN": "access-0",
    "STARLING_REFRESH_TOKEN": "refresh-0",
}


@pytest.fixture
def starling_env(monkeypatch):
    for name, value in REQUIRED_ENV.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_settings_from_environment(starling_env):
    """Test credentials load from env and optional values take defaults"""
    settings = Settings(_env_file=None)

    assert settings.api_base == REQUIRED_ENV["STARLING_API_BASE"]
    assert settings.refresh_token == "refresh-0"
    assert settings.default_currency == "GBP"
    assert settings.http_timeout_seconds == 5.0


def test_settings_optional_overrides(starling_env):
    starling_env.setenv("DEFAULT_CURRENCY", "EUR")
    starling_env.setenv("HTTP_TIMEOUT_SECONDS", "2.5")

    settings = Settings(_env_file=None)

    assert settings.default_currency == "EUR"
    assert settings.http_timeout_seconds == 2.5


@pytest.mark.parametrize("missing", sorted(REQUIRED_ENV))
def test_settings_missing_credential_is_fatal(starling_env, missing):
    """Test absence of any required value fails at load, no fallback"""
    starling_env.delenv(missing)

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert missing in str(exc_info.value)


@pytest.mark.parametrize("blank", sorted(REQUIRED_ENV))
def test_settings_empty_credential_is_fatal(starling_env, blank):
    """Test a required value set to an empty string is rejected like a missing one"""
    starling_env.setenv(blank, "")

    with pytest.raises(ValidationError) as exc_info:
        Settings(_env_file=None)

    assert blank in str(exc_info.value)
