"""Tests for Fapshi payment gateway settings."""

import dataclasses
import importlib

import pytest

from src.payment import (
    FAPSHI_BASE_URLS,
    FapshiConfig,
    FapshiEnvironment,
    PaymentConfigError,
    get_fapshi_config,
    load_fapshi_config,
)


def test_base_urls():
    assert FAPSHI_BASE_URLS[FapshiEnvironment.sandbox] == "https://api.fapshi.com/sandbox"
    assert FAPSHI_BASE_URLS[FapshiEnvironment.production] == "https://api.fapshi.com"


def test_empty_environment_defaults_to_blank_sandbox():
    config = load_fapshi_config({})

    assert config.api_key == ""
    assert config.api_user == ""
    assert config.webhook_url == ""
    assert config.environment is FapshiEnvironment.sandbox
    assert config.base_url == "https://api.fapshi.com/sandbox"
    assert config.is_production is False


def test_node_env_production_selects_production_url():
    config = load_fapshi_config({"NODE_ENV": "production"})

    assert config.environment is FapshiEnvironment.production
    assert config.base_url == "https://api.fapshi.com"
    assert config.is_production is True


@pytest.mark.parametrize("marker", ["development", "test", "staging", "Production", " production", ""])
def test_any_other_marker_selects_sandbox(marker):
    config = load_fapshi_config({"NODE_ENV": marker})

    assert config.environment is FapshiEnvironment.sandbox
    assert config.base_url == "https://api.fapshi.com/sandbox"


PRODUCTION_MARKERS = [
    {"APP_ENV": "", "NODE_ENV": "production"},
    {"APP_ENV": "development", "NODE_ENV": "production"},
    {"APP_ENV": "production", "NODE_ENV": "development"},
    {"APP_ENV": "production"},
]


@pytest.mark.parametrize("environ", PRODUCTION_MARKERS)
def test_production_wins_when_either_marker_says_so(environ):
    config = load_fapshi_config(environ)

    assert config.environment is FapshiEnvironment.production
    assert config.base_url == "https://api.fapshi.com"


def test_no_production_marker_selects_sandbox():
    config = load_fapshi_config({"APP_ENV": "staging", "NODE_ENV": "development"})

    assert config.environment is FapshiEnvironment.sandbox


def test_importing_payment_config_does_not_raise():
    module = importlib.import_module("src.payment.config")

    assert hasattr(module, "load_fapshi_config")


def test_config_is_hashable_and_comparable():
    first = FapshiConfig(api_key="key", api_user="user")
    second = FapshiConfig(api_key="key", api_user="user")

    assert first == second
    assert hash(first) == hash(second)
    assert first != FapshiConfig(api_key="key", api_user="user", environment=FapshiEnvironment.production)


def test_reads_credentials_and_webhook():
    config = load_fapshi_config(
        {
            "FAPSHI_API_KEY": "FAK_TEST_123",
            "FAPSHI_API_USER": "user-42",
            "FAPSHI_WEBHOOK_URL": "https://example.com/webhooks/fapshi",
        }
    )

    assert config.api_key == "FAK_TEST_123"
    assert config.api_user == "user-42"
    assert config.webhook_url == "https://example.com/webhooks/fapshi"


def test_reads_os_environ_by_default(monkeypatch):
    monkeypatch.setenv("FAPSHI_API_USER", "from-env")
    monkeypatch.setenv("NODE_ENV", "production")

    config = load_fapshi_config()

    assert config.api_user == "from-env"
    assert config.is_production


def test_config_is_immutable():
    config = load_fapshi_config({})

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.api_key = "changed"


def test_api_key_not_in_repr():
    config = FapshiConfig(api_key="super-secret", api_user="user-42")

    assert "super-secret" not in repr(config)
    assert "user-42" in repr(config)


def test_missing_settings_lists_blank_credentials():
    config = FapshiConfig(api_key="  ", api_user="user-42")

    assert config.missing_settings() == ["FAPSHI_API_KEY"]


def test_validate_raises_with_missing_names():
    with pytest.raises(PaymentConfigError) as exc_info:
        load_fapshi_config({}, validate=True)

    assert exc_info.value.missing == ["FAPSHI_API_KEY", "FAPSHI_API_USER"]
    assert "FAPSHI_API_KEY" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


def test_validate_returns_config_when_complete():
    config = FapshiConfig(api_key="key", api_user="user")

    assert config.validate() is config


def test_get_fapshi_config_reads_once(monkeypatch):
    monkeypatch.setenv("FAPSHI_API_USER", "first")
    first = get_fapshi_config()

    monkeypatch.setenv("FAPSHI_API_USER", "second")
    assert get_fapshi_config() is first
    assert get_fapshi_config().api_user == "first"

    get_fapshi_config.cache_clear()
    assert get_fapshi_config().api_user == "second"
