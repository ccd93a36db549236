"""Unit tests for configuration loading and validation."""

from __future__ import annotations

from datetime import timedelta

import pytest

from shopauth.core.config import (
    ConfigError,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_seconds,
    get_config,
    validate_config,
)
from shopauth.factory import create_app


def _config(**overrides):
    base = {"JWT_SECRET": "a", "JWT_REFRESH_SECRET": "b", "BCRYPT_ROUNDS": 12}
    base.update(overrides)
    return base


def test_testing_config_is_self_contained():
    assert TestingConfig.JWT_SECRET != TestingConfig.JWT_REFRESH_SECRET
    assert TestingConfig.BCRYPT_ROUNDS == 4


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_follows_app_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)

    assert get_config() is expected


def test_validate_config_accepts_distinct_secrets():
    validate_config(_config())


@pytest.mark.parametrize("missing", ["JWT_SECRET", "JWT_REFRESH_SECRET"])
def test_validate_config_requires_secrets(missing):
    with pytest.raises(ConfigError, match=missing):
        validate_config(_config(**{missing: None}))


def test_validate_config_rejects_blank_secret():
    with pytest.raises(ConfigError):
        validate_config(_config(JWT_SECRET="   "))


def test_validate_config_rejects_equal_secrets():
    with pytest.raises(ConfigError, match="must differ"):
        validate_config(_config(JWT_SECRET="same", JWT_REFRESH_SECRET="same"))


@pytest.mark.parametrize("rounds", [3, 32])
def test_validate_config_rejects_bcrypt_cost(rounds):
    with pytest.raises(ConfigError, match="BCRYPT_ROUNDS"):
        validate_config(_config(BCRYPT_ROUNDS=rounds))


def test_create_app_refuses_to_start_without_secrets():
    class NoSecrets(TestingConfig):
        JWT_SECRET = None

    with pytest.raises(ConfigError):
        create_app(NoSecrets)


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    assert env_bool("FLAG") is True
    monkeypatch.setenv("FLAG", "0")
    assert env_bool("FLAG", True) is False
    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", True) is True


def test_env_seconds(monkeypatch):
    monkeypatch.delenv("TTL", raising=False)
    assert env_seconds("TTL", 60) == timedelta(seconds=60)
    monkeypatch.setenv("TTL", "120")
    assert env_seconds("TTL", 60) == timedelta(seconds=120)
    monkeypatch.setenv("TTL", "0")
    with pytest.raises(ConfigError):
        env_seconds("TTL", 60)
