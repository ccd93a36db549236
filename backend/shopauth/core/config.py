"""Settings for the auth service, read from the environment.

``APP_ENV`` picks one of the classes below (``development`` when unset). A
``.env`` file in the working directory is loaded first, so local secrets do
not have to be exported by hand.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"

REQUIRED_SECRETS: Final[tuple[str, ...]] = ("JWT_SECRET", "JWT_REFRESH_SECRET")
BCRYPT_MIN_ROUNDS: Final[int] = 4
BCRYPT_MAX_ROUNDS: Final[int] = 31

TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


class ConfigError(RuntimeError):
    """Raised when the process must not start with the given configuration."""


def env_bool(name: str, default: bool = False) -> bool:
    """Read a flag such as ``EXPOSE_ERROR_DETAILS=yes``.

    :param name: Environment variable.
    :param default: Returned when the variable is unset.
    :returns: ``True`` for ``1/true/yes/y/on`` in any case, else ``False``.
    """
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in TRUTHY


def env_seconds(name: str, default: int) -> timedelta:
    """Read a positive number of seconds from the environment as a ``timedelta``."""
    raw = os.getenv(name)
    seconds = default if raw is None or not raw.strip() else int(raw)
    if seconds <= 0:
        raise ConfigError(f"{name} must be a positive number of seconds")
    return timedelta(seconds=seconds)


class BaseConfig:
    """Defaults shared by every environment.

    Token settings
    --------------
    JWT_SECRET, JWT_REFRESH_SECRET
        HMAC keys for access and refresh tokens. No defaults; they must be
        set and must differ (see :func:`validate_config`).
    ACCESS_TOKEN_EXPIRES, REFRESH_TOKEN_EXPIRES
        Lifetimes, one hour and seven days unless overridden with
        ``ACCESS_TOKEN_EXPIRES_SECONDS`` / ``REFRESH_TOKEN_EXPIRES_SECONDS``.
    BCRYPT_ROUNDS
        Cost factor for new password hashes.

    Service settings
    ----------------
    SERVICE_NAME
        Reported by ``/health`` and stamped on every log line.
    PORT
        Port gunicorn binds to (``3002``).
    CORS_ORIGINS
        Comma-separated frontends allowed to call the API.
    PROXY_HOPS
        Reverse proxies (the API gateway) whose ``X-Forwarded-*`` headers
        are trusted. ``0`` trusts none.
    EXPOSE_ERROR_DETAILS
        Include exception text in 500 responses. Development only.
    """

    API_BASE_PREFIX = "/api"
    SERVICE_NAME = "auth-service"
    PORT = int(os.getenv("PORT", "3002"))

    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES = env_seconds("ACCESS_TOKEN_EXPIRES_SECONDS", 60 * 60)
    REFRESH_TOKEN_EXPIRES = env_seconds("REFRESH_TOKEN_EXPIRES_SECONDS", 7 * 24 * 60 * 60)
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
    CORS_MAX_AGE = 600
    PROXY_HOPS = int(os.getenv("PROXY_HOPS", "1"))

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False
    EXPOSE_ERROR_DETAILS = False
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local runs: debug on, exception text in 500 responses."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    EXPOSE_ERROR_DETAILS = env_bool("EXPOSE_ERROR_DETAILS", True)


class TestingConfig(BaseConfig):
    """Test runs.

    Fixed, distinct signing secrets keep tests independent of the developer's
    environment. The database is in-memory SQLite unless ``TEST_DATABASE_URL``
    is set, and bcrypt runs at its minimum cost.
    """

    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET = "test-access-secret"
    JWT_REFRESH_SECRET = "test-refresh-secret"
    BCRYPT_ROUNDS = BCRYPT_MIN_ROUNDS
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    """Deployed service. Never echoes SQL or exception text."""

    SQLALCHEMY_ECHO = False
    EXPOSE_ERROR_DETAILS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the class named by ``APP_ENV``; unknown names mean development."""
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def validate_config(config: Mapping[str, Any]) -> None:
    """Fail fast when the loaded configuration cannot run the service.

    :param config: Loaded Flask config (or any mapping with the same keys).
    :type config: Mapping[str, Any]
    :raises ConfigError: If a signing secret is missing, both secrets are
        equal, or the bcrypt cost is out of range.
    """
    missing = [key for key in REQUIRED_SECRETS if not str(config.get(key) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    if config["JWT_SECRET"] == config["JWT_REFRESH_SECRET"]:
        raise ConfigError("JWT_SECRET and JWT_REFRESH_SECRET must differ")

    rounds = int(config.get("BCRYPT_ROUNDS", 12))
    if not BCRYPT_MIN_ROUNDS <= rounds <= BCRYPT_MAX_ROUNDS:
        raise ConfigError(
            f"BCRYPT_ROUNDS must be between {BCRYPT_MIN_ROUNDS} and {BCRYPT_MAX_ROUNDS}"
        )
