"""Application factory wiring Flask extensions, the auth service and blueprints."""

from __future__ import annotations

from flask import Flask

from shopauth.core.config import BaseConfig, get_config, validate_config
from shopauth.core.logger import configure_logging, init_app as init_logging
from shopauth.services.auth import AuthService


def build_auth_service(config) -> AuthService:
    """Assemble the production :class:`AuthService` from loaded config.

    :param config: Flask config (or any mapping with the same keys).
    :returns: A service wired to the SQL store, PyJWT and bcrypt.
    """
    from shopauth.infra.jwt import PyJWTTokenIssuer
    from shopauth.infra.security import BcryptPasswordHasher
    from shopauth.infra.sqlalchemy import SQLAlchemyCredentialStore

    return AuthService(
        store=SQLAlchemyCredentialStore(),
        tokens=PyJWTTokenIssuer(
            access_secret=config["JWT_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_expires=config["ACCESS_TOKEN_EXPIRES"],
            refresh_expires=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
        ),
        hasher=BcryptPasswordHasher(rounds=config.get("BCRYPT_ROUNDS", 12)),
    )


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    auth_service: AuthService | None = None,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object or import path; defaults to ``APP_ENV``.
    :param auth_service: Prebuilt service (tests inject doubles here).
    :raises ConfigError: If signing secrets or bcrypt cost are unusable.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    validate_config(app.config)

    configure_logging(
        app.config.get("LOG_LEVEL", "INFO"),
        service=app.config.get("SERVICE_NAME"),
    )

    from shopauth.core import proxy

    proxy.init_app(app)

    from shopauth.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from shopauth.core import cors

    cors.init_app(app)

    app.extensions["auth_service"] = auth_service or build_auth_service(app.config)

    from shopauth.api import init_app as init_api

    init_api(app)

    from shopauth.core import errors

    errors.init_app(app)

    from shopauth import cli as app_cli

    app_cli.init_app(app)

    return app
