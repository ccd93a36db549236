"""Flask CLI commands for managing users outside the HTTP API."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from shopauth.api.deps import AUTH_SERVICE_KEY
from shopauth.models.user import Role
from shopauth.services._shared.errors import ConflictError

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Collection of user administration commands."""


@users_cli.command("create")
@click.argument("email")
@click.argument("password")
@click.option(
    "--role",
    type=click.Choice([r.value for r in Role], case_sensitive=False),
    default=Role.USER.value,
    show_default=True,
    help="Role of the new user. This is the only way to create an ADMIN.",
)
@with_appcontext
def create_user(email: str, password: str, role: str) -> None:
    """Create a user with EMAIL and PASSWORD."""
    service = current_app.extensions[AUTH_SERVICE_KEY]
    password_hash = service.hasher.hash(password)
    try:
        user = service.store.create_user(email, password_hash, Role(role.upper()))
    except ConflictError as exc:
        raise click.ClickException(exc.message) from exc
    LOGGER.info("user created from cli", extra={"event": "cli.users.create", "user_id": user.id})
    click.echo(f"Created {user.role.value} {user.email} ({user.id})")
