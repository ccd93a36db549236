"""``flask`` sub-commands for operators (creating users and admins)."""

from __future__ import annotations

from flask import Flask

from .users import users_cli


def init_app(app: Flask) -> None:
    """Attach the ``users`` command group to ``app.cli``."""
    app.cli.add_command(users_cli)
