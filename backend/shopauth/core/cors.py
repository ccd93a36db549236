"""Cross-origin policy for the storefront frontends."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from shopauth.core.logger import REQUEST_ID_HEADER


def _origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def init_app(app: Flask) -> None:
    """Apply ``CORS_ORIGINS`` to every ``/api/*`` route.

    Listed origins may send credentials and the ``Authorization`` header.
    An empty list or ``*`` allows any origin, in which case credentials are
    refused as browsers require.
    """
    origins = _origins(app.config.get("CORS_ORIGINS", ""))
    allow_any = not origins or "*" in origins

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if allow_any else origins}},
        supports_credentials=not allow_any,
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        methods=["GET", "POST", "OPTIONS"],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
