"""JSON logging for the auth service.

Every record is one JSON object on stdout. Records emitted while a request is
active carry its ``request_id``; the same id is returned to the caller in the
``X-Request-ID`` response header so gateway and service logs can be joined.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
# Checked in order; the gateway forwards one of these
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra=`` keys promoted into the payload. Never add secrets here.
EXTRA_KEYS = ("event", "user_id", "endpoint", "elapsed_ms", "status")


def ensure_request_id() -> str:
    """Return the id of the current request, assigning one on first use.

    Outside a request context a fresh id is returned on every call.
    """

    if not has_request_context():
        return str(uuid4())
    rid = g.get("request_id")
    if rid is None:
        inbound = (request.headers.get(name) for name in INBOUND_ID_HEADERS)
        rid = next((value for value in inbound if value), None) or str(uuid4())
        g.request_id = rid
    return rid


class JSONFormatter(logging.Formatter):
    """Serialize a record, its request id and whitelisted extras as JSON.

    Parameters
    ----------
    service:
        Optional service name stamped on every line (``"auth-service"``).
    """

    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        if self.service:
            payload["service"] = self.service
        payload.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on records (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def configure_logging(level: str | int = "INFO", *, service: str | None = None) -> None:
    """Route the root logger to stdout through :class:`JSONFormatter`.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output. Unknown level names fall back to ``INFO``.
    """

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service=service))
    handler.addFilter(RequestIdFilter())

    if isinstance(level, str):
        level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)


def init_app(app: Flask) -> None:
    """Assign request ids early and echo them on every response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _assign_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["JSONFormatter", "configure_logging", "ensure_request_id", "init_app"]
