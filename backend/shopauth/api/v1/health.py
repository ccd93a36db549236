"""Liveness probe used by the gateway and the container orchestrator."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from shopauth.api.deps import json_response
from shopauth.core.extensions import db

bp = Blueprint("health", __name__)
log = logging.getLogger(__name__)


def _database_reachable() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        log.exception("database probe failed", extra={"event": "health.db_error"})
        return False
    return True


@bp.get("/health")
def healthcheck():
    """Report ``ok`` with 200, or ``degraded`` with 503 when the database is down."""

    healthy = _database_reachable()
    payload = {
        "status": "ok" if healthy else "degraded",
        "service": current_app.config.get("SERVICE_NAME", "auth-service"),
        "db": "ok" if healthy else "fail",
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return json_response(payload, status=200 if healthy else 503)
