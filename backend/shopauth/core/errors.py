"""RFC 7807 error responses for the auth API.

Every failure leaving the service is an ``application/problem+json`` body::

    {"type": "about:blank", "title": "Unauthorized", "status": 401,
     "detail": "access token required", "instance": "/api/v1/auth/profile",
     "code": "unauthorized", "request_id": "..."}

``detail`` is safe to show to users and ``code`` is stable for clients to
branch on. Database and driver messages never reach the body.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, current_app, has_request_context, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from shopauth.core.logger import ensure_request_id
from shopauth.services._shared.errors import ServiceError

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

# Codes for errors raised by Werkzeug (routing, method checks, body parsing)
HTTP_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "payload_too_large",
    415: "unsupported_media_type",
    500: "internal_server_error",
    503: "service_unavailable",
}


class APIError(Exception):
    """
    An error with a known HTTP status, rendered as a problem document.

    Parameters
    ----------
    message : str
        ``detail`` of the problem; shown to clients.
    status_code : int, optional
        HTTP status. Defaults to ``400``.
    code : str, optional
        Machine-readable ``code``. Defaults to ``"bad_request"``.
    details : dict[str, Any] | None, optional
        Extra structured data, e.g. per-field validation messages.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}

    def to_problem(self) -> dict[str, Any]:
        """Return the problem document for the current request."""
        problem: dict[str, Any] = {
            "type": "about:blank",
            "title": HTTPStatus(self.status_code).phrase,
            "status": self.status_code,
            "detail": self.message,
            "instance": request.path if has_request_context() else None,
            "code": self.code,
        }
        if self.details:
            problem["details"] = self.details
        problem["request_id"] = ensure_request_id()
        return problem


class BadRequest(APIError):
    def __init__(self, message: str = "Validation failed", code: str = "validation_error") -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, code=code)


class BadRequestWithFields(BadRequest):
    """400 ``validation_error`` listing the offending fields."""

    def __init__(self, errors: dict[str, Any] | list[Any]) -> None:
        super().__init__("Invalid input data")
        self.details = {"errors": errors}


class Unauthorized(APIError):
    """401. Responses also carry ``WWW-Authenticate: Bearer``."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


class Forbidden(APIError):
    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message, status_code=HTTPStatus.FORBIDDEN, code="forbidden")


class NotFound(APIError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND, code="not_found")


class Conflict(APIError):
    def __init__(self, message: str = "Conflict") -> None:
        super().__init__(message, status_code=HTTPStatus.CONFLICT, code="conflict")


class InternalError(APIError):
    """500 with a fixed message; the cause is only logged."""

    def __init__(self, message: str = "Unexpected error", code: str = "internal_server_error") -> None:
        super().__init__(message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR, code=code)


def _render(err: APIError, *, exc_info: bool = False) -> tuple[Response, int]:
    """Log ``err`` (WARNING for 4xx, ERROR for 5xx) and build its response."""
    problem = err.to_problem()
    server_side = err.status_code >= 500
    log.log(
        logging.ERROR if server_side else logging.WARNING,
        "request failed: %s (%s) %s",
        err.code,
        err.status_code,
        err.message,
        exc_info=exc_info or server_side,
        extra={"status": err.status_code, "event": "http.error"},
    )
    resp = jsonify(problem)
    resp.mimetype = PROBLEM_MIMETYPE
    if err.status_code == HTTPStatus.UNAUTHORIZED:
        resp.headers["WWW-Authenticate"] = "Bearer"
    return resp, err.status_code


def init_app(app: Flask) -> None:
    """Register the problem+json handlers on ``app``.

    Service errors are mapped by ``BaseService.translate_exceptions``; the
    remaining handlers cover Werkzeug, Marshmallow and SQLAlchemy failures
    that escape a view, plus a catch-all 500.
    """

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        return _render(err)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        from shopauth.services._shared.base import BaseService

        return _render(BaseService.translate_exceptions(err))

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or HTTPStatus.INTERNAL_SERVER_ERROR
        code = HTTP_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            message = f"Route '{request.path}' not found"
        else:
            message = (err.description or code.replace("_", " ").capitalize()).strip()
        return _render(APIError(message, status_code=status, code=code))

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        return _render(BadRequestWithFields(err.messages))

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        return _render(Conflict("Resource conflict"))

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        return _render(
            APIError(
                "Service temporarily unavailable",
                status_code=HTTPStatus.SERVICE_UNAVAILABLE,
                code="service_unavailable",
            ),
            exc_info=True,
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        error = InternalError()
        if current_app.config.get("EXPOSE_ERROR_DETAILS"):
            error.details = {"error": str(err)}
        return _render(error, exc_info=True)

