"""Shared API helpers: the auth gate, JSON responses and handler timing."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from shopauth.core.errors import Forbidden, Unauthorized
from shopauth.models.user import Role
from shopauth.services._shared.errors import UnauthorizedError
from shopauth.services._shared.ports import AccessTokenClaims
from shopauth.services.auth import AuthService

F = TypeVar("F", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "
AUTH_SERVICE_KEY = "auth_service"


def get_auth_service() -> AuthService:
    """Return the process-wide :class:`AuthService` built by the app factory."""

    return cast(AuthService, current_app.extensions[AUTH_SERVICE_KEY])


def parse_bearer(header: str | None) -> str | None:
    """Extract the token from an ``Authorization`` header value.

    The header must start with exactly ``"Bearer "`` (case-sensitive, one
    space). The remainder must be non-empty and free of whitespace.

    :returns: The raw token, or ``None`` when the header is unusable.
    """

    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :]
    if not token or any(ch.isspace() for ch in token):
        return None
    return token


def current_identity() -> AccessTokenClaims | None:
    """Return the claims stored by the gate for this request, if any."""

    return getattr(g, "identity", None)


def _authenticate() -> AccessTokenClaims:
    header = request.headers.get("Authorization")
    if not header:
        raise Unauthorized("access token required")
    token = parse_bearer(header)
    if token is None:
        raise Unauthorized("invalid token format")
    try:
        return get_auth_service().verify_access_token(token)
    except UnauthorizedError as exc:
        raise Unauthorized("invalid or expired token", code="invalid_token") from exc


def require_auth(func: F) -> F:
    """Reject the request with 401 unless it carries a valid access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = _authenticate()
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_admin(func: F) -> F:
    """Reject the request with 403 unless the authenticated role is ``ADMIN``.

    Must be applied beneath :func:`require_auth`. Without an identity the
    request is refused with 403 as well.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        identity = current_identity()
        if identity is None or identity.role is not Role.ADMIN:
            raise Forbidden("admin role required")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def optional_auth(func: F) -> F:
    """Attach the identity when a valid token is present; never reject."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        g.identity = None
        token = parse_bearer(request.headers.get("Authorization"))
        if token is not None:
            try:
                g.identity = get_auth_service().verify_access_token(token)
            except UnauthorizedError:
                current_app.logger.debug("optional_auth.ignored_invalid_token")
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
