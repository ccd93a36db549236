# shopauth/services/_shared/base.py
from __future__ import annotations

import logging

from shopauth.core import errors as api_errors
from shopauth.services._shared.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceError,
    StoreError,
    UnauthorizedError,
    ValidationError,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Centralize error translation from service errors to HTTP errors.
    * Provide a service-scoped logger.
    * Keep services thin, orchestration-only, no web/ORM leakage.
    """

    def __init__(self) -> None:
        self.log = logging.getLogger(f"{type(self).__module__}.{type(self).__name__}")

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        Subclasses are checked before their parents (``ConflictError`` before
        ``ValidationError``).

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be rendered or re-raised.
        :rtype: Exception
        """
        if isinstance(exc, NotFoundError):
            # → 404 Not Found
            return api_errors.NotFound(exc.message)

        if isinstance(exc, ConflictError):
            # → 409 Conflict
            return api_errors.Conflict(exc.message)

        if isinstance(exc, ValidationError):
            # → 400 Bad Request
            return api_errors.BadRequest(exc.message, code=exc.code)

        if isinstance(exc, UnauthorizedError):
            # → 401 Unauthorized (``invalid_token`` keeps its own code)
            return api_errors.Unauthorized(exc.message, code=exc.code)

        if isinstance(exc, ForbiddenError):
            # → 403 Forbidden
            return api_errors.Forbidden(exc.message)

        if isinstance(exc, StoreError):
            # → 500, never echo driver details
            return api_errors.InternalError()

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=exc.message,
                status_code=400,
                code=exc.code,
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
