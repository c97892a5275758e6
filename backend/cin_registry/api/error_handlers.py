"""Error Handlers — global exception handlers for the registry API.

Invariants:
    - RegistryError → plain-text body (the contract message) with the error's http_status
    - RequestValidationError on the request body → rule #1 message ("User data cannot be null.")
    - RequestValidationError elsewhere (query/path types) → structured field-level JSON
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (RegistryError), validation (Pydantic), catch-all (Exception)
    - Single place that maps outcomes to status/body; routes only raise
    - A body that cannot be bound to a user record is treated as an absent record
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from cin_registry.core.domain_types import UserRule
from cin_registry.core.enforce_user import USER_MESSAGES
from cin_registry.core.errors import (
    GENERIC_ERROR_MESSAGE, ErrorSeverity, RegistryError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_registry_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_registry_error_handler(app: FastAPI) -> None:
    """Register registry domain/infrastructure error handler."""

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        """Handle all registry domain/infrastructure errors."""
        extra = {**exc.log_extra(), "path": request.url.path}
        if exc.severity == ErrorSeverity.CRITICAL:
            logger.error(f"RegistryError: {exc.message}", exc_info=exc, extra=extra)
        else:
            logger.warning(f"RegistryError: {exc.message}", extra=extra)
        return PlainTextResponse(exc.to_response(), status_code=exc.http_status)


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"path": request.url.path},
        )
        if _is_body_error(exc):
            return PlainTextResponse(
                USER_MESSAGES[UserRule.USER_DATA_MISSING],
                status_code=status.HTTP_400_BAD_REQUEST,
            )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True, extra={"path": request.url.path},
        )
        return PlainTextResponse(
            GENERIC_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _is_body_error(exc: RequestValidationError) -> bool:
    errors = exc.errors()
    return bool(errors) and all(
        e.get("loc") and e["loc"][0] == "body" for e in errors
    )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
