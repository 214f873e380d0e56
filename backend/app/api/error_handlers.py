"""Error Handlers — global exception handlers for the user service API.

Invariants:
    - UserServiceError → its http_status with {"error": message}
    - RequestValidationError (bad JSON, wrong field types) → 400 {"error": message}
    - Framework HTTP errors (404 route, 405 method) keep their status, {"error": detail} body
    - Exception (catch-all) → 500 {"error": "Internal server error"}; never leaks internal details
    - Routine outcomes (validation, not found, conflict) are logged at DEBUG, not as incidents

Design Decisions:
    - Layered handlers: domain (UserServiceError), validation (Pydantic), framework
      (unknown route, wrong method), catch-all (Exception)
    - Extracted from main.py (ADR: import fan-out < 10)
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.enforce_user_fields import REQUIRED_MESSAGE
from app.core.errors import UnclassifiedFailureError, UserServiceError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register user service domain/infrastructure error handler."""

    @app.exception_handler(UserServiceError)
    async def domain_error_handler(request: Request, exc: UserServiceError):
        """Handle all user service errors."""
        extra = {
            "error_code": exc.code,
            "path": request.url.path,
            "method": request.method,
        }
        if exc.is_routine:
            logger.debug(f"{exc.code}: {exc.message}", extra=extra)
        elif isinstance(exc, UnclassifiedFailureError):
            logger.error(
                f"{exc.code} during {exc.operation}: {exc.detail}",
                extra=extra, exc_info=exc,
            )
        else:
            logger.error(f"{exc.code}: {exc.message}", extra=extra)
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.debug(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": describe_validation_error(exc)},
        )


def _register_http_error_handler(app: FastAPI) -> None:
    """Register framework HTTP error handler (unknown route, wrong method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException,
    ):
        """Re-shape framework errors into the {"error": message} envelope."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": GENERIC_ERROR_MESSAGE},
        )


def describe_validation_error(exc: RequestValidationError) -> str:
    """One-line message for the first Pydantic error."""
    errors = exc.errors()
    if not errors:
        return "Invalid request data"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body must be valid JSON"
    if first.get("type") == "missing":
        return REQUIRED_MESSAGE
    field = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
    if field:
        return f"Invalid {field}: {first.get('msg', 'invalid value')}"
    return "Request body must be a JSON object"
