"""
Exception handlers.

Maps module exceptions onto HTTP status codes by their base category and
renders every failure in the standard envelope. Messages come from the
exception itself, which only ever carries generic text; provider details
stay in ``exc.details`` and the logs.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ModuleHubError,
    NotFoundError,
    ValidationError,
)

from .models.responses import ErrorResponse

logger = logging.getLogger(__name__)

# First match wins; anything else is a server error.
STATUS_BY_CATEGORY: list[tuple[type[ModuleHubError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
]


def status_for(exc: ModuleHubError) -> int:
    """HTTP status code for a module exception."""
    for category, status_code in STATUS_BY_CATEGORY:
        if isinstance(exc, category):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    status_code: int,
    message: str,
    code: str | None = None,
) -> JSONResponse:
    """Render a failure envelope."""
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    body = ErrorResponse(error=message, code=code)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(),
        headers=headers,
    )


async def handle_module_hub_error(request: Request, exc: ModuleHubError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.to_dict(),
        )
    else:
        logger.info("%s on %s %s", exc.code, request.method, request.url.path)
    return error_response(status_code, exc.message, exc.code)


async def handle_request_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    fields = sorted(
        {".".join(str(part) for part in error.get("loc", ())[1:]) for error in exc.errors()}
        - {""}
    )
    message = "Invalid request"
    if fields:
        message = f"Invalid request: {', '.join(fields)}"
    return error_response(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


async def handle_http_exception(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "INTERNAL_ERROR",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all handlers on ``app``."""
    app.add_exception_handler(ModuleHubError, handle_module_hub_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
