"""
Error Handler Utility for the HTTP API

Provides centralized error handling for API routes with:
- One table mapping exception types to HTTP status and error code
- Consistent {"error", "code"} response bodies
- Storage failures reported generically, never with internals
- Logging for debugging

Usage:
    from utils.error_handler import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)

Routes then simply raise:
    raise CartLineNotFoundException(user_id=7, product_id=99)
    -> 404 {"error": "Cart item for product 99 not found", "code": "CART_ITEM_NOT_FOUND"}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from exceptions import (
    StorefrontException,
    ValidationException,
    AuthorizationException,
    MissingTokenException,
    InvalidTokenException,
    InvalidCredentialsException,
    ForbiddenException,
    NotFoundException,
    CartLineNotFoundException,
    UserNotFoundException,
    EmailAlreadyRegisteredException,
    StorageException,
)

logger = logging.getLogger(__name__)

STORAGE_ERROR_MESSAGE = "Internal server error"

# Exception type -> (HTTP status, error code). Subclasses not listed fall back
# to their nearest listed ancestor.
error_mapping: dict[type[StorefrontException], tuple[int, str]] = {
    # Validation
    ValidationException: (400, "VALIDATION_ERROR"),

    # Auth
    AuthorizationException: (401, "UNAUTHORIZED"),
    MissingTokenException: (401, "MISSING_TOKEN"),
    InvalidTokenException: (401, "INVALID_TOKEN"),
    InvalidCredentialsException: (401, "INVALID_CREDENTIALS"),
    ForbiddenException: (403, "FORBIDDEN"),

    # Not found
    NotFoundException: (404, "NOT_FOUND"),
    CartLineNotFoundException: (404, "CART_ITEM_NOT_FOUND"),
    UserNotFoundException: (404, "USER_NOT_FOUND"),

    # Conflict
    EmailAlreadyRegisteredException: (409, "EMAIL_EXISTS"),

    # Storage
    StorageException: (500, "STORAGE_ERROR"),
}


def resolve_error(exception: StorefrontException) -> tuple[int, str]:
    """
    Find status and code for an exception.

    Args:
        exception: The custom exception raised by a service

    Returns:
        (status_code, error_code); unmapped types give (500, "INTERNAL_ERROR")
    """
    for exception_type in type(exception).__mro__:
        if exception_type in error_mapping:
            return error_mapping[exception_type]
    return 500, "INTERNAL_ERROR"


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, "code": code})


def handle_service_error(exception: StorefrontException) -> JSONResponse:
    status_code, code = resolve_error(exception)

    if status_code >= 500:
        cause = exception.__cause__
        logger.error(
            f"Service error: {type(exception).__name__} - {exception.message}"
            f"{f' (cause: {type(cause).__name__}: {cause})' if cause else ''}"
        )
        return error_response(status_code, STORAGE_ERROR_MESSAGE, code)

    logger.warning(f"Service error handled: {type(exception).__name__} - {exception.message}")
    return error_response(status_code, exception.message, code)


def handle_unexpected_error(exception: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions (non-StorefrontException).

    Note:
        Logs the full traceback; the client only sees a generic message
    """
    logger.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=exception)
    return error_response(500, STORAGE_ERROR_MESSAGE, "INTERNAL_ERROR")


def handle_request_validation_error(exception: RequestValidationError) -> JSONResponse:
    errors = exception.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
        message = f"Invalid {location}: {first.get('msg')}" if location else str(first.get('msg'))
    else:
        message = "Invalid request"
    logger.warning(f"Request validation failed: {message}")
    return error_response(400, message, "VALIDATION_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    async def storefront_exception_handler(request: Request, exc: StorefrontException):
        return handle_service_error(exc)

    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return handle_request_validation_error(exc)

    async def unexpected_exception_handler(request: Request, exc: Exception):
        return handle_unexpected_error(exc)

    app.add_exception_handler(StorefrontException, storefront_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_exception_handler)
