"""
Exception handlers for SKU Studio API.

Handles:
- API errors raised by routes and services
- Request validation errors (rendered as 400)
- HTTP exceptions
- General unhandled exceptions

Every error body has the shape {"error": "<message>"}.
"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from config.settings import config
from services.infrastructure.http.errors import ApiError

logger = logging.getLogger(__name__)


async def api_error_handler(request: Request, exc: ApiError):
    """
    Handle ApiError and its subclasses.

    4xx are expected client/policy outcomes and logged at DEBUG;
    5xx mean a provider or upstream failed and are logged at WARNING.
    """
    path = request.url.path if request and request.url else ''
    if exc.status_code >= 500:
        logger.warning("HTTP %s on %s: %s", exc.status_code, path, exc.message)
    else:
        logger.debug("HTTP %s on %s: %s", exc.status_code, path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=exc.headers or None
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handle request validation errors.

    Routes validate their own bodies and raise ApiError with endpoint-specific
    messages; this only catches schema failures that slip past them.
    """
    path = getattr(request.url, 'path', '') if request and request.url else ''

    errors = exc.errors() if hasattr(exc, 'errors') else []
    error_details = []
    for error in errors:
        loc = error.get('loc', [])
        msg = error.get('msg', '')
        error_details.append(f"{'.'.join(str(x) for x in loc)}: {msg}")

    error_summary = '; '.join(error_details[:3])
    if len(error_details) > 3:
        error_summary += f" ... and {len(error_details) - 3} more"

    logger.debug("Request validation error on %s: %s", path, error_summary)

    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request"}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handle HTTP exceptions (404/405 from routing, mostly).
    """
    path = getattr(request.url, 'path', '') if request and request.url else ''
    if exc.status_code in (404, 405):
        logger.debug("HTTP %s on %s: %s", exc.status_code, path, exc.detail)
    else:
        logger.warning("HTTP %s on %s: %s", exc.status_code, path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, 'headers', None)
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions"""
    exception_type = type(exc).__name__
    request_path = getattr(request.url, 'path', '') if request and request.url else ''

    logger.error(
        "Unhandled exception on %s: %s: %s",
        request_path, exception_type, exc, exc_info=True
    )

    error_response = {"error": "An unexpected error occurred. Please try again later."}

    # Add debug info in development mode
    if config.debug:
        error_response["debug"] = str(exc)

    return JSONResponse(
        status_code=500,
        content=error_response
    )


def setup_exception_handlers(app: FastAPI):
    """
    Register all exception handlers with the FastAPI application.
    """
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
