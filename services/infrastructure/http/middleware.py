"""
Middleware configuration for SKU Studio API.

Handles:
- Request body size limiting
- Same-origin enforcement for mutating API calls
- Security headers
- Request/response logging
"""

import time
import logging
from typing import Optional
from urllib.parse import urlsplit
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from config.settings import config
from services.security import security_log

logger = logging.getLogger(__name__)

GUARDED_METHODS = frozenset({'POST', 'PUT', 'PATCH', 'DELETE'})
GUARDED_PATH_PREFIX = '/api/'

DEFAULT_PORTS = {'http': 80, 'https': 443}

# Seconds after which a request is logged as slow
SLOW_REQUEST_THRESHOLDS = {
    '/api/generate-hotsheet': 30,
    '/api/remove-bg': 20,
    '/api/suggest-images': 15,
    '/api/proxy-image': 6,
}
DEFAULT_SLOW_THRESHOLD = 5


def header_host(value: str) -> Optional[str]:
    """
    Host component of an Origin/Referer value, as a browser URL.host.

    'https://Shop.Example:443/x' -> 'shop.example'
    'http://localhost:3001' -> 'localhost:3001'
    Returns None when the value has no parseable host.
    """
    try:
        parts = urlsplit(value.strip())
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return None
    if not parts.scheme or not hostname:
        return None
    if ':' in hostname:
        hostname = f'[{hostname}]'
    if port is None or DEFAULT_PORTS.get(parts.scheme.lower()) == port:
        return hostname.lower()
    return f'{hostname.lower()}:{port}'


async def limit_request_body_size(request: Request, call_next):
    """
    Reject requests whose declared Content-Length exceeds the configured limit.

    Note: This checks Content-Length header, which can be spoofed.
    Endpoint-level limits still apply to what is actually read.
    """
    max_bytes = config.max_request_body_bytes
    content_length = request.headers.get('content-length')
    if content_length:
        try:
            size = int(content_length)
        except ValueError:
            size = None
        if size is not None and size > max_bytes:
            client_ip = request.client.host if request.client else 'unknown'
            security_log.input_validation_failed(
                field="request_body",
                reason=(
                    f"size {size / 1024 / 1024:.1f}MB exceeds "
                    f"{max_bytes / 1024 / 1024:.0f}MB limit"
                ),
                ip=client_ip,
                value_size=size
            )
            return JSONResponse(status_code=413, content={"error": "Request body too large"})

    return await call_next(request)


async def origin_guard(request: Request, call_next):
    """
    Block cross-origin mutating requests to the API.

    The host of Origin (or Referer when Origin is absent) must equal the
    request Host header. Requests carrying neither header are admitted
    (server-side callers, curl).
    """
    if request.method not in GUARDED_METHODS or not request.url.path.startswith(GUARDED_PATH_PREFIX):
        return await call_next(request)

    header_name = 'origin'
    header_value = request.headers.get('origin')
    if header_value is None:
        header_name = 'referer'
        header_value = request.headers.get('referer')
    if header_value is None:
        return await call_next(request)

    source_host = header_host(header_value)
    request_host = request.headers.get('host', '').strip().lower()
    if source_host is None or source_host != request_host:
        security_log.origin_rejected(
            origin_host=source_host or header_value[:100],
            request_host=request_host or None,
            path=request.url.path,
            header=header_name
        )
        return JSONResponse(status_code=403, content={"error": "Forbidden"})

    return await call_next(request)


async def add_security_headers(request: Request, call_next):
    """
    Add security headers to all HTTP responses.

    Protects against:
    - Clickjacking (X-Frame-Options)
    - MIME sniffing attacks (X-Content-Type-Options)
    - Information leakage (Referrer-Policy)
    """
    response = await call_next(request)

    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

    return response


async def log_requests(request: Request, call_next):
    """
    Log all HTTP requests and responses with timing information.
    """
    start_time = time.time()

    response = await call_next(request)

    response_time = time.time() - start_time
    client_host = request.client.host if request.client else 'unknown'
    logger.debug(
        "Request: %s %s from %s Response: %s in %.3fs",
        request.method, request.url.path, client_host, response.status_code, response_time
    )

    # Streaming responses return here before the body is sent
    threshold = SLOW_REQUEST_THRESHOLDS.get(request.url.path, DEFAULT_SLOW_THRESHOLD)
    if response_time > threshold:
        logger.warning(
            "Slow request: %s %s took %.3fs",
            request.method, request.url.path, response_time
        )

    return response


def setup_middleware(app: FastAPI):
    """
    Register all middleware with the FastAPI application.

    Order matters - middleware is executed in reverse order of registration.
    So log_requests runs first, then add_security_headers, origin_guard,
    and limit_request_body_size closest to the routes.
    """
    app.middleware("http")(limit_request_body_size)
    app.middleware("http")(origin_guard)
    app.middleware("http")(add_security_headers)
    app.middleware("http")(log_requests)
