"""
API Errors
==========

Exceptions that map one-to-one onto HTTP responses.

Handlers and services raise these; the exception handler renders them as
``{"error": message}`` with the matching status code and headers. Anything
that is not an ``ApiError`` becomes a generic 500.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import math
from typing import Dict, Optional


class ApiError(Exception):
    """Base exception for errors surfaced to the API caller."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.headers = headers or {}


class BadRequestError(ApiError):
    """Malformed or invalid client input (400)."""
    status_code = 400


class PaymentRequiredError(ApiError):
    """Upstream quota exhausted (402)."""
    status_code = 402


class PayloadTooLargeError(ApiError):
    """Declared or measured payload above its ceiling (413)."""
    status_code = 413


class TooManyRequestsError(ApiError):
    """Rate limited, locally or by the provider (429)."""
    status_code = 429

    def __init__(self, message: str, retry_after: Optional[float] = None):
        headers = {}
        if retry_after is not None:
            headers["Retry-After"] = str(max(0, math.ceil(retry_after)))
        super().__init__(message, headers=headers)
        self.retry_after = retry_after


class NotConfiguredError(ApiError):
    """Provider credential missing (501)."""
    status_code = 501


class BadGatewayError(ApiError):
    """Upstream provider failed or returned something unusable (502)."""
    status_code = 502


class GatewayTimeoutError(ApiError):
    """An outbound call exceeded its deadline (504)."""
    status_code = 504
