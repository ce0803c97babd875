"""
Provider Client Exceptions

Exceptions raised by the third-party API clients. Clients translate httpx
failures and malformed payloads into these; services decide which HTTP
status the caller sees.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Optional


class ProviderError(Exception):
    """Base exception for provider call failures (transport errors included)."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class ProviderTimeoutError(ProviderError):
    """Raised when the provider call times out."""


class ProviderStatusError(ProviderError):
    """Raised when the provider answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        provider: Optional[str] = None,
        detail: Optional[str] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(f"{provider or 'provider'} returned HTTP {status_code}", provider=provider)
        self.status_code = status_code
        self.detail = detail
        self.retry_after = retry_after


class ProviderDecodeError(ProviderError):
    """Raised when a 2xx payload does not match the expected shape."""
