"""
Base Class for Provider Clients

Shared request plumbing for the third-party API clients: deadline-aware
timeouts, httpx error translation and typed payload decoding.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Any, Optional, Type, TypeVar
import logging

import httpx
from pydantic import BaseModel, ValidationError

from clients.exceptions import (
    ProviderDecodeError,
    ProviderError,
    ProviderStatusError,
    ProviderTimeoutError,
)
from services.infrastructure.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)


def parse_retry_after(value: Optional[str]) -> Optional[float]:
    """Retry-After in seconds; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


class BaseProviderClient:
    """
    Base class for provider clients.

    Subclasses set ``provider`` and call ``_send`` / ``_decode``.
    """

    provider = "provider"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str):
        """
        Args:
            http_client: Shared AsyncClient from HTTPXClientManager
            api_key: Provider credential
        """
        self.http_client = http_client
        self.api_key = api_key

    @staticmethod
    def _timeout(token: Optional[CancellationToken]) -> Any:
        if token is None:
            return httpx.USE_CLIENT_DEFAULT
        token.raise_if_cancelled()
        remaining = token.remaining()
        return httpx.USE_CLIENT_DEFAULT if remaining is None else httpx.Timeout(remaining)

    async def _send(
        self,
        method: str,
        url: str,
        token: Optional[CancellationToken] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Send one request; no retries.

        Raises:
            ProviderTimeoutError: httpx timeout
            ProviderError: Any other transport failure
        """
        try:
            return await self.http_client.request(method, url, timeout=self._timeout(token), **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("[%s] Request timed out: %s", self.provider, type(exc).__name__)
            raise ProviderTimeoutError(f"{self.provider} request timed out", provider=self.provider) from exc
        except httpx.HTTPError as exc:
            logger.warning("[%s] Request failed: %s", self.provider, exc)
            raise ProviderError(f"{self.provider} request failed", provider=self.provider) from exc

    def _status_error(self, response: httpx.Response, detail: Optional[str] = None) -> ProviderStatusError:
        return ProviderStatusError(
            response.status_code,
            provider=self.provider,
            detail=detail,
            retry_after=parse_retry_after(response.headers.get("retry-after")),
        )

    @staticmethod
    def _json(response: httpx.Response) -> Optional[Any]:
        """Response JSON, or None when the body is not JSON."""
        try:
            return response.json()
        except ValueError:
            return None

    def _decode(self, model: Type[ModelT], payload: Any) -> ModelT:
        """Validate wire JSON into ``model`` or raise ProviderDecodeError."""
        if not isinstance(payload, dict):
            raise ProviderDecodeError(f"{self.provider} returned a non-object payload", provider=self.provider)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.warning("[%s] Unexpected payload shape: %s", self.provider, exc.errors()[:3])
            raise ProviderDecodeError(f"{self.provider} returned an unexpected payload", provider=self.provider) from exc
