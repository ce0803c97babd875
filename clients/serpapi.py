"""
SerpApi Image Search Client

Async client for SerpApi's Google Images engine. Individual results that do
not match the expected shape are dropped rather than failing the search.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Any, List, Optional
import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from clients.base import BaseProviderClient
from clients.exceptions import ProviderDecodeError
from services.infrastructure.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class ImageSearchResult(BaseModel):
    """One ``images_results`` entry."""
    model_config = ConfigDict(extra="ignore")

    thumbnail: Optional[str] = None
    original: Optional[str] = None
    title: Optional[str] = None
    source: Optional[str] = None


class ImageSearchResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    images_results: List[Any] = []
    error: Optional[str] = None


class SerpApiClient(BaseProviderClient):
    """Async client for SerpApi image search."""

    provider = "serpapi"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str, api_url: str):
        super().__init__(http_client, api_key)
        self.api_url = api_url

    @staticmethod
    def _parse_results(raw_results: List[Any]) -> List[ImageSearchResult]:
        results = []
        for item in raw_results:
            if not isinstance(item, dict):
                continue
            try:
                results.append(ImageSearchResult.model_validate(item))
            except ValidationError:
                continue
        return results

    async def search_images(
        self,
        query: str,
        token: Optional[CancellationToken] = None
    ) -> List[ImageSearchResult]:
        """
        Run one Google Images search.

        Returns:
            Results in provider order

        Raises:
            ProviderStatusError: Non-2xx from SerpApi
            ProviderTimeoutError: Request timed out
            ProviderDecodeError: Body is not the expected JSON object
            ProviderError: Transport failure
        """
        params = {
            "engine": "google_images",
            "q": query,
            "api_key": self.api_key,
        }
        response = await self._send("GET", self.api_url, token=token, params=params)
        if not response.is_success:
            logger.warning("[SerpApi] Search error: HTTP %s", response.status_code)
            raise self._status_error(response)

        body = self._json(response)
        if body is None:
            raise ProviderDecodeError("serpapi returned a non-JSON body", provider=self.provider)
        envelope = self._decode(ImageSearchResponse, body)
        if envelope.error and not envelope.images_results:
            logger.info("[SerpApi] Search returned no results: %s", envelope.error)
        return self._parse_results(envelope.images_results)
