"""
remove.bg Client

Async client for the remove.bg background-removal API (JSON mode).

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import List, Optional
import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from clients.base import BaseProviderClient
from services.infrastructure.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class RemoveBgResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result_b64: Optional[str] = None
    foreground_top: Optional[int] = None
    foreground_left: Optional[int] = None
    foreground_width: Optional[int] = None
    foreground_height: Optional[int] = None


class RemoveBgResponse(BaseModel):
    """Success envelope: ``{"data": {"result_b64": ...}}``."""
    model_config = ConfigDict(extra="ignore")

    data: Optional[RemoveBgResult] = None


class RemoveBgErrorItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    detail: Optional[str] = None
    code: Optional[str] = None


class RemoveBgErrorResponse(BaseModel):
    """Error envelope: ``{"errors": [{"title": ..., "detail": ...}]}``."""
    model_config = ConfigDict(extra="ignore")

    errors: List[RemoveBgErrorItem] = []

    def first_detail(self) -> Optional[str]:
        if not self.errors:
            return None
        detail = self.errors[0].detail
        return detail if detail else None


class RemoveBgClient(BaseProviderClient):
    """Async client for remove.bg."""

    provider = "remove.bg"

    def __init__(self, http_client: httpx.AsyncClient, api_key: str, api_url: str):
        super().__init__(http_client, api_key)
        self.api_url = api_url

    def _error_detail(self, response: httpx.Response) -> Optional[str]:
        body = self._json(response)
        if not isinstance(body, dict):
            return None
        try:
            return RemoveBgErrorResponse.model_validate(body).first_detail()
        except ValidationError:
            return None

    async def remove_background(
        self,
        image_b64: str,
        token: Optional[CancellationToken] = None
    ) -> Optional[str]:
        """
        Remove the background from a base64 image.

        Args:
            image_b64: Raw base64 payload (no data-URI prefix)
            token: Deadline for the whole call

        Returns:
            Base64 PNG of the cut-out, or None when the provider omitted it

        Raises:
            ProviderStatusError: Non-2xx, with ``detail`` and ``retry_after``
            ProviderTimeoutError: Request timed out
            ProviderDecodeError: 2xx with a body that is not a JSON object
            ProviderError: Transport failure
        """
        payload = {
            "image_file_b64": image_b64,
            "size": "preview",
            "format": "png",
            "channels": "rgba",
        }
        headers = {
            "X-Api-Key": self.api_key,
            "Accept": "application/json",
        }

        response = await self._send("POST", self.api_url, token=token, json=payload, headers=headers)
        if not response.is_success:
            detail = self._error_detail(response)
            logger.warning("[RemoveBg] API error: HTTP %s (%s)", response.status_code, detail)
            raise self._status_error(response, detail=detail)

        result = self._decode(RemoveBgResponse, self._json(response))
        if result.data is None or not result.data.result_b64:
            return None
        return result.data.result_b64
