"""
Anthropic Messages Client

Async client for the Anthropic Messages API using httpx. Returns the typed
response; interpreting the text is the caller's job.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import List, Optional
import logging

import httpx
from pydantic import BaseModel, ConfigDict

from clients.base import BaseProviderClient
from clients.exceptions import ProviderDecodeError
from services.infrastructure.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class ContentBlock(BaseModel):
    """One block of a Messages response. Only text blocks carry ``text``."""
    model_config = ConfigDict(extra="ignore")

    type: str
    text: Optional[str] = None


class MessageUsage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    input_tokens: int = 0
    output_tokens: int = 0


class MessageResponse(BaseModel):
    """Subset of the Messages API response the service reads."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    model: Optional[str] = None
    content: List[ContentBlock] = []
    stop_reason: Optional[str] = None
    usage: Optional[MessageUsage] = None

    def first_text(self) -> Optional[str]:
        """Text of the first block when that block is a text block."""
        if not self.content:
            return None
        block = self.content[0]
        if block.type != "text" or block.text is None:
            return None
        return block.text


class AnthropicClient(BaseProviderClient):
    """Async client for the Anthropic Messages API."""

    provider = "anthropic"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        api_url: str,
        model: str,
        max_tokens: int = 2048
    ):
        super().__init__(http_client, api_key)
        self.api_url = api_url
        self.model = model
        self.max_tokens = max_tokens

    async def create_message(
        self,
        system: str,
        user_message: str,
        token: Optional[CancellationToken] = None
    ) -> MessageResponse:
        """
        Send a single-turn message.

        Args:
            system: System prompt
            user_message: The only user turn
            token: Deadline for the whole call

        Returns:
            Decoded MessageResponse

        Raises:
            ProviderStatusError: Non-2xx from the API
            ProviderTimeoutError: Request timed out
            ProviderDecodeError: 2xx with an unexpected body
            ProviderError: Transport failure
        """
        payload = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user_message}],
        }
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

        response = await self._send("POST", self.api_url, token=token, json=payload, headers=headers)
        if not response.is_success:
            logger.warning("[Anthropic] API error: HTTP %s", response.status_code)
            raise self._status_error(response)

        body = self._json(response)
        if body is None:
            raise ProviderDecodeError("anthropic returned a non-JSON body", provider=self.provider)
        message = self._decode(MessageResponse, body)
        if message.usage is not None:
            logger.debug(
                "[Anthropic] %s: %s input / %s output tokens",
                message.model, message.usage.input_tokens, message.usage.output_tokens
            )
        return message
