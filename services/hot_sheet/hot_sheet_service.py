"""
Hot Sheet Service
=================

Turns a brand name (and optional retailer) into a Hot Sheet draft via one
Anthropic Messages call. The model's JSON is relayed as-is once it parses.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Any
import json
import logging
import math
import re

from clients.anthropic import AnthropicClient
from clients.exceptions import ProviderError, ProviderTimeoutError
from prompts.hot_sheet import HOT_SHEET_SYSTEM_PROMPT, build_hot_sheet_user_message
from services.infrastructure.http.errors import BadGatewayError, BadRequestError, GatewayTimeoutError
from services.infrastructure.utils.cancellation import (
    CancellationToken,
    DeadlineExceededError,
    OperationCancelledError,
)

logger = logging.getLogger(__name__)

GENERATION_TIMEOUT_SECONDS = 45.0
MAX_BRAND_NAME_LENGTH = 100
MAX_RETAILER_LENGTH = 50

# Unicode-aware \w: accented brand names survive
_BRAND_DISALLOWED = re.compile(r"[^\w\s&'.,-]")
_LEADING_FENCE = re.compile(r"^```(?:json)?\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if math.isinf(value):
        raise ValueError(f"number out of range {literal[:20]}")
    return value


def sanitize_brand_name(raw: str) -> str:
    return _BRAND_DISALLOWED.sub("", raw).strip()[:MAX_BRAND_NAME_LENGTH]


def sanitize_retailer(raw: str) -> str:
    return raw.strip()[:MAX_RETAILER_LENGTH]


def strip_code_fence(text: str) -> str:
    """Remove one leading ```json / ``` fence and one trailing ``` fence."""
    stripped = _LEADING_FENCE.sub("", text.strip(), count=1)
    return _TRAILING_FENCE.sub("", stripped, count=1)


def parse_hot_sheet_json(text: str) -> Any:
    """
    Parse the model's reply.

    Raises:
        BadGatewayError: Reply is not valid JSON after fence stripping, or
            contains NaN, Infinity or an overflowing number
    """
    json_text = strip_code_fence(text)
    try:
        return json.loads(json_text, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as e:
        logger.error("[HotSheet] Failed to parse AI JSON: %s. Preview: %s", e, json_text[:500])
        raise BadGatewayError("AI returned invalid JSON") from e


class HotSheetService:
    """Single-turn Hot Sheet generation."""

    def __init__(self, client: AnthropicClient, timeout: float = GENERATION_TIMEOUT_SECONDS):
        self.client = client
        self.timeout = timeout

    async def generate(self, raw_brand_name: str, raw_retailer: str) -> Any:
        """
        Generate a Hot Sheet draft.

        Args:
            raw_brand_name: Brand name as typed by the user
            raw_retailer: Retailer name, may be empty

        Returns:
            Parsed JSON from the model

        Raises:
            BadRequestError: Brand name empty after sanitising
            BadGatewayError: Provider failure or unusable reply
            GatewayTimeoutError: Deadline passed
        """
        brand_name = sanitize_brand_name(raw_brand_name)
        retailer = sanitize_retailer(raw_retailer)
        if not brand_name:
            raise BadRequestError("Brand name is required")

        user_message = build_hot_sheet_user_message(brand_name, retailer)
        token = CancellationToken(timeout=self.timeout)
        try:
            message = await token.run(
                self.client.create_message(HOT_SHEET_SYSTEM_PROMPT, user_message, token=token)
            )
        except (ProviderTimeoutError, DeadlineExceededError, OperationCancelledError) as exc:
            logger.warning("[HotSheet] Generation timed out for brand %r", brand_name)
            raise GatewayTimeoutError("AI generation timed out") from exc
        except ProviderError as exc:
            logger.error("[HotSheet] Generation failed for brand %r: %s", brand_name, exc)
            raise BadGatewayError("AI generation failed") from exc

        text = message.first_text()
        if text is None:
            logger.warning("[HotSheet] First content block is not text")
            raise BadGatewayError("Unexpected AI response format")

        logger.info("[HotSheet] Generated Hot Sheet for brand %r", brand_name)
        return parse_hot_sheet_json(text)
