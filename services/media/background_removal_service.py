"""
Background Removal Service
==========================

Forwards a product photo to remove.bg and returns the cut-out as a PNG data
URI. Enforces the input ceiling before spending provider quota.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Optional
import logging
import re

from clients.exceptions import (
    ProviderError,
    ProviderStatusError,
    ProviderTimeoutError,
)
from clients.remove_bg import RemoveBgClient
from services.infrastructure.http.errors import (
    ApiError,
    BadGatewayError,
    GatewayTimeoutError,
    PayloadTooLargeError,
    PaymentRequiredError,
    TooManyRequestsError,
)
from services.infrastructure.utils.cancellation import (
    CancellationToken,
    DeadlineExceededError,
    OperationCancelledError,
)
from services.security import security_log

logger = logging.getLogger(__name__)

REMOVE_BG_TIMEOUT_SECONDS = 30.0
MAX_DECODED_BYTES = 12_000_000

DATA_URI_PREFIX = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)

FAILED_MESSAGE = "Background removal failed"


def strip_data_uri_prefix(image_b64: str) -> str:
    """'data:image/png;base64,AAAA' -> 'AAAA'; other input is returned as-is."""
    return DATA_URI_PREFIX.sub("", image_b64, count=1)


def estimated_decoded_size(raw_b64: str) -> float:
    return len(raw_b64) * 3 / 4


def _map_status_error(exc: ProviderStatusError) -> ApiError:
    if exc.status_code == 402:
        return PaymentRequiredError("Monthly limit reached")
    if exc.status_code == 429:
        return TooManyRequestsError("Rate limited, try again later", retry_after=exc.retry_after)
    status = 502 if exc.status_code >= 500 else exc.status_code
    return ApiError(exc.detail or FAILED_MESSAGE, status_code=status)


class BackgroundRemovalService:
    """Size check plus one remove.bg call per request."""

    def __init__(
        self,
        client: RemoveBgClient,
        timeout: float = REMOVE_BG_TIMEOUT_SECONDS,
        max_decoded_bytes: int = MAX_DECODED_BYTES
    ):
        self.client = client
        self.timeout = timeout
        self.max_decoded_bytes = max_decoded_bytes

    async def remove_background(self, image_b64: str, client_ip: Optional[str] = None) -> str:
        """
        Remove the background of ``image_b64`` (raw base64 or a data URI).

        Returns:
            ``data:image/png;base64,...`` of the result

        Raises:
            PayloadTooLargeError: Estimated decoded size above the ceiling
            PaymentRequiredError / TooManyRequestsError: Provider quota
            ApiError: Other provider statuses
            BadGatewayError: Missing result or transport failure
            GatewayTimeoutError: Deadline passed
        """
        raw = strip_data_uri_prefix(image_b64)
        if estimated_decoded_size(raw) > self.max_decoded_bytes:
            security_log.input_validation_failed(
                "image_b64", "exceeds decoded size limit", ip=client_ip, value_size=len(raw)
            )
            raise PayloadTooLargeError("Image too large")

        token = CancellationToken(timeout=self.timeout)
        try:
            result = await token.run(self.client.remove_background(raw, token=token))
        except ProviderStatusError as exc:
            raise _map_status_error(exc) from exc
        except (ProviderTimeoutError, DeadlineExceededError, OperationCancelledError) as exc:
            logger.warning("[BackgroundRemoval] Provider call timed out")
            raise GatewayTimeoutError("Background removal timed out") from exc
        except ProviderError as exc:
            logger.warning("[BackgroundRemoval] Provider call failed: %s", exc)
            raise BadGatewayError(FAILED_MESSAGE) from exc

        if not result:
            logger.warning("[BackgroundRemoval] Provider returned no result_b64")
            raise BadGatewayError(FAILED_MESSAGE)
        return f"data:image/png;base64,{result}"
