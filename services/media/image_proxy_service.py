"""
Image Proxy Service
===================

Fetches one user-supplied image URL on behalf of the browser so that canvas
exports are not tainted by cross-origin images.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Any
import logging

import httpx

from services.infrastructure.http.errors import (
    BadGatewayError,
    BadRequestError,
    GatewayTimeoutError,
    PayloadTooLargeError,
)
from services.infrastructure.utils.cancellation import (
    CancellationToken,
    DeadlineExceededError,
    OperationCancelledError,
)
from services.media.exceptions import (
    ImageTooLargeError,
    InvalidUrlError,
    UnsupportedContentTypeError,
    UpstreamStatusError,
)
from services.media.image_fetcher import FetchedImage, fetch_image
from services.media.url_validator import validate_proxy_url
from services.security import security_log

logger = logging.getLogger(__name__)

PROXY_TIMEOUT_SECONDS = 8.0
PROXY_MAX_BYTES = 2_000_000


class ImageProxyService:
    """Validates, fetches and bounds a single proxied image."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        timeout: float = PROXY_TIMEOUT_SECONDS,
        max_bytes: int = PROXY_MAX_BYTES
    ):
        self.http_client = http_client
        self.timeout = timeout
        self.max_bytes = max_bytes

    async def proxy(self, raw_url: Any) -> FetchedImage:
        """
        Fetch ``raw_url`` and return its bytes.

        Raises:
            BadRequestError: Invalid URL or not an image
            BadGatewayError: Upstream status or transport failure
            PayloadTooLargeError: Image above max_bytes
            GatewayTimeoutError: Deadline passed
        """
        try:
            target = validate_proxy_url(raw_url)
        except InvalidUrlError as exc:
            security_log.url_blocked(exc.reason, raw_url, route="proxy-image")
            raise BadRequestError("Invalid URL") from exc

        token = CancellationToken(timeout=self.timeout)
        try:
            image = await token.run(fetch_image(self.http_client, target, self.max_bytes, token))
        except UpstreamStatusError as exc:
            logger.info("[ImageProxy] Upstream %s for %s", exc.status_code, target.hostname)
            raise BadGatewayError("Upstream error") from exc
        except UnsupportedContentTypeError as exc:
            logger.info("[ImageProxy] Rejected content type %s from %s", exc.content_type, target.hostname)
            raise BadRequestError("Not an image") from exc
        except ImageTooLargeError as exc:
            logger.info("[ImageProxy] %s (%s)", exc.message, target.hostname)
            raise PayloadTooLargeError("Image too large") from exc
        except (DeadlineExceededError, OperationCancelledError, httpx.TimeoutException) as exc:
            logger.warning("[ImageProxy] Fetch timed out for %s", target.hostname)
            raise GatewayTimeoutError("Fetch timed out") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("[ImageProxy] Fetch failed for %s: %s", target.hostname, type(exc).__name__)
            raise BadGatewayError("Fetch failed") from exc

        logger.debug("[ImageProxy] Proxied %s bytes from %s", len(image.content), target.hostname)
        return image
