"""
Validated image download.

Shared by the image proxy and the suggestion thumbnail workers: one GET with
redirects disabled, a 2xx requirement, a raster content-type allowlist and a
bounded body read.
"""
from dataclasses import dataclass
from typing import FrozenSet, Optional, Union
import base64
import logging

import httpx

from services.infrastructure.utils.cancellation import CancellationToken
from services.media.bounded_reader import read_bounded
from services.media.exceptions import UnsupportedContentTypeError, UpstreamStatusError
from services.media.url_validator import ValidatedUrl

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES: FrozenSet[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
})


@dataclass(frozen=True)
class FetchedImage:
    """Bytes of a downloaded image and its validated content type."""
    content_type: str
    content: bytes

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def normalize_content_type(raw: Optional[str]) -> Optional[str]:
    """Strip parameters and lowercase: 'Image/PNG; charset=x' -> 'image/png'."""
    if not raw:
        return None
    media_type = raw.split(";", 1)[0].strip().lower()
    return media_type or None


async def fetch_image(
    client: httpx.AsyncClient,
    url: Union[ValidatedUrl, str],
    max_bytes: int,
    token: Optional[CancellationToken] = None,
    allowed_types: FrozenSet[str] = ALLOWED_IMAGE_TYPES
) -> FetchedImage:
    """
    Download one image under the given limits.

    Callers validate the URL first and bound the whole call with
    ``token.run(...)``; the token's remaining time is also passed to httpx.

    Raises:
        UpstreamStatusError: Non-2xx status, including any redirect
        UnsupportedContentTypeError: Missing or disallowed content type
        ImageTooLargeError: Declared or streamed size above max_bytes
        httpx.HTTPError: Transport failures and httpx timeouts
    """
    timeout = httpx.USE_CLIENT_DEFAULT
    if token is not None:
        token.raise_if_cancelled()
        remaining = token.remaining()
        if remaining is not None:
            timeout = httpx.Timeout(remaining)

    request = client.build_request("GET", str(url), headers={"Accept": "image/*"}, timeout=timeout)
    response = await client.send(request, stream=True, follow_redirects=False)
    try:
        if not response.is_success:
            raise UpstreamStatusError(response.status_code)

        content_type = normalize_content_type(response.headers.get("content-type"))
        if content_type not in allowed_types:
            raise UnsupportedContentTypeError(content_type)

        content = await read_bounded(response, max_bytes, token)
    finally:
        await response.aclose()

    logger.debug("[ImageFetcher] Fetched %s bytes (%s)", len(content), content_type)
    return FetchedImage(content_type=content_type, content=content)
