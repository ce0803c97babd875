"""
Bounded response reader.

Reads an upstream streamed body while enforcing a byte ceiling. Never trusts
Content-Length alone: the declared length is checked first (when present and
numeric), then the running total of received chunks. On overflow, or any other
failure while reading, the upstream response is closed so the connection is
released instead of left draining.
"""
from typing import List, Optional
import logging

import httpx

from services.infrastructure.utils.cancellation import CancellationToken
from services.media.exceptions import ImageTooLargeError

logger = logging.getLogger(__name__)


def declared_length(response: httpx.Response) -> Optional[int]:
    """Content-Length as an int, or None when absent or malformed."""
    raw = response.headers.get("content-length")
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


async def read_bounded(
    response: httpx.Response,
    max_bytes: int,
    token: Optional[CancellationToken] = None
) -> bytes:
    """
    Read the full body of a streamed response, failing fast past max_bytes.

    Args:
        response: Response opened with stream=True
        max_bytes: Largest accepted body
        token: Checked between chunks

    Returns:
        The body as one contiguous bytes object

    Raises:
        ImageTooLargeError: Declared or streamed size above max_bytes
        DeadlineExceededError / OperationCancelledError: Token fired mid-read
    """
    declared = declared_length(response)
    if declared is not None and declared > max_bytes:
        await response.aclose()
        raise ImageTooLargeError(max_bytes, observed=declared, declared=True)

    chunks: List[bytes] = []
    total = 0
    try:
        async for chunk in response.aiter_bytes():
            if token is not None:
                token.raise_if_cancelled()
            total += len(chunk)
            if total > max_bytes:
                logger.debug("[BoundedReader] Overflow after %s bytes (limit %s)", total, max_bytes)
                raise ImageTooLargeError(max_bytes, observed=total)
            chunks.append(chunk)
    except BaseException:
        chunks.clear()
        await response.aclose()
        raise

    return b"".join(chunks)
