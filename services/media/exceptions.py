"""
Media-specific exceptions for outbound image fetches.

Provides specific exception types for the ways a user-supplied image URL can
fail, so each endpoint can translate them into its own response.
"""

from typing import Optional


class ImageFetchError(Exception):
    """Base exception for image fetch errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class InvalidUrlError(ImageFetchError):
    """Raised when a URL fails validation before any network call."""

    def __init__(self, reason: str):
        super().__init__(f"URL rejected: {reason}", error_code="INVALID_URL")
        self.reason = reason


class UpstreamStatusError(ImageFetchError):
    """Raised when the upstream answers with a non-2xx status (redirects included)."""

    def __init__(self, status_code: int):
        super().__init__(f"Upstream returned {status_code}", error_code="UPSTREAM_STATUS")
        self.status_code = status_code


class UnsupportedContentTypeError(ImageFetchError):
    """Raised when the upstream content type is missing or not an allowed image type."""

    def __init__(self, content_type: Optional[str]):
        super().__init__(
            f"Unsupported content type: {content_type or 'missing'}",
            error_code="UNSUPPORTED_CONTENT_TYPE"
        )
        self.content_type = content_type


class ImageTooLargeError(ImageFetchError):
    """Raised when the declared or streamed size exceeds the ceiling."""

    def __init__(self, max_bytes: int, observed: Optional[int] = None, declared: bool = False):
        source = "declared" if declared else "streamed"
        super().__init__(
            f"Image exceeds {max_bytes} bytes ({source} {observed})",
            error_code="IMAGE_TOO_LARGE"
        )
        self.max_bytes = max_bytes
        self.observed = observed
        self.declared = declared
