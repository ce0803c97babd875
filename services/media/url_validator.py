"""
Outbound URL validation (SSRF guard).

Syntactic allow/deny rules applied to every user-supplied URL before the
service fetches it. No DNS resolution happens here: a public hostname that
resolves to a private address is NOT caught.
"""
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlsplit
import re

import httpx

from services.media.exceptions import InvalidUrlError

ALLOWED_SCHEME = "https"

BLOCKED_HOSTNAMES = frozenset({
    "localhost",
    "0.0.0.0",
    "metadata.google.internal",
})

BLOCKED_SUFFIXES = (".local", ".internal")

_IPV4_LITERAL = re.compile(r"^\d{1,3}(\.\d{1,3}){3}$")
# Browsers parse a host whose last label is a number as IPv4 (127.1, 0x7f.1, 2130706433)
_NUMERIC_LABEL = re.compile(r"^(0x[0-9a-f]*|\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ValidatedUrl:
    """A URL that passed validate_proxy_url. Only exists for one request."""
    url: str
    hostname: str

    def __str__(self) -> str:
        return self.url


def _host_part(netloc: str) -> str:
    return netloc.rpartition("@")[2]


def validate_proxy_url(raw_url: Any) -> ValidatedUrl:
    """
    Validate a user-supplied URL for outbound fetching.

    Args:
        raw_url: Candidate URL

    Returns:
        ValidatedUrl

    Raises:
        InvalidUrlError: With a short machine-readable reason
    """
    if not isinstance(raw_url, str) or not raw_url.strip():
        raise InvalidUrlError("empty")

    candidate = raw_url.strip()
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        # Accessing .port validates it
        _ = parts.port
    except ValueError as exc:
        raise InvalidUrlError("unparseable") from exc

    if parts.scheme.lower() != ALLOWED_SCHEME:
        raise InvalidUrlError("scheme")
    if parts.username is not None or parts.password is not None:
        raise InvalidUrlError("userinfo")
    if _host_part(parts.netloc).startswith("["):
        raise InvalidUrlError("ip_literal")
    if not hostname:
        raise InvalidUrlError("missing_host")

    hostname = hostname.lower().rstrip(".")
    if not hostname:
        raise InvalidUrlError("missing_host")
    if _IPV4_LITERAL.match(hostname) or _NUMERIC_LABEL.match(hostname.rsplit(".", 1)[-1]):
        raise InvalidUrlError("ip_literal")
    if hostname in BLOCKED_HOSTNAMES:
        raise InvalidUrlError("blocked_host")
    if hostname.endswith(BLOCKED_SUFFIXES):
        raise InvalidUrlError("internal_suffix")

    url = parts.geturl()
    # The host must survive httpx's IDNA handling when the request is built
    try:
        _ = httpx.URL(url).host
    except (httpx.InvalidURL, UnicodeError, ValueError) as exc:
        raise InvalidUrlError("unparseable") from exc

    return ValidatedUrl(url=url, hostname=hostname)
