"""
Pytest Configuration
====================

Ensures project root is in Python path for imports, and provides app and
upstream fixtures. Every outbound call goes through an httpx.MockTransport,
so no test touches the network.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List

import httpx
import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("LOG_TO_FILE", "false")

from fastapi.testclient import TestClient  # noqa: E402

from config.settings import config  # noqa: E402
from main import create_app  # noqa: E402
from services.infrastructure.rate_limiting import SlidingWindowRateLimiter  # noqa: E402

MANAGED_ENV_KEYS = (
    "ANTHROPIC_API_KEY",
    "REMOVEBG_API_KEY",
    "SERPAPI_KEY",
    "RATE_LIMIT_WINDOW_MS",
    "RATE_LIMIT_GENERATE_HOTSHEET",
    "RATE_LIMIT_PROXY_IMAGE",
    "RATE_LIMIT_REMOVE_BG",
    "RATE_LIMIT_SUGGEST_IMAGES",
    "MAX_REQUEST_BODY_MB",
)


class UpstreamStub:
    """
    Routes outbound requests by host to per-test handlers and records them.

    A host without a handler answers 599 so unexpected calls are visible.
    """

    def __init__(self):
        self.handlers: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def on(self, host: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handlers[host] = handler

    def calls_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(request.url.host)
        if handler is None:
            return httpx.Response(599, text=f"no stub for {request.url.host}")
        result = handler(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test with no provider keys and default limits."""
    for key in MANAGED_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    config.clear_cache()
    yield
    config.clear_cache()


@pytest.fixture
def set_env(monkeypatch):
    """Set environment variables and drop the config cache."""
    def _set(**values):
        for key, value in values.items():
            monkeypatch.setenv(key, str(value))
        config.clear_cache()
    return _set


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def limiter():
    return SlidingWindowRateLimiter()


@pytest.fixture
def client(upstream, limiter):
    """TestClient over a fresh app whose outbound traffic hits ``upstream``."""
    app = create_app(rate_limiter=limiter, transport=upstream.transport)
    with TestClient(app) as test_client:
        yield test_client
