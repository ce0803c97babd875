"""
HTTP Client Manager for Outbound Calls

Manages shared httpx AsyncClient instances for the AI, background-removal,
image-search and image-fetch traffic. Provides HTTP/2 multiplexing, connection
pooling, and proper cleanup.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Dict, Optional
import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)


class HTTPXClientManager:
    """
    Manages shared httpx AsyncClient instances, one per named purpose.

    Clients never follow redirects; the image proxy treats a 3xx as an
    upstream error. Tests pass ``transport`` (usually httpx.MockTransport)
    so no real sockets are opened.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._clients: Dict[str, httpx.AsyncClient] = {}
        self._lock = asyncio.Lock()
        self._transport = transport

    def _build_client(self, name: str, timeout: float) -> httpx.AsyncClient:
        kwargs = {
            "timeout": httpx.Timeout(timeout, connect=10.0),
            "follow_redirects": False,
            "headers": {"User-Agent": "hotsheet-proxy/1.0"},
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        else:
            kwargs["http2"] = True
            kwargs["limits"] = httpx.Limits(
                max_connections=100,
                max_keepalive_connections=20,
                keepalive_expiry=30.0
            )
        client = httpx.AsyncClient(**kwargs)
        logger.debug('[HTTPXClientManager] Created client for %s', name)
        return client

    async def get_client(self, name: str, timeout: float = 60.0) -> httpx.AsyncClient:
        """
        Get or create the shared client for ``name``.

        Args:
            name: Purpose identifier (e.g., 'anthropic', 'images')
            timeout: Default timeout; per-request deadlines override it

        Returns:
            Shared httpx.AsyncClient instance
        """
        async with self._lock:
            client = self._clients.get(name)
            if client is None or client.is_closed:
                client = self._build_client(name, timeout)
                self._clients[name] = client
            return client

    async def close_all(self) -> None:
        """Close all client connections. Call on app shutdown."""
        async with self._lock:
            for name, client in self._clients.items():
                if not client.is_closed:
                    await client.aclose()
                    logger.debug('[HTTPXClientManager] Closed client for %s', name)
            self._clients.clear()
