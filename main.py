"""
SKU Studio API - Proxy and Ingestion Boundary (FastAPI)
=======================================================

Server side of the SKU card and Hot Sheet tool: AI brand research, image
proxying, background removal and image suggestions, each behind an origin
check, a per-client rate limit and outbound timeouts.

Version: See VERSION file (centralized version management)
Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from typing import Optional

# Third-party imports
import httpx
from fastapi import FastAPI

# First-party imports
from clients.http_client_manager import HTTPXClientManager
from config.settings import config
from routers.register import register_routers
from services.infrastructure.utils.logging_config import setup_logging
from services.infrastructure.lifecycle.lifespan import lifespan
from services.infrastructure.http.middleware import setup_middleware
from services.infrastructure.http.exception_handlers import setup_exception_handlers
from services.infrastructure.process.server_launcher import run_server
from services.infrastructure.rate_limiting import SlidingWindowRateLimiter

# Setup logging (must happen early, before other modules use logger)
logger = setup_logging()


def create_app(
    rate_limiter: Optional[SlidingWindowRateLimiter] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        rate_limiter: Limiter instance; a fresh one by default
        transport: httpx transport for all outbound calls (tests pass a MockTransport)
    """
    fastapi_app = FastAPI(
        title="SKU Studio API",
        description="Proxy and ingestion endpoints for SKU cards and Hot Sheets",
        version=config.version,
        # Disable Swagger UI in production for security (only enable in DEBUG mode)
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
        lifespan=lifespan
    )

    fastapi_app.state.rate_limiter = rate_limiter or SlidingWindowRateLimiter()
    fastapi_app.state.http_clients = HTTPXClientManager(transport=transport)

    setup_middleware(fastapi_app)
    setup_exception_handlers(fastapi_app)
    register_routers(fastapi_app)

    return fastapi_app


app = create_app()

# ============================================================================
# APPLICATION ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    run_server()
