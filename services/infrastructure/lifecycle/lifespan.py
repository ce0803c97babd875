"""
Lifespan management for SKU Studio API.

Handles FastAPI application startup and shutdown lifecycle:
- Startup logging of which providers are configured
- Closing the shared outbound HTTP clients on shutdown
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config.settings import config

logger = logging.getLogger(__name__)


def _log_provider_status() -> None:
    providers = {
        'generate-hotsheet (ANTHROPIC_API_KEY)': config.ANTHROPIC_API_KEY,
        'remove-bg (REMOVEBG_API_KEY)': config.REMOVEBG_API_KEY,
        'suggest-images (SERPAPI_KEY)': config.SERPAPI_KEY,
    }
    for name, key in providers.items():
        if key:
            logger.info("[LIFESPAN] %s: configured", name)
        else:
            logger.warning("[LIFESPAN] %s: not configured, endpoint answers 501", name)


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    fastapi_app.state.start_time = time.time()
    fastapi_app.state.is_shutting_down = False

    # Only log startup messages from first worker to avoid repetition
    worker_id = os.getenv('UVICORN_WORKER_ID', '0')
    is_main_worker = (worker_id == '0' or not worker_id)

    if is_main_worker:
        logger.info("[LIFESPAN] SKU Studio API v%s starting", config.version)
        _log_provider_status()

    try:
        yield
    finally:
        fastapi_app.state.is_shutting_down = True
        await fastapi_app.state.http_clients.close_all()
        if is_main_worker:
            logger.info("[LIFESPAN] Outbound HTTP clients closed, shutdown complete")
