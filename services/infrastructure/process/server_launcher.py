"""
Server launcher for SKU Studio API.

Starts Uvicorn with the unified logging configuration.
"""

import os
import logging

import uvicorn

from config.settings import config
from uvicorn_config import LOGGING_CONFIG, TIMEOUT_GRACEFUL_SHUTDOWN, TIMEOUT_KEEP_ALIVE

logger = logging.getLogger(__name__)


def run_server() -> None:
    """
    Run SKU Studio API with Uvicorn (FastAPI async server).

    Rate-limit windows live in process memory, so each worker keeps its own
    counters when UVICORN_WORKERS > 1.
    """
    os.makedirs("logs", exist_ok=True)

    host = config.host
    port = config.port
    debug = config.debug
    workers = 1 if debug else config.workers
    log_level = config.log_level.lower()

    print(f"Environment: {'development' if debug else 'production'} (DEBUG={debug})")
    print(f"Host: {host}")
    print(f"Port: {port}")
    print(f"Workers: {workers}")
    print(f"Log Level: {log_level.upper()}")
    print(f"Auto-reload: {debug}")
    print("=" * 80)
    print(f"Server ready at: http://localhost:{port}")
    if debug:
        print(f"API Docs: http://localhost:{port}/docs")
    print()

    if workers > 1:
        logger.warning("Running %s workers: rate limits are enforced per worker process", workers)

    try:
        uvicorn.run(
            "main:app",
            host=host,
            port=port,
            workers=workers,
            reload=debug,
            log_level=log_level,
            log_config=LOGGING_CONFIG,
            access_log=False,
            timeout_keep_alive=TIMEOUT_KEEP_ALIVE,
            timeout_graceful_shutdown=TIMEOUT_GRACEFUL_SHUTDOWN,
        )
    except KeyboardInterrupt:
        print("\nShutting down gracefully...")
