"""
Uvicorn Configuration for SKU Studio API
========================================

Server timeouts and the logging configuration handed to Uvicorn, so server
logs share the application's format.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

import sys

from services.infrastructure.utils.logging_config import SafeStreamHandler, _is_stream_usable


class SafeStdoutHandler(SafeStreamHandler):
    """SafeStreamHandler that uses stdout, falling back to stderr if stdout is closed."""

    def __init__(self, stream=None):
        if stream is None:
            stream = sys.stdout if _is_stream_usable(sys.stdout) else sys.stderr
        super().__init__(stream)


# ============================================================================
# SERVER CONFIGURATION
# ============================================================================

# Suggestion streams stay open while thumbnails are fetched
TIMEOUT_KEEP_ALIVE = 30
TIMEOUT_GRACEFUL_SHUTDOWN = 10

# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "unified": {
            "()": "services.infrastructure.utils.logging_config.UnifiedFormatter",
        },
    },
    "handlers": {
        "default": {
            "()": SafeStdoutHandler,
            "formatter": "unified",
        },
    },
    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        },
        "watchfiles": {
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}
