"""Base configuration class and core settings.

This module provides the base Config class with caching mechanism and core
application settings like version, server configuration, and logging.
"""
import logging
import os
import time
from pathlib import Path

logger = logging.getLogger(__name__)


class BaseConfig:
    """Base configuration class with caching mechanism."""

    def __init__(self):
        self._cache = {}
        self._cache_timestamp = 0
        self._cache_duration = 30
        self._version = None

    def _get_cached_value(self, key: str, default=None):
        """Get cached value from environment."""
        current_time = time.time()
        if current_time - self._cache_timestamp > self._cache_duration:
            self._cache.clear()
            self._cache_timestamp = current_time
        if key not in self._cache:
            self._cache[key] = os.environ.get(key, default)
        return self._cache[key]

    def _get_int(self, key: str, default: int, minimum: int = 0) -> int:
        """Read an integer setting, falling back to default on bad input."""
        try:
            val = int(self._get_cached_value(key, str(default)))
        except (ValueError, TypeError):
            logger.warning("Invalid %s value, using %s", key, default)
            return default
        if val < minimum:
            logger.warning("%s=%s below minimum %s, using %s", key, val, minimum, default)
            return default
        return val

    def _get_bool(self, key: str, default: bool) -> bool:
        val = self._get_cached_value(key, 'true' if default else 'false')
        return str(val).strip().lower() in ('1', 'true', 'yes')

    def clear_cache(self) -> None:
        """Drop cached environment values so the next read hits os.environ."""
        self._cache.clear()
        self._cache_timestamp = 0

    @property
    def version(self) -> str:
        """
        Application version - read from VERSION file (single source of truth).
        Cached after first read.
        """
        if self._version is None:
            try:
                version_file = Path(__file__).parent.parent / 'VERSION'
                self._version = version_file.read_text(encoding='utf-8').strip()
            except OSError as e:
                logger.warning("Failed to read VERSION file: %s", e)
                self._version = "0.0.0"
        return self._version

    @property
    def host(self) -> str:
        """FastAPI application host address."""
        return self._get_cached_value('HOST', '0.0.0.0')

    @property
    def port(self) -> int:
        """FastAPI application port number."""
        try:
            val = int(self._get_cached_value('PORT', '3001'))
            if not 1 <= val <= 65535:
                logger.warning("PORT %s out of range, using 3001", val)
                return 3001
            return val
        except (ValueError, TypeError):
            logger.warning("Invalid PORT value, using 3001")
            return 3001

    @property
    def workers(self) -> int:
        """Uvicorn worker processes. Rate-limit state is kept per process."""
        return self._get_int('UVICORN_WORKERS', 1, minimum=1)

    @property
    def debug(self) -> bool:
        """FastAPI debug mode setting."""
        return self._get_bool('DEBUG', False)

    @property
    def log_level(self) -> str:
        """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""
        level = str(self._get_cached_value('LOG_LEVEL', 'INFO')).upper()
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if level not in valid_levels:
            logger.warning("Invalid LOG_LEVEL '%s', using INFO", level)
            return 'INFO'
        return level

    @property
    def log_to_file(self) -> bool:
        """Write logs/app.log in addition to the console."""
        return self._get_bool('LOG_TO_FILE', True)

    @property
    def max_request_body_bytes(self) -> int:
        """Largest declared request body accepted by the body-size middleware."""
        return self._get_int('MAX_REQUEST_BODY_MB', 20, minimum=1) * 1024 * 1024
