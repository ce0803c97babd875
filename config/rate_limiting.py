"""Rate limiting configuration settings.

This module provides the per-route request limits and the shared sliding
window used by the in-process rate limiter.
"""
import logging
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)


class RateLimitingConfigMixin:
    """Mixin class for rate limiting configuration properties.

    This mixin expects the class to inherit from BaseConfig or provide
    _get_cached_value / _get_int methods.
    """
    if TYPE_CHECKING:
        def _get_cached_value(self, _key: str, _default: Any = None) -> Any:
            """Type stub: method provided by BaseConfig."""
            return _default

        def _get_int(self, _key: str, _default: int, minimum: int = 0) -> int:
            """Type stub: method provided by BaseConfig."""
            return _default

    @property
    def RATE_LIMIT_WINDOW_MS(self):
        """Sliding window length in milliseconds (default: 60,000)."""
        return self._get_int('RATE_LIMIT_WINDOW_MS', 60000, minimum=1)

    @property
    def RATE_LIMIT_GENERATE_HOTSHEET(self):
        """
        Hot Sheet generations per client per window.

        Default: 3. Every call spends LLM tokens.
        """
        return self._get_int('RATE_LIMIT_GENERATE_HOTSHEET', 3, minimum=1)

    @property
    def RATE_LIMIT_PROXY_IMAGE(self):
        """Image proxy fetches per client per window (default: 30)"""
        return self._get_int('RATE_LIMIT_PROXY_IMAGE', 30, minimum=1)

    @property
    def RATE_LIMIT_REMOVE_BG(self):
        """
        Background removals per client per window.

        Default: 5. remove.bg bills per call.
        """
        return self._get_int('RATE_LIMIT_REMOVE_BG', 5, minimum=1)

    @property
    def RATE_LIMIT_SUGGEST_IMAGES(self):
        """Image suggestion searches per client per window (default: 10)"""
        return self._get_int('RATE_LIMIT_SUGGEST_IMAGES', 10, minimum=1)
