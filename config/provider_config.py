"""Third-party provider configuration settings.

This module provides credentials and endpoints for the Anthropic Messages API,
remove.bg and SerpApi. A missing credential disables the matching endpoint
(it answers 501 instead of calling out).
"""
import logging
from typing import Optional, TYPE_CHECKING, Any

logger = logging.getLogger(__name__)


class ProviderConfigMixin:
    """Mixin class for provider configuration properties.

    This mixin expects the class to inherit from BaseConfig or provide
    a _get_cached_value method.
    """

    if TYPE_CHECKING:
        def _get_cached_value(self, _key: str, _default: Any = None) -> Any:
            """Type stub: method provided by BaseConfig."""
            return _default

        def _get_int(self, _key: str, _default: int, minimum: int = 0) -> int:
            """Type stub: method provided by BaseConfig."""
            return _default

    def _get_secret(self, key: str) -> Optional[str]:
        value = self._get_cached_value(key)
        if not value or not isinstance(value, str) or not value.strip():
            return None
        return value.strip()

    @property
    def ANTHROPIC_API_KEY(self):
        """Anthropic API key; None when unset."""
        return self._get_secret('ANTHROPIC_API_KEY')

    @property
    def ANTHROPIC_API_URL(self):
        """Anthropic Messages API URL"""
        return self._get_cached_value('ANTHROPIC_API_URL', 'https://api.anthropic.com/v1/messages')

    @property
    def ANTHROPIC_MODEL(self):
        """Model used for Hot Sheet research"""
        return self._get_cached_value('ANTHROPIC_MODEL', 'claude-sonnet-4-20250514')

    @property
    def ANTHROPIC_MAX_TOKENS(self):
        """Output token budget for one Hot Sheet (default: 2048)"""
        return self._get_int('ANTHROPIC_MAX_TOKENS', 2048, minimum=1)

    @property
    def REMOVEBG_API_KEY(self):
        """remove.bg API key; None when unset."""
        return self._get_secret('REMOVEBG_API_KEY')

    @property
    def REMOVEBG_API_URL(self):
        """remove.bg endpoint"""
        return self._get_cached_value('REMOVEBG_API_URL', 'https://api.remove.bg/v1.0/removebg')

    @property
    def SERPAPI_KEY(self):
        """SerpApi key; None when unset."""
        return self._get_secret('SERPAPI_KEY')

    @property
    def SERPAPI_URL(self):
        """SerpApi search endpoint"""
        return self._get_cached_value('SERPAPI_URL', 'https://serpapi.com/search.json')
