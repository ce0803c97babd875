"""
External API Clients Package

This package contains clients for external services:
- Anthropic: Messages API for Hot Sheet research
- remove.bg: Background removal
- SerpApi: Google Images search

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from .anthropic import AnthropicClient, MessageResponse
from .exceptions import ProviderDecodeError, ProviderError, ProviderStatusError, ProviderTimeoutError
from .http_client_manager import HTTPXClientManager
from .remove_bg import RemoveBgClient
from .serpapi import ImageSearchResult, SerpApiClient

__all__ = [
    'AnthropicClient',
    'MessageResponse',
    'RemoveBgClient',
    'SerpApiClient',
    'ImageSearchResult',
    'HTTPXClientManager',
    'ProviderError',
    'ProviderTimeoutError',
    'ProviderStatusError',
    'ProviderDecodeError',
]
