"""SKU Studio Configuration Module.

This module provides centralized configuration management for the SKU Studio
API. It handles environment variable loading, validation, and provides a clean
interface for accessing configuration values throughout the application.

Features:
- Environment variable loading with .env support
- Property-based configuration access with a short-lived cache
- Default values for all configuration options

Environment Variables:
- ANTHROPIC_API_KEY: Enables /api/generate-hotsheet
- REMOVEBG_API_KEY: Enables /api/remove-bg
- SERPAPI_KEY: Enables /api/suggest-images

Usage:
    from config.settings import config
    api_key = config.REMOVEBG_API_KEY

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import logging

from dotenv import load_dotenv

from config.base_config import BaseConfig
from config.provider_config import ProviderConfigMixin
from config.rate_limiting import RateLimitingConfigMixin

logger = logging.getLogger(__name__)

load_dotenv()  # Load environment variables from .env file


class Config(
    BaseConfig,
    ProviderConfigMixin,
    RateLimitingConfigMixin,
):
    """
    Centralized configuration management for SKU Studio.

    Combines all configuration mixins to provide a unified interface
    for accessing configuration values throughout the application.
    """


# Create global configuration instance
config = Config()
