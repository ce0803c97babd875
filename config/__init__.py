"""
Configuration Package

This package contains application configuration:
- Settings: server, logging, provider credentials and rate limits
  (Config class and config instance)

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from .settings import Config, config

__all__ = [
    'Config',
    'config',
]
