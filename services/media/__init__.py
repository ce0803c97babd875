"""
Media Services
==============

Outbound image handling: URL validation, bounded downloads, the image proxy,
background removal and image suggestions.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from .background_removal_service import BackgroundRemovalService
from .image_proxy_service import ImageProxyService
from .image_suggestion_service import ImageSuggestionService
from .url_validator import ValidatedUrl, validate_proxy_url

__all__ = [
    'BackgroundRemovalService',
    'ImageProxyService',
    'ImageSuggestionService',
    'ValidatedUrl',
    'validate_proxy_url',
]
