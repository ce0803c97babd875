"""
SKU Studio Pydantic Models
==========================

Request and response models for FastAPI type safety and validation.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from .requests import (
    GenerateHotSheetRequest,
    ProxyImageRequest,
    RemoveBackgroundRequest,
    SuggestImagesRequest,
)
from .responses import (
    ErrorResponse,
    HealthResponse,
    ImageSuggestionRecord,
    RemoveBackgroundResponse,
)

__all__ = [
    'GenerateHotSheetRequest',
    'ProxyImageRequest',
    'RemoveBackgroundRequest',
    'SuggestImagesRequest',
    'ErrorResponse',
    'HealthResponse',
    'ImageSuggestionRecord',
    'RemoveBackgroundResponse',
]
