"""
Request Models

Pydantic request models for API endpoints.
"""

from .requests_hot_sheet import GenerateHotSheetRequest
from .requests_media import (
    ProxyImageRequest,
    RemoveBackgroundRequest,
    SuggestImagesRequest,
)

__all__ = [
    'GenerateHotSheetRequest',
    'ProxyImageRequest',
    'RemoveBackgroundRequest',
    'SuggestImagesRequest',
]
