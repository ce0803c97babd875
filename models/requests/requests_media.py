"""Media Request Models.

Pydantic models for validating image proxy, background removal and image
suggestion API requests.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ProxyImageRequest(BaseModel):
    """Request model for /api/proxy-image endpoint"""
    model_config = ConfigDict(extra='ignore')

    url: StrictStr = Field(..., description="HTTPS image URL to fetch")


class RemoveBackgroundRequest(BaseModel):
    """Request model for /api/remove-bg endpoint"""
    model_config = ConfigDict(extra='ignore')

    image_b64: StrictStr = Field(
        ..., min_length=1,
        description="Base64 image, optionally prefixed with a data:image/...;base64, header"
    )


class SuggestImagesRequest(BaseModel):
    """Request model for /api/suggest-images endpoint"""
    model_config = ConfigDict(extra='ignore')

    # Length is checked after trimming by the service
    query: StrictStr = Field(..., description="Product search query")
