"""
Response Models
===============

Pydantic models for API response validation and documentation.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response"""
    model_config = ConfigDict(json_schema_extra={"example": {"error": "Invalid URL"}})

    error: str = Field(..., description="Error message")


class RemoveBackgroundResponse(BaseModel):
    """Response model for /api/remove-bg endpoint"""
    result_b64: str = Field(..., description="Cut-out as data:image/png;base64,...")


class ImageSuggestionRecord(BaseModel):
    """One NDJSON line of /api/suggest-images"""
    dataUrl: str = Field(..., description="Thumbnail as a data URI")
    originalUrl: str = Field(..., description="Full-size image link")
    title: str = Field(..., description="Plain-text title")


class HealthResponse(BaseModel):
    """Response model for /health endpoint"""
    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(0.0, description="Seconds since startup")
