"""Hot Sheet Request Models.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from pydantic import BaseModel, ConfigDict, Field, StrictStr


class GenerateHotSheetRequest(BaseModel):
    """Request model for /api/generate-hotsheet endpoint"""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    brand_name: StrictStr = Field(..., alias='brandName', description="Brand to research")
    retailer: StrictStr = Field(..., description="Retailer context, may be empty")
