"""
API Router Module
=================

Main API router that combines all sub-routers for the application:
- Hot Sheet generation
- Image proxy
- Background removal
- Image suggestions
"""
import logging

from fastapi import APIRouter

from . import hot_sheet, image_proxy, remove_bg, suggest_images

logger = logging.getLogger(__name__)

# Create main router with prefix and tags
router = APIRouter(prefix="/api", tags=["api"])

# Include all sub-routers
router.include_router(hot_sheet.router)
router.include_router(image_proxy.router)
router.include_router(remove_bg.router)
router.include_router(suggest_images.router)

__all__ = ["router"]
