"""
Image Proxy API Router
======================

API endpoint to fetch external images server-side so the browser can draw
them onto a canvas without tainting it.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from config.settings import config
from models.requests import ProxyImageRequest
from models.responses import ErrorResponse
from services.media.image_proxy_service import ImageProxyService

from .helpers import get_http_client, json_body, rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])


@router.post(
    '/proxy-image',
    dependencies=[Depends(rate_limit('proxy-image', lambda: config.RATE_LIMIT_PROXY_IMAGE))],
    response_class=Response,
    responses={
        200: {"content": {"image/*": {}}, "description": "Raw image bytes"},
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)
async def proxy_image(
    request: Request,
    body: ProxyImageRequest = Depends(json_body(ProxyImageRequest, "Missing url"))
):
    """
    Proxy an external image.

    Security:
    - HTTPS only; literal IPs, localhost and internal hostnames are rejected
    - Redirects are not followed
    - Only jpeg/png/gif/webp content types
    - Response size limited to 2MB
    """
    service = ImageProxyService(await get_http_client(request, 'images'))
    image = await service.proxy(body.url)

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            'Cache-Control': 'public, max-age=3600',
            'X-Content-Type-Options': 'nosniff'
        }
    )
