"""
Background Removal API Router
=============================

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import logging

from fastapi import APIRouter, Depends, Request

from clients.remove_bg import RemoveBgClient
from config.settings import config
from models.requests import RemoveBackgroundRequest
from models.responses import ErrorResponse, RemoveBackgroundResponse
from services.media.background_removal_service import BackgroundRemovalService

from .helpers import get_client_identifier, get_http_client, json_body, rate_limit, require_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])


@router.post(
    '/remove-bg',
    response_model=RemoveBackgroundResponse,
    dependencies=[Depends(rate_limit('remove-bg', lambda: config.RATE_LIMIT_REMOVE_BG))],
    responses={
        400: {"model": ErrorResponse},
        402: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        501: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)
async def remove_background(
    request: Request,
    api_key: str = Depends(require_api_key(
        lambda: config.REMOVEBG_API_KEY, "Background removal not configured"
    )),
    body: RemoveBackgroundRequest = Depends(json_body(RemoveBackgroundRequest, "Missing image_b64"))
):
    """Remove the background of a product photo via remove.bg."""
    client = RemoveBgClient(
        await get_http_client(request, 'removebg'),
        api_key=api_key,
        api_url=config.REMOVEBG_API_URL
    )
    service = BackgroundRemovalService(client)
    result = await service.remove_background(body.image_b64, client_ip=get_client_identifier(request))
    return RemoveBackgroundResponse(result_b64=result)
