"""
Hot Sheet API Router
====================

AI-assisted brand research for the Hot Sheet view.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from clients.anthropic import AnthropicClient
from config.settings import config
from models.requests import GenerateHotSheetRequest
from models.responses import ErrorResponse
from services.hot_sheet import HotSheetService

from .helpers import get_http_client, json_body, rate_limit, require_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])


@router.post(
    '/generate-hotsheet',
    dependencies=[Depends(rate_limit('generate-hotsheet', lambda: config.RATE_LIMIT_GENERATE_HOTSHEET))],
    responses={
        400: {"model": ErrorResponse},
        501: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)
async def generate_hot_sheet(
    request: Request,
    api_key: str = Depends(require_api_key(
        lambda: config.ANTHROPIC_API_KEY, "AI generation not configured. Set ANTHROPIC_API_KEY."
    )),
    body: GenerateHotSheetRequest = Depends(json_body(
        GenerateHotSheetRequest, "Invalid request", invalid_json_message="Invalid JSON"
    ))
):
    """
    Draft a Hot Sheet for a brand.

    The model's JSON is returned as-is; the client treats it as an editable draft.
    """
    client = AnthropicClient(
        await get_http_client(request, 'anthropic'),
        api_key=api_key,
        api_url=config.ANTHROPIC_API_URL,
        model=config.ANTHROPIC_MODEL,
        max_tokens=config.ANTHROPIC_MAX_TOKENS
    )
    hot_sheet = await HotSheetService(client).generate(body.brand_name, body.retailer)
    return JSONResponse(content=hot_sheet)
