"""
Image Suggestion API Router
===========================

Streams validated product thumbnails as newline-delimited JSON.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from clients.serpapi import SerpApiClient
from config.settings import config
from models.requests import SuggestImagesRequest
from models.responses import ErrorResponse
from services.media.image_suggestion_service import ImageSuggestionService, normalize_query

from .helpers import get_http_client, json_body, rate_limit, require_api_key

logger = logging.getLogger(__name__)

router = APIRouter(tags=["api"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


@router.post(
    '/suggest-images',
    dependencies=[Depends(rate_limit('suggest-images', lambda: config.RATE_LIMIT_SUGGEST_IMAGES))],
    response_class=StreamingResponse,
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}, "description": "One ImageSuggestionRecord per line"},
        400: {"model": ErrorResponse},
        501: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    }
)
async def suggest_images(
    request: Request,
    api_key: str = Depends(require_api_key(lambda: config.SERPAPI_KEY, "Image search not configured")),
    body: SuggestImagesRequest = Depends(json_body(SuggestImagesRequest, "Invalid request"))
):
    """
    Search for product images and stream thumbnails as they validate.

    The search runs before the stream starts, so search failures still
    produce an error status. Thumbnail failures are skipped silently.
    """
    query = normalize_query(body.query)
    service = ImageSuggestionService(
        SerpApiClient(await get_http_client(request, 'serpapi'), api_key=api_key, api_url=config.SERPAPI_URL),
        await get_http_client(request, 'images')
    )
    candidates = await service.search(query)
    logger.debug("[SuggestImages] Streaming up to %s of %s candidates", service.target_results, len(candidates))

    return StreamingResponse(
        service.stream_suggestions(candidates),
        media_type=NDJSON_MEDIA_TYPE,
        headers={'Cache-Control': 'no-store'}
    )
