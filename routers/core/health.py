"""
Health check endpoint for SKU Studio API.

Reports process liveness and the running version. Provider reachability is
not checked; each call would spend quota.
"""

import time
import logging

from fastapi import APIRouter, Request

from config.settings import config
from models.responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get('/health', response_model=HealthResponse)
async def health_check(request: Request):
    """Basic health check"""
    start_time = getattr(request.app.state, 'start_time', None)
    uptime = time.time() - start_time if start_time else 0.0
    return HealthResponse(status="ok", version=config.version, uptime_seconds=round(uptime, 1))
