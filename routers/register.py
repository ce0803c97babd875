"""
Router Registration Module

Centralized router registration for all FastAPI routes.
"""
import logging

from fastapi import FastAPI

from routers import api
from routers.core import health_router

logger = logging.getLogger(__name__)


def register_routers(app: FastAPI) -> None:
    """
    Register all FastAPI routers.

    1. Health check endpoints (no prefix)
    2. API routes (/api prefix)

    Args:
        app: FastAPI application instance
    """
    app.include_router(health_router)
    app.include_router(api.router)
    logger.debug("[RouterRegistration] Registered %s routes", len(app.routes))
