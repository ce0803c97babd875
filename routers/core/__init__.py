"""
Core Infrastructure Routers

Core application infrastructure endpoints (health checks).
"""

from .health import router as health_router

__all__ = [
    "health_router",
]
