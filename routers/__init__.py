"""
SKU Studio FastAPI Routers
==========================

This package contains all FastAPI route modules organized by functionality.

Routers:
- api/: Proxy and ingestion endpoints under /api
- core/: Health check

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from . import api
from . import core

__all__ = ["api", "core"]
