"""Services package for SKU Studio API.

This package contains the service modules behind the API routes:
- Hot Sheet generation (hot_sheet)
- Image proxy, background removal and image suggestions (media)
- Infrastructure services (HTTP errors and middleware, rate limiting, logging)
- Security event logging

Import directly from subpackages:
    from services.media.image_proxy_service import ImageProxyService
    from services.hot_sheet import HotSheetService
"""

__all__ = []
