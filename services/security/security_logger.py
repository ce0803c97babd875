"""
Security Event Logger
=====================

Centralized security event logging for audit trails.

Logs security-relevant events with consistent format for monitoring and analysis.
All events are prefixed with [Security] for easy filtering in log aggregators.

Events logged:
- Origin rejections (cross-origin mutating requests)
- Rate limiting (exceeded limits)
- Blocked outbound URLs (SSRF guard)
- Input validation (oversized requests)

Usage:
    from services.security import security_log

    security_log.origin_rejected(origin_host='evil.example', request_host='app.example', path='/api/remove-bg')
    security_log.rate_limit_exceeded(identifier='1.2.3.4', route='remove-bg', count=5, limit=5)

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from typing import Optional
import logging


logger = logging.getLogger(__name__)


class SecurityLogger:
    """
    Centralized security event logger.

    Provides structured logging for security events with consistent format.
    """

    ORIGIN_REJECTED = "ORIGIN_REJECTED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    URL_BLOCKED = "URL_BLOCKED"
    INPUT_VALIDATION_FAILED = "INPUT_VALIDATION_FAILED"

    def _log(self, level: int, event_type: str, message: str, **context):
        """Internal logging method with consistent format."""
        context_str = ", ".join(f"{k}={v}" for k, v in context.items() if v is not None)
        full_message = f"[Security] [{event_type}] {message}"
        if context_str:
            full_message += f" | {context_str}"
        logger.log(level, full_message)

    def origin_rejected(
        self,
        origin_host: Optional[str],
        request_host: Optional[str],
        path: str,
        header: str = "origin"
    ):
        """Log a mutating request whose Origin/Referer host differs from Host."""
        self._log(
            logging.WARNING,
            self.ORIGIN_REJECTED,
            "Cross-origin request blocked",
            header=header,
            origin_host=origin_host,
            request_host=request_host,
            path=path
        )

    def rate_limit_exceeded(
        self,
        identifier: str,
        route: str,
        count: Optional[int] = None,
        limit: Optional[int] = None
    ):
        """Log a request rejected by the sliding-window limiter."""
        self._log(
            logging.WARNING,
            self.RATE_LIMIT_EXCEEDED,
            f"Rate limit exceeded for {route}",
            identifier=identifier,
            count=count,
            limit=limit
        )

    def url_blocked(self, reason: str, url: Optional[str] = None, route: Optional[str] = None):
        """Log a user-supplied URL rejected before any fetch."""
        preview = url[:100] if url else None
        self._log(
            logging.INFO,
            self.URL_BLOCKED,
            f"Outbound URL rejected: {reason}",
            route=route,
            url=preview
        )

    def input_validation_failed(
        self,
        field: str,
        reason: str,
        ip: Optional[str] = None,
        value_size: Optional[int] = None
    ):
        """Log oversized or otherwise rejected input."""
        self._log(
            logging.WARNING,
            self.INPUT_VALIDATION_FAILED,
            f"Input rejected for {field}: {reason}",
            value_size=value_size,
            ip=ip
        )


security_log = SecurityLogger()
