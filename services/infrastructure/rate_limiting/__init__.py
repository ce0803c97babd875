"""
Rate Limiting

In-process sliding window rate limiting for the API routes.
"""

from .rate_limiter import RateLimitDecision, SlidingWindowRateLimiter

__all__ = ["RateLimitDecision", "SlidingWindowRateLimiter"]
