"""
Sliding Window Rate Limiter (in-process)
========================================

Per-route, per-client request limiting for the API endpoints.

Each route owns a map ``identifier -> [admission timestamps in ms]``. A request
is admitted while fewer than ``limit`` timestamps fall inside the trailing
window; admission records the current time. Expired timestamps are pruned
when their key is touched, and a full sweep drops empty keys once a route map
grows past ``sweep_threshold`` keys. State lives for the lifetime of the
process, so every worker process counts independently.

Usage:
    limiter = SlidingWindowRateLimiter()
    decision = limiter.check('remove-bg', '1.2.3.4', limit=5, window_ms=60000)
    if not decision.allowed:
        ...  # 429 with Retry-After: decision.retry_after_seconds

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""

from dataclasses import dataclass
from typing import Callable, Dict, List
import logging
import math
import threading
import time


logger = logging.getLogger(__name__)

DEFAULT_WINDOW_MS = 60_000
DEFAULT_SWEEP_THRESHOLD = 1000


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of one check-and-record call."""
    allowed: bool
    count: int
    limit: int
    retry_after_seconds: int


class SlidingWindowRateLimiter:
    """
    In-memory sliding window limiter keyed by (route, client identifier).

    Thread-safe: the only critical section is one filter, check and append
    under a single lock, so it is safe for concurrent requests on the event
    loop and for handlers running in the threadpool.
    """

    def __init__(
        self,
        clock: Callable[[], float] = _monotonic_ms,
        sweep_threshold: int = DEFAULT_SWEEP_THRESHOLD
    ):
        """
        Initialize rate limiter.

        Args:
            clock: Millisecond clock (injectable for tests)
            sweep_threshold: Route map size that triggers a full prune
        """
        self._clock = clock
        self._sweep_threshold = sweep_threshold
        self._windows: Dict[str, Dict[str, List[float]]] = {}
        self._lock = threading.Lock()

    def check(
        self,
        route: str,
        identifier: str,
        limit: int,
        window_ms: int = DEFAULT_WINDOW_MS
    ) -> RateLimitDecision:
        """
        Check the limit for (route, identifier) and record the request if admitted.

        Args:
            route: Route name (each route has its own map)
            identifier: Client identifier (IP or the shared 'unknown' bucket)
            limit: Maximum requests admitted per window
            window_ms: Trailing window length in milliseconds

        Returns:
            RateLimitDecision; retry_after_seconds is the window length in seconds
        """
        retry_after = math.ceil(window_ms / 1000)
        with self._lock:
            now = self._clock()
            route_map = self._windows.setdefault(route, {})
            recent = [t for t in route_map.get(identifier, ()) if now - t < window_ms]

            if len(recent) >= limit:
                route_map[identifier] = recent
                return RateLimitDecision(False, len(recent), limit, retry_after)

            recent.append(now)
            route_map[identifier] = recent

            if len(route_map) > self._sweep_threshold:
                self._sweep(route_map, now, window_ms)

            return RateLimitDecision(True, len(recent), limit, retry_after)

    def _sweep(self, route_map: Dict[str, List[float]], now: float, window_ms: int) -> None:
        """Prune expired timestamps and drop keys left empty. Caller holds the lock."""
        before = len(route_map)
        for key in list(route_map):
            live = [t for t in route_map[key] if now - t < window_ms]
            if live:
                route_map[key] = live
            else:
                del route_map[key]
        logger.debug("[RateLimiter] Swept route map: %s -> %s keys", before, len(route_map))

