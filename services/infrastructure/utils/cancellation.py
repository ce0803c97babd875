"""
Cancellation Tokens
===================

Deadline plus explicit cancel flag, threaded through every suspension point
of an outbound call (request send, each stream read).

Usage:
    token = CancellationToken(timeout=8.0)
    image = await token.run(fetch_image(client, url, max_bytes, token))

``run`` bounds the awaitable with the remaining time. When the deadline
passes, the inner task is cancelled, which closes any open upstream stream,
and ``DeadlineExceededError`` is raised. Code that loops over a stream calls
``raise_if_cancelled`` between chunks.
"""
from typing import Awaitable, Callable, Optional, TypeVar
import asyncio
import inspect
import time

T = TypeVar('T')


class DeadlineExceededError(Exception):
    """Raised when a token's deadline has passed."""


class OperationCancelledError(Exception):
    """Raised when a token was cancelled explicitly."""


class CancellationToken:
    """Cooperative cancellation for one outbound operation."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        parent: Optional['CancellationToken'] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._clock = clock
        self._parent = parent
        self._cancelled = False
        deadline = None if timeout is None else clock() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

    def child(self, timeout: Optional[float] = None) -> 'CancellationToken':
        """Token that expires no later than this one and observes its cancel flag."""
        return CancellationToken(timeout=timeout, parent=self, clock=self._clock)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def expired(self) -> bool:
        return self.deadline is not None and self._clock() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when unbounded."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._clock())

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelledError("Operation cancelled")
        if self.expired:
            raise DeadlineExceededError("Deadline exceeded")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` within the remaining time."""
        try:
            self.raise_if_cancelled()
        except (OperationCancelledError, DeadlineExceededError):
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise
        try:
            return await asyncio.wait_for(awaitable, timeout=self.remaining())
        except asyncio.TimeoutError as exc:
            raise DeadlineExceededError("Deadline exceeded") from exc
