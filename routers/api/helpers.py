"""
Shared dependencies for the API routers.

Every endpoint runs the same gate sequence before its handler body:
rate limit -> credential check -> JSON body validation. FastAPI resolves
route-level ``dependencies`` before parameter dependencies, and parameter
dependencies in declaration order, which gives exactly that sequence.
"""
from typing import Callable, Optional, Type, TypeVar
import logging

import httpx
from fastapi import Request
from pydantic import BaseModel, ValidationError

from config.settings import config
from services.infrastructure.http.errors import BadRequestError, NotConfiguredError, TooManyRequestsError
from services.security import security_log

logger = logging.getLogger(__name__)

ModelT = TypeVar('ModelT', bound=BaseModel)

UNKNOWN_CLIENT = 'unknown'


def get_client_identifier(request: Request) -> str:
    """
    Get identifier for rate limiting.

    First X-Forwarded-For entry, else CF-Connecting-IP, else the shared
    'unknown' bucket.
    """
    forwarded = request.headers.get('x-forwarded-for')
    if forwarded:
        first = forwarded.split(',')[0].strip()
        if first:
            return first
    cf_ip = request.headers.get('cf-connecting-ip')
    if cf_ip:
        return cf_ip
    return UNKNOWN_CLIENT


def rate_limit(route: str, limit_getter: Callable[[], int]):
    """
    Build a dependency enforcing the sliding-window limit for ``route``.

    Args:
        route: Route name; each route counts separately
        limit_getter: Returns the current per-window limit from config

    Raises:
        TooManyRequestsError: With Retry-After set to the window length
    """
    async def check_rate_limit(request: Request) -> None:
        identifier = get_client_identifier(request)
        limit = limit_getter()
        decision = request.app.state.rate_limiter.check(
            route, identifier, limit, config.RATE_LIMIT_WINDOW_MS
        )
        if not decision.allowed:
            security_log.rate_limit_exceeded(identifier, route, count=decision.count, limit=limit)
            raise TooManyRequestsError("Too many requests", retry_after=decision.retry_after_seconds)

    return check_rate_limit


def require_api_key(key_getter: Callable[[], Optional[str]], message: str):
    """
    Build a dependency returning a provider credential, or 501 when unset.
    """
    async def get_api_key() -> str:
        api_key = key_getter()
        if not api_key:
            raise NotConfiguredError(message)
        return api_key

    return get_api_key


def json_body(
    model: Type[ModelT],
    error_message: str,
    invalid_json_message: Optional[str] = None
):
    """
    Build a dependency parsing the request body into ``model``.

    Malformed JSON raises ``invalid_json_message`` (falling back to
    ``error_message``); a non-object body or a schema mismatch raises
    ``error_message``. Both are 400.
    """
    async def parse_body(request: Request) -> ModelT:
        try:
            payload = await request.json()
        except ValueError as exc:
            logger.debug("Malformed JSON body on %s", request.url.path)
            raise BadRequestError(invalid_json_message or error_message) from exc

        if not isinstance(payload, dict):
            raise BadRequestError(error_message)
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            logger.debug("Body validation failed on %s: %s", request.url.path, exc.errors()[:3])
            raise BadRequestError(error_message) from exc

    return parse_body


async def get_http_client(request: Request, name: str) -> httpx.AsyncClient:
    """Shared outbound client ``name`` from the application's client manager."""
    return await request.app.state.http_clients.get_client(name)
