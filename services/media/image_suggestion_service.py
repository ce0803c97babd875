"""
Image Suggestion Service
========================

Searches for product images and streams validated thumbnails back as
newline-delimited JSON records.

One search call builds a candidate pool (over-fetched, because individual
thumbnail fetches fail). A fixed pool of workers then drains a shared queue of
candidates; each validated thumbnail is emitted as soon as it is ready, until
the target count is reached or the queue is empty.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from dataclasses import dataclass
from typing import AsyncIterator, Dict, List, Optional
import asyncio
import html
import json
import logging
import re

import httpx

from clients.exceptions import ProviderError, ProviderTimeoutError
from clients.serpapi import ImageSearchResult, SerpApiClient
from services.infrastructure.http.errors import BadGatewayError, BadRequestError, GatewayTimeoutError
from services.infrastructure.utils.cancellation import (
    CancellationToken,
    DeadlineExceededError,
    OperationCancelledError,
)
from services.media.exceptions import ImageFetchError
from services.media.image_fetcher import fetch_image
from services.media.url_validator import validate_proxy_url

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
MAX_QUERY_LENGTH = 200
SEARCH_TIMEOUT_SECONDS = 10.0
THUMBNAIL_TIMEOUT_SECONDS = 3.0
MAX_THUMBNAIL_BYTES = 150_000
CANDIDATE_POOL_SIZE = 20
TARGET_RESULTS = 15
WORKER_COUNT = 3

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")

_DONE = object()


@dataclass(frozen=True)
class ImageCandidate:
    thumbnail: str
    original_url: str
    title: str


@dataclass(frozen=True)
class ImageSuggestion:
    """One emitted record."""
    data_url: str
    original_url: str
    title: str

    def to_record(self) -> Dict[str, str]:
        return {
            "dataUrl": self.data_url,
            "originalUrl": self.original_url,
            "title": self.title,
        }

    def to_ndjson(self) -> bytes:
        return (json.dumps(self.to_record(), ensure_ascii=False) + "\n").encode("utf-8")


def normalize_query(raw_query: str) -> str:
    """Trim and length-check a search query."""
    query = raw_query.strip()
    if len(query) < MIN_QUERY_LENGTH or len(query) > MAX_QUERY_LENGTH:
        raise BadRequestError("Query too short or too long")
    return query


def sanitize_title(raw_title: Optional[str]) -> str:
    """Plain-text title: entities decoded, tags removed, whitespace collapsed."""
    if not raw_title:
        return ""
    text = _TAG_PATTERN.sub("", raw_title)
    text = _TAG_PATTERN.sub("", html.unescape(text))
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def build_candidates(results: List[ImageSearchResult], pool_size: int = CANDIDATE_POOL_SIZE) -> List[ImageCandidate]:
    """First ``pool_size`` results that carry a thumbnail, in provider order."""
    candidates = []
    for result in results:
        if not result.thumbnail:
            continue
        candidates.append(ImageCandidate(
            thumbnail=result.thumbnail,
            original_url=result.original or result.thumbnail,
            title=sanitize_title(result.title),
        ))
        if len(candidates) >= pool_size:
            break
    return candidates


class ImageSuggestionService:
    """Search plus bounded concurrent thumbnail fan-out."""

    def __init__(
        self,
        search_client: SerpApiClient,
        image_client: httpx.AsyncClient,
        worker_count: int = WORKER_COUNT,
        target_results: int = TARGET_RESULTS,
        search_timeout: float = SEARCH_TIMEOUT_SECONDS,
        thumbnail_timeout: float = THUMBNAIL_TIMEOUT_SECONDS,
        max_thumbnail_bytes: int = MAX_THUMBNAIL_BYTES
    ):
        self.search_client = search_client
        self.image_client = image_client
        self.worker_count = worker_count
        self.target_results = target_results
        self.search_timeout = search_timeout
        self.thumbnail_timeout = thumbnail_timeout
        self.max_thumbnail_bytes = max_thumbnail_bytes

    async def search(self, query: str) -> List[ImageCandidate]:
        """
        Run the search and build the candidate pool.

        Raises:
            GatewayTimeoutError: Search deadline passed
            BadGatewayError: Search failed for any other reason
        """
        token = CancellationToken(timeout=self.search_timeout)
        try:
            results = await token.run(self.search_client.search_images(query, token=token))
        except (ProviderTimeoutError, DeadlineExceededError, OperationCancelledError) as exc:
            logger.warning("[ImageSuggestion] Search timed out")
            raise GatewayTimeoutError("Search timed out") from exc
        except ProviderError as exc:
            logger.warning("[ImageSuggestion] Search failed: %s", exc)
            raise BadGatewayError("Search failed") from exc

        candidates = build_candidates(results)
        logger.debug("[ImageSuggestion] %s results, %s candidates", len(results), len(candidates))
        return candidates

    async def fetch_thumbnail(
        self,
        candidate: ImageCandidate,
        parent: Optional[CancellationToken] = None
    ) -> Optional[ImageSuggestion]:
        """
        Validated thumbnail for ``candidate``, or None when it fails any check.

        ``parent`` is the stream's token; cancelling it abandons the fetch at
        its next chunk.
        """
        try:
            target = validate_proxy_url(candidate.thumbnail)
            if parent is not None:
                token = parent.child(timeout=self.thumbnail_timeout)
            else:
                token = CancellationToken(timeout=self.thumbnail_timeout)
            image = await token.run(fetch_image(self.image_client, target, self.max_thumbnail_bytes, token))
        except (ImageFetchError, DeadlineExceededError, OperationCancelledError,
                httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("[ImageSuggestion] Skipped thumbnail %s: %s", candidate.thumbnail[:100], exc)
            return None
        return ImageSuggestion(
            data_url=image.to_data_url(),
            original_url=candidate.original_url,
            title=candidate.title,
        )

    async def stream_suggestions(self, candidates: List[ImageCandidate]) -> AsyncIterator[bytes]:
        """
        Yield NDJSON lines as workers validate thumbnails.

        Never yields more than ``target_results`` records. Reaching the target
        or closing the generator (client disconnect) cancels the stream token
        and the workers, so in-flight fetches are abandoned.
        """
        pending: asyncio.Queue = asyncio.Queue()
        for candidate in candidates:
            pending.put_nowait(candidate)
        ready: asyncio.Queue = asyncio.Queue()
        stream_token = CancellationToken()
        emitted = 0

        async def worker(worker_id: int) -> None:
            nonlocal emitted
            while emitted < self.target_results and not stream_token.cancelled:
                try:
                    candidate = pending.get_nowait()
                except asyncio.QueueEmpty:
                    return
                suggestion = await self.fetch_thumbnail(candidate, stream_token)
                if suggestion is None or emitted >= self.target_results:
                    continue
                emitted += 1
                await ready.put(suggestion)
            logger.debug("[ImageSuggestion] Worker %s stopped at target", worker_id)

        async def watcher(tasks: List[asyncio.Task]) -> None:
            try:
                outcomes = await asyncio.gather(*tasks, return_exceptions=True)
                for outcome in outcomes:
                    if isinstance(outcome, Exception):
                        logger.error("[ImageSuggestion] Worker failed: %s", outcome, exc_info=outcome)
            finally:
                ready.put_nowait(_DONE)

        workers = [asyncio.create_task(worker(i)) for i in range(min(self.worker_count, len(candidates)))]
        done_task = asyncio.create_task(watcher(workers))
        yielded = 0
        try:
            while yielded < self.target_results:
                item = await ready.get()
                if item is _DONE:
                    break
                yielded += 1
                yield item.to_ndjson()
        finally:
            stream_token.cancel()
            for task in workers + [done_task]:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*workers, done_task, return_exceptions=True)
            logger.debug("[ImageSuggestion] Stream closed after %s records", yielded)
