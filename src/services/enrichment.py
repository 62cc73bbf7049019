"""
Best-effort batch enrichment.

A strategy runs one fetch per key and returns results aligned with the keys.
A fetch that fails with a ServiceError yields None for that key only; the other
keys are unaffected. Strategies differ only in how the fetches are scheduled.
"""
import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from core.config import Settings
from services.exceptions import ServiceError

logger = logging.getLogger(__name__)

R = TypeVar("R")

Fetch = Callable[[int], Awaitable[R]]


async def _attempt(fetch: Fetch[R], key: int) -> R | None:
    try:
        return await fetch(key)
    except ServiceError as e:
        logger.warning("Enrichment failed for id %s: %s", key, e.message)
        return None


class EnrichmentStrategy(Protocol):
    """Schedules one fetch per key."""

    async def fetch_all(self, keys: Sequence[int], fetch: Fetch[R]) -> list[R | None]:
        """Return one result per key, None where the fetch failed."""
        ...


class SequentialEnrichment:
    """One fetch at a time, in key order. Matches the platform's historical behavior."""

    async def fetch_all(self, keys: Sequence[int], fetch: Fetch[R]) -> list[R | None]:
        return [await _attempt(fetch, key) for key in keys]


class ConcurrentEnrichment:
    """All fetches in flight at once, capped at ``limit`` concurrent calls."""

    def __init__(self, limit: int = 10) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self._limit = limit

    async def fetch_all(self, keys: Sequence[int], fetch: Fetch[R]) -> list[R | None]:
        semaphore = asyncio.Semaphore(self._limit)

        async def bounded(key: int) -> R | None:
            async with semaphore:
                return await _attempt(fetch, key)

        return list(await asyncio.gather(*(bounded(key) for key in keys)))


class CachedEnrichment:
    """
    Fetch each distinct key once per call, then fan results back out.

    The cache lives for a single ``fetch_all`` call, i.e. one request.
    """

    def __init__(self, inner: EnrichmentStrategy | None = None) -> None:
        self._inner = inner or SequentialEnrichment()

    async def fetch_all(self, keys: Sequence[int], fetch: Fetch[R]) -> list[R | None]:
        unique_keys = list(dict.fromkeys(keys))
        results = await self._inner.fetch_all(unique_keys, fetch)
        by_key = dict(zip(unique_keys, results, strict=True))
        return [by_key[key] for key in keys]


def create_enrichment_strategy(settings: Settings) -> EnrichmentStrategy:
    """Build the strategy selected by ENRICHMENT_STRATEGY."""
    if settings.enrichment_strategy == "concurrent":
        return ConcurrentEnrichment(settings.enrichment_concurrency)
    if settings.enrichment_strategy == "cached":
        return CachedEnrichment()
    return SequentialEnrichment()
