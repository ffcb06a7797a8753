"""
Forum search with backend fallback.

Backends are tried in configured order; the first one that answers wins,
even with no posts. A forum whose backends all fail yields an empty list so
one unreachable forum never aborts an aggregation. No retries: the caller's
next refresh is the retry.
"""

import logging
import time
from typing import Awaitable, Callable, Optional, Sequence

import httpx

from api import pullpush, reddit
from core.metrics import get_api_metrics
from core.reliability import get_circuit_breaker
from models.config import Settings
from models.game import RawPost

__all__ = ["search", "get_fetcher"]

logger = logging.getLogger(__name__)

Fetcher = Callable[..., Awaitable[list[RawPost]]]


def get_fetcher(backend: str) -> Fetcher:
    """Look up a backend's fetch function by name."""
    fetchers = {
        "pullpush": pullpush.fetch,
        "reddit": reddit.fetch,
    }
    return fetchers[backend]


async def search(
    forum: str,
    query: Optional[str] = None,
    since: int = 0,
    *,
    settings: Optional[Settings] = None,
    backends: Optional[Sequence[str]] = None,
) -> list[RawPost]:
    """
    Search one forum for posts created at or after `since`.

    Args:
        forum: Subreddit name without the r/ prefix
        query: Free-text query (optional)
        since: Earliest creation time, epoch seconds
        settings: Runtime settings (default: from environment)
        backends: Backend names in preference order (default: settings.backends)

    Returns:
        Posts from the first backend that answered, or [] if none did
    """
    settings = settings or Settings.from_env()
    metrics = get_api_metrics()

    for backend in backends or settings.backends:
        breaker = get_circuit_breaker(backend)
        if not breaker.allow_request():
            metrics.record_skip(backend)
            logger.debug(f"Skipping {backend} for r/{forum}: circuit open")
            continue

        started = time.perf_counter()
        try:
            posts = await get_fetcher(backend)(
                forum, query, since, settings=settings
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            breaker.record_failure()
            metrics.record_failure(backend, type(e).__name__)
            logger.warning(f"{backend} search failed for r/{forum}: {e}")
            continue

        breaker.record_success()
        metrics.record_success(backend, (time.perf_counter() - started) * 1000)
        return posts

    logger.warning(f"No search backend answered for r/{forum}")
    return []
