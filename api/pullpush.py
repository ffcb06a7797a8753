"""
PullPush Reddit Archive Search.

Time-windowed submission search over the PullPush archive. Any proxy that
answers with the same ``{"data": [...]}`` envelope can stand in for it via
PRESSBOX_PULLPUSH_URL.

API: https://pullpush.io
Rate Limits: Soft limit, roughly 15 requests/minute per client
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from models.config import Settings
from models.game import RawPost

__all__ = ["fetch", "build_params", "parse_posts"]

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════════════════
# Request Building
# ══════════════════════════════════════════════════════════════════════════════


def build_params(
    forum: str, query: Optional[str], since: int, limit: int
) -> dict[str, Any]:
    params: dict[str, Any] = {
        "subreddit": forum,
        # `after` is exclusive upstream
        "after": int(since) - 1,
        "size": min(limit, 100),
        "sort": "desc",
        "sort_type": "created_utc",
    }
    if query:
        params["q"] = query
    return params


def parse_posts(payload: Any, since: int) -> list[RawPost]:
    """
    Parse a ``{"data": [...]}`` envelope into posts created at or after `since`.

    Raises:
        ValueError: if the envelope is not the expected shape
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise ValueError("Unexpected search envelope: missing 'data' list")

    posts = []
    for item in payload["data"]:
        try:
            post = RawPost.model_validate(item)
        except ValidationError as e:
            logger.debug(f"Skipping malformed archive post: {e.error_count()} errors")
            continue
        if post.created_utc >= since:
            posts.append(post)
    return posts


# ══════════════════════════════════════════════════════════════════════════════
# Search Function
# ══════════════════════════════════════════════════════════════════════════════


async def fetch(
    forum: str,
    query: Optional[str] = None,
    since: int = 0,
    *,
    settings: Optional[Settings] = None,
) -> list[RawPost]:
    """
    Search one subreddit's archived submissions.

    Args:
        forum: Subreddit name without the r/ prefix
        query: Free-text query (optional)
        since: Earliest creation time, epoch seconds
        settings: Runtime settings (default: from environment)

    Returns:
        Posts created at or after `since`, newest first

    Raises:
        httpx.HTTPError: on network failure or non-2xx status
        ValueError: on a malformed response body

    Example:
        >>> posts = await fetch("nfl", "game thread", since=1700000000)
    """
    settings = settings or Settings.from_env()
    params = build_params(forum, query, since, settings.search_limit)

    async with httpx.AsyncClient(
        timeout=settings.api_timeout, headers=settings.headers
    ) as client:
        response = await client.get(settings.pullpush_url, params=params)
        response.raise_for_status()
        posts = parse_posts(response.json(), since)

    logger.debug(f"pullpush: {len(posts)} posts from r/{forum}")
    return posts
