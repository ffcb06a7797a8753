"""
Reddit Public JSON Search.

Read-only access to Reddit's public listing endpoints (no auth). Used as a
fallback search backend and to read a thread's comments. Cannot post, vote,
or access private content.

API: https://www.reddit.com/dev/api
Rate Limits: ~10 requests/minute unauthenticated, needs a descriptive User-Agent
"""

import logging
from typing import Any, Literal, Optional

import httpx
from pydantic import ValidationError

from models.config import Settings
from models.game import RawComment, RawPost

__all__ = ["fetch", "fetch_comments", "parse_listing"]

logger = logging.getLogger(__name__)

CommentSort = Literal["new", "best", "top", "controversial"]

# ══════════════════════════════════════════════════════════════════════════════
# Listing Parsing
# ══════════════════════════════════════════════════════════════════════════════


def _children(listing: Any) -> list[dict[str, Any]]:
    if not isinstance(listing, dict):
        raise ValueError("Unexpected listing: not an object")
    data = listing.get("data")
    children = data.get("children") if isinstance(data, dict) else None
    if not isinstance(children, list):
        raise ValueError("Unexpected listing: missing 'data.children'")
    return [child for child in children if isinstance(child, dict)]


def _child_data(child: dict[str, Any]) -> dict[str, Any]:
    data = child.get("data")
    return data if isinstance(data, dict) else {}


def parse_listing(listing: Any, since: int = 0) -> list[RawPost]:
    """Parse a submission listing into posts created at or after `since`."""
    posts = []
    for child in _children(listing):
        try:
            post = RawPost.model_validate(_child_data(child))
        except ValidationError:
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
    Search a subreddit's recent submissions.

    With a query this uses the subreddit search restricted to the last day;
    without one it reads the newest posts. Reddit has no creation-time
    filter, so posts before `since` are dropped here.

    Raises:
        httpx.HTTPError: on network failure or non-2xx status
        ValueError: on a malformed response body
    """
    settings = settings or Settings.from_env()
    limit = min(settings.search_limit, 100)

    if query:
        path = f"/r/{forum}/search.json"
        params: dict[str, Any] = {
            "q": query,
            "restrict_sr": "on",
            "sort": "new",
            "t": "day",
            "limit": limit,
        }
    else:
        path = f"/r/{forum}/new.json"
        params = {"limit": limit}

    async with httpx.AsyncClient(
        timeout=settings.api_timeout,
        headers=settings.headers,
        follow_redirects=True,
    ) as client:
        response = await client.get(f"{settings.reddit_url}{path}", params=params)
        response.raise_for_status()
        posts = parse_listing(response.json(), since)

    logger.debug(f"reddit: {len(posts)} posts from r/{forum}")
    return posts


# ══════════════════════════════════════════════════════════════════════════════
# Comments
# ══════════════════════════════════════════════════════════════════════════════


async def fetch_comments(
    subreddit: str,
    post_id: str,
    *,
    sort: CommentSort = "new",
    limit: int = 100,
    settings: Optional[Settings] = None,
) -> list[RawComment]:
    """
    Fetch the top-level comments of a thread.

    Returns:
        Comments (kind t1) that still have a body

    Raises:
        httpx.HTTPError: on network failure or non-2xx status
        ValueError: on a malformed response body
    """
    settings = settings or Settings.from_env()

    async with httpx.AsyncClient(
        timeout=settings.api_timeout,
        headers=settings.headers,
        follow_redirects=True,
    ) as client:
        response = await client.get(
            f"{settings.reddit_url}/r/{subreddit}/comments/{post_id}.json",
            params={"sort": sort, "limit": limit},
        )
        response.raise_for_status()
        data = response.json()

    if not isinstance(data, list) or len(data) < 2:
        raise ValueError("Unexpected comments payload: expected [post, comments]")

    comments = []
    for child in _children(data[1]):
        fields = _child_data(child)
        if child.get("kind") != "t1" or not fields.get("body"):
            continue
        try:
            comments.append(RawComment.model_validate(fields))
        except ValidationError:
            continue
    return comments
