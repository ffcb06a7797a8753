#!/usr/bin/env python3
"""
Pressbox MCP Server

An MCP server that finds the Reddit game threads for an NFL or NBA game:
the league-wide thread from r/nfl or r/nba plus each team's own community
thread, ranked and with reposts removed.

Features:
- Parallel search across the league forum and both team forums
- Game-thread detection from titles and moderator flair
- Strict two-team matching on league forums, one-team matching on team forums
- Per-game result cache with a short TTL
- Graceful degradation when search backends are down
"""

import json
import logging
from functools import partial
from typing import Literal

import httpx
from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from api import fetch_comments, search_forum
from core import ThreadAggregator, format_metrics_report
from models import (
    DEFAULT_DIRECTORY,
    FindThreadsInput,
    Game,
    GameThread,
    MalformedGameError,
    ResponseFormat,
    Settings,
)
from utils import ThreadCache, format_relative_time

# Set up logging
logging.getLogger().setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

settings = Settings.from_env()

aggregator = ThreadAggregator(
    directory=DEFAULT_DIRECTORY,
    search=partial(search_forum, settings=settings),
    query=settings.thread_query,
    tz=settings.timezone,
)

thread_cache: ThreadCache[list[GameThread]] = ThreadCache()

mcp = FastMCP("pressbox_mcp")


# ============================================================================
# Formatting
# ============================================================================


def format_threads_markdown(game: Game, threads: list[GameThread]) -> str:
    """Render a ranked thread list for chat display."""
    header = (
        f"# {game.away_team.name} @ {game.home_team.name}\n\n"
        f"Discussions ({len(threads)})"
    )
    if not threads:
        return (
            f"{header}\n\nNo threads yet. "
            "Threads usually appear 1-2 hours before game time."
        )

    lines = [header, ""]
    for thread in threads:
        badges = [thread.thread_type.label]
        if thread.is_main_thread:
            badges.append("Main")
        if thread.is_hot:
            badges.append("Hot")
        elif thread.is_trending:
            badges.append("Trending")

        post = thread.post
        lines.append(f"## [{' | '.join(badges)}] {post.title}")
        lines.append(
            f"- r/{thread.subreddit} · u/{post.author or '[deleted]'} · "
            f"{format_relative_time(post.created_utc)}"
        )
        lines.append(f"- {post.num_comments} comments · {post.score} points")
        lines.append(f"- {thread.url}")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_threads_json(game: Game, threads: list[GameThread]) -> str:
    return json.dumps(
        {
            "game_id": game.id,
            "sport": game.sport.value,
            "count": len(threads),
            "threads": [t.summary() for t in threads],
        },
        indent=2,
    )


# ============================================================================
# Tools
# ============================================================================


@mcp.tool(
    name="find_game_threads",
    annotations={
        "title": "Find Reddit Game Threads",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def find_game_threads(params: FindThreadsInput) -> str:
    """
    Find the Reddit discussion threads for one NFL or NBA game.

    Searches the league subreddit (r/nfl, r/nba) and both teams' subreddits
    for today's game threads, keeps the ones about this game, and lists
    league threads first, then by comment count.

    Args:
        params (FindThreadsInput): Game identity and team names, plus
            force_refresh and response_format

    Returns:
        str: Markdown list of threads, or JSON with a "threads" array.
            An empty list is normal before a thread has been posted.

    Examples:
        - Patriots host the Jets: sport="nfl", home_name="New England Patriots",
          home_abbreviation="NE", away_name="New York Jets", away_abbreviation="NYJ"
    """
    try:
        game = params.to_game()
    except ValidationError as e:
        return json.dumps({"error": f"Invalid game: {e.errors()[0]['msg']}"}, indent=2)

    try:
        threads = await thread_cache.get_or_compute(
            game.id,
            settings.cache_ttl_seconds,
            lambda: aggregator.find_threads(game),
            force_refresh=params.force_refresh,
        )
    except MalformedGameError as e:
        return json.dumps({"error": str(e)}, indent=2)

    if params.response_format == ResponseFormat.JSON:
        return format_threads_json(game, threads)
    return format_threads_markdown(game, threads)


@mcp.tool(
    name="fetch_thread_comments",
    annotations={
        "title": "Fetch Game Thread Comments",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
async def fetch_thread_comments(
    subreddit: str,
    post_id: str,
    sort: Literal["new", "best", "top", "controversial"] = "new",
    limit: int = 50,
) -> str:
    """
    Fetch the latest top-level comments of a game thread.

    Args:
        subreddit (str): Subreddit of the thread (e.g., "nfl")
        post_id (str): Post id from find_game_threads (e.g., "1abc23")
        sort (str): 'new' (default, best for live games), 'best', 'top', 'controversial'
        limit (int): Number of comments to request (1-100)

    Returns:
        str: JSON with a "comments" array (author, body, score, age)
    """
    limit = max(1, min(limit, 100))
    try:
        comments = await fetch_comments(
            subreddit, post_id, sort=sort, limit=limit, settings=settings
        )
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.warning(f"Comment fetch failed for {post_id} in r/{subreddit}: {e}")
        return json.dumps({"error": f"Failed to fetch comments: {e}"}, indent=2)

    return json.dumps(
        {
            "subreddit": subreddit,
            "post_id": post_id,
            "count": len(comments),
            "comments": [
                {
                    "id": c.id,
                    "author": c.author,
                    "body": c.body,
                    "score": c.score,
                    "age": format_relative_time(c.created_utc),
                    "flair": c.author_flair_text,
                    "stickied": c.stickied,
                }
                for c in comments
            ],
        },
        indent=2,
    )


@mcp.tool(
    name="get_performance_metrics",
    annotations={
        "title": "Get Search Performance Metrics",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def get_performance_metrics() -> str:
    """
    Get search backend health and cache efficiency.

    Returns:
        str: Markdown report with aggregation latency, backend success
            rate, circuit-breaker skips and cache hit rate
    """
    return format_metrics_report()


@mcp.tool(
    name="clear_cache",
    annotations={
        "title": "Clear Thread Cache",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": False,
        "openWorldHint": False,
    },
)
async def clear_cache() -> str:
    """
    Clear cached thread lists, forcing fresh searches for every game.

    Returns:
        str: Status message
    """
    removed = thread_cache.clear()
    if removed:
        return f"✓ Cleared {removed} cached game(s)."
    return "ℹ️ Cache was already empty."


def validate_environment():
    """Log the active configuration on startup."""
    logger.warning(
        f"Pressbox starting: backends={','.join(settings.backends)} "
        f"cache_ttl={settings.cache_ttl_seconds:.0f}s "
        f"timezone={settings.timezone or 'local'}"
    )


# ============================================================================
# Main Entry Point
# ============================================================================


def main():
    validate_environment()
    mcp.run()


if __name__ == "__main__":
    main()
