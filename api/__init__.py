"""
Pressbox Forum Search Integrations.

This module provides async search functions for Reddit game-thread
discovery. Backends follow a consistent pattern:

    async def fetch(forum: str, query: str = None, since: int = 0, *, settings=None) -> list[RawPost]

Backend ``fetch`` functions raise on upstream failure; ``search`` wraps them
with fallback and never raises.

Available Backends:
─────────────────────────────────────────────────────────────────────────────
    pullpush    PullPush Reddit archive (time-windowed search)
    reddit      Reddit public JSON listings (also serves thread comments)

Configuration:
─────────────────────────────────────────────────────────────────────────────
Set in environment variables or .env file:

    PRESSBOX_SEARCH_BACKENDS   Backend order (default: pullpush,reddit)
    PRESSBOX_PULLPUSH_URL      Archive endpoint or a proxy with the same envelope
    PRESSBOX_REDDIT_URL        Reddit base URL (default: https://old.reddit.com)
    PRESSBOX_USER_AGENT        Descriptive User-Agent sent upstream
    PRESSBOX_API_TIMEOUT       Per-request timeout in seconds
"""

# ══════════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════════

from dotenv import load_dotenv

load_dotenv()

# ══════════════════════════════════════════════════════════════════════════════
# Backends
# ══════════════════════════════════════════════════════════════════════════════

from api.forums import search as search_forum
from api.pullpush import fetch as fetch_pullpush
from api.reddit import fetch as fetch_reddit
from api.reddit import fetch_comments

# ══════════════════════════════════════════════════════════════════════════════
# Public API
# ══════════════════════════════════════════════════════════════════════════════

__all__ = [
    "search_forum",
    "fetch_pullpush",
    "fetch_reddit",
    "fetch_comments",
]
