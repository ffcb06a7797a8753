"""Configuration enums and runtime settings for Pressbox."""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class MatchPolicy(str, Enum):
    """How strictly a post must reference a game's teams."""

    REQUIRE_EITHER_TEAM = "either"  # Forum already scoped to one team
    REQUIRE_BOTH_TEAMS = "both"  # League-wide or broad forums


# ══════════════════════════════════════════════════════════════════════════════
# Settings
# ══════════════════════════════════════════════════════════════════════════════

KNOWN_BACKENDS = ("pullpush", "reddit")

DEFAULT_PULLPUSH_URL = "https://api.pullpush.io/reddit/search/submission/"
DEFAULT_REDDIT_URL = "https://old.reddit.com"
DEFAULT_USER_AGENT = "web:pressbox:v1.0.0 (personal game threads viewer)"


def _env_number(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"Ignoring non-positive {name}={raw!r}, using {default}")
        return default
    return value


def _env_backends() -> tuple[str, ...]:
    raw = os.getenv("PRESSBOX_SEARCH_BACKENDS", ",".join(KNOWN_BACKENDS))
    backends = []
    for name in raw.split(","):
        name = name.strip().lower()
        if not name:
            continue
        if name not in KNOWN_BACKENDS:
            logger.warning(f"Unknown search backend '{name}' ignored")
            continue
        if name not in backends:
            backends.append(name)
    return tuple(backends) or KNOWN_BACKENDS


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment."""

    backends: tuple[str, ...] = KNOWN_BACKENDS
    pullpush_url: str = DEFAULT_PULLPUSH_URL
    reddit_url: str = DEFAULT_REDDIT_URL
    user_agent: str = DEFAULT_USER_AGENT
    api_timeout: float = 15.0
    search_limit: int = 100
    cache_ttl_seconds: float = 120.0
    thread_query: str = "game thread"
    timezone: Optional[str] = None

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    @classmethod
    def from_env(cls) -> "Settings":
        user_agent = os.getenv("PRESSBOX_USER_AGENT", "").strip() or DEFAULT_USER_AGENT
        return cls(
            backends=_env_backends(),
            pullpush_url=os.getenv("PRESSBOX_PULLPUSH_URL", "").strip()
            or DEFAULT_PULLPUSH_URL,
            reddit_url=(
                os.getenv("PRESSBOX_REDDIT_URL", "").strip() or DEFAULT_REDDIT_URL
            ).rstrip("/"),
            user_agent=user_agent,
            api_timeout=_env_number("PRESSBOX_API_TIMEOUT", 15.0),
            search_limit=int(_env_number("PRESSBOX_SEARCH_LIMIT", 100)),
            cache_ttl_seconds=_env_number("PRESSBOX_THREAD_CACHE_TTL", 120.0),
            thread_query=os.getenv("PRESSBOX_THREAD_QUERY", "").strip()
            or "game thread",
            timezone=os.getenv("PRESSBOX_TIMEZONE", "").strip() or None,
        )
