"""Game, post and thread models for Pressbox."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

__all__ = [
    "Sport",
    "Team",
    "Game",
    "RawPost",
    "RawComment",
    "ThreadType",
    "GameThread",
    "MalformedGameError",
]

REDDIT_BASE_URL = "https://reddit.com"

TRENDING_COMMENTS = 500
HOT_COMMENTS = 2000


class MalformedGameError(ValueError):
    """A game record is missing the team data needed to match against it."""


# ══════════════════════════════════════════════════════════════════════════════
# Games
# ══════════════════════════════════════════════════════════════════════════════


class Sport(str, Enum):
    """Sports with game-thread coverage."""

    AMERICAN_FOOTBALL = "american_football"
    BASKETBALL = "basketball"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Sport"]:
        aliases = {"nfl": cls.AMERICAN_FOOTBALL, "nba": cls.BASKETBALL}
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class Team(BaseModel):
    """One side of a game."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str
    name: str
    abbreviation: str


class Game(BaseModel):
    """A single contest, as produced by the scoreboard adapter."""

    model_config = ConfigDict(frozen=True)

    id: str
    sport: Sport
    home_team: Team
    away_team: Team

    @field_validator("sport", mode="before")
    @classmethod
    def parse_sport(cls, v: Any) -> Any:
        return Sport(v) if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_distinct_teams(self) -> "Game":
        if self.home_team.id == self.away_team.id:
            raise ValueError(
                f"Game {self.id} has the same team on both sides ({self.home_team.id})"
            )
        return self


# ══════════════════════════════════════════════════════════════════════════════
# Forum Posts
# ══════════════════════════════════════════════════════════════════════════════


class RawPost(BaseModel):
    """A submission as returned by a forum search backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str = ""
    selftext: str = ""
    author: str = ""
    subreddit: str = ""
    permalink: str = ""
    created_utc: int = 0
    score: int = 0
    num_comments: int = 0
    link_flair_text: Optional[str] = None
    stickied: bool = False

    @field_validator("title", "selftext", "author", "subreddit", "permalink", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("created_utc", "score", "num_comments", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Any:
        # Archives serialize created_utc as a float
        if v is None:
            return 0
        if isinstance(v, float):
            return int(v)
        return v


class RawComment(BaseModel):
    """A top-level or nested comment on a thread."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    author: str = ""
    body: str = ""
    created_utc: int = 0
    score: int = 0
    author_flair_text: Optional[str] = None
    stickied: bool = False
    depth: int = 0

    @field_validator("created_utc", "score", "depth", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> Any:
        if v is None:
            return 0
        if isinstance(v, float):
            return int(v)
        return v


# ══════════════════════════════════════════════════════════════════════════════
# Game Threads
# ══════════════════════════════════════════════════════════════════════════════


class ThreadType(str, Enum):
    """Display category of a thread, derived from its title."""

    POST_GAME = "post_game"
    LIVE = "live"
    DAILY = "daily"
    DISCUSSION = "discussion"

    @classmethod
    def from_title(cls, title: str) -> "ThreadType":
        lower = title.lower()
        if "post game" in lower or "postgame" in lower:
            return cls.POST_GAME
        if "game thread" in lower or "gamethread" in lower:
            return cls.LIVE
        if "daily discussion" in lower or "index" in lower:
            return cls.DAILY
        return cls.DISCUSSION

    @property
    def label(self) -> str:
        return {
            ThreadType.POST_GAME: "Post Game",
            ThreadType.LIVE: "Live",
            ThreadType.DAILY: "Daily",
            ThreadType.DISCUSSION: "Discussion",
        }[self]


class GameThread(BaseModel):
    """A post accepted as discussion for a specific game."""

    model_config = ConfigDict(frozen=True)

    post: RawPost
    subreddit: str
    is_main_thread: bool = Field(
        default=False,
        description="True when sourced from the sport's league-wide forum",
    )

    @property
    def url(self) -> str:
        permalink = self.post.permalink
        if not permalink.startswith("/"):
            permalink = f"/{permalink}"
        return f"{REDDIT_BASE_URL}{permalink}"

    @property
    def thread_type(self) -> ThreadType:
        return ThreadType.from_title(self.post.title)

    @property
    def is_trending(self) -> bool:
        return self.post.num_comments > TRENDING_COMMENTS

    @property
    def is_hot(self) -> bool:
        return self.post.num_comments > HOT_COMMENTS

    def summary(self) -> dict[str, Any]:
        """Flat dict for JSON responses."""
        return {
            "id": self.post.id,
            "title": self.post.title,
            "subreddit": self.subreddit,
            "is_main_thread": self.is_main_thread,
            "thread_type": self.thread_type.value,
            "url": self.url,
            "author": self.post.author,
            "score": self.post.score,
            "num_comments": self.post.num_comments,
            "created_utc": self.post.created_utc,
            "is_trending": self.is_trending,
            "is_hot": self.is_hot,
        }
