"""
Data models for Pressbox.

Provides Pydantic models for games, forum posts and game threads, the
static forum directory, and request validation for the server tools.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.config import MatchPolicy, ResponseFormat, Settings
from models.forums import (
    DEFAULT_DIRECTORY,
    ForumDirectory,
    ForumTargets,
    NBA_TEAM_SUBREDDITS,
    NFL_TEAM_SUBREDDITS,
)
from models.game import (
    Game,
    GameThread,
    MalformedGameError,
    RawComment,
    RawPost,
    Sport,
    Team,
    ThreadType,
)

__all__ = [
    # Configuration
    "MatchPolicy",
    "ResponseFormat",
    "Settings",
    # Games and threads
    "Sport",
    "Team",
    "Game",
    "RawPost",
    "RawComment",
    "ThreadType",
    "GameThread",
    "MalformedGameError",
    # Forums
    "ForumDirectory",
    "ForumTargets",
    "DEFAULT_DIRECTORY",
    "NFL_TEAM_SUBREDDITS",
    "NBA_TEAM_SUBREDDITS",
    # Tool inputs
    "FindThreadsInput",
]

# ══════════════════════════════════════════════════════════════════════════════
# Input Models
# ══════════════════════════════════════════════════════════════════════════════


class FindThreadsInput(BaseModel):
    """Input model for game thread discovery."""

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        extra="forbid",
    )

    game_id: str = Field(
        ...,
        description="Scoreboard identifier of the game (e.g., '401671789')",
        min_length=1,
        max_length=64,
    )

    sport: Sport = Field(
        ...,
        description="'american_football' (or 'nfl') or 'basketball' (or 'nba')",
    )

    home_name: str = Field(
        ...,
        description="Full home team name (e.g., 'New England Patriots')",
        min_length=2,
        max_length=100,
    )

    home_abbreviation: str = Field(
        ...,
        description="Home team abbreviation (e.g., 'NE')",
        min_length=1,
        max_length=8,
    )

    away_name: str = Field(
        ...,
        description="Full away team name (e.g., 'New York Jets')",
        min_length=2,
        max_length=100,
    )

    away_abbreviation: str = Field(
        ...,
        description="Away team abbreviation (e.g., 'NYJ')",
        min_length=1,
        max_length=8,
    )

    home_id: Optional[str] = Field(default=None, description="Home team id")
    away_id: Optional[str] = Field(default=None, description="Away team id")

    force_refresh: bool = Field(
        default=False,
        description="Bypass the thread cache and search again",
    )

    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' (default) or 'json'",
    )

    @field_validator("sport", mode="before")
    @classmethod
    def parse_sport(cls, v):
        return Sport(v) if isinstance(v, str) else v

    @field_validator("home_abbreviation", "away_abbreviation")
    @classmethod
    def upper_abbreviation(cls, v: str) -> str:
        return v.upper()

    def to_game(self) -> Game:
        """Build the Game record; team ids fall back to abbreviations."""
        return Game(
            id=self.game_id,
            sport=self.sport,
            home_team=Team(
                id=self.home_id or self.home_abbreviation,
                name=self.home_name,
                abbreviation=self.home_abbreviation,
            ),
            away_team=Team(
                id=self.away_id or self.away_abbreviation,
                name=self.away_name,
                abbreviation=self.away_abbreviation,
            ),
        )
