"""
Game matching.

Decides whether a game thread is about one specific game by looking for
each team's names in the post's title and body.

    REQUIRE_EITHER_TEAM   one side mentioned is enough; only safe when the
                          forum is already scoped to one of the teams
    REQUIRE_BOTH_TEAMS    both sides must be mentioned, using only the
                          abbreviation and the last word of the team name
"""

import logging

from models.config import MatchPolicy
from models.game import Game, MalformedGameError, RawPost, Team

__all__ = ["team_terms", "matches_game"]

logger = logging.getLogger(__name__)


def team_terms(team: Team, policy: MatchPolicy) -> set[str]:
    """
    Build the lower-cased search terms for one side of a game.

    Raises:
        MalformedGameError: if the team has neither a name nor an abbreviation
    """
    if team is None:
        raise MalformedGameError("Game is missing a team")

    name = (team.name or "").lower()
    words = name.split()
    terms = {(team.abbreviation or "").lower()}

    if policy == MatchPolicy.REQUIRE_BOTH_TEAMS:
        if words:
            terms.add(words[-1])
    else:
        terms.add(name)
        terms.update(words)

    terms = {t.strip() for t in terms if t.strip()}
    if not terms:
        raise MalformedGameError(f"Team {team.id!r} has no name or abbreviation")
    return terms


def matches_game(
    post: RawPost,
    game: Game,
    policy: MatchPolicy = MatchPolicy.REQUIRE_BOTH_TEAMS,
) -> bool:
    """Check whether a post mentions the game's teams as the policy requires."""
    haystack = f"{post.title} {post.selftext or ''}".lower()

    has_home = any(term in haystack for term in team_terms(game.home_team, policy))
    has_away = any(term in haystack for term in team_terms(game.away_team, policy))

    if policy == MatchPolicy.REQUIRE_EITHER_TEAM:
        return has_home or has_away
    return has_home and has_away
