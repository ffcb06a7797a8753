"""
Game thread aggregation.

Fans out one search per target forum, keeps posts that are game threads
about this game, ranks league-forum threads first and then by comment
count, and drops reposts within each team forum.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from api import forums
from core.classifier import is_game_thread_post, is_similar_title
from core.matcher import matches_game, team_terms
from core.metrics import get_performance_monitor
from models.config import MatchPolicy
from models.forums import DEFAULT_DIRECTORY, ForumDirectory, ForumTargets
from models.game import Game, GameThread, RawPost
from utils.helpers import start_of_local_day

__all__ = ["ThreadAggregator", "rank_threads", "dedupe_threads"]

logger = logging.getLogger(__name__)

SearchFn = Callable[[str, Optional[str], int], Awaitable[list[RawPost]]]

# ══════════════════════════════════════════════════════════════════════════════
# Ranking and Deduplication
# ══════════════════════════════════════════════════════════════════════════════


def rank_threads(threads: Iterable[GameThread]) -> list[GameThread]:
    """Stable sort: league-forum threads first, then most comments."""
    return sorted(
        threads,
        key=lambda t: (not t.is_main_thread, -t.post.num_comments),
    )


def dedupe_threads(threads: Sequence[GameThread]) -> list[GameThread]:
    """
    Drop reposts within the same team forum, keeping the earlier one.

    League-forum threads are never collapsed: the league forum hosts several
    distinct threads per game. The same game in two team forums is two
    communities, not a duplicate.
    """
    kept: list[GameThread] = []
    for thread in threads:
        if not thread.is_main_thread:
            forum = thread.subreddit.lower()
            duplicate = next(
                (
                    k
                    for k in kept
                    if k.subreddit.lower() == forum
                    and is_similar_title(k.post.title, thread.post.title)
                ),
                None,
            )
            if duplicate is not None:
                logger.debug(
                    f"Dropping {thread.post.id} in r/{thread.subreddit}: "
                    f"repost of {duplicate.post.id}"
                )
                continue
        kept.append(thread)
    return kept


# ══════════════════════════════════════════════════════════════════════════════
# Aggregator
# ══════════════════════════════════════════════════════════════════════════════


class ThreadAggregator:
    """
    Finds the discussion threads for a game across its forums.

    Args:
        directory: Sport/team forum lookup
        search: Async forum search, ``search(forum, query, since)``; must not
            raise, though exceptions are tolerated and logged
        query: Free-text query sent to every forum
        main_policy: Matching policy for the league-wide forum
        team_policy: Matching policy for team forums
        tz: IANA zone used for "today" (default: host local time)
    """

    def __init__(
        self,
        directory: ForumDirectory = DEFAULT_DIRECTORY,
        search: Optional[SearchFn] = None,
        query: Optional[str] = "game thread",
        main_policy: MatchPolicy = MatchPolicy.REQUIRE_BOTH_TEAMS,
        team_policy: MatchPolicy = MatchPolicy.REQUIRE_EITHER_TEAM,
        tz: Optional[str] = None,
    ):
        self.directory = directory
        self._search = search
        self.query = query
        self.main_policy = main_policy
        self.team_policy = team_policy
        self.tz = tz

    def resolve_targets(self, game: Game) -> ForumTargets:
        return self.directory.resolve(game)

    async def _search_forum(self, forum: str, since: int) -> list[RawPost]:
        search = self._search or forums.search
        return await search(forum, self.query, since)

    async def find_threads(
        self, game: Game, since: Optional[int] = None
    ) -> list[GameThread]:
        """
        Search, filter, rank and dedupe the threads for a game.

        Args:
            game: The game to find threads for
            since: Earliest post creation time (default: local midnight)

        Returns:
            Ranked threads; empty when nothing matched or nothing answered
        """
        # Raises MalformedGameError before any network call
        for team in (game.home_team, game.away_team):
            team_terms(team, self.main_policy)
            team_terms(team, self.team_policy)

        started = time.perf_counter()
        targets = self.resolve_targets(game)
        if since is None:
            since = start_of_local_day(self.tz)

        forum_names = targets.all
        results = await asyncio.gather(
            *(self._search_forum(forum, since) for forum in forum_names),
            return_exceptions=True,
        )

        candidates: list[GameThread] = []
        seen_ids: set[str] = set()
        failed = 0

        # Forums are walked in target order, not completion order
        for forum, posts in zip(forum_names, results):
            if isinstance(posts, BaseException):
                logger.error(f"Search for r/{forum} raised: {posts!r}")
                failed += 1
                continue

            is_main = targets.is_main(forum)
            policy = self.main_policy if is_main else self.team_policy
            accepted = 0

            for post in posts:
                if post.id in seen_ids:
                    continue
                if not is_game_thread_post(post):
                    continue
                if not matches_game(post, game, policy):
                    continue
                seen_ids.add(post.id)
                candidates.append(
                    GameThread(post=post, subreddit=forum, is_main_thread=is_main)
                )
                accepted += 1

            logger.debug(f"r/{forum}: {accepted}/{len(posts)} posts accepted")

        threads = dedupe_threads(rank_threads(candidates))

        elapsed = time.perf_counter() - started
        get_performance_monitor().record_aggregation(elapsed, len(threads), failed)
        logger.info(
            f"Game {game.id}: {len(threads)} threads from "
            f"{len(forum_names)} forums in {elapsed * 1000:.0f}ms"
        )
        return threads
