"""
Forum directory: which subreddits cover which sports and teams.

The tables are static configuration. A ForumDirectory is built once and
injected into the aggregation pipeline, so a relocated or renamed team only
needs a new table, not a pipeline change.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from models.game import Game, Sport

__all__ = [
    "LEAGUE_FORUMS",
    "NFL_TEAM_SUBREDDITS",
    "NBA_TEAM_SUBREDDITS",
    "ForumTargets",
    "ForumDirectory",
    "DEFAULT_DIRECTORY",
]

# ══════════════════════════════════════════════════════════════════════════════
# Static Tables
# ══════════════════════════════════════════════════════════════════════════════

LEAGUE_FORUMS: dict[Sport, str] = {
    Sport.AMERICAN_FOOTBALL: "nfl",
    Sport.BASKETBALL: "nba",
}

# Keyed by scoreboard abbreviation
NFL_TEAM_SUBREDDITS: dict[str, str] = {
    "ARI": "azcardinals",
    "ATL": "falcons",
    "BAL": "ravens",
    "BUF": "buffalobills",
    "CAR": "panthers",
    "CHI": "CHIBears",
    "CIN": "bengals",
    "CLE": "Browns",
    "DAL": "cowboys",
    "DEN": "DenverBroncos",
    "DET": "detroitlions",
    "GB": "GreenBayPackers",
    "HOU": "Texans",
    "IND": "Colts",
    "JAX": "Jaguars",
    "KC": "KansasCityChiefs",
    "LV": "raiders",
    "LAC": "Chargers",
    "LAR": "LosAngelesRams",
    "MIA": "miamidolphins",
    "MIN": "minnesotavikings",
    "NE": "Patriots",
    "NO": "Saints",
    "NYG": "NYGiants",
    "NYJ": "nyjets",
    "PHI": "eagles",
    "PIT": "steelers",
    "SF": "49ers",
    "SEA": "Seahawks",
    "TB": "buccaneers",
    "TEN": "Tennesseetitans",
    "WSH": "Commanders",
}

NBA_TEAM_SUBREDDITS: dict[str, str] = {
    "ATL": "AtlantaHawks",
    "BOS": "bostonceltics",
    "BKN": "GoNets",
    "CHA": "CharlotteHornets",
    "CHI": "chicagobulls",
    "CLE": "clevelandcavs",
    "DAL": "Mavericks",
    "DEN": "denvernuggets",
    "DET": "DetroitPistons",
    "GS": "warriors",
    "HOU": "rockets",
    "IND": "pacers",
    "LAC": "LAClippers",
    "LAL": "lakers",
    "MEM": "memphisgrizzlies",
    "MIA": "heat",
    "MIL": "MkeBucks",
    "MIN": "timberwolves",
    "NO": "NOLAPelicans",
    "NY": "NYKnicks",
    "OKC": "Thunder",
    "ORL": "OrlandoMagic",
    "PHI": "sixers",
    "PHX": "suns",
    "POR": "ripcity",
    "SAC": "kings",
    "SA": "NBASpurs",
    "TOR": "torontoraptors",
    "UTAH": "UtahJazz",
    "WSH": "washingtonwizards",
}

# ══════════════════════════════════════════════════════════════════════════════
# Directory
# ══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ForumTargets:
    """Forums to search for one game, main forum first."""

    main: str
    teams: tuple[str, ...] = ()

    @property
    def all(self) -> tuple[str, ...]:
        return (self.main, *self.teams)

    def is_main(self, forum: str) -> bool:
        return forum.lower() == self.main.lower()


@dataclass(frozen=True)
class ForumDirectory:
    """Immutable sport/team to forum lookup."""

    league_forums: Mapping[Sport, str]
    team_forums: Mapping[Sport, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "league_forums", MappingProxyType(dict(self.league_forums)))
        object.__setattr__(
            self,
            "team_forums",
            MappingProxyType(
                {
                    sport: MappingProxyType(
                        {abbr.upper(): forum for abbr, forum in table.items()}
                    )
                    for sport, table in self.team_forums.items()
                }
            ),
        )

    def league_forum(self, sport: Sport) -> str:
        return self.league_forums[sport]

    def team_forum(self, sport: Sport, abbreviation: str) -> Optional[str]:
        return self.team_forums.get(sport, {}).get(abbreviation.strip().upper())

    def resolve(self, game: Game) -> ForumTargets:
        """Main forum plus whichever team forums are mapped, in home/away order."""
        main = self.league_forum(game.sport)
        teams: list[str] = []
        seen = {main.lower()}
        for team in (game.home_team, game.away_team):
            forum = self.team_forum(game.sport, team.abbreviation)
            if forum and forum.lower() not in seen:
                seen.add(forum.lower())
                teams.append(forum)
        return ForumTargets(main=main, teams=tuple(teams))


DEFAULT_DIRECTORY = ForumDirectory(
    league_forums=LEAGUE_FORUMS,
    team_forums={
        Sport.AMERICAN_FOOTBALL: NFL_TEAM_SUBREDDITS,
        Sport.BASKETBALL: NBA_TEAM_SUBREDDITS,
    },
)
