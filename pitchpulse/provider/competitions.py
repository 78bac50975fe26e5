"""Competition whitelist and fixture status codes for API-Football."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Competition:
    """Competition configuration."""

    league_id: int
    name: str
    country: str


PREMIER_LEAGUE = Competition(league_id=39, name="Premier League", country="England")
LA_LIGA = Competition(league_id=140, name="La Liga", country="Spain")
SERIE_A = Competition(league_id=135, name="Serie A", country="Italy")
BUNDESLIGA = Competition(league_id=78, name="Bundesliga", country="Germany")
LIGUE_1 = Competition(league_id=61, name="Ligue 1", country="France")
FIRST_LEAGUE_BG = Competition(league_id=172, name="First League", country="Bulgaria")

# Order matters only for display; membership is what the catalog checks
COMPETITIONS: dict[int, Competition] = {
    comp.league_id: comp
    for comp in [
        PREMIER_LEAGUE,
        LA_LIGA,
        SERIE_A,
        BUNDESLIGA,
        LIGUE_1,
        FIRST_LEAGUE_BG,
    ]
}

ALL_LEAGUE_IDS = list(COMPETITIONS.keys())

# In-play: first half, second half, half-time, extra time, break, penalties, generic live
LIVE_STATUSES = frozenset({"1H", "2H", "HT", "ET", "BT", "P", "LIVE"})

# Not started / to be defined
UPCOMING_STATUSES = frozenset({"NS", "TBD"})


def resolve_league_ids(override: Optional[list[int]] = None) -> frozenset[int]:
    """Whitelist in effect: the configured override, else the built-in list."""
    if override:
        return frozenset(override)
    return frozenset(ALL_LEAGUE_IDS)
