"""Normalizers for fixture-scoped domains: detail, statistics, events, lineups, ratings."""

from typing import Optional

from pitchpulse.models import (
    LineupPlayer,
    Lineups,
    LiveStats,
    MatchEvent,
    PlayerPerformance,
    StatPair,
    TeamLineup,
    TopPerformers,
)
from pitchpulse.normalizers._access import as_list, dig, leading_int, safe_float, safe_int
from pitchpulse.provider.envelope import DomainEnvelope
from pitchpulse.utils.display import format_event_time

# LiveStats field -> provider statistic type
STAT_TYPES = {
    "possession": "Ball Possession",
    "shots": "Total Shots",
    "shots_on_target": "Shots on Goal",
    "shots_off_target": "Shots off Goal",
    "blocked": "Blocked Shots",
    "corners": "Corner Kicks",
    "offsides": "Offsides",
    "fouls": "Fouls",
    "yellow_cards": "Yellow Cards",
    "red_cards": "Red Cards",
    "saves": "Goalkeeper Saves",
    "passes": "Total passes",
    "pass_accuracy": "Passes %",
}

TOP_PERFORMERS_LIMIT = 5


def _stat_value(statistics: list, stat_type: str) -> int:
    for entry in statistics:
        if isinstance(entry, dict) and entry.get("type") == stat_type:
            return leading_int(entry.get("value"))
    return 0


def normalize_live_stats(envelope: DomainEnvelope) -> Optional[LiveStats]:
    """Side-by-side match statistics, None unless both sides are reported."""
    sides = [s for s in envelope.response_list() if isinstance(s, dict)]
    if len(sides) < 2:
        return None

    home = as_list(dig(sides, 0, "statistics"))
    away = as_list(dig(sides, 1, "statistics"))
    return LiveStats(
        **{
            name: StatPair(home=_stat_value(home, stat_type), away=_stat_value(away, stat_type))
            for name, stat_type in STAT_TYPES.items()
        }
    )


def normalize_events(envelope: DomainEnvelope) -> list[MatchEvent]:
    """Match timeline, most recent event first."""
    events = []
    for item in envelope.response_list():
        if not isinstance(item, dict):
            continue
        events.append(
            MatchEvent(
                time=format_event_time(dig(item, "time", "elapsed"), dig(item, "time", "extra")),
                team=dig(item, "team", "name"),
                player=dig(item, "player", "name"),
                assist=dig(item, "assist", "name"),
                type=item.get("type"),
                detail=item.get("detail"),
            )
        )
    events.reverse()
    return events


def _lineup_player(entry: dict, with_grid: bool) -> LineupPlayer:
    player = dig(entry, "player", default={})
    return LineupPlayer(
        name=dig(player, "name"),
        number=safe_int(dig(player, "number")),
        pos=dig(player, "pos"),
        grid=dig(player, "grid") if with_grid else None,
    )


def _team_lineup(side: dict) -> TeamLineup:
    return TeamLineup(
        formation=dig(side, "formation") or "N/A",
        coach=dig(side, "coach", "name") or "N/A",
        start_xi=[_lineup_player(p, True) for p in as_list(dig(side, "startXI")) if isinstance(p, dict)],
        substitutes=[_lineup_player(p, False) for p in as_list(dig(side, "substitutes")) if isinstance(p, dict)],
    )


def normalize_lineups(envelope: DomainEnvelope) -> Optional[Lineups]:
    sides = [s for s in envelope.response_list() if isinstance(s, dict)]
    if len(sides) < 2:
        return None
    return Lineups(home=_team_lineup(sides[0]), away=_team_lineup(sides[1]))


def _performance(entry: dict) -> PlayerPerformance:
    stats = dig(entry, "statistics", 0, default={})
    rating = dig(stats, "games", "rating")
    return PlayerPerformance(
        name=dig(entry, "player", "name"),
        photo=dig(entry, "player", "photo"),
        rating=str(rating) if rating is not None else None,
        goals=safe_int(dig(stats, "goals", "total")) or 0,
        assists=safe_int(dig(stats, "goals", "assists")) or 0,
        shots=safe_int(dig(stats, "shots", "total")) or 0,
        passes=safe_int(dig(stats, "passes", "total")) or 0,
        pass_accuracy=leading_int(dig(stats, "passes", "accuracy")),
        dribbles=safe_int(dig(stats, "dribbles", "success")) or 0,
        duels=safe_int(dig(stats, "duels", "won")) or 0,
    )


def _top_players(side: dict) -> list[PlayerPerformance]:
    played = [
        p for p in as_list(dig(side, "players"))
        if isinstance(p, dict) and (safe_int(dig(p, "statistics", 0, "games", "minutes")) or 0) > 0
    ]
    performances = [_performance(p) for p in played]
    performances.sort(key=lambda p: safe_float(p.rating) or 0.0, reverse=True)
    return performances[:TOP_PERFORMERS_LIMIT]


def normalize_players(envelope: DomainEnvelope) -> Optional[TopPerformers]:
    """Five best-rated players per side among those who took the field."""
    sides = [s for s in envelope.response_list() if isinstance(s, dict)]
    if len(sides) < 2:
        return None
    return TopPerformers(home=_top_players(sides[0]), away=_top_players(sides[1]))


def normalize_fixture(envelope: DomainEnvelope) -> Optional[dict]:
    """Raw fixture detail object, passed through untouched."""
    item = dig(envelope.response_list(), 0)
    return item if isinstance(item, dict) else None
