"""Pure, total domain normalizers: DomainEnvelope in, fixed shape out."""

from pitchpulse.normalizers.history import normalize_form, normalize_head_to_head
from pitchpulse.normalizers.live import (
    normalize_events,
    normalize_fixture,
    normalize_lineups,
    normalize_live_stats,
    normalize_players,
)
from pitchpulse.normalizers.market import PRIORITY_BOOKMAKERS, normalize_odds, normalize_predictions
from pitchpulse.normalizers.team import (
    normalize_injuries,
    normalize_squad,
    normalize_standings,
    normalize_team_stats,
)

__all__ = [
    "PRIORITY_BOOKMAKERS",
    "normalize_events",
    "normalize_fixture",
    "normalize_form",
    "normalize_head_to_head",
    "normalize_injuries",
    "normalize_lineups",
    "normalize_live_stats",
    "normalize_odds",
    "normalize_players",
    "normalize_predictions",
    "normalize_squad",
    "normalize_standings",
    "normalize_team_stats",
]
