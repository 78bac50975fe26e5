"""Data transfer objects for fixtures, normalized domains and analysis output.

Every record is a frozen dataclass: a run produces new objects and never
mutates old ones, so a superseded aggregate is simply replaced.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Side(str, Enum):
    HOME = "home"
    AWAY = "away"


class ViewMode(str, Enum):
    """Catalog views offered to the browsing collaborator."""

    LIVE = "live"
    TODAY = "today"
    TOMORROW = "tomorrow"


# =============================================================================
# FIXTURE IDENTITY
# =============================================================================


@dataclass(frozen=True)
class TeamRef:
    id: Optional[int]
    name: str
    logo: Optional[str] = None


@dataclass(frozen=True)
class Match:
    """Identity + snapshot of one fixture, projected by the catalog filter."""

    fixture_id: int
    league_id: int
    league_name: str
    home: TeamRef
    away: TeamRef
    home_score: int
    away_score: int
    status: str
    is_live: bool
    clock: str  # "67'" when elapsed is known, else the status code
    date: str  # DD.MM.YYYY
    season: int
    league_flag: Optional[str] = None
    venue: Optional[str] = None
    city: Optional[str] = None


# =============================================================================
# NORMALIZED DOMAINS
# =============================================================================


@dataclass(frozen=True)
class StatPair:
    home: int
    away: int


@dataclass(frozen=True)
class LiveStats:
    possession: StatPair
    shots: StatPair
    shots_on_target: StatPair
    shots_off_target: StatPair
    blocked: StatPair
    corners: StatPair
    offsides: StatPair
    fouls: StatPair
    yellow_cards: StatPair
    red_cards: StatPair
    saves: StatPair
    passes: StatPair
    pass_accuracy: StatPair


@dataclass(frozen=True)
class MatchEvent:
    time: str  # "45+2'"
    team: Optional[str]
    player: Optional[str]
    assist: Optional[str]
    type: Optional[str]  # "Goal", "Card", "subst", "Var"
    detail: Optional[str]


@dataclass(frozen=True)
class LineupPlayer:
    name: Optional[str]
    number: Optional[int]
    pos: Optional[str]
    grid: Optional[str] = None  # only set for the starting XI


@dataclass(frozen=True)
class TeamLineup:
    formation: str
    coach: str
    start_xi: list[LineupPlayer]
    substitutes: list[LineupPlayer]


@dataclass(frozen=True)
class Lineups:
    home: TeamLineup
    away: TeamLineup


@dataclass(frozen=True)
class PlayerPerformance:
    name: Optional[str]
    photo: Optional[str]
    rating: Optional[str]
    goals: int
    assists: int
    shots: int
    passes: int
    pass_accuracy: int
    dribbles: int
    duels: int


@dataclass(frozen=True)
class TopPerformers:
    home: list[PlayerPerformance]
    away: list[PlayerPerformance]


@dataclass(frozen=True)
class HeadToHeadMeeting:
    date: str
    home: Optional[str]
    away: Optional[str]
    score: str
    league: Optional[str]


@dataclass(frozen=True)
class HeadToHeadSummary:
    home_wins: int
    away_wins: int
    draws: int
    avg_goals: float  # one decimal place


@dataclass(frozen=True)
class HeadToHead:
    meetings: list[HeadToHeadMeeting] = field(default_factory=list)
    summary: Optional[HeadToHeadSummary] = None


@dataclass(frozen=True)
class PredictedWinner:
    id: Optional[int]
    name: str
    comment: Optional[str]


@dataclass(frozen=True)
class PredictionPercent:
    home: Optional[str]  # "45%"
    draw: Optional[str]
    away: Optional[str]


@dataclass(frozen=True)
class Predictions:
    winner: Optional[PredictedWinner]
    win_or_draw: Optional[bool]
    under_over: Optional[str]
    goals_home: Optional[str]
    goals_away: Optional[str]
    advice: Optional[str]
    percent: Optional[PredictionPercent]


@dataclass(frozen=True)
class MatchWinnerOdds:
    home: Optional[str]
    draw: Optional[str]
    away: Optional[str]


@dataclass(frozen=True)
class OverUnderOdds:
    over_25: Optional[str]
    under_25: Optional[str]


@dataclass(frozen=True)
class BttsOdds:
    yes: Optional[str]
    no: Optional[str]


@dataclass(frozen=True)
class OddsSnapshot:
    bookmaker: str
    match_winner: Optional[MatchWinnerOdds] = None
    over_under: Optional[OverUnderOdds] = None
    btts: Optional[BttsOdds] = None


@dataclass(frozen=True)
class SplitCount:
    """A home/away/total breakdown as reported by team statistics."""

    home: int
    away: int
    total: int


@dataclass(frozen=True)
class TeamSeasonStats:
    form: str  # oldest result first, "" when not reported
    played: Optional[SplitCount]
    wins: Optional[SplitCount]
    draws: Optional[SplitCount]
    losses: Optional[SplitCount]
    goals_for: Optional[SplitCount]
    goals_against: Optional[SplitCount]
    goals_for_average: Optional[float]
    goals_against_average: Optional[float]
    clean_sheets: Optional[SplitCount]
    failed_to_score: Optional[SplitCount]
    biggest: dict[str, Any] = field(default_factory=dict)
    penalty: dict[str, Any] = field(default_factory=dict)
    lineups: list[dict[str, Any]] = field(default_factory=list)
    cards: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Injury:
    player: Optional[str]
    photo: Optional[str]
    type: Optional[str]
    reason: Optional[str]


@dataclass(frozen=True)
class FormMatch:
    date: str
    opponent: Optional[str]
    score: str
    result: str  # "W" | "D" | "L"


@dataclass(frozen=True)
class FormRecord:
    """Result letters, most recent first, capped at five."""

    form: str = ""
    matches: list[FormMatch] = field(default_factory=list)
    source: str = "none"  # "fixtures" | "season_stats" | "none"

    @property
    def wins(self) -> int:
        return self.form.count("W")

    @property
    def draws(self) -> int:
        return self.form.count("D")

    @property
    def losses(self) -> int:
        return self.form.count("L")


@dataclass(frozen=True)
class StandingEntry:
    team_id: Optional[int]
    team_name: Optional[str]
    rank: Optional[int]  # None = unknown
    points: int
    played: int
    won: int
    drawn: int
    lost: int
    goals_diff: int
    form: Optional[str] = None
    description: Optional[str] = None
    is_fallback: bool = False

    @property
    def rank_label(self) -> str:
        return str(self.rank) if self.rank is not None else "N/A"


@dataclass(frozen=True)
class StandingsExcerpt:
    home: Optional[StandingEntry] = None
    away: Optional[StandingEntry] = None
    table: list[StandingEntry] = field(default_factory=list)


@dataclass(frozen=True)
class SquadPlayer:
    id: Optional[int]
    name: Optional[str]
    age: Optional[int]
    number: Optional[int]
    position: Optional[str]
    photo: Optional[str]


@dataclass(frozen=True)
class MatchDetails:
    """Everything one orchestration run learned about one Match."""

    fixture: Optional[dict[str, Any]]
    live_stats: Optional[LiveStats]
    events: list[MatchEvent]
    lineups: Optional[Lineups]
    players: Optional[TopPerformers]
    h2h: HeadToHead
    predictions: Optional[Predictions]
    odds: Optional[OddsSnapshot]
    home_stats: Optional[TeamSeasonStats]
    away_stats: Optional[TeamSeasonStats]
    home_injuries: list[Injury]
    away_injuries: list[Injury]
    home_form: FormRecord
    away_form: FormRecord
    standings: StandingsExcerpt
    home_squad: list[SquadPlayer] = field(default_factory=list)
    away_squad: list[SquadPlayer] = field(default_factory=list)
    domain_status: dict[str, str] = field(default_factory=dict)


# =============================================================================
# ANALYSIS OUTPUT
# =============================================================================


class ConfidenceTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TipCategory(str, Enum):
    WINNER = "winner"
    DRAW = "draw"
    GOALS = "goals"
    DEFENSIVE = "defensive"
    MODEL = "model"
    ODDS = "odds"


TIP_ICONS = {
    TipCategory.WINNER: "🏆",
    TipCategory.DRAW: "⚖️",
    TipCategory.GOALS: "⚽",
    TipCategory.DEFENSIVE: "🛡️",
    TipCategory.MODEL: "🎯",
    TipCategory.ODDS: "💰",
}


@dataclass(frozen=True)
class BettingTip:
    label: str
    reason: str
    confidence: ConfidenceTier
    category: TipCategory

    @property
    def icon(self) -> str:
        return TIP_ICONS[self.category]

    def to_dict(self) -> dict:
        return {
            "tip": self.label,
            "reason": self.reason,
            "confidence": self.confidence.value,
            "category": self.category.value,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class AnalysisResult:
    home_analysis: list[str]
    away_analysis: list[str]
    prediction: str
    confidence: int
    tips: list[BettingTip]
    home_score: int = 0
    away_score: int = 0
    notice: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "home_analysis": list(self.home_analysis),
            "away_analysis": list(self.away_analysis),
            "prediction": self.prediction,
            "confidence": self.confidence,
            "betting_tips": [tip.to_dict() for tip in self.tips],
            "home_score": self.home_score,
            "away_score": self.away_score,
            "notice": self.notice,
        }
