"""
Rule evaluators of the scoring rubric.

Each rule is a pure function of an AnalysisContext returning a RuleOutcome:
score adjustments (side, delta, bullet) and tips. Rules never read each
other's output; only the verdict sees the folded scores.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from pitchpulse.analysis.thresholds import ScoringThresholds
from pitchpulse.fallbacks import ResolvedSignals
from pitchpulse.models import (
    BettingTip,
    ConfidenceTier,
    FormRecord,
    Match,
    MatchDetails,
    Side,
    TeamSeasonStats,
    TipCategory,
)
from pitchpulse.normalizers._access import safe_float

_PERCENT = re.compile(r"^\s*(\d+)")


@dataclass(frozen=True)
class AnalysisContext:
    match: Match
    details: MatchDetails
    signals: ResolvedSignals
    thresholds: ScoringThresholds

    def team_name(self, side: Side) -> str:
        return self.match.home.name if side == Side.HOME else self.match.away.name

    def stats(self, side: Side) -> Optional[TeamSeasonStats]:
        return self.details.home_stats if side == Side.HOME else self.details.away_stats

    def form(self, side: Side) -> FormRecord:
        return self.signals.home_form if side == Side.HOME else self.signals.away_form


@dataclass(frozen=True)
class ScoreAdjustment:
    side: Side
    delta: int
    bullet: str


@dataclass(frozen=True)
class RuleOutcome:
    adjustments: list[ScoreAdjustment] = field(default_factory=list)
    tips: list[BettingTip] = field(default_factory=list)


@dataclass(frozen=True)
class Verdict:
    prediction: str
    confidence: int
    tips: list[BettingTip] = field(default_factory=list)


Rule = Callable[[AnalysisContext], RuleOutcome]

NOTHING = RuleOutcome()


def _fmt(value: float) -> str:
    return f"{value:g}"


def _price(raw: Optional[str], missing: float) -> float:
    """Bookmaker price as a number; an absent or unreadable price never wins."""
    value = safe_float(raw)
    return value if value is not None else missing


def _goals_for_average(stats: Optional[TeamSeasonStats]) -> Optional[float]:
    return stats.goals_for_average if stats is not None else None


def _tip(label: str, reason: str, confidence: ConfidenceTier, category: TipCategory) -> BettingTip:
    return BettingTip(label=label, reason=reason, confidence=confidence, category=category)


# =============================================================================
# SCORING RULES (adjust side scores)
# =============================================================================


def form_rule(ctx: AnalysisContext) -> RuleOutcome:
    t = ctx.thresholds
    adjustments = []
    for side in (Side.HOME, Side.AWAY):
        record = ctx.form(side)
        if not record.form:
            continue
        wins = record.wins
        team = ctx.team_name(side)
        played = len(record.form)
        if wins >= t.form_good_wins:
            adjustments.append(
                ScoreAdjustment(
                    side,
                    t.form_good_delta,
                    f"{team} is in excellent form with {wins} wins in the last {played} matches",
                )
            )
        elif wins <= t.form_poor_wins:
            adjustments.append(
                ScoreAdjustment(
                    side,
                    t.form_poor_delta,
                    f"{team} is going through a difficult spell with only {wins} wins in the last {played} matches",
                )
            )
    return RuleOutcome(adjustments=adjustments)


def injuries_rule(ctx: AnalysisContext) -> RuleOutcome:
    t = ctx.thresholds
    adjustments = []
    for side, injuries in ((Side.HOME, ctx.details.home_injuries), (Side.AWAY, ctx.details.away_injuries)):
        count = len(injuries)
        team = ctx.team_name(side)
        if count > t.injuries_severe:
            adjustments.append(
                ScoreAdjustment(
                    side,
                    t.injuries_severe_delta,
                    f"⚠️ {team} has {count} injured players, a serious problem for the squad",
                )
            )
        elif count > 0:
            adjustments.append(ScoreAdjustment(side, t.injuries_minor_delta, f"{team} has {count} injured players"))
    return RuleOutcome(adjustments=adjustments)


def season_averages_rule(ctx: AnalysisContext) -> RuleOutcome:
    """Attack and defence bonuses, only for averages the provider reported."""
    t = ctx.thresholds
    adjustments = []
    for side in (Side.HOME, Side.AWAY):
        stats = ctx.stats(side)
        if stats is None:
            continue
        team = ctx.team_name(side)
        scored = stats.goals_for_average
        conceded = stats.goals_against_average
        if scored is not None and scored > t.attack_average:
            adjustments.append(
                ScoreAdjustment(
                    side,
                    t.average_delta,
                    f"{team} scores {_fmt(scored)} goals per match on average, a powerful attack",
                )
            )
        if conceded is not None and conceded < t.defence_average:
            adjustments.append(
                ScoreAdjustment(
                    side,
                    t.average_delta,
                    f"{team} has a solid defence, conceding only {_fmt(conceded)} goals per match on average",
                )
            )
    return RuleOutcome(adjustments=adjustments)


def standings_gap_rule(ctx: AnalysisContext) -> RuleOutcome:
    home = ctx.signals.home_standing
    away = ctx.signals.away_standing
    if home is None or away is None or home.rank is None or away.rank is None:
        return NOTHING

    t = ctx.thresholds
    gap = away.rank - home.rank
    home_team = ctx.match.home.name
    away_team = ctx.match.away.name
    if gap > t.rank_gap:
        bullet = f"{home_team} is ranked {home.rank} in the table, well above {away_team} (ranked {away.rank})"
        return RuleOutcome(adjustments=[ScoreAdjustment(Side.HOME, t.rank_gap_delta, bullet)])
    if gap < -t.rank_gap:
        bullet = f"{away_team} is ranked {away.rank} in the table, well above {home_team} (ranked {home.rank})"
        return RuleOutcome(adjustments=[ScoreAdjustment(Side.AWAY, t.rank_gap_delta, bullet)])
    return NOTHING


def head_to_head_rule(ctx: AnalysisContext) -> RuleOutcome:
    summary = ctx.details.h2h.summary
    if summary is None:
        return NOTHING

    t = ctx.thresholds
    adjustments = []
    tips = []
    if summary.home_wins > summary.away_wins + t.h2h_margin:
        adjustments.append(
            ScoreAdjustment(
                Side.HOME,
                t.h2h_delta,
                f"{ctx.match.home.name} dominates the head-to-head with {summary.home_wins} wins "
                f"against {summary.away_wins}",
            )
        )
    elif summary.away_wins > summary.home_wins + t.h2h_margin:
        adjustments.append(
            ScoreAdjustment(
                Side.AWAY,
                t.h2h_delta,
                f"{ctx.match.away.name} dominates the head-to-head with {summary.away_wins} wins "
                f"against {summary.home_wins}",
            )
        )

    if summary.avg_goals > t.h2h_goals:
        tips.append(
            _tip(
                "Over 2.5 goals",
                f"Head-to-head meetings are high scoring, averaging {_fmt(summary.avg_goals)} goals per match",
                ConfidenceTier.HIGH,
                TipCategory.GOALS,
            )
        )
    return RuleOutcome(adjustments=adjustments, tips=tips)


SCORING_RULES: list[Rule] = [
    form_rule,
    injuries_rule,
    season_averages_rule,
    standings_gap_rule,
    head_to_head_rule,
]


# =============================================================================
# VERDICT
# =============================================================================


def _percent_value(raw: Optional[str]) -> Optional[int]:
    if not isinstance(raw, str):
        return None
    match = _PERCENT.match(raw)
    return int(match.group(1)) if match else None


def _winner_tip(ctx: AnalysisContext, side: Side, reason: str) -> BettingTip:
    if side == Side.HOME:
        label = f"1 ({ctx.match.home.name} to win)"
    else:
        label = f"2 ({ctx.match.away.name} to win)"
    return _tip(label, reason, ConfidenceTier.HIGH, TipCategory.WINNER)


def decide_verdict(ctx: AnalysisContext, home_score: int, away_score: int) -> Verdict:
    """
    Prediction label and confidence.

    A provider-named winner takes precedence and its confidence is the
    provider's percentage for that side. Otherwise the folded scores decide:
    a lead above the margin names a favourite, anything closer is contested.
    """
    t = ctx.thresholds
    predictions = ctx.details.predictions
    winner = predictions.winner if predictions is not None else None

    if winner is not None:
        side = Side.HOME if winner.id is not None and winner.id == ctx.match.home.id else Side.AWAY
        percent = predictions.percent
        raw = None
        if percent is not None:
            raw = percent.home if side == Side.HOME else percent.away
        confidence = _percent_value(raw)
        return Verdict(
            prediction=f"{winner.name} favored",
            confidence=confidence if confidence is not None else t.confidence_default,
            tips=[_winner_tip(ctx, side, winner.comment or "Recommendation from the provider prediction")],
        )

    if home_score > away_score + t.lead_margin:
        return Verdict(
            prediction=f"{ctx.match.home.name} favored",
            confidence=min(t.confidence_cap, t.confidence_base + t.confidence_step * home_score),
            tips=[_winner_tip(ctx, Side.HOME, "Better form, fewer injuries and home advantage")],
        )

    if away_score > home_score + t.lead_margin:
        return Verdict(
            prediction=f"{ctx.match.away.name} favored",
            confidence=min(t.confidence_cap, t.confidence_base + t.confidence_step * away_score),
            tips=[_winner_tip(ctx, Side.AWAY, "Better form and a stronger squad")],
        )

    return Verdict(
        prediction="Contested match",
        confidence=t.confidence_default,
        tips=[
            _tip(
                "X (Draw)",
                "The teams are evenly matched on form and squad",
                ConfidenceTier.MEDIUM,
                TipCategory.DRAW,
            )
        ],
    )


# =============================================================================
# SUPPLEMENTARY TIPS (no score effect)
# =============================================================================


def provider_advice_tip(ctx: AnalysisContext) -> RuleOutcome:
    predictions = ctx.details.predictions
    if predictions is None or not predictions.advice:
        return NOTHING
    return RuleOutcome(
        tips=[
            _tip(
                predictions.advice,
                "Recommendation based on the provider's statistical model",
                ConfidenceTier.HIGH,
                TipCategory.MODEL,
            )
        ]
    )


def lowest_price_tip(ctx: AnalysisContext) -> RuleOutcome:
    """Shortest match-winner price when under the threshold; ties go home, draw, away."""
    odds = ctx.details.odds
    if odds is None or odds.match_winner is None:
        return NOTHING

    t = ctx.thresholds
    winner_odds = odds.match_winner
    candidates = [
        (_price(winner_odds.home, t.missing_price), f"1 - {ctx.match.home.name} (odds {winner_odds.home})"),
        (_price(winner_odds.draw, t.missing_price), f"X - Draw (odds {winner_odds.draw})"),
        (_price(winner_odds.away, t.missing_price), f"2 - {ctx.match.away.name} (odds {winner_odds.away})"),
    ]
    lowest, label = min(candidates, key=lambda c: c[0])
    if lowest >= t.short_price:
        return NOTHING
    return RuleOutcome(
        tips=[_tip(label, f"Lowest price at {odds.bookmaker}", ConfidenceTier.HIGH, TipCategory.ODDS)]
    )


def combined_goals_tip(ctx: AnalysisContext) -> RuleOutcome:
    home = _goals_for_average(ctx.details.home_stats)
    away = _goals_for_average(ctx.details.away_stats)
    if home is None or away is None:
        return NOTHING

    t = ctx.thresholds
    combined = (home + away) / 2
    if combined > t.over_total:
        return RuleOutcome(
            tips=[
                _tip(
                    "Over 2.5 goals",
                    f"Both teams score freely, averaging {combined:.1f} per match",
                    ConfidenceTier.MEDIUM,
                    TipCategory.GOALS,
                )
            ]
        )
    if combined < t.under_total:
        return RuleOutcome(
            tips=[
                _tip(
                    "Under 2.5 goals",
                    f"Both teams rarely score, averaging {combined:.1f} per match",
                    ConfidenceTier.MEDIUM,
                    TipCategory.DEFENSIVE,
                )
            ]
        )
    return NOTHING


def both_teams_score_tip(ctx: AnalysisContext) -> RuleOutcome:
    t = ctx.thresholds
    home = _goals_for_average(ctx.details.home_stats)
    away = _goals_for_average(ctx.details.away_stats)
    if home is None or away is None or home <= t.btts_average or away <= t.btts_average:
        return NOTHING
    return RuleOutcome(
        tips=[
            _tip(
                "BTTS - Yes (both teams score)",
                "Both teams attack well and score regularly",
                ConfidenceTier.MEDIUM,
                TipCategory.MODEL,
            )
        ]
    )


def btts_price_tip(ctx: AnalysisContext) -> RuleOutcome:
    odds = ctx.details.odds
    if odds is None or odds.btts is None:
        return NOTHING
    t = ctx.thresholds
    yes = _price(odds.btts.yes, t.missing_price)
    no = _price(odds.btts.no, t.missing_price)
    if yes >= no:
        return NOTHING
    return RuleOutcome(
        tips=[
            _tip(
                f"BTTS Yes (odds {odds.btts.yes})",
                "Best price for both teams to score",
                ConfidenceTier.MEDIUM,
                TipCategory.GOALS,
            )
        ]
    )


def side_to_score_tips(ctx: AnalysisContext) -> RuleOutcome:
    t = ctx.thresholds
    tips = []
    for side in (Side.HOME, Side.AWAY):
        average = _goals_for_average(ctx.stats(side))
        if average is not None and average > t.side_to_score_average:
            tips.append(
                _tip(
                    f"{ctx.team_name(side)} to score",
                    f"Averaging {_fmt(average)} goals per match",
                    ConfidenceTier.MEDIUM,
                    TipCategory.GOALS,
                )
            )
    return RuleOutcome(tips=tips)


def clean_sheet_tips(ctx: AnalysisContext) -> RuleOutcome:
    """Home side judged on clean sheets at home, away side on clean sheets away."""
    t = ctx.thresholds
    tips = []
    home_stats = ctx.details.home_stats
    away_stats = ctx.details.away_stats
    home_count = home_stats.clean_sheets.home if home_stats and home_stats.clean_sheets else 0
    away_count = away_stats.clean_sheets.away if away_stats and away_stats.clean_sheets else 0
    for side, count in ((Side.HOME, home_count), (Side.AWAY, away_count)):
        if count > t.clean_sheets:
            tips.append(
                _tip(
                    f"{ctx.team_name(side)} clean sheet",
                    f"{count} matches without conceding",
                    ConfidenceTier.MEDIUM,
                    TipCategory.DEFENSIVE,
                )
            )
    return RuleOutcome(tips=tips)


def over_under_price_tip(ctx: AnalysisContext) -> RuleOutcome:
    odds = ctx.details.odds
    if odds is None or odds.over_under is None:
        return NOTHING
    t = ctx.thresholds
    over = _price(odds.over_under.over_25, t.missing_price)
    under = _price(odds.over_under.under_25, t.missing_price)
    if over < under and over < t.short_price:
        return RuleOutcome(
            tips=[
                _tip(
                    f"Over 2.5 goals (odds {odds.over_under.over_25})",
                    "Short prices on a high-scoring match",
                    ConfidenceTier.HIGH,
                    TipCategory.GOALS,
                )
            ]
        )
    if under < over and under < t.short_price:
        return RuleOutcome(
            tips=[
                _tip(
                    f"Under 2.5 goals (odds {odds.over_under.under_25})",
                    "Short prices on a low-scoring match",
                    ConfidenceTier.HIGH,
                    TipCategory.DEFENSIVE,
                )
            ]
        )
    return NOTHING


def projected_goals_tip(ctx: AnalysisContext) -> RuleOutcome:
    predictions = ctx.details.predictions
    if predictions is None or not predictions.goals_home or not predictions.goals_away:
        return NOTHING
    home = safe_float(predictions.goals_home)
    away = safe_float(predictions.goals_away)
    if home is None or away is None:
        return NOTHING
    total = home + away
    if total <= ctx.thresholds.projected_total:
        return NOTHING
    return RuleOutcome(
        tips=[
            _tip(
                f"Over 2.5 goals (projection: {total:.1f})",
                f"Provider projects {predictions.goals_home}-{predictions.goals_away}",
                ConfidenceTier.MEDIUM,
                TipCategory.MODEL,
            )
        ]
    )


SUPPLEMENTARY_RULES: list[Rule] = [
    provider_advice_tip,
    lowest_price_tip,
    combined_goals_tip,
    both_teams_score_tip,
    btts_price_tip,
    side_to_score_tips,
    clean_sheet_tips,
    over_under_price_tip,
    projected_goals_tip,
]
