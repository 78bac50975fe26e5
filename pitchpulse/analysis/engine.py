"""Heuristic scoring engine: fold the rule list into an AnalysisResult."""

import logging
from typing import Optional

from pitchpulse.analysis.rules import (
    SCORING_RULES,
    SUPPLEMENTARY_RULES,
    AnalysisContext,
    Rule,
    RuleOutcome,
    Verdict,
    decide_verdict,
)
from pitchpulse.analysis.thresholds import DEFAULT_THRESHOLDS, ScoringThresholds
from pitchpulse.fallbacks import ResolvedSignals, resolve_signals
from pitchpulse.models import AnalysisResult, Match, MatchDetails, Side

logger = logging.getLogger(__name__)

INSUFFICIENT_DATA = "Insufficient data"
NO_SIGNAL = "No clear betting signal"


def _evaluate(rule: Rule, ctx: AnalysisContext) -> RuleOutcome:
    try:
        return rule(ctx)
    except Exception as e:
        logger.error(f"[ANALYSIS] Rule {rule.__name__} failed for fixture {ctx.match.fixture_id}: {e}")
        return RuleOutcome()


def analyze(
    match: Match,
    details: MatchDetails,
    signals: Optional[ResolvedSignals] = None,
    thresholds: Optional[ScoringThresholds] = None,
) -> AnalysisResult:
    """
    Score one match.

    Rules run in a fixed order; scores start at 0 and are never clamped.
    Tips are concatenated in rule order with no deduplication.

    Args:
        match: Fixture identity.
        details: Aggregate from one orchestration run.
        signals: Form/standing after fallbacks (derived when not given).
        thresholds: Alternate rubric thresholds.
    """
    ctx = AnalysisContext(
        match=match,
        details=details,
        signals=signals if signals is not None else resolve_signals(match, details),
        thresholds=thresholds or DEFAULT_THRESHOLDS,
    )

    scores = {Side.HOME: 0, Side.AWAY: 0}
    bullets: dict[Side, list[str]] = {Side.HOME: [], Side.AWAY: []}
    tips = []

    for rule in SCORING_RULES:
        outcome = _evaluate(rule, ctx)
        for adjustment in outcome.adjustments:
            scores[adjustment.side] += adjustment.delta
            bullets[adjustment.side].append(adjustment.bullet)
        tips.extend(outcome.tips)

    try:
        verdict = decide_verdict(ctx, scores[Side.HOME], scores[Side.AWAY])
    except Exception as e:
        logger.error(f"[ANALYSIS] Verdict failed for fixture {match.fixture_id}: {e}")
        verdict = Verdict(prediction="Contested match", confidence=ctx.thresholds.confidence_default)
    tips.extend(verdict.tips)

    for rule in SUPPLEMENTARY_RULES:
        tips.extend(_evaluate(rule, ctx).tips)

    return AnalysisResult(
        home_analysis=bullets[Side.HOME] or [INSUFFICIENT_DATA],
        away_analysis=bullets[Side.AWAY] or [INSUFFICIENT_DATA],
        prediction=verdict.prediction,
        confidence=verdict.confidence,
        tips=tips,
        home_score=scores[Side.HOME],
        away_score=scores[Side.AWAY],
        notice=None if tips else NO_SIGNAL,
    )
