"""Heuristic scoring of normalized match intelligence."""

from pitchpulse.analysis.engine import INSUFFICIENT_DATA, NO_SIGNAL, analyze
from pitchpulse.analysis.rules import SCORING_RULES, SUPPLEMENTARY_RULES, AnalysisContext, RuleOutcome, ScoreAdjustment
from pitchpulse.analysis.thresholds import DEFAULT_THRESHOLDS, ScoringThresholds

__all__ = [
    "AnalysisContext",
    "DEFAULT_THRESHOLDS",
    "INSUFFICIENT_DATA",
    "NO_SIGNAL",
    "RuleOutcome",
    "SCORING_RULES",
    "SUPPLEMENTARY_RULES",
    "ScoreAdjustment",
    "ScoringThresholds",
    "analyze",
]
