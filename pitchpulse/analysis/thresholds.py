"""Tunable thresholds of the scoring rubric."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringThresholds:
    # Recent form (wins within the last five)
    form_good_wins: int = 3
    form_poor_wins: int = 1
    form_good_delta: int = 2
    form_poor_delta: int = -1

    # Injuries
    injuries_severe: int = 3
    injuries_severe_delta: int = -2
    injuries_minor_delta: int = -1

    # Season averages
    attack_average: float = 2.0
    defence_average: float = 1.0
    average_delta: int = 1

    # Table
    rank_gap: int = 5
    rank_gap_delta: int = 2

    # Head-to-head
    h2h_margin: int = 2
    h2h_delta: int = 1
    h2h_goals: float = 3.0

    # Verdict
    lead_margin: int = 2
    confidence_base: int = 60
    confidence_step: int = 5
    confidence_cap: int = 85
    confidence_default: int = 50

    # Supplementary tips
    short_price: float = 2.0
    missing_price: float = 999.0
    over_total: float = 2.5
    under_total: float = 1.5
    btts_average: float = 1.5
    side_to_score_average: float = 1.8
    clean_sheets: int = 5
    projected_total: float = 2.5


DEFAULT_THRESHOLDS = ScoringThresholds()
