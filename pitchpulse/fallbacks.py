"""Fallback derivation of form and standing from season statistics."""

import logging
from dataclasses import dataclass
from typing import Optional

from pitchpulse.models import FormRecord, Match, MatchDetails, StandingEntry, TeamRef, TeamSeasonStats

logger = logging.getLogger(__name__)

FORM_LENGTH = 5


def derive_form_from_stats(stats: Optional[TeamSeasonStats]) -> FormRecord:
    """
    Form letters from the season form string.

    The season string runs oldest first ("WWDLW...WDL"), so the last five
    letters are taken and reversed to read most recent first.
    """
    if stats is None or not stats.form:
        return FormRecord()
    letters = [c for c in stats.form.upper() if c in ("W", "D", "L")]
    if not letters:
        return FormRecord()
    recent = "".join(reversed(letters[-FORM_LENGTH:]))
    return FormRecord(form=recent, matches=[], source="season_stats")


def derive_standing_from_stats(stats: Optional[TeamSeasonStats], team: TeamRef) -> Optional[StandingEntry]:
    """Synthesized standing row (rank unknown), None when no fixtures are recorded."""
    if stats is None:
        return None

    played = stats.played.total if stats.played else 0
    wins = stats.wins.total if stats.wins else 0
    draws = stats.draws.total if stats.draws else 0
    losses = stats.losses.total if stats.losses else 0
    if played == 0 and wins == 0 and draws == 0 and losses == 0:
        return None

    goals_for = stats.goals_for.total if stats.goals_for else 0
    goals_against = stats.goals_against.total if stats.goals_against else 0
    return StandingEntry(
        team_id=team.id,
        team_name=team.name,
        rank=None,
        points=wins * 3 + draws,
        played=played,
        won=wins,
        drawn=draws,
        lost=losses,
        goals_diff=goals_for - goals_against,
        form=stats.form or None,
        is_fallback=True,
    )


@dataclass(frozen=True)
class ResolvedSignals:
    """Per-side form and standing after fallbacks, as consumed by scoring."""

    home_form: FormRecord
    away_form: FormRecord
    home_standing: Optional[StandingEntry]
    away_standing: Optional[StandingEntry]


def _resolve_form(form: FormRecord, stats: Optional[TeamSeasonStats]) -> FormRecord:
    if form.form:
        return form
    return derive_form_from_stats(stats)


def _resolve_standing(
    standing: Optional[StandingEntry], stats: Optional[TeamSeasonStats], team: TeamRef
) -> Optional[StandingEntry]:
    if standing is not None:
        return standing
    return derive_standing_from_stats(stats, team)


def resolve_signals(match: Match, details: MatchDetails) -> ResolvedSignals:
    signals = ResolvedSignals(
        home_form=_resolve_form(details.home_form, details.home_stats),
        away_form=_resolve_form(details.away_form, details.away_stats),
        home_standing=_resolve_standing(details.standings.home, details.home_stats, match.home),
        away_standing=_resolve_standing(details.standings.away, details.away_stats, match.away),
    )
    logger.debug(
        f"[FALLBACK] fixture={match.fixture_id} "
        f"form={signals.home_form.source}/{signals.away_form.source} "
        f"standing_fallback={bool(signals.home_standing and signals.home_standing.is_fallback)}/"
        f"{bool(signals.away_standing and signals.away_standing.is_fallback)}"
    )
    return signals
