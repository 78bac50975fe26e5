"""Normalizers for past results: head-to-head meetings and recent team form."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pitchpulse.models import FormMatch, FormRecord, HeadToHead, HeadToHeadMeeting, HeadToHeadSummary, Match
from pitchpulse.normalizers._access import dig, fixture_sort_key, played_goals, safe_int
from pitchpulse.provider.envelope import DomainEnvelope
from pitchpulse.utils.display import format_display_date

MEETINGS_SHOWN = 5
FORM_LENGTH = 5


def _score_label(item: dict) -> str:
    goals = played_goals(item)
    if goals is None:
        return "-"
    return f"{goals[0]}-{goals[1]}"


def _one_decimal(total: int, count: int) -> float:
    value = (Decimal(total) / Decimal(count)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(value)


def normalize_head_to_head(envelope: DomainEnvelope, match: Match) -> HeadToHead:
    """
    Previous meetings of the two clubs.

    The five most recent meetings are kept for display. The summary counts
    every played meeting in the returned set, oriented to the current
    fixture: a win by the club that is home *today* is a home win no matter
    which side of the old fixture it played on. Meetings without a score
    are listed but not tallied.
    """
    meetings = [m for m in envelope.response_list() if isinstance(m, dict)]
    if not meetings:
        return HeadToHead()

    meetings.sort(key=fixture_sort_key, reverse=True)
    shown = [
        HeadToHeadMeeting(
            date=format_display_date(dig(m, "fixture", "date")),
            home=dig(m, "teams", "home", "name"),
            away=dig(m, "teams", "away", "name"),
            score=_score_label(m),
            league=dig(m, "league", "name"),
        )
        for m in meetings[:MEETINGS_SHOWN]
    ]

    home_wins = away_wins = draws = total_goals = played = 0
    for m in meetings:
        goals = played_goals(m)
        if goals is None:
            continue
        played += 1
        goals_home, goals_away = goals
        total_goals += goals_home + goals_away
        if goals_home == goals_away:
            draws += 1
            continue
        winner_side = "home" if goals_home > goals_away else "away"
        winner_id = safe_int(dig(m, "teams", winner_side, "id"))
        if winner_id is not None and winner_id == match.home.id:
            home_wins += 1
        else:
            away_wins += 1

    summary: Optional[HeadToHeadSummary] = None
    if played:
        summary = HeadToHeadSummary(
            home_wins=home_wins,
            away_wins=away_wins,
            draws=draws,
            avg_goals=_one_decimal(total_goals, played),
        )
    return HeadToHead(meetings=shown, summary=summary)


def _form_match(item: dict, team_id: Optional[int]) -> Optional[FormMatch]:
    goals = played_goals(item)
    if goals is None:
        return None
    is_home = safe_int(dig(item, "teams", "home", "id")) == team_id
    scored, conceded = goals if is_home else (goals[1], goals[0])
    if scored > conceded:
        result = "W"
    elif scored < conceded:
        result = "L"
    else:
        result = "D"
    opponent = dig(item, "teams", "away" if is_home else "home", "name")
    return FormMatch(
        date=format_display_date(dig(item, "fixture", "date")),
        opponent=opponent,
        score=f"{goals[0]}-{goals[1]}",
        result=result,
    )


def normalize_form(envelope: DomainEnvelope, team_id: Optional[int]) -> FormRecord:
    """Last five played fixtures of one team, most recent first."""
    fixtures = [f for f in envelope.response_list() if isinstance(f, dict)]
    fixtures.sort(key=fixture_sort_key, reverse=True)

    matches = []
    for item in fixtures:
        summary = _form_match(item, team_id)
        if summary is not None:
            matches.append(summary)
        if len(matches) == FORM_LENGTH:
            break

    if not matches:
        return FormRecord()
    return FormRecord(
        form="".join(m.result for m in matches),
        matches=matches,
        source="fixtures",
    )
