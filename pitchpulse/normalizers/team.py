"""Normalizers for team-scoped domains: season statistics, injuries, squads, standings."""

from typing import Optional

from pitchpulse.models import Injury, Match, SplitCount, SquadPlayer, StandingEntry, StandingsExcerpt, TeamSeasonStats
from pitchpulse.normalizers._access import as_dict, as_list, dig, safe_float, safe_int
from pitchpulse.provider.envelope import DomainEnvelope

INJURIES_LIMIT = 10
TABLE_ROWS = 10


def _split(section) -> Optional[SplitCount]:
    """{home, away, total} counts; None when the section is not reported."""
    if not isinstance(section, dict):
        return None
    return SplitCount(
        home=safe_int(section.get("home")) or 0,
        away=safe_int(section.get("away")) or 0,
        total=safe_int(section.get("total")) or 0,
    )


def normalize_team_stats(envelope: DomainEnvelope) -> Optional[TeamSeasonStats]:
    data = envelope.response_object()
    if data is None:
        return None

    form = data.get("form")
    return TeamSeasonStats(
        form=form if isinstance(form, str) else "",
        played=_split(dig(data, "fixtures", "played")),
        wins=_split(dig(data, "fixtures", "wins")),
        draws=_split(dig(data, "fixtures", "draws")),
        losses=_split(dig(data, "fixtures", "loses")),
        goals_for=_split(dig(data, "goals", "for", "total")),
        goals_against=_split(dig(data, "goals", "against", "total")),
        goals_for_average=safe_float(dig(data, "goals", "for", "average", "total")),
        goals_against_average=safe_float(dig(data, "goals", "against", "average", "total")),
        clean_sheets=_split(data.get("clean_sheet")),
        failed_to_score=_split(data.get("failed_to_score")),
        biggest=as_dict(data.get("biggest")),
        penalty=as_dict(data.get("penalty")),
        lineups=[entry for entry in as_list(data.get("lineups")) if isinstance(entry, dict)],
        cards=as_dict(data.get("cards")),
    )


def normalize_injuries(envelope: DomainEnvelope) -> list[Injury]:
    injuries = []
    for item in envelope.response_list()[:INJURIES_LIMIT]:
        if not isinstance(item, dict):
            continue
        injuries.append(
            Injury(
                player=dig(item, "player", "name"),
                photo=dig(item, "player", "photo"),
                type=dig(item, "player", "type"),
                reason=dig(item, "player", "reason"),
            )
        )
    return injuries


def normalize_squad(envelope: DomainEnvelope) -> list[SquadPlayer]:
    players = as_list(dig(envelope.response_list(), 0, "players"))
    return [
        SquadPlayer(
            id=safe_int(p.get("id")),
            name=p.get("name"),
            age=safe_int(p.get("age")),
            number=safe_int(p.get("number")),
            position=p.get("position"),
            photo=p.get("photo"),
        )
        for p in players
        if isinstance(p, dict)
    ]


def _standing_entry(row: dict) -> StandingEntry:
    """Parse a single standing row.

    `description` carries promotion/relegation status
    ("Promotion - Champions League", "Relegation"), None for mid-table.
    """
    return StandingEntry(
        team_id=safe_int(dig(row, "team", "id")),
        team_name=dig(row, "team", "name"),
        rank=safe_int(row.get("rank")),
        points=safe_int(row.get("points")) or 0,
        played=safe_int(dig(row, "all", "played")) or 0,
        won=safe_int(dig(row, "all", "win")) or 0,
        drawn=safe_int(dig(row, "all", "draw")) or 0,
        lost=safe_int(dig(row, "all", "lose")) or 0,
        goals_diff=safe_int(row.get("goalsDiff")) or 0,
        form=row.get("form") if isinstance(row.get("form"), str) else None,
        description=row.get("description"),
    )


def _find(groups: list[list[StandingEntry]], team_id: Optional[int]) -> Optional[StandingEntry]:
    if team_id is None:
        return None
    for group in groups:
        for entry in group:
            if entry.team_id == team_id:
                return entry
    return None


def normalize_standings(envelope: DomainEnvelope, match: Match) -> StandingsExcerpt:
    """
    League table excerpt for the two participants.

    API-Football nests tables as a list of groups (a single group for a
    regular league). The displayed table is the first group containing a
    participant, else the first group.
    """
    raw_groups = as_list(dig(envelope.response_list(), 0, "league", "standings"))
    groups = [
        [_standing_entry(row) for row in group if isinstance(row, dict)]
        for group in raw_groups
        if isinstance(group, list)
    ]
    groups = [g for g in groups if g]
    if not groups:
        return StandingsExcerpt()

    participants = {match.home.id, match.away.id} - {None}
    table = next(
        (g for g in groups if any(entry.team_id in participants for entry in g)),
        groups[0],
    )
    return StandingsExcerpt(
        home=_find(groups, match.home.id),
        away=_find(groups, match.away.id),
        table=table[:TABLE_ROWS],
    )
