"""Tests for team statistics, injuries, squads and standings normalizers."""

import pytest

from pitchpulse.models import StandingsExcerpt
from pitchpulse.normalizers import normalize_injuries, normalize_squad, normalize_standings, normalize_team_stats
from pitchpulse.provider.envelope import DomainEnvelope

from tests.conftest import AWAY_ID, HOME_ID, provider_body
from tests.test_normalizers_live import NO_DATA


def _team_stats_body():
    return {
        "get": "teams/statistics",
        "errors": [],
        "response": {
            "form": "WDLWW",
            "fixtures": {
                "played": {"home": 17, "away": 17, "total": 34},
                "wins": {"home": 14, "away": 11, "total": 25},
                "draws": {"home": 2, "away": 4, "total": 6},
                "loses": {"home": 1, "away": 2, "total": 3},
            },
            "goals": {
                "for": {"total": {"home": 51, "away": 38, "total": 89}, "average": {"total": "2.6"}},
                "against": {"total": {"home": 14, "away": 17, "total": 31}, "average": {"total": "0.9"}},
            },
            "clean_sheet": {"home": 8, "away": 6, "total": 14},
            "failed_to_score": {"home": 0, "away": 2, "total": 2},
            "biggest": {"streak": {"wins": 9}},
            "lineups": [{"formation": "4-3-3", "played": 20}],
        },
    }


class TestTeamStats:
    def test_full_block(self):
        """A full statistics block is mapped field by field."""
        stats = normalize_team_stats(DomainEnvelope.wrap(_team_stats_body()))

        assert stats.form == "WDLWW"
        assert stats.played.total == 34
        assert stats.losses.away == 2
        assert stats.goals_for.total == 89
        assert stats.goals_for_average == 2.6
        assert stats.goals_against_average == 0.9
        assert stats.clean_sheets.home == 8
        assert stats.biggest == {"streak": {"wins": 9}}
        assert stats.lineups[0]["formation"] == "4-3-3"
        assert stats.cards == {}

    def test_unreported_sections(self):
        """Sections the provider omits stay None."""
        body = {"errors": [], "response": {"form": None, "fixtures": {"played": {"total": 3}}}}
        stats = normalize_team_stats(DomainEnvelope.wrap(body))

        assert stats.form == ""
        assert stats.played.total == 3
        assert stats.played.home == 0
        assert stats.wins is None
        assert stats.goals_for_average is None
        assert stats.clean_sheets is None

    @pytest.mark.parametrize("envelope", NO_DATA)
    def test_no_data(self, envelope):
        """No usable payload gives no statistics."""
        assert normalize_team_stats(envelope) is None


class TestInjuries:
    def test_capped_at_ten(self):
        """At most ten injuries are kept."""
        items = [
            {"player": {"name": f"Player {i}", "photo": None, "type": "Missing Fixture", "reason": "Knee Injury"}}
            for i in range(14)
        ]
        injuries = normalize_injuries(DomainEnvelope.wrap(provider_body(items)))

        assert len(injuries) == 10
        assert injuries[0].player == "Player 0"
        assert injuries[0].reason == "Knee Injury"

    @pytest.mark.parametrize("envelope", NO_DATA)
    def test_no_data(self, envelope):
        """No usable payload gives no injuries."""
        assert normalize_injuries(envelope) == []


class TestSquad:
    def test_players(self):
        """Non-object entries are skipped and ages are parsed."""
        body = provider_body([{
            "team": {"id": HOME_ID},
            "players": [
                {"id": 617, "name": "Ederson", "age": 30, "number": 31, "position": "Goalkeeper", "photo": "e.png"},
                "junk",
                {"id": 1100, "name": "E. Haaland", "age": "23", "number": 9, "position": "Attacker"},
            ],
        }])
        squad = normalize_squad(DomainEnvelope.wrap(body))

        assert [p.name for p in squad] == ["Ederson", "E. Haaland"]
        assert squad[1].age == 23
        assert squad[1].photo is None

    @pytest.mark.parametrize("envelope", NO_DATA)
    def test_no_data(self, envelope):
        """No usable payload gives an empty squad."""
        assert normalize_squad(envelope) == []


def _row(rank, team_id, name, points=50):
    return {
        "rank": rank,
        "team": {"id": team_id, "name": name},
        "points": points,
        "goalsDiff": 10,
        "form": "WWDLW",
        "description": "Promotion - Champions League" if rank <= 4 else None,
        "all": {"played": 34, "win": 15, "draw": 5, "lose": 14},
    }


def _standings_body(groups):
    return provider_body([{"league": {"id": 39, "standings": groups}}])


class TestStandings:
    """Table excerpt and participant lookup."""

    def test_single_table(self, match):
        """A single table is cut to ten rows and both sides are found."""
        rows = [_row(i, 100 + i, f"Team {i}") for i in range(1, 21)]
        rows[0] = _row(1, HOME_ID, "Manchester City", points=85)
        rows[2] = _row(3, AWAY_ID, "Arsenal", points=80)
        excerpt = normalize_standings(DomainEnvelope.wrap(_standings_body([rows])), match)

        assert len(excerpt.table) == 10
        assert excerpt.home.rank == 1
        assert excerpt.home.points == 85
        assert excerpt.home.won == 15
        assert excerpt.home.description == "Promotion - Champions League"
        assert excerpt.away.rank == 3
        assert excerpt.away.rank_label == "3"

    def test_group_containing_participant_is_shown(self, match):
        """With several groups the one holding a participant is shown."""
        group_a = [_row(1, 1, "A1"), _row(2, 2, "A2")]
        group_b = [_row(1, 3, "B1"), _row(2, AWAY_ID, "Arsenal")]
        group_c = [_row(1, HOME_ID, "Manchester City")]
        excerpt = normalize_standings(DomainEnvelope.wrap(_standings_body([group_a, group_b, group_c])), match)

        assert [e.team_name for e in excerpt.table] == ["B1", "Arsenal"]
        assert excerpt.home.team_name == "Manchester City"
        assert excerpt.away.rank == 2

    def test_participants_missing_from_table(self, match):
        """Teams absent from the table have no row."""
        rows = [_row(1, 1, "A1"), _row(2, 2, "A2")]
        excerpt = normalize_standings(DomainEnvelope.wrap(_standings_body([rows])), match)

        assert excerpt.home is None
        assert excerpt.away is None
        assert [e.team_name for e in excerpt.table] == ["A1", "A2"]

    @pytest.mark.parametrize("envelope", NO_DATA)
    def test_no_data(self, envelope, match):
        """No usable payload gives an empty excerpt."""
        assert normalize_standings(envelope, match) == StandingsExcerpt()
