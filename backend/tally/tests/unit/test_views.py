import math

import pytest

from tally.logic import views
from tally.logic.game import create_session
from tally.logic.state import GameSession, PlayerScore
from tally.logic.state_utils import set_round_index, update_player


def _with_totals(session, *totals):
    for player, total in zip(session.players, totals, strict=True):
        scores = (total,) + (0.0,) * (session.total_rounds - 1)
        session = update_player(session, player.id, round_scores=scores)
    return session


class TestFormatScore:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (3.0, "3"),
            (0.0, "0"),
            (-1.0, "-1"),
            (2.5, "2.5"),
            (1.26, "1.3"),
            (2.00001, "2"),
            (1.99999, "2"),
            (12.0004, "12.0"),
        ],
    )
    def test_formats(self, value, expected):
        assert views.format_score(value) == expected

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_renders_zero(self, value):
        assert views.format_score(value) == "0"


class TestStandings:
    def test_sorted_by_total_descending(self, preset_by_id):
        session = _with_totals(create_session(preset_by_id("chess"), ["A", "B", "C"]), 1.0, 3.0, 2.0)
        assert [p.name for p in views.standings(session)] == ["B", "C", "A"]

    def test_ties_keep_roster_order(self, preset_by_id):
        session = _with_totals(create_session(preset_by_id("chess"), ["A", "B", "C"]), 1.0, 2.0, 2.0)
        assert [p.name for p in views.standings(session)] == ["B", "C", "A"]


class TestLeaderSummary:
    def test_single_leader(self, table_tennis_session):
        session = _with_totals(table_tennis_session, 3.0, 1.0)
        assert views.leader_summary(session) == "Leader: A (3)"

    def test_tie(self, table_tennis_session):
        session = _with_totals(table_tennis_session, 2.0, 2.0)
        assert views.leader_summary(session) == "Tied: A, B (2)"

    def test_tie_within_tolerance(self, preset_by_id):
        session = _with_totals(create_session(preset_by_id("chess"), ["A", "B"]), 1.5, 1.50001)
        assert views.leader_summary(session).startswith("Tied: ")

    def test_all_zero_is_a_tie(self, table_tennis_session):
        assert views.leader_summary(table_tennis_session) == "Tied: A, B (0)"

    def test_no_players(self, table_tennis):
        assert views.leader_summary(GameSession(preset=table_tennis)) == ""


class TestPlayerSummary:
    @pytest.mark.parametrize(
        ("names", "expected"),
        [
            ([], "No players yet"),
            (["A"], "A"),
            (["A", "B"], "A vs B"),
            (["A", "B", "C"], "A, B, C"),
            (["A", "B", "C", "D"], "A, B, C, D"),
            (["A", "B", "C", "D", "E"], "A, B, C +2 more"),
            (["A", "B", "C", "D", "E", "F"], "A, B, C +3 more"),
        ],
    )
    def test_summary(self, preset_by_id, names, expected):
        players = tuple(PlayerScore(name=n) for n in names)
        session = GameSession(preset=preset_by_id("chess"), players=players)
        assert views.player_summary(session) == expected


class TestRoundStatus:
    def test_first_round(self, table_tennis_session):
        assert views.round_status_headline(table_tennis_session) == "Game 1 of 5"
        assert views.round_status_detail(table_tennis_session) == "In progress"
        assert views.round_status_badge(table_tennis_session) == "1/5 game"

    def test_last_round(self, table_tennis_session):
        last = set_round_index(table_tennis_session, 4)
        assert views.round_status_headline(last) == "Game 5 of 5"
        assert views.round_status_detail(last) == "Final game"
        assert views.round_status_badge(last) == "5/5 game"

    def test_round_title(self, preset_by_id):
        session = create_session(preset_by_id("hockey"), ["H", "A"])
        assert [views.round_title(session, i) for i in range(3)] == ["Period 1", "Period 2", "Period 3"]


class TestTargets:
    def test_target_reached(self, table_tennis_session):
        assert views.target_reached(table_tennis_session, 11.0) is True
        assert views.target_reached(table_tennis_session, 10.0) is False

    def test_no_target(self, preset_by_id):
        session = create_session(preset_by_id("football"), ["H", "A"])
        assert views.target_reached(session, 100.0) is False
        assert views.target_summary(session) is None

    def test_target_summary(self, table_tennis_session):
        assert views.target_summary(table_tennis_session) == "Target: first to 11 each game."
