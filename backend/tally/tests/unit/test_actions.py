import itertools
import uuid

import pytest

from tally.logic.actions import (
    add_player,
    apply_score,
    next_round,
    previous_round,
    remove_player,
    rename_player,
    reset_scores,
)
from tally.logic.exceptions import PlayerNotFoundError, RosterLimitError
from tally.logic.game import create_session


def _player(session, name):
    return next(p for p in session.players if p.name == name)


class TestRoundNavigation:
    def test_next_round_advances(self, table_tennis_session):
        assert next_round(table_tennis_session).current_round_index == 1

    def test_next_round_saturates_at_last_round(self, table_tennis_session):
        session = table_tennis_session
        for _ in range(10):
            session = next_round(session)
        assert session.current_round_index == 4
        assert next_round(session) is session

    def test_previous_round_saturates_at_zero(self, table_tennis_session):
        assert previous_round(table_tennis_session) is table_tennis_session

    def test_previous_round_steps_back(self, table_tennis_session):
        session = next_round(next_round(table_tennis_session))
        assert previous_round(session).current_round_index == 1

    def test_cursor_stays_in_range_for_any_sequence(self, table_tennis_session):
        for moves in itertools.product((next_round, previous_round), repeat=7):
            session = table_tennis_session
            for move in moves:
                session = move(session)
                assert 0 <= session.current_round_index <= session.total_rounds - 1

    def test_single_round_preset_never_moves(self, preset_by_id):
        session = create_session(preset_by_id("chess"), ["W", "B"])
        assert next_round(session) is session
        assert previous_round(session) is session


class TestApplyScore:
    def test_table_tennis_scenario(self, table_tennis_session, table_tennis):
        point = table_tennis.option("Point")
        undo = table_tennis.option("Undo")
        a = _player(table_tennis_session, "A")
        b = _player(table_tennis_session, "B")

        session = table_tennis_session
        for _ in range(3):
            session = apply_score(session, point, a.id)

        assert session.get_player(a.id).round_scores == (3.0, 0.0, 0.0, 0.0, 0.0)
        assert session.get_player(b.id).round_scores == b.round_scores

        session = next_round(session)
        assert session.current_round_index == 1

        session = apply_score(session, undo, a.id)
        assert session.get_player(a.id).round_scores[1] == 0.0

    def test_scores_current_round_only(self, table_tennis_session, table_tennis):
        a = _player(table_tennis_session, "A")
        session = next_round(next_round(table_tennis_session))
        session = apply_score(session, table_tennis.option("Point"), a.id)
        assert session.get_player(a.id).round_scores == (0.0, 0.0, 1.0, 0.0, 0.0)

    def test_undo_at_floor_is_a_no_op(self, table_tennis_session, table_tennis):
        a = _player(table_tennis_session, "A")
        assert apply_score(table_tennis_session, table_tennis.option("Undo"), a.id) is table_tennis_session

    def test_undo_overshoot_is_not_reversible(self, table_tennis_session, table_tennis):
        point, undo = table_tennis.option("Point"), table_tennis.option("Undo")
        a = _player(table_tennis_session, "A")
        session = apply_score(table_tennis_session, point, a.id)
        session = apply_score(session, undo, a.id)
        session = apply_score(session, undo, a.id)
        session = apply_score(session, point, a.id)
        assert session.get_player(a.id).round_scores[0] == 1.0

    def test_never_below_floor(self, preset_by_id):
        chess = preset_by_id("chess")
        session = create_session(chess, ["W", "B"])
        white = session.players[0]
        for labels in itertools.product(("Win", "Draw", "Undo"), repeat=5):
            current = session
            for label in labels:
                current = apply_score(current, chess.option(label), white.id)
                assert current.get_player(white.id).round_scores[0] >= chess.score_floor

    def test_half_points(self, preset_by_id):
        chess = preset_by_id("chess")
        session = create_session(chess, ["W", "B"])
        white = session.players[0]
        session = apply_score(session, chess.option("Draw"), white.id)
        session = apply_score(session, chess.option("Win"), white.id)
        assert session.get_player(white.id).total_score == 1.5

    def test_unknown_player_raises(self, table_tennis_session, table_tennis):
        with pytest.raises(PlayerNotFoundError):
            apply_score(table_tennis_session, table_tennis.option("Point"), uuid.uuid4())

    def test_input_session_is_untouched(self, table_tennis_session, table_tennis):
        a = _player(table_tennis_session, "A")
        apply_score(table_tennis_session, table_tennis.option("Point"), a.id)
        assert table_tennis_session.is_pristine


class TestResetScores:
    def test_zeroes_scores_and_rewinds(self, table_tennis_session, table_tennis):
        a = _player(table_tennis_session, "A")
        session = apply_score(table_tennis_session, table_tennis.option("Point"), a.id)
        session = next_round(next_round(session))
        session = apply_score(session, table_tennis.option("Point"), a.id)

        reset = reset_scores(session)

        assert reset.current_round_index == 0
        assert all(p.round_scores == (0.0,) * 5 for p in reset.players)
        assert [(p.id, p.name) for p in reset.players] == [(p.id, p.name) for p in session.players]
        assert reset.preset == session.preset

    def test_pristine_session_is_a_no_op(self, table_tennis_session):
        assert reset_scores(table_tennis_session) is table_tennis_session

    def test_rewinds_even_without_scores(self, table_tennis_session):
        session = next_round(table_tennis_session)
        assert reset_scores(session).current_round_index == 0


class TestRoster:
    def test_add_player_uses_suggested_name(self, preset_by_id):
        session = create_session(preset_by_id("chess"), ["White", "Black"])
        session = add_player(session)
        assert [p.name for p in session.players] == ["White", "Black", "Challenger 1"]
        assert session.players[-1].round_scores == (0.0,)

    def test_add_player_past_defaults(self, preset_by_id):
        session = create_session(preset_by_id("chess"), ["a", "b", "c", "d"])
        session = add_player(session)
        assert session.players[-1].name == "Player 5"

    def test_add_player_at_max_rejected(self, table_tennis_session):
        with pytest.raises(RosterLimitError, match="up to 2"):
            add_player(table_tennis_session)

    def test_remove_player(self, preset_by_id):
        session = create_session(preset_by_id("chess"), ["W", "B", "C"])
        doomed = session.players[1]
        session = remove_player(session, doomed.id)
        assert [p.name for p in session.players] == ["W", "C"]

    def test_remove_player_below_min_rejected(self, table_tennis_session):
        with pytest.raises(RosterLimitError, match="at least 2"):
            remove_player(table_tennis_session, table_tennis_session.players[0].id)

    def test_remove_unknown_player(self, preset_by_id):
        session = create_session(preset_by_id("chess"), ["W", "B", "C"])
        with pytest.raises(PlayerNotFoundError):
            remove_player(session, uuid.uuid4())

    def test_roster_changes_keep_vectors_normalized(self, preset_by_id):
        three_rounds = preset_by_id("chess").model_copy(update={"round_count": 3})
        session = create_session(three_rounds, ["W", "B"])
        session = add_player(add_player(session))
        session = remove_player(session, session.players[0].id)
        assert all(len(p.round_scores) == session.total_rounds for p in session.players)

    def test_rename_player(self, table_tennis_session):
        a = _player(table_tennis_session, "A")
        renamed = rename_player(table_tennis_session, a.id, "Alice")
        assert renamed.get_player(a.id).name == "Alice"

    def test_rename_to_same_name_is_a_no_op(self, table_tennis_session):
        a = _player(table_tennis_session, "A")
        assert rename_player(table_tennis_session, a.id, "A") is table_tennis_session
