"""
Session commands: round navigation, scoring and roster changes.

Every command takes a session and returns a session. A command that has
nothing to do returns the same instance, so callers detect a change with
`new is not old`. Rule violations raise TallyRuleError subclasses and
leave the input untouched.
"""

from uuid import UUID

import structlog

from tally.logic.exceptions import PlayerNotFoundError, RosterLimitError
from tally.logic.presets import ScoreOption
from tally.logic.state import GameSession, PlayerScore
from tally.logic.state_utils import replace_players, set_round_index, update_player, zero_scores

logger = structlog.get_logger()


def next_round(session: GameSession) -> GameSession:
    """Advance to the next round; no-op on the last round."""
    if not session.can_advance_round:
        return session
    return set_round_index(session, session.current_round_index + 1)


def previous_round(session: GameSession) -> GameSession:
    """Go back one round; no-op on the first round."""
    if not session.can_rewind_round:
        return session
    return set_round_index(session, session.current_round_index - 1)


def apply_score(session: GameSession, option: ScoreOption, player_id: UUID) -> GameSession:
    """
    Add option.delta to the player's current-round score, clamped to the preset's floor.

    Undo options carry a negative delta, so undoing at the floor loses the
    overshoot: +1 then Undo twice ends at the floor, not below it.

    Raises:
        PlayerNotFoundError: If no player has `player_id`

    """
    player = session.get_player(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    round_index = min(session.current_round_index, session.total_rounds - 1)
    scores = list(player.round_scores)
    scores[round_index] = max(session.preset.score_floor, scores[round_index] + option.delta)
    if scores[round_index] == player.round_scores[round_index]:
        return session
    return update_player(session, player_id, round_scores=tuple(scores))


def reset_scores(session: GameSession) -> GameSession:
    """Zero every score and rewind to the first round, keeping the roster."""
    if session.current_round_index == 0 and all(not any(p.round_scores) for p in session.players):
        return session
    rounds = session.total_rounds
    reset = replace_players(session, (zero_scores(p, rounds) for p in session.players))
    return set_round_index(reset, 0)


def add_player(session: GameSession) -> GameSession:
    """
    Append a player with the preset's suggested name and a zeroed score vector.

    Raises:
        RosterLimitError: If the roster is already at the preset's maximum

    """
    if not session.can_add_player:
        raise RosterLimitError(f"{session.preset.name} supports up to {session.preset.max_players} player(s)")
    player = PlayerScore(
        name=session.preset.suggested_name(len(session.players)),
        round_scores=(0.0,) * session.total_rounds,
    )
    logger.debug("player added", session_id=str(session.id), player_id=str(player.id))
    return replace_players(session, (*session.players, player))


def remove_player(session: GameSession, player_id: UUID) -> GameSession:
    """
    Remove a player, provided the roster stays at or above the preset's minimum.

    Raises:
        PlayerNotFoundError: If no player has `player_id`
        RosterLimitError: If removal would drop below min_players

    """
    if session.get_player(player_id) is None:
        raise PlayerNotFoundError(player_id)
    if not session.can_remove_player:
        raise RosterLimitError(f"{session.preset.name} requires at least {session.preset.min_players} player(s)")
    logger.debug("player removed", session_id=str(session.id), player_id=str(player_id))
    return replace_players(session, (p for p in session.players if p.id != player_id))


def rename_player(session: GameSession, player_id: UUID, name: str) -> GameSession:
    """Change a player's display name."""
    player = session.get_player(player_id)
    if player is None:
        raise PlayerNotFoundError(player_id)
    if player.name == name:
        return session
    return update_player(session, player_id, name=name)
