"""
Immutable state update utilities using Pydantic model_copy.

These functions never mutate the input state - they always return new
state objects with the requested changes applied. model_copy skips
validation, so every roster change goes through replace_players to keep
score vectors normalized.
"""

from collections.abc import Iterable
from uuid import UUID

from tally.logic.exceptions import PlayerNotFoundError
from tally.logic.state import GameSession, PlayerScore, clamp_round_index, normalize_players

_PLAYER_FIELDS = set(PlayerScore.model_fields)


def replace_players(session: GameSession, players: Iterable[PlayerScore]) -> GameSession:
    """
    Return new session with the given roster, normalized to the session's round count.

    Args:
        session: Current session
        players: New roster, in display order

    Returns:
        New GameSession with every score vector sized to total_rounds

    """
    return session.model_copy(update={"players": normalize_players(players, session.total_rounds)})


def update_player(session: GameSession, player_id: UUID, **updates: object) -> GameSession:
    """
    Return new session with updated player.

    Raises:
        PlayerNotFoundError: If no player has `player_id`
        ValueError: If update fields are invalid

    """
    invalid_fields = set(updates) - _PLAYER_FIELDS
    if invalid_fields:
        raise ValueError(f"Invalid player fields: {invalid_fields}")
    index = session.player_index(player_id)
    if index is None:
        raise PlayerNotFoundError(player_id)
    players = list(session.players)
    players[index] = session.players[index].model_copy(update=updates)
    return replace_players(session, players)


def set_round_index(session: GameSession, index: int) -> GameSession:
    """Return new session with the round cursor moved to `index` (clamped)."""
    return session.model_copy(update={"current_round_index": clamp_round_index(index, session.total_rounds)})


def zero_scores(player: PlayerScore, rounds: int) -> PlayerScore:
    return player.model_copy(update={"round_scores": (0.0,) * max(rounds, 1)})
