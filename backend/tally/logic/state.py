"""
Frozen state models for scorekeeping sessions.

Sessions and players are immutable; commands in tally.logic.actions return
new instances built with model_copy. Construction normalizes every player's
score vector to the preset's round count and clamps the round cursor.
"""

from collections.abc import Iterable, Sequence
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, model_validator

from tally.logic.presets import GamePreset

_ROUND_INDEX = TypeAdapter(int)


def resize_scores(scores: Sequence[float], rounds: int) -> tuple[float, ...]:
    """Zero-pad or truncate scores to exactly `rounds` entries (at least one)."""
    rounds = max(rounds, 1)
    if len(scores) >= rounds:
        return tuple(scores[:rounds])
    return (*scores, *([0.0] * (rounds - len(scores))))


def clamp_round_index(index: int, rounds: int) -> int:
    return min(max(index, 0), max(rounds - 1, 0))


class PlayerScore(BaseModel):
    """A player's display name and per-round scores within one session."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    round_scores: tuple[float, ...] = ()

    @property
    def total_score(self) -> float:
        return sum(self.round_scores)


def normalize_players(players: Iterable[PlayerScore], rounds: int) -> tuple[PlayerScore, ...]:
    """Resize every player's score vector to `rounds`, copying only the players that change."""
    normalized = []
    for player in players:
        scores = resize_scores(player.round_scores, rounds)
        if scores == player.round_scores:
            normalized.append(player)
        else:
            normalized.append(player.model_copy(update={"round_scores": scores}))
    return tuple(normalized)


class GameSession(BaseModel):
    """
    A running game: one preset, its players, and the current round cursor.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    preset: GamePreset
    players: tuple[PlayerScore, ...] = ()
    current_round_index: int = 0  # 0-based, within [0, total_rounds - 1]

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        preset = data.get("preset")
        if isinstance(preset, dict):
            preset = GamePreset.model_validate(preset)
        if not isinstance(preset, GamePreset):
            return data
        rounds = preset.total_rounds
        players = tuple(
            p if isinstance(p, PlayerScore) else PlayerScore.model_validate(p) for p in data.get("players", ())
        )
        normalized = {**data, "preset": preset, "players": normalize_players(players, rounds)}
        try:
            index = _ROUND_INDEX.validate_python(data.get("current_round_index", 0))
        except ValidationError:
            return normalized
        normalized["current_round_index"] = clamp_round_index(index, rounds)
        return normalized

    @property
    def total_rounds(self) -> int:
        return self.preset.total_rounds

    @property
    def current_round_number(self) -> int:
        """1-based number of the current round."""
        return min(self.current_round_index, self.total_rounds - 1) + 1

    @property
    def progress(self) -> float:
        """Fraction of rounds reached, in [1/total_rounds, 1.0]."""
        return self.current_round_number / self.total_rounds

    @property
    def can_advance_round(self) -> bool:
        return self.current_round_index < self.total_rounds - 1

    @property
    def can_rewind_round(self) -> bool:
        return self.current_round_index > 0

    @property
    def can_add_player(self) -> bool:
        if self.preset.max_players is None:
            return True
        return len(self.players) < self.preset.max_players

    @property
    def can_remove_player(self) -> bool:
        return len(self.players) > self.preset.min_players

    @property
    def is_pristine(self) -> bool:
        """True when no player has scored yet."""
        return all(p.total_score == 0 for p in self.players)

    def player_index(self, player_id: UUID) -> int | None:
        return next((i for i, p in enumerate(self.players) if p.id == player_id), None)

    def get_player(self, player_id: UUID) -> PlayerScore | None:
        index = self.player_index(player_id)
        return None if index is None else self.players[index]
