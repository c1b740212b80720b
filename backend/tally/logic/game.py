"""
Session creation: validate a proposed roster against its preset.
"""

from collections.abc import Iterable

from tally.logic.exceptions import SessionValidationError
from tally.logic.presets import GamePreset
from tally.logic.state import GameSession, PlayerScore


def clean_player_names(names: Iterable[str]) -> list[str]:
    """Strip surrounding whitespace and drop names that end up empty."""
    return [stripped for stripped in (name.strip() for name in names) if stripped]


def validate_roster(preset: GamePreset, names: list[str]) -> None:
    """
    Check a cleaned roster against the preset's player bounds.

    Raises:
        SessionValidationError: With a user-facing message when bounds are violated

    """
    if len(names) < preset.min_players:
        raise SessionValidationError(f"This preset requires at least {preset.min_players} player(s).")
    if preset.max_players is not None and len(names) > preset.max_players:
        raise SessionValidationError(f"This preset supports up to {preset.max_players} player(s).")


def create_session(preset: GamePreset, names: Iterable[str]) -> GameSession:
    """Build a fresh session for `preset`; no session exists if validation fails."""
    clean_names = clean_player_names(names)
    validate_roster(preset, clean_names)
    rounds = preset.total_rounds
    players = tuple(PlayerScore(name=name, round_scores=(0.0,) * rounds) for name in clean_names)
    return GameSession(preset=preset, players=players)


def draft_player_names(preset: GamePreset) -> list[str]:
    """Initial names offered when creating a session for `preset`."""
    names = [preset.suggested_name(i) for i in range(len(preset.default_player_names))]
    while len(names) < preset.min_players:
        names.append(preset.suggested_name(len(names)))
    if preset.max_players is not None:
        names = names[: preset.max_players]
    return names
