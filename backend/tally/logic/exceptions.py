"""Typed domain exceptions for scorekeeping rule violations.

All domain-level rule violations use subclasses of TallyRuleError rather
than raw ValueError, so front-ends can catch one type and show the message.
"""


class TallyRuleError(Exception):
    """Base exception for scorekeeping rule violations."""


class SessionValidationError(TallyRuleError):
    """A new session does not satisfy its preset's player bounds."""


class RosterLimitError(TallyRuleError):
    """Adding or removing a player would break the preset's player bounds."""


class PlayerNotFoundError(TallyRuleError):
    """No player with the given id exists in the session."""

    def __init__(self, player_id: object) -> None:
        self.player_id = player_id
        super().__init__(f"player {player_id} is not part of this session")


class SessionNotFoundError(TallyRuleError):
    """No session with the given id is registered."""

    def __init__(self, session_id: object) -> None:
        self.session_id = session_id
        super().__init__(f"session {session_id} not found")


class UnknownPresetError(TallyRuleError):
    """Preset id is not part of the catalog."""

    def __init__(self, preset_id: str) -> None:
        self.preset_id = preset_id
        super().__init__(f"unknown preset '{preset_id}'")


class UnknownScoreOptionError(TallyRuleError):
    """The preset has no scoring option with the given label."""

    def __init__(self, preset_id: str, label: str) -> None:
        self.preset_id = preset_id
        self.label = label
        super().__init__(f"preset '{preset_id}' has no scoring option '{label}'")
