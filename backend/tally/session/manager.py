"""Application state: the session registry, settings and lifetime statistics.

AppState is the single owner of all state. Every command applies a pure
update, swaps the result in, and writes the complete bundle through to
storage. Commands that change nothing do not write.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

import structlog

from tally.logic import actions
from tally.logic.exceptions import SessionNotFoundError, UnknownPresetError, UnknownScoreOptionError
from tally.logic.game import create_session
from tally.logic.presets import PLACEHOLDER_PRESET, PRESET_LIBRARY, GamePreset, find_preset
from tally.session.feedback import FeedbackManager
from tally.session.models import AppSettings, AppStatistics, PersistedBundle, utc_now
from tally.session.snapshot import build_bundle, restore_sessions
from tally.session.statistics import (
    DerivedStatistics,
    derive_statistics,
    record_player_added,
    record_score_change,
    record_session_created,
    touch,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence
    from datetime import datetime
    from uuid import UUID

    from tally.logic.state import GameSession
    from tally.session.persistence import StatePersistence

logger = structlog.get_logger()


def _catalog(presets: Iterable[GamePreset]) -> tuple[GamePreset, ...]:
    """An empty catalog falls back to the generic placeholder preset."""
    return tuple(presets) or (PLACEHOLDER_PRESET,)


class AppState:
    """Registry of sessions plus settings and statistics, persisted on every change."""

    def __init__(
        self,
        persistence: StatePersistence | None = None,
        *,
        presets: Sequence[GamePreset] = PRESET_LIBRARY,
        sessions: Iterable[GameSession] = (),
        settings: AppSettings | None = None,
        statistics: AppStatistics | None = None,
        feedback: FeedbackManager | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._persistence = persistence
        self._presets = _catalog(presets)
        self._sessions: tuple[GameSession, ...] = tuple(sessions)
        self._settings = settings if settings is not None else AppSettings()
        self._clock = clock
        self._statistics = statistics if statistics is not None else AppStatistics(last_updated=clock())
        self._feedback = feedback if feedback is not None else FeedbackManager()
        self._batch_depth = 0
        self._dirty = False

    @classmethod
    def load(
        cls,
        persistence: StatePersistence,
        *,
        presets: Sequence[GamePreset] = PRESET_LIBRARY,
        feedback: FeedbackManager | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> AppState:
        """Restore state from storage, falling back to defaults when nothing usable is stored."""
        bundle = persistence.load()
        if bundle is None:
            bundle = PersistedBundle(sessions=(), settings=AppSettings(), statistics=AppStatistics(last_updated=clock()))
        sessions = restore_sessions(bundle.sessions, _catalog(presets))
        logger.info("state loaded", sessions=len(sessions), dropped=len(bundle.sessions) - len(sessions))
        return cls(
            persistence,
            presets=presets,
            sessions=sessions,
            settings=bundle.settings,
            statistics=bundle.statistics,
            feedback=feedback,
            clock=clock,
        )

    # --- read access ---

    @property
    def presets(self) -> tuple[GamePreset, ...]:
        return self._presets

    @property
    def sessions(self) -> tuple[GameSession, ...]:
        return self._sessions

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def statistics(self) -> AppStatistics:
        return self._statistics

    @property
    def derived_statistics(self) -> DerivedStatistics:
        return derive_statistics(self._sessions, self._presets)

    def get_session(self, session_id: UUID) -> GameSession:
        session = next((s for s in self._sessions if s.id == session_id), None)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def bundle(self) -> PersistedBundle:
        return build_bundle(self._sessions, self._settings, self._statistics)

    # --- persistence ---

    @contextlib.contextmanager
    def _batch(self) -> Iterator[None]:
        """Group several changes into one write."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._persist()

    def _changed(self) -> None:
        self._dirty = True
        if self._batch_depth == 0:
            self._persist()

    def _persist(self) -> None:
        self._dirty = False
        if self._persistence is not None:
            self._persistence.save(self.bundle())

    # --- session list ---

    def add_session(self, session: GameSession) -> None:
        self._sessions = (*self._sessions, session)
        self._statistics = record_session_created(self._statistics, len(session.players), self._clock())
        logger.info("session added", session_id=str(session.id), preset_id=session.preset.id)
        self._changed()

    def create_session(self, preset_id: str, names: Iterable[str]) -> GameSession:
        """Validate and register a new session.

        Raises:
            UnknownPresetError: If the preset is not in the catalog
            SessionValidationError: If the roster violates the preset's player bounds

        """
        preset = find_preset(self._presets, preset_id)
        if preset is None:
            raise UnknownPresetError(preset_id)
        session = create_session(preset, names)
        self.add_session(session)
        return session

    def delete_sessions(self, indices: Iterable[int]) -> None:
        """Remove the sessions at the given list positions."""
        doomed = set(indices)
        if not doomed:
            return
        out_of_range = [i for i in doomed if not 0 <= i < len(self._sessions)]
        if out_of_range:
            raise IndexError(f"session index out of range: {sorted(out_of_range)}")
        self._sessions = tuple(s for i, s in enumerate(self._sessions) if i not in doomed)
        self._statistics = touch(self._statistics, self._clock())
        logger.info("sessions deleted", count=len(doomed))
        self._changed()

    def clear_sessions(self) -> None:
        self._sessions = ()
        self._statistics = touch(self._statistics, self._clock())
        logger.info("sessions cleared")
        self._changed()

    # --- statistics and settings ---

    def reset_statistics(self) -> None:
        self._statistics = AppStatistics(last_updated=self._clock())
        logger.info("statistics reset")
        self._changed()

    def register_player_added(self) -> None:
        self._statistics = record_player_added(self._statistics, self._clock())
        self._changed()

    def register_score_change(self, delta: float) -> None:
        """Record a score event and trigger feedback; a zero delta is ignored."""
        if delta == 0:
            return
        self._statistics = record_score_change(self._statistics, delta, self._clock())
        self._changed()
        self._feedback.play(delta, self._settings)

    def update_settings(self, *, sound_enabled: bool | None = None, vibration_enabled: bool | None = None) -> bool:
        updates: dict[str, bool] = {}
        if sound_enabled is not None and sound_enabled != self._settings.sound_enabled:
            updates["sound_enabled"] = sound_enabled
        if vibration_enabled is not None and vibration_enabled != self._settings.vibration_enabled:
            updates["vibration_enabled"] = vibration_enabled
        if not updates:
            return False
        self._settings = self._settings.model_copy(update=updates)
        self._changed()
        return True

    # --- session commands ---

    def _update_session(self, session_id: UUID, command: Callable[[GameSession], GameSession]) -> bool:
        current = self.get_session(session_id)
        updated = command(current)
        if updated is current:
            return False
        self._sessions = tuple(updated if s.id == session_id else s for s in self._sessions)
        self._changed()
        return True

    def next_round(self, session_id: UUID) -> bool:
        return self._update_session(session_id, actions.next_round)

    def previous_round(self, session_id: UUID) -> bool:
        return self._update_session(session_id, actions.previous_round)

    def reset_scores(self, session_id: UUID) -> bool:
        return self._update_session(session_id, actions.reset_scores)

    def apply_score(self, session_id: UUID, player_id: UUID, option_label: str) -> bool:
        """Apply a scoring option and record its nominal delta in the statistics.

        The statistics see the option's delta even when the session floor
        absorbed part or all of it.
        """
        preset = self.get_session(session_id).preset
        option = preset.option(option_label)
        if option is None:
            raise UnknownScoreOptionError(preset.id, option_label)
        with self._batch():
            changed = self._update_session(session_id, lambda s: actions.apply_score(s, option, player_id))
            self.register_score_change(option.delta)
        return changed

    def add_player(self, session_id: UUID) -> bool:
        with self._batch():
            self._update_session(session_id, actions.add_player)
            self.register_player_added()
        return True

    def remove_player(self, session_id: UUID, player_id: UUID) -> bool:
        return self._update_session(session_id, lambda s: actions.remove_player(s, player_id))

    def rename_player(self, session_id: UUID, player_id: UUID, name: str) -> bool:
        return self._update_session(session_id, lambda s: actions.rename_player(s, player_id, name))
