"""Conversion between live sessions and their persisted snapshots."""

from collections.abc import Iterable

import structlog

from tally.logic.presets import GamePreset, find_preset
from tally.logic.state import GameSession, PlayerScore
from tally.session.models import (
    AppSettings,
    AppStatistics,
    GameSessionSnapshot,
    PersistedBundle,
    PlayerSnapshot,
)

logger = structlog.get_logger()


def session_to_snapshot(session: GameSession) -> GameSessionSnapshot:
    return GameSessionSnapshot(
        id=session.id,
        preset_id=session.preset.id,
        current_round_index=session.current_round_index,
        players=tuple(PlayerSnapshot(id=p.id, name=p.name, scores=p.round_scores) for p in session.players),
    )


def session_from_snapshot(snapshot: GameSessionSnapshot, presets: Iterable[GamePreset]) -> GameSession | None:
    """Rebuild a session, or return None when its preset is no longer in the catalog.

    Score vectors of the wrong length are zero-padded or truncated and an
    out-of-range round index is clamped.
    """
    preset = find_preset(presets, snapshot.preset_id)
    if preset is None:
        return None
    players = tuple(PlayerScore(id=p.id, name=p.name, round_scores=p.scores) for p in snapshot.players)
    return GameSession(
        id=snapshot.id,
        preset=preset,
        players=players,
        current_round_index=snapshot.current_round_index,
    )


def restore_sessions(snapshots: Iterable[GameSessionSnapshot], presets: Iterable[GamePreset]) -> tuple[GameSession, ...]:
    """Rebuild all restorable sessions, dropping those whose preset is gone."""
    catalog = tuple(presets)
    sessions = []
    for snapshot in snapshots:
        session = session_from_snapshot(snapshot, catalog)
        if session is None:
            logger.info("dropping session with unknown preset", session_id=str(snapshot.id), preset_id=snapshot.preset_id)
            continue
        sessions.append(session)
    return tuple(sessions)


def build_bundle(
    sessions: Iterable[GameSession],
    settings: AppSettings,
    statistics: AppStatistics,
) -> PersistedBundle:
    return PersistedBundle(
        sessions=tuple(session_to_snapshot(s) for s in sessions),
        settings=settings,
        statistics=statistics,
    )
