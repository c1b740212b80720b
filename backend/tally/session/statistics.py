"""
Lifetime statistics updates and statistics derived from live sessions.

Lifetime counters are recorded alongside user actions rather than
recomputed, so they keep counting sessions that were later deleted.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from tally.logic.presets import GamePreset
from tally.logic.state import GameSession
from tally.session.models import AppStatistics


@dataclass(frozen=True)
class DerivedStatistics:
    """Snapshot of the current session list; never persisted."""

    active_sessions: int
    active_players: int
    total_active_points: float
    average_points_per_active_session: float
    favorite_preset_name: str | None


def touch(statistics: AppStatistics, now: datetime) -> AppStatistics:
    return statistics.model_copy(update={"last_updated": now})


def record_session_created(statistics: AppStatistics, player_count: int, now: datetime) -> AppStatistics:
    return statistics.model_copy(
        update={
            "total_sessions_created": statistics.total_sessions_created + 1,
            "total_players_tracked": statistics.total_players_tracked + player_count,
            "last_updated": now,
        },
    )


def record_player_added(statistics: AppStatistics, now: datetime) -> AppStatistics:
    return statistics.model_copy(
        update={
            "total_players_tracked": statistics.total_players_tracked + 1,
            "last_updated": now,
        },
    )


def record_score_change(statistics: AppStatistics, delta: float, now: datetime) -> AppStatistics:
    """
    Count a score event and fold its delta into the awarded points.

    A zero delta is not an event and returns the input unchanged. The
    cumulative total never goes below zero, independently of any per-player
    score floor.
    """
    if delta == 0:
        return statistics
    points = statistics.total_points_awarded + delta
    return statistics.model_copy(
        update={
            "total_score_events": statistics.total_score_events + 1,
            "total_points_awarded": max(0.0, points),
            "last_updated": now,
        },
    )


def favorite_preset_name(sessions: Iterable[GameSession], presets: Sequence[GamePreset]) -> str | None:
    """Name of the preset used by the most sessions.

    Ties go to the preset listed first in the catalog. Returns None with no
    sessions or when the most used preset is not in the catalog.
    """
    counts = Counter(s.preset.id for s in sessions)
    if not counts:
        return None
    top = max(counts.values())
    return next((p.name for p in presets if counts.get(p.id) == top), None)


def derive_statistics(sessions: Sequence[GameSession], presets: Sequence[GamePreset]) -> DerivedStatistics:
    active_sessions = len(sessions)
    active_players = sum(len(s.players) for s in sessions)
    total_points = sum(p.total_score for s in sessions for p in s.players)
    average = total_points / active_sessions if active_sessions > 0 else 0.0
    return DerivedStatistics(
        active_sessions=active_sessions,
        active_players=active_players,
        total_active_points=total_points,
        average_points_per_active_session=average,
        favorite_preset_name=favorite_preset_name(sessions, presets),
    )
