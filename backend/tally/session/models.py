"""Persisted models: settings, lifetime statistics and session snapshots.

Field aliases are the on-disk JSON keys; Python code uses the snake_case
names. Both are accepted when loading.
"""

from datetime import UTC, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class AppSettings(BaseModel):
    """User feedback toggles."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sound_enabled: bool = Field(default=True, alias="soundEnabled")
    vibration_enabled: bool = Field(default=True, alias="vibrationEnabled")


class AppStatistics(BaseModel):
    """Lifetime activity counters.

    Counters only grow (apart from points, which score corrections can
    lower but never below zero) until an explicit reset. Deleting
    sessions does not roll them back.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_sessions_created: int = Field(default=0, ge=0, alias="totalSessionsCreated")
    total_score_events: int = Field(default=0, ge=0, alias="totalScoreEvents")
    total_points_awarded: float = Field(default=0.0, ge=0, alias="totalPointsAwarded")
    total_players_tracked: int = Field(default=0, ge=0, alias="totalPlayersTracked")
    last_updated: datetime = Field(default_factory=utc_now, alias="lastUpdated")

    @property
    def average_points_per_session(self) -> float:
        if self.total_sessions_created <= 0:
            return 0.0
        return self.total_points_awarded / self.total_sessions_created


class PlayerSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    scores: tuple[float, ...] = ()


class GameSessionSnapshot(BaseModel):
    """Serializable form of a session; the preset is stored by id only."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID
    preset_id: str = Field(alias="presetID")
    current_round_index: int = Field(default=0, alias="currentRoundIndex")
    players: tuple[PlayerSnapshot, ...] = ()


class PersistedBundle(BaseModel):
    """Everything written to disk: sessions, settings and statistics."""

    model_config = ConfigDict(frozen=True)

    sessions: tuple[GameSessionSnapshot, ...]
    settings: AppSettings
    statistics: AppStatistics

    @classmethod
    def default(cls) -> "PersistedBundle":
        return cls(sessions=(), settings=AppSettings(), statistics=AppStatistics())
