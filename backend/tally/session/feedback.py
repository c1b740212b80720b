"""Sound and haptic feedback for score changes."""

import sys
from enum import Enum
from typing import Protocol, TextIO

import structlog

from tally.session.models import AppSettings

logger = structlog.get_logger()


class FeedbackKind(str, Enum):
    """Haptic pattern for a score change."""

    SUCCESS = "success"  # points added
    WARNING = "warning"  # points taken back


class FeedbackSink(Protocol):
    """Device-side trigger for feedback."""

    def play(self, kind: FeedbackKind, *, sound: bool, haptic: bool) -> None: ...


class NullFeedback:
    """Discards all feedback."""

    def play(self, kind: FeedbackKind, *, sound: bool, haptic: bool) -> None:
        return None


class TerminalFeedback:
    """Rings the terminal bell for sound; terminals have no haptics, so those are only logged."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout

    def play(self, kind: FeedbackKind, *, sound: bool, haptic: bool) -> None:
        if sound:
            self._stream.write("\a")
            self._stream.flush()
        if haptic:
            logger.debug("haptic feedback", kind=kind)


def feedback_kind(delta: float) -> FeedbackKind:
    return FeedbackKind.SUCCESS if delta >= 0 else FeedbackKind.WARNING


class FeedbackManager:
    """Maps a score delta and the user's toggles onto a sink call."""

    def __init__(self, sink: FeedbackSink | None = None) -> None:
        self._sink: FeedbackSink = sink if sink is not None else NullFeedback()

    def play(self, delta: float, settings: AppSettings) -> None:
        if not (settings.sound_enabled or settings.vibration_enabled):
            return
        kind = feedback_kind(delta)
        try:
            self._sink.play(kind, sound=settings.sound_enabled, haptic=settings.vibration_enabled)
        except OSError as exc:
            logger.warning("feedback failed", kind=kind, error=str(exc))
