"""
Read-only views over a session: standings, summaries and display text.
"""

import math

from tally.logic.state import GameSession, PlayerScore

# Two scores closer than this are treated as equal (ties, integer display).
SCORE_TOLERANCE = 1e-4


def format_score(value: float) -> str:
    """Render a score as an integer when it is one, otherwise with one decimal."""
    if math.isnan(value) or math.isinf(value):
        return "0"
    rounded = round(value)
    if abs(rounded - value) < SCORE_TOLERANCE:
        return str(int(rounded))
    return f"{value:.1f}"


def standings(session: GameSession) -> list[PlayerScore]:
    """Players ordered by total score, highest first; ties keep roster order."""
    return sorted(session.players, key=lambda p: p.total_score, reverse=True)


def leader_summary(session: GameSession) -> str:
    ranked = standings(session)
    if not ranked:
        return ""
    top_score = ranked[0].total_score
    leaders = [p for p in ranked if abs(p.total_score - top_score) < SCORE_TOLERANCE]
    formatted = format_score(top_score)
    if len(leaders) == 1:
        return f"Leader: {leaders[0].name} ({formatted})"
    names = ", ".join(p.name for p in leaders)
    return f"Tied: {names} ({formatted})"


def player_summary(session: GameSession) -> str:
    """Compact roster line for session lists."""
    names = [p.name for p in session.players]
    match len(names):
        case 0:
            return "No players yet"
        case 1:
            return names[0]
        case 2:
            return f"{names[0]} vs {names[1]}"
        case 3 | 4:
            return ", ".join(names)
        case _:
            return f"{', '.join(names[:3])} +{len(names) - 3} more"


def round_title(session: GameSession, index: int) -> str:
    return f"{session.preset.round_label} {index + 1}"


def round_status_headline(session: GameSession) -> str:
    return f"{session.preset.round_label} {session.current_round_number} of {session.total_rounds}"


def round_status_detail(session: GameSession) -> str:
    if session.can_advance_round:
        return "In progress"
    return f"Final {session.preset.round_label.lower()}"


def round_status_badge(session: GameSession) -> str:
    return f"{session.current_round_number}/{session.total_rounds} {session.preset.round_label.lower()}"


def target_reached(session: GameSession, value: float) -> bool:
    target = session.preset.target_per_round
    return target is not None and value >= target


def target_summary(session: GameSession) -> str | None:
    target = session.preset.target_per_round
    if target is None:
        return None
    return f"Target: first to {format_score(target)} each {session.preset.round_label.lower()}."
