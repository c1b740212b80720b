"""Command-line front-end for the scorekeeper.

Usage:
    tally presets
    tally new table-tennis Alice Bob
    tally score 1 Alice Point
    tally next 1
    tally show 1
    tally stats

Sessions are addressed by their 1-based position in `tally list` or by an
id prefix; players by 1-based position or exact name.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from shared.logging import setup_logging
from shared.storage import LocalBlobStore
from tally.logic import views
from tally.logic.exceptions import PlayerNotFoundError, SessionNotFoundError, TallyRuleError
from tally.logic.game import draft_player_names
from tally.logic.presets import find_preset
from tally.session.feedback import FeedbackManager, NullFeedback, TerminalFeedback
from tally.session.manager import AppState
from tally.session.persistence import StatePersistence
from tally.settings import TallySettings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tally.logic.state import GameSession, PlayerScore


def _on_off(value: str) -> bool:
    lowered = value.lower()
    if lowered in {"on", "true", "yes", "1"}:
        return True
    if lowered in {"off", "false", "no", "0"}:
        return False
    raise argparse.ArgumentTypeError(f"expected on/off, got {value!r}")


def resolve_session(state: AppState, ref: str) -> GameSession:
    """Find a session by 1-based list position or id prefix."""
    if ref.isdigit():
        position = int(ref)
        if 1 <= position <= len(state.sessions):
            return state.sessions[position - 1]
    matches = [s for s in state.sessions if str(s.id).startswith(ref.lower())]
    if len(matches) == 1:
        return matches[0]
    raise SessionNotFoundError(ref)


def resolve_player(session: GameSession, ref: str) -> PlayerScore:
    """Find a player by exact name or 1-based roster position."""
    by_name = [p for p in session.players if p.name == ref]
    if len(by_name) == 1:
        return by_name[0]
    if ref.isdigit() and 1 <= int(ref) <= len(session.players):
        return session.players[int(ref) - 1]
    raise PlayerNotFoundError(ref)


def _print_session_row(position: int, session: GameSession) -> None:
    print(f"{position}. {session.preset.name} [{views.round_status_badge(session)}] {str(session.id)[:8]}")
    print(f"   {views.player_summary(session)}")
    summary = views.leader_summary(session)
    if summary:
        print(f"   {summary}")


def _print_session(session: GameSession) -> None:
    preset = session.preset
    print(f"{preset.name} ({session.id})")
    print(preset.description)
    if preset.notes:
        print(preset.notes)
    print()
    print(f"{views.round_status_headline(session)} - {views.round_status_detail(session)}")
    print(f"Progress: {session.progress:.0%}")
    print()
    for position, player in enumerate(session.players, start=1):
        rounds = []
        for index, value in enumerate(player.round_scores):
            marker = "*" if index == session.current_round_index else " "
            cell = f"{marker}{views.round_title(session, index)}: {views.format_score(value)}"
            if views.target_reached(session, value):
                cell += " (target reached)"
            rounds.append(cell)
        print(f"{position}. {player.name}: {views.format_score(player.total_score)}")
        print("   " + " | ".join(rounds))
    print()
    print("Options: " + ", ".join(f"{o.label} ({views.format_score(o.delta)})" for o in preset.scoring_options))
    if preset.scoring_hint:
        print(preset.scoring_hint)
    print()
    print("Leaderboard:")
    for player in views.standings(session):
        print(f"  {player.name}: {views.format_score(player.total_score)}")
    target = views.target_summary(session)
    if target:
        print(target)


def cmd_presets(state: AppState, _args: argparse.Namespace) -> None:
    for preset in state.presets:
        bounds = f"{preset.min_players}+" if preset.max_players is None else f"{preset.min_players}-{preset.max_players}"
        rounds = f"{preset.round_count} x {preset.round_label}"
        print(f"{preset.id}: {preset.name} - {preset.description} ({rounds}, {bounds} players)")


def cmd_list(state: AppState, _args: argparse.Namespace) -> None:
    if not state.sessions:
        print("No sessions yet. Create one with `tally new PRESET [NAME ...]`.")
        return
    for position, session in enumerate(state.sessions, start=1):
        _print_session_row(position, session)


def cmd_new(state: AppState, args: argparse.Namespace) -> None:
    names = args.names
    if not names:
        preset = find_preset(state.presets, args.preset)
        names = draft_player_names(preset) if preset is not None else []
    session = state.create_session(args.preset, names)
    _print_session_row(len(state.sessions), session)


def cmd_show(state: AppState, args: argparse.Namespace) -> None:
    _print_session(resolve_session(state, args.session))


def cmd_score(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    player = resolve_player(session, args.player)
    state.apply_score(session.id, player.id, args.option)
    updated = state.get_session(session.id)
    current = updated.get_player(player.id)
    if current is not None:
        round_score = current.round_scores[updated.current_round_index]
        print(
            f"{current.name}: {views.format_score(round_score)} this {updated.preset.round_label.lower()}, "
            f"{views.format_score(current.total_score)} total",
        )


def cmd_next(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    state.next_round(session.id)
    print(views.round_status_headline(state.get_session(session.id)))


def cmd_prev(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    state.previous_round(session.id)
    print(views.round_status_headline(state.get_session(session.id)))


def cmd_reset(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    state.reset_scores(session.id)
    print(f"Scores reset for {session.preset.name}.")


def cmd_add_player(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    state.add_player(session.id)
    print(f"Added {state.get_session(session.id).players[-1].name}.")


def cmd_remove_player(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    player = resolve_player(session, args.player)
    state.remove_player(session.id, player.id)
    print(f"Removed {player.name}.")


def cmd_rename(state: AppState, args: argparse.Namespace) -> None:
    session = resolve_session(state, args.session)
    player = resolve_player(session, args.player)
    name = args.name.strip()
    if not name:
        raise TallyRuleError("player name must not be empty")
    state.rename_player(session.id, player.id, name)
    print(f"Renamed {player.name} to {name}.")


def cmd_delete(state: AppState, args: argparse.Namespace) -> None:
    sessions = [resolve_session(state, ref) for ref in args.sessions]
    state.delete_sessions(state.sessions.index(s) for s in sessions)
    print(f"Deleted {len({s.id for s in sessions})} session(s).")


def cmd_clear(state: AppState, _args: argparse.Namespace) -> None:
    state.clear_sessions()
    print("All sessions removed.")


def cmd_stats(state: AppState, _args: argparse.Namespace) -> None:
    derived = state.derived_statistics
    lifetime = state.statistics
    print("Overview")
    print(f"  Active Sessions: {derived.active_sessions}")
    print(f"  Active Players: {derived.active_players}")
    print(f"  Points Tracked: {views.format_score(derived.total_active_points)}")
    print(f"  Avg. Points / Session: {views.format_score(derived.average_points_per_active_session)}")
    if derived.favorite_preset_name is not None:
        print(f"  Most Popular Preset: {derived.favorite_preset_name}")
    print("Lifetime Totals")
    print(f"  Sessions Created: {lifetime.total_sessions_created}")
    print(f"  Score Events: {lifetime.total_score_events}")
    print(f"  Points Awarded: {views.format_score(lifetime.total_points_awarded)}")
    print(f"  Players Tracked: {lifetime.total_players_tracked}")
    print(f"  Avg. Points / Session: {views.format_score(lifetime.average_points_per_session)}")
    print(f"  Last Updated: {lifetime.last_updated:%Y-%m-%d %H:%M}")


def cmd_reset_stats(state: AppState, _args: argparse.Namespace) -> None:
    state.reset_statistics()
    print("Lifetime statistics reset.")


def cmd_settings(state: AppState, args: argparse.Namespace) -> None:
    state.update_settings(sound_enabled=args.sound, vibration_enabled=args.vibration)
    print(f"Sound: {'on' if state.settings.sound_enabled else 'off'}")
    print(f"Vibration: {'on' if state.settings.vibration_enabled else 'off'}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tally", description="Keep score across the rounds of a game.")
    parser.add_argument("--data-dir", help="directory holding the state file (overrides TALLY_DATA_DIR)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("presets", help="list available game presets").set_defaults(func=cmd_presets)
    sub.add_parser("list", help="list sessions").set_defaults(func=cmd_list)

    new = sub.add_parser("new", help="create a session")
    new.add_argument("preset")
    new.add_argument("names", nargs="*", help="player names (defaults to the preset's names)")
    new.set_defaults(func=cmd_new)

    for name, func, help_text in (
        ("show", cmd_show, "show a session's scores"),
        ("next", cmd_next, "advance to the next round"),
        ("prev", cmd_prev, "go back one round"),
        ("reset", cmd_reset, "reset a session's scores"),
        ("add-player", cmd_add_player, "add a player to a session"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("session")
        p.set_defaults(func=func)

    score = sub.add_parser("score", help="apply a scoring option to a player")
    score.add_argument("session")
    score.add_argument("player")
    score.add_argument("option", help="scoring option label, e.g. Point or Undo")
    score.set_defaults(func=cmd_score)

    remove = sub.add_parser("remove-player", help="remove a player from a session")
    remove.add_argument("session")
    remove.add_argument("player")
    remove.set_defaults(func=cmd_remove_player)

    rename = sub.add_parser("rename", help="rename a player")
    rename.add_argument("session")
    rename.add_argument("player")
    rename.add_argument("name")
    rename.set_defaults(func=cmd_rename)

    delete = sub.add_parser("delete", help="delete sessions")
    delete.add_argument("sessions", nargs="+")
    delete.set_defaults(func=cmd_delete)

    sub.add_parser("clear", help="remove all sessions").set_defaults(func=cmd_clear)
    sub.add_parser("stats", help="show statistics").set_defaults(func=cmd_stats)
    sub.add_parser("reset-stats", help="reset lifetime statistics").set_defaults(func=cmd_reset_stats)

    settings = sub.add_parser("settings", help="show or change feedback settings")
    settings.add_argument("--sound", type=_on_off, metavar="on|off")
    settings.add_argument("--vibration", type=_on_off, metavar="on|off")
    settings.set_defaults(func=cmd_settings)
    return parser


def build_state(settings: TallySettings, data_dir: str | None = None) -> AppState:
    store = LocalBlobStore(data_dir if data_dir is not None else settings.data_path)
    sink = TerminalFeedback() if settings.terminal_bell else NullFeedback()
    return AppState.load(StatePersistence(store, settings.state_file), feedback=FeedbackManager(sink))


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = TallySettings()
    setup_logging(log_dir=settings.log_dir, level=logging.DEBUG if args.verbose else logging.WARNING)

    state = build_state(settings, args.data_dir)
    try:
        args.func(state, args)
    except (TallyRuleError, IndexError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
