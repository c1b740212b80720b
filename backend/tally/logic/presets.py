"""Static catalog of game presets - round structure and scoring buttons."""

from collections.abc import Iterable
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScoreOption(BaseModel):
    """A scoring button: applies `delta` to the current round's score."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1)
    delta: float
    icon: str = ""
    color: str = "accent"


class GamePreset(BaseModel):
    """Immutable template for a game: rounds, scoring options and player bounds."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    icon: str = ""
    description: str = ""
    round_count: int = Field(ge=1)
    round_label: str = "Round"
    scoring_options: tuple[ScoreOption, ...] = ()
    min_players: int = Field(default=1, ge=1)
    max_players: int | None = None
    default_player_names: tuple[str, ...] = ()
    notes: str = ""
    score_floor: float = 0
    target_per_round: float | None = None  # informational, e.g. 11 points per table tennis game
    scoring_hint: str = ""

    @model_validator(mode="after")
    def _validate_player_bounds(self) -> Self:
        if self.max_players is not None and self.max_players < self.min_players:
            raise ValueError(f"max_players ({self.max_players}) must be >= min_players ({self.min_players})")
        return self

    @property
    def total_rounds(self) -> int:
        return max(self.round_count, 1)

    def suggested_name(self, index: int) -> str:
        """Default display name for the player at `index` (0-based)."""
        if index < len(self.default_player_names):
            candidate = self.default_player_names[index]
            if candidate:
                return candidate
        return f"Player {index + 1}"

    def option(self, label: str) -> ScoreOption | None:
        return next((o for o in self.scoring_options if o.label == label), None)


def _undo(delta: float = -1) -> ScoreOption:
    return ScoreOption(label="Undo", delta=delta, icon="arrow.uturn.backward", color="orange")


PLACEHOLDER_PRESET = GamePreset(
    id="generic",
    name="Generic",
    icon="sportscourt",
    description="Configure players and keep score.",
    round_count=1,
    round_label="Round",
    scoring_options=(ScoreOption(label="+1", delta=1, icon="plus"),),
    min_players=2,
    default_player_names=("Player 1", "Player 2"),
    notes="Generic preset placeholder.",
)

PRESET_LIBRARY: tuple[GamePreset, ...] = (
    GamePreset(
        id="football",
        name="Football",
        icon="soccerball",
        description="Two halves, standard match scoring.",
        round_count=2,
        round_label="Half",
        scoring_options=(
            ScoreOption(label="Goal", delta=1, icon="sportscourt", color="green"),
            ScoreOption(label="Penalty", delta=1, icon="bolt.circle", color="blue"),
            _undo(),
        ),
        min_players=2,
        max_players=2,
        default_player_names=("Home", "Away"),
        notes="Track total goals across two halves. Use undo to revert mistakes; scores never drop below zero.",
        scoring_hint="Each button updates the current half's tally.",
    ),
    GamePreset(
        id="basketball",
        name="Basketball",
        icon="basketball",
        description="Four quarters with standard point values.",
        round_count=4,
        round_label="Quarter",
        scoring_options=(
            ScoreOption(label="+1", delta=1, icon="1.circle", color="purple"),
            ScoreOption(label="+2", delta=2, icon="2.circle", color="blue"),
            ScoreOption(label="+3", delta=3, icon="3.circle", color="green"),
            _undo(),
        ),
        min_players=2,
        max_players=2,
        default_player_names=("Home", "Away"),
        notes="Four quarters mirror regulation play. Quarter totals sum to the game score.",
        scoring_hint="Use +1 for free throws, +2 for field goals, +3 for long-range shots.",
    ),
    GamePreset(
        id="table-tennis",
        name="Table Tennis",
        icon="figure.table.tennis",
        description="Best of five games to eleven points.",
        round_count=5,
        round_label="Game",
        scoring_options=(
            ScoreOption(label="Point", delta=1, icon="figure.table.tennis", color="green"),
            _undo(),
        ),
        min_players=2,
        max_players=2,
        default_player_names=("Player A", "Player B"),
        notes="Track up to five games. A game is typically won at 11 points with a two-point margin.",
        target_per_round=11,
        scoring_hint="Mark each rally won. Stop scoring once a player reaches 11 with a two-point lead.",
    ),
    GamePreset(
        id="chess",
        name="Chess",
        icon="checkerboard.rectangle",
        description="Single game with classic result scoring.",
        round_count=1,
        round_label="Game",
        scoring_options=(
            ScoreOption(label="Win", delta=1, icon="crown", color="green"),
            ScoreOption(label="Draw", delta=0.5, icon="scalemass", color="blue"),
            _undo(-0.5),
        ),
        min_players=2,
        default_player_names=("White", "Black", "Challenger 1", "Challenger 2"),
        notes="Track head-to-head games or round-robin results across multiple players.",
        scoring_hint="Record wins as 1.0, draws as 0.5, and losses as 0.",
    ),
    GamePreset(
        id="volleyball",
        name="Volleyball",
        icon="volleyball",
        description="Five sets to twenty-five points.",
        round_count=5,
        round_label="Set",
        scoring_options=(
            ScoreOption(label="+1", delta=1, icon="plus", color="green"),
            _undo(),
        ),
        min_players=2,
        max_players=2,
        default_player_names=("Team A", "Team B"),
        notes="Race to 25 points per set with a two-point lead. Track up to five sets.",
        target_per_round=25,
        scoring_hint="Log points rally-by-rally. A team must lead by two to close a set.",
    ),
    GamePreset(
        id="hockey",
        name="Hockey",
        icon="hockey.puck",
        description="Three periods with goal-based scoring.",
        round_count=3,
        round_label="Period",
        scoring_options=(
            ScoreOption(label="Goal", delta=1, icon="sportscourt", color="green"),
            ScoreOption(label="Empty Net", delta=1, icon="target", color="blue"),
            _undo(),
        ),
        min_players=2,
        max_players=2,
        default_player_names=("Home", "Away"),
        notes="Standard three-period structure. Use scoring buttons for each goal event.",
        scoring_hint="Undo reverses the last goal if added by mistake.",
    ),
)


def find_preset(presets: Iterable[GamePreset], preset_id: str) -> GamePreset | None:
    """Return the preset with `preset_id`, or None if the catalog lacks it."""
    return next((p for p in presets if p.id == preset_id), None)
