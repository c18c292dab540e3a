from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

GameState = Literal["init", "ready", "play", "pause", "game_over"]
GameEvent = Literal["init", "ready", "play", "pause", "resume", "cancel", "game_over"]
Team = Literal["red", "blue"]
PlayType = Literal["single", "multi"]
SelectResult = Literal["none", "one_flip", "not_matched", "matched"]

GAME_STATES: tuple[GameState, ...] = ("init", "ready", "play", "pause", "game_over")
TEAMS: tuple[Team, ...] = ("red", "blue")
PLAY_TYPES: tuple[PlayType, ...] = ("single", "multi")

MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 8


def other_team(team: Team) -> Team:
    return "blue" if team == "red" else "red"


def grid_error(rows: object, cols: object) -> str | None:
    """Return why (rows, cols) is not a playable grid, or None if it is."""
    for label, v in (("rows", rows), ("cols", cols)):
        if not isinstance(v, int) or isinstance(v, bool):
            return f"{label} must be an integer."
        if v < MIN_GRID_SIZE or v > MAX_GRID_SIZE:
            return f"{label} must be between {MIN_GRID_SIZE} and {MAX_GRID_SIZE}."
        if v % 2 != 0:
            return f"{label} must be even."
    return None


@dataclass(frozen=True)
class Card:
    id: str
    title: str
    image_url: str = ""


@dataclass
class Slot:
    card: Card
    opened: bool = False
    matched: bool = False

    def open(self) -> None:
        self.opened = True

    def close(self) -> None:
        # matched slots stay face-up for the rest of the game
        if not self.matched:
            self.opened = False

    def mark_matched(self) -> None:
        self.opened = True
        self.matched = True

    def reset(self) -> None:
        self.opened = False
        self.matched = False


@dataclass(frozen=True)
class GridConfig:
    rows: int = 4
    cols: int = 4
    play_type: PlayType = "multi"

    @property
    def pairs(self) -> int:
        return (self.rows * self.cols) // 2


@dataclass(frozen=True)
class Cursor:
    """The single face-up slot waiting for its partner."""

    section: int
    row: int
    card_id: str
