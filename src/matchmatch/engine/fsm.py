from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping

from .types import GameEvent, GameState

logger = logging.getLogger(__name__)

# event -> (valid sources, destination)
TRANSITIONS: Mapping[GameEvent, tuple[frozenset[GameState], GameState]] = {
    "ready": (frozenset({"init"}), "ready"),
    "play": (frozenset({"ready"}), "play"),
    "pause": (frozenset({"play"}), "pause"),
    "resume": (frozenset({"pause"}), "play"),
    "cancel": (frozenset({"pause", "play"}), "game_over"),
    "game_over": (frozenset({"play"}), "game_over"),
    "init": (frozenset({"game_over"}), "init"),
}


@dataclass(frozen=True)
class TransitionResult:
    ok: bool
    event: str
    source: GameState
    destination: GameState | None = None
    error: str | None = None


class GameStateMachine:
    """Finite-state controller for the game lifecycle.

    Invalid events are reported through `TransitionResult`, never raised, and
    leave the current state untouched.
    """

    def __init__(self, initial: GameState = "init") -> None:
        self._current: GameState = initial

    @property
    def current(self) -> GameState:
        return self._current

    def can_fire(self, event: str) -> bool:
        rule = TRANSITIONS.get(event)  # type: ignore[call-overload]
        return rule is not None and self._current in rule[0]

    def fire(
        self, event: str, on_enter: Callable[[GameState], None] | None = None
    ) -> TransitionResult:
        source = self._current
        rule = TRANSITIONS.get(event)  # type: ignore[call-overload]
        if rule is None:
            return TransitionResult(ok=False, event=event, source=source, error=f"Unknown event: {event}")
        sources, destination = rule
        if source not in sources:
            logger.debug("rejected %s from %s", event, source)
            return TransitionResult(
                ok=False, event=event, source=source, error=f"Cannot {event} from {source}."
            )

        self._current = destination
        logger.debug("%s: %s -> %s", event, source, destination)
        if on_enter is not None:
            on_enter(destination)
        return TransitionResult(ok=True, event=event, source=source, destination=destination)
