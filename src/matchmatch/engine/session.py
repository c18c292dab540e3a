from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from .deck import Deck, DeckError, DeckResult, DeckSupplier, validate_deck
from .fsm import GameStateMachine, TransitionResult
from .signals import Signal
from .timer import ElapsedTimer, format_elapsed
from .types import (
    PLAY_TYPES,
    TEAMS,
    Cursor,
    GameState,
    GridConfig,
    PlayType,
    SelectResult,
    Team,
    grid_error,
    other_team,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    state: GameState
    error: str | None = None


@dataclass(frozen=True)
class GameOutcome:
    play_type: PlayType
    scores: dict[Team, int]
    elapsed: int
    winner: Team | None  # None: draw, or a single-player game

    @property
    def is_draw(self) -> bool:
        return self.play_type == "multi" and self.winner is None


class GameSession:
    """One long-lived MatchMatch game, replayed through init/ready cycles.

    Intents are expected from a single control path. Notifications:
      state_changed(GameState), turn_changed(Team), timer_tick(str),
      deck_supplied(DeckResult).

    timer_tick is emitted on the timer thread with no session lock held. A
    tick handler may block on a lock the caller of `run_event("pause")` holds;
    it must not block on one held across `run_event("init")`/`("ready")`,
    which wait for an in-flight tick before emitting "00".
    """

    def __init__(
        self,
        supplier: DeckSupplier | None = None,
        config: GridConfig | None = None,
        timer_interval: float = 1.0,
    ) -> None:
        self._supplier = supplier
        self._config = config or GridConfig()
        self._fsm = GameStateMachine()
        self._deck: Deck | None = None
        self._cursor: Cursor | None = None
        self._turn: Team = "red"
        self._scores: dict[Team, int] = {t: 0 for t in TEAMS}
        # bumped on every reset so late async deck results can be dropped
        self._deal_id = 0

        self.state_changed: Signal[GameState] = Signal("state_changed")
        self.turn_changed: Signal[Team] = Signal("turn_changed")
        self.timer_tick: Signal[str] = Signal("timer_tick")
        self.deck_supplied: Signal[DeckResult] = Signal("deck_supplied")

        self._timer = ElapsedTimer(on_tick=self._on_timer_tick, interval=timer_interval)

    # ---- read-only views ----

    @property
    def state(self) -> GameState:
        return self._fsm.current

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def rows(self) -> int:
        return self._config.rows

    @property
    def cols(self) -> int:
        return self._config.cols

    @property
    def play_type(self) -> PlayType:
        return self._config.play_type

    @property
    def current_turn(self) -> Team:
        return self._turn

    @property
    def cursor(self) -> Cursor | None:
        return self._cursor

    @property
    def deck(self) -> Deck | None:
        return self._deck

    @property
    def elapsed(self) -> int:
        return self._timer.elapsed

    @property
    def timer_text(self) -> str:
        return format_elapsed(self._timer.elapsed)

    def score(self, team: Team) -> int:
        return self._scores[team]

    @property
    def scores(self) -> dict[Team, int]:
        return dict(self._scores)

    # ---- configuration ----

    def configure(self, rows: int, cols: int, play_type: PlayType) -> CommandResult:
        if self.state == "play":
            return CommandResult(ok=False, state=self.state, error="Cannot change settings during play.")
        err = grid_error(rows, cols)
        if err is not None:
            return CommandResult(ok=False, state=self.state, error=err)
        if play_type not in PLAY_TYPES:
            return CommandResult(ok=False, state=self.state, error=f"Unknown play type: {play_type}")

        self._config = GridConfig(rows=rows, cols=cols, play_type=play_type)
        deck = self._deck
        if self.state == "ready" and deck is not None and (deck.rows, deck.cols) != (rows, cols):
            # dealt for the old grid; a new request is needed before play
            self._deck = None
        return CommandResult(ok=True, state=self.state)

    def set_play_type(self, play_type: PlayType) -> CommandResult:
        return self.configure(self._config.rows, self._config.cols, play_type)

    # ---- lifecycle ----

    def run_event(self, event: str) -> TransitionResult:
        if event == "play" and self.state == "ready" and self._deck is None:
            return TransitionResult(ok=False, event=event, source=self.state, error="Deck not ready.")
        return self._fsm.fire(event, self._enter)

    def _enter(self, state: GameState) -> None:
        if state in ("init", "ready"):
            self._reset()
            if state == "ready":
                self._deck = None
        elif state == "play":
            self._timer.start()
        elif state in ("pause", "game_over"):
            self._timer.stop()
        self.state_changed.emit(state)

    def _reset(self) -> None:
        self._deal_id += 1
        for t in TEAMS:
            self._scores[t] = 0
        if self._deck is not None:
            self._deck.reset_flags()
        self._cursor = None
        self._set_turn("red")
        self._timer.reset()

    def _set_turn(self, team: Team) -> None:
        if team == self._turn:
            return
        self._turn = team
        self.turn_changed.emit(team)

    def _on_timer_tick(self, elapsed: int) -> None:
        self.timer_tick.emit(format_elapsed(elapsed))

    # ---- deck supply ----

    def request_deck(self) -> DeckResult:
        if self.state != "ready":
            return self._deck_failed(f"Cards can only be dealt when ready (state is {self.state}).")
        if self._supplier is None:
            return self._deck_failed("No deck supplier configured.")
        try:
            result = self._supplier.request_deck(self.rows, self.cols)
        except Exception as e:
            logger.exception("deck supplier raised")
            return self._deck_failed(f"Deck supplier error: {e}")
        return self.install_deck(result)

    async def request_deck_async(self) -> DeckResult:
        if self.state != "ready":
            return self._deck_failed(f"Cards can only be dealt when ready (state is {self.state}).")
        if self._supplier is None:
            return self._deck_failed("No deck supplier configured.")
        deal_id = self._deal_id
        try:
            result = await asyncio.to_thread(self._supplier.request_deck, self.rows, self.cols)
        except Exception as e:
            logger.exception("deck supplier raised")
            return self._deck_failed(f"Deck supplier error: {e}")
        if deal_id != self._deal_id or self.state != "ready":
            # the newer deal owns deck_supplied
            logger.debug("dropping superseded deck result (state is %s)", self.state)
            return DeckResult.failure("Deck request superseded.")
        return self.install_deck(result)

    def install_deck(self, result: DeckResult) -> DeckResult:
        if self.state != "ready":
            return self._deck_failed(f"Cards can only be dealt when ready (state is {self.state}).")
        if not result.ok or result.deck is None:
            return self._deck_failed(result.error or "Deck supplier failed.")
        deck = result.deck
        if (deck.rows, deck.cols) != (self.rows, self.cols):
            return self._deck_failed(
                f"Deck is {deck.rows}x{deck.cols}, expected {self.rows}x{self.cols}."
            )
        try:
            validate_deck(deck)
        except DeckError as e:
            return self._deck_failed(str(e))

        self._deck = deck
        self.deck_supplied.emit(result)
        return result

    def _deck_failed(self, error: str) -> DeckResult:
        logger.warning("deck supply failed: %s", error)
        result = DeckResult.failure(error)
        self.deck_supplied.emit(result)
        return result

    # ---- play ----

    def select_card(self, section: int, row: int) -> SelectResult:
        deck = self._deck
        if self.state != "play" or deck is None:
            return "none"
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (section, row)):
            return "none"
        if not deck.in_bounds(section, row):
            return "none"
        slot = deck.slot_at(section, row)
        if slot.opened or slot.matched:
            return "none"

        pending = self._cursor
        if pending is None:
            slot.open()
            self._cursor = Cursor(section=section, row=row, card_id=slot.card.id)
            return "one_flip"

        first = deck.slot_at(pending.section, pending.row)
        matched = pending.card_id == slot.card.id
        logger.debug("open card [%s, %s] -> %s (%s)", pending.card_id, slot.card.id, matched, self._turn)
        self._cursor = None

        if matched:
            first.mark_matched()
            slot.mark_matched()
            self._scores[self._turn] += 1
            if deck.all_matched():
                self.run_event("game_over")
            return "matched"

        first.close()
        if self.play_type == "multi":
            self._set_turn(other_team(self._turn))
        return "not_matched"

    def outcome(self) -> GameOutcome:
        scores = self.scores
        winner: Team | None = None
        if self.play_type == "multi" and scores["red"] != scores["blue"]:
            winner = "red" if scores["red"] > scores["blue"] else "blue"
        return GameOutcome(play_type=self.play_type, scores=scores, elapsed=self.elapsed, winner=winner)

    def close(self) -> None:
        """Stop the timer thread; the session stays usable."""
        self._timer.stop()
