"""Headless MatchMatch game engine.

IMPORTANT: This package must never perform network or file I/O; decks come in
through a `DeckSupplier`.
"""

from .deck import Deck, DeckError, DeckResult, DeckSupplier, build_deck, validate_deck
from .fsm import GameStateMachine, TransitionResult
from .session import CommandResult, GameOutcome, GameSession
from .signals import Signal
from .timer import ElapsedTimer, format_elapsed
from .types import Card, Cursor, GameEvent, GameState, GridConfig, PlayType, SelectResult, Slot, Team

__all__ = [
    "Card",
    "CommandResult",
    "Cursor",
    "Deck",
    "DeckError",
    "DeckResult",
    "DeckSupplier",
    "ElapsedTimer",
    "GameEvent",
    "GameOutcome",
    "GameSession",
    "GameState",
    "GameStateMachine",
    "GridConfig",
    "PlayType",
    "SelectResult",
    "Signal",
    "Slot",
    "Team",
    "TransitionResult",
    "build_deck",
    "format_elapsed",
    "validate_deck",
]
