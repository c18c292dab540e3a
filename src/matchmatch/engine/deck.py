from __future__ import annotations

import random
from collections import Counter
from dataclasses import dataclass
from typing import Iterator, Protocol, Sequence

from .types import Card, Slot, grid_error


class DeckError(ValueError):
    pass


@dataclass
class Deck:
    rows: int
    cols: int
    slots: list[Slot]

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[Slot]:
        return iter(self.slots)

    def in_bounds(self, section: int, row: int) -> bool:
        return 0 <= section < self.rows and 0 <= row < self.cols

    def slot_at(self, section: int, row: int) -> Slot:
        if not self.in_bounds(section, row):
            raise IndexError(f"({section}, {row}) is outside a {self.rows}x{self.cols} deck")
        return self.slots[section * self.cols + row]

    def all_matched(self) -> bool:
        return all(s.matched for s in self.slots)

    def reset_flags(self) -> None:
        for s in self.slots:
            s.reset()

    def card_ids(self) -> list[str]:
        return [s.card.id for s in self.slots]


@dataclass(frozen=True)
class DeckResult:
    ok: bool
    deck: Deck | None = None
    error: str | None = None

    @staticmethod
    def failure(error: str) -> "DeckResult":
        return DeckResult(ok=False, deck=None, error=error)


class DeckSupplier(Protocol):
    def request_deck(self, rows: int, cols: int) -> DeckResult: ...


def build_deck(cards: Sequence[Card], rows: int, cols: int, rng: random.Random | None = None) -> Deck:
    """Pair up `cards` (one per pair) into a shuffled rows x cols deck."""
    err = grid_error(rows, cols)
    if err is not None:
        raise DeckError(err)
    pairs = (rows * cols) // 2
    if len(cards) != pairs:
        raise DeckError(f"Need exactly {pairs} cards for a {rows}x{cols} deck, got {len(cards)}.")
    if len({c.id for c in cards}) != len(cards):
        raise DeckError("Card ids must be distinct.")

    slots = [Slot(card=c) for c in cards for _ in range(2)]
    (rng or random.Random()).shuffle(slots)
    return Deck(rows=rows, cols=cols, slots=slots)


def validate_deck(deck: Deck) -> None:
    err = grid_error(deck.rows, deck.cols)
    if err is not None:
        raise DeckError(err)
    if len(deck.slots) != deck.rows * deck.cols:
        raise DeckError(f"Deck has {len(deck.slots)} slots, expected {deck.rows * deck.cols}.")
    if len({id(s) for s in deck.slots}) != len(deck.slots):
        raise DeckError("Slots must be distinct objects.")
    counts = Counter(deck.card_ids())
    odd = sorted(cid for cid, n in counts.items() if n != 2)
    if odd:
        raise DeckError(f"Cards must appear exactly twice: {', '.join(odd[:5])}")
    if any(s.opened or s.matched for s in deck.slots):
        raise DeckError("A new deck must start face-down.")
