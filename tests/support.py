from __future__ import annotations

from matchmatch.engine.deck import Deck, DeckResult
from matchmatch.engine.types import Card, Slot


def grid_deck(rows: int, cols: int, layout: list[str]) -> Deck:
    """Deck with a known layout, row-major; each id must appear twice."""
    return Deck(
        rows=rows,
        cols=cols,
        slots=[Slot(card=Card(id=cid, title=cid.upper(), image_url=f"cards/{cid}.png")) for cid in layout],
    )


class FixedSupplier:
    def __init__(self, layout: list[str]) -> None:
        self.layout = layout
        self.requests: list[tuple[int, int]] = []

    def request_deck(self, rows: int, cols: int) -> DeckResult:
        self.requests.append((rows, cols))
        return DeckResult(ok=True, deck=grid_deck(rows, cols, list(self.layout)))


class FailingSupplier:
    def request_deck(self, rows: int, cols: int) -> DeckResult:
        return DeckResult.failure("service unavailable")


# 4x4: (0,0)=a (0,1)=b ... (1,0)=c (1,1)=c
LAYOUT_4X4 = [
    "a", "b", "d", "e",
    "c", "c", "f", "g",
    "a", "b", "d", "e",
    "h", "f", "g", "h",
]
