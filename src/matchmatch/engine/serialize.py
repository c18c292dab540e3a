from __future__ import annotations

from .deck import Deck
from .session import GameOutcome, GameSession
from .types import Cursor


def _cursor_to_dict(c: Cursor | None) -> dict[str, object] | None:
    if c is None:
        return None
    return {"section": c.section, "row": c.row, "card_id": c.card_id}


def deck_to_dict(deck: Deck | None) -> dict[str, object] | None:
    if deck is None:
        return None
    return {
        "rows": deck.rows,
        "cols": deck.cols,
        "slots": [
            {
                "card_id": s.card.id,
                "title": s.card.title,
                "image_url": s.card.image_url,
                "opened": s.opened,
                "matched": s.matched,
            }
            for s in deck.slots
        ],
    }


def outcome_to_dict(o: GameOutcome) -> dict[str, object]:
    return {
        "play_type": o.play_type,
        "scores": dict(o.scores),
        "elapsed": o.elapsed,
        "winner": o.winner,
        "draw": o.is_draw,
    }


def snapshot(session: GameSession) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the session."""
    return {
        "state": session.state,
        "rows": session.rows,
        "cols": session.cols,
        "play_type": session.play_type,
        "current_turn": session.current_turn,
        "scores": session.scores,
        "elapsed": session.elapsed,
        "cursor": _cursor_to_dict(session.cursor),
        "deck": deck_to_dict(session.deck),
    }
