from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Mapping

from matchmatch.engine.deck import DeckResult
from matchmatch.engine.serialize import outcome_to_dict
from matchmatch.engine.session import GameSession
from matchmatch.engine.types import GameState, Team
from matchmatch.paths import Paths


@dataclass
class TelemetryService:
    path: Path
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @staticmethod
    def from_paths(paths: Paths) -> "TelemetryService":
        return TelemetryService(paths.telemetry_path)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self._lock, self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def attach(self, session: GameSession) -> Callable[[], None]:
        """Record the session's lifecycle; returns a function that detaches."""

        def on_state(state: GameState) -> None:
            payload: dict[str, object] = {"state": state}
            if state == "game_over":
                payload["outcome"] = outcome_to_dict(session.outcome())
            self.log("state_changed", payload)

        def on_turn(team: Team) -> None:
            self.log("turn_changed", {"team": team})

        def on_deck(result: DeckResult) -> None:
            if result.ok and result.deck is not None:
                self.log("deck_ready", {"rows": result.deck.rows, "cols": result.deck.cols})
            else:
                self.log("deck_failed", {"error": result.error})

        detachers = [
            session.state_changed.connect(on_state),
            session.turn_changed.connect(on_turn),
            session.deck_supplied.connect(on_deck),
        ]

        def detach() -> None:
            for d in detachers:
                d()

        return detach
