from __future__ import annotations

from collections.abc import Iterator

import pytest

from matchmatch.engine.session import GameSession
from matchmatch.engine.types import GridConfig

from support import LAYOUT_4X4, FixedSupplier


@pytest.fixture
def supplier() -> FixedSupplier:
    return FixedSupplier(LAYOUT_4X4)


@pytest.fixture
def session(supplier: FixedSupplier) -> Iterator[GameSession]:
    s = GameSession(supplier=supplier, config=GridConfig(rows=4, cols=4, play_type="multi"))
    yield s
    s.close()


@pytest.fixture
def playing(session: GameSession) -> GameSession:
    assert session.run_event("ready").ok
    assert session.request_deck().ok
    assert session.run_event("play").ok
    return session
