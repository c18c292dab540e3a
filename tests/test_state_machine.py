from __future__ import annotations

import pytest

from matchmatch.engine.fsm import TRANSITIONS, GameStateMachine
from matchmatch.engine.types import GAME_STATES


def test_initial_state_is_init() -> None:
    assert GameStateMachine().current == "init"


def test_pause_from_init_fails_without_state_change() -> None:
    fsm = GameStateMachine()
    res = fsm.fire("pause")
    assert not res.ok
    assert res.error is not None
    assert fsm.current == "init"


def test_play_pause_resume_returns_to_play() -> None:
    fsm = GameStateMachine()
    assert fsm.fire("ready").ok
    assert fsm.fire("play").ok
    assert fsm.fire("pause").ok
    assert fsm.current == "pause"
    res = fsm.fire("resume")
    assert res.ok
    assert res.source == "pause"
    assert res.destination == "play"


@pytest.mark.parametrize("via_pause", [False, True])
def test_cancel_reaches_game_over(via_pause: bool) -> None:
    fsm = GameStateMachine()
    fsm.fire("ready")
    fsm.fire("play")
    if via_pause:
        fsm.fire("pause")
    assert fsm.fire("cancel").ok
    assert fsm.current == "game_over"


@pytest.mark.parametrize("state", [s for s in GAME_STATES if s != "game_over"])
def test_init_only_succeeds_from_game_over(state: str) -> None:
    fsm = GameStateMachine(initial=state)  # type: ignore[arg-type]
    assert not fsm.fire("init").ok
    assert fsm.current == state


def test_init_from_game_over() -> None:
    fsm = GameStateMachine(initial="game_over")
    assert fsm.fire("init").ok
    assert fsm.current == "init"


def test_every_state_event_pair_matches_table() -> None:
    for state in GAME_STATES:
        for event, (sources, dest) in TRANSITIONS.items():
            fsm = GameStateMachine(initial=state)
            res = fsm.fire(event)
            if state in sources:
                assert res.ok and fsm.current == dest
            else:
                assert not res.ok and fsm.current == state


def test_unknown_event_is_reported() -> None:
    fsm = GameStateMachine()
    res = fsm.fire("explode")
    assert not res.ok
    assert "Unknown event" in (res.error or "")
    assert fsm.current == "init"


def test_callback_sees_new_state() -> None:
    fsm = GameStateMachine()
    seen: list[tuple[str, str]] = []
    fsm.fire("ready", lambda s: seen.append((s, fsm.current)))
    assert seen == [("ready", "ready")]


def test_callback_not_run_on_invalid_transition() -> None:
    fsm = GameStateMachine()
    seen: list[str] = []
    fsm.fire("play", seen.append)
    assert seen == []
    assert fsm.can_fire("ready")
    assert not fsm.can_fire("play")
