from __future__ import annotations

import threading
from typing import Callable


def format_elapsed(seconds: int) -> str:
    return "%02d" % seconds


class ElapsedTimer:
    """Counts seconds on a background thread while running.

    Counting and stop/reset share one lock and every run gets a generation
    number, so once `stop()` or `reset()` returns the counter never moves
    again. The tick callback runs on the timer thread with no lock held.

    A tick already being delivered when `stop()` is called may finish after
    `stop()` returns; its value is the frozen one. `stop()` only joins the
    thread when nothing is being delivered, so a handler blocked on a lock
    held by the caller of `stop()` cannot deadlock it. `reset()` waits for
    such a delivery so no stale value lands after the reset value; tick
    handlers must not block on a lock held by whoever calls `reset()`.
    """

    def __init__(self, on_tick: Callable[[int], None] | None = None, interval: float = 1.0) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._on_tick = on_tick
        self._lock = threading.RLock()
        self._idle = threading.Condition(self._lock)
        self._elapsed = 0
        self._generation = 0
        self._thread: threading.Thread | None = None
        self._wake: threading.Event | None = None
        self._delivering: threading.Thread | None = None

    @property
    def elapsed(self) -> int:
        with self._lock:
            return self._elapsed

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._generation += 1
            wake = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(self._generation, wake),
                name="matchmatch-timer",
                daemon=True,
            )
            self._wake = wake
            self._thread = thread
            thread.start()

    def stop(self) -> None:
        with self._lock:
            thread = self._thread
            busy = self._delivering is not None
            self._generation += 1
            self._thread = None
            if self._wake is not None:
                self._wake.set()
                self._wake = None
        if thread is not None and not busy and thread is not threading.current_thread():
            thread.join()

    def reset(self) -> None:
        self.stop()
        me = threading.current_thread()
        with self._idle:
            while self._delivering is not None and self._delivering is not me:
                self._idle.wait()
            self._elapsed = 0
        if self._on_tick is not None:
            self._on_tick(0)

    def _run(self, generation: int, wake: threading.Event) -> None:
        while not wake.wait(self._interval):
            if not self._tick(generation):
                return

    def _tick(self, generation: int) -> bool:
        with self._lock:
            if generation != self._generation:
                return False
            self._elapsed += 1
            value = self._elapsed
            self._delivering = threading.current_thread()
        try:
            if self._on_tick is not None:
                self._on_tick(value)
        finally:
            with self._idle:
                self._delivering = None
                self._idle.notify_all()
        return True
