from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

# Receives a zero-argument thunk and runs it wherever the subscriber needs it
# (a UI loop's call_soon, a queue.put, ...).
Dispatcher = Callable[[Callable[[], None]], None]


@dataclass(frozen=True)
class _Subscription(Generic[T]):
    handler: Callable[[T], None]
    dispatcher: Dispatcher | None


class Signal(Generic[T]):
    """Typed notification channel.

    Handlers without a dispatcher run synchronously on the emitting thread.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subs: list[_Subscription[T]] = []

    def connect(
        self, handler: Callable[[T], None], *, dispatcher: Dispatcher | None = None
    ) -> Callable[[], None]:
        self._subs.append(_Subscription(handler=handler, dispatcher=dispatcher))
        return partial(self.disconnect, handler)

    def disconnect(self, handler: Callable[[T], None]) -> None:
        self._subs = [s for s in self._subs if s.handler != handler]

    def emit(self, value: T) -> None:
        # copy so handlers may (dis)connect while being notified
        for sub in list(self._subs):
            if sub.dispatcher is None:
                sub.handler(value)
            else:
                sub.dispatcher(partial(sub.handler, value))

    def __len__(self) -> int:
        return len(self._subs)
