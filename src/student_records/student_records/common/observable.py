from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, Generic, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[Tuple[T, ...]], None]


class ObservableCollection(Generic[T]):
    """Holds the current snapshot of a collection and pushes every new snapshot to subscribers.

    Subscribers are called synchronously, in registration order. A new subscriber
    immediately receives the current snapshot. A subscriber that raises is logged and
    skipped; the others still receive the snapshot.
    """

    def __init__(self, initial: Tuple[T, ...] = ()):
        self._value: Tuple[T, ...] = tuple(initial)
        self._subscribers: Dict[int, Subscriber] = {}
        self._handles = itertools.count(1)

    @property
    def value(self) -> Tuple[T, ...]:
        return self._value

    def subscribe(self, callback: Subscriber) -> int:
        handle = next(self._handles)
        self._subscribers[handle] = callback
        callback(self._value)
        return handle

    def unsubscribe(self, handle: int) -> bool:
        return self._subscribers.pop(handle, None) is not None

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def next(self, value: Tuple[T, ...]) -> None:
        self._value = tuple(value)
        # Copy so a callback may unsubscribe itself.
        for handle, callback in list(self._subscribers.items()):
            try:
                callback(self._value)
            except Exception:
                logger.exception("Subscriber %d failed to handle a change", handle)
