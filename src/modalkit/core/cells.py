"""Observable single-value state cells.

A :class:`StateCell` holds one value. Every :meth:`StateCell.set` replaces
the value and then notifies subscribers synchronously, in subscription order,
with the new value. Because writes replace the whole value, observers never
see a partially updated record.

Usage example::

    cell = StateCell(0)
    unsubscribe = cell.subscribe(lambda v: print("now", v))
    cell.set(1)      # prints "now 1"
    unsubscribe()
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, TypeVar

__all__ = ["StateCell", "Listener"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


class StateCell(Generic[T]):
    """Mutable, externally observable holder of a single value."""

    __slots__ = ("_value", "_listeners")

    def __init__(self, value: T) -> None:
        self._value = value
        self._listeners: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers.

        A listener that raises is logged and skipped; the write itself has
        already happened and the remaining listeners are still notified.
        """
        self._value = value
        # Snapshot so listeners may (un)subscribe while being notified.
        for cb in list(self._listeners):
            try:
                cb(value)
            except Exception:
                logger.exception("state listener %r failed", cb)

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Register *listener* and return a callable that removes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def __len__(self) -> int:
        return len(self._listeners)
