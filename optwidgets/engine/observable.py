"""
OptWidgets Observables — Synchronous reactive value cells.

An Observable holds a value and notifies its listeners when the value changes.
Propagation is depth-first: ``set()`` returns only after every listener (and
everything those listeners write) has run.

``set()`` is set-if-changed. Writing a value equal to the current one is a
no-op and notifies nobody, which is what terminates two-way links such as
ObservablePair.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger("optwidgets.engine.observable")

T = TypeVar("T")
S = TypeVar("S")

Listener = Callable[[Any], None]


def _equal(a: Any, b: Any) -> bool:
    try:
        return bool(a == b) and type(a) is type(b)
    except Exception:
        # Values whose __eq__ is not a plain bool (arrays, lazy exprs)
        return a is b


class Observable(Generic[T]):
    """
    A value cell with listeners.

    Usage:
        count = Observable(0)
        count.subscribe(lambda v: print("now", v))
        count.set(1)        # prints "now 1"
        count.set(1)        # no-op
        count.value         # 1
    """

    def __init__(self, value: T = None, name: str = ""):
        self._value = value
        self._listeners: List[Listener] = []
        self.name = name

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self.set(new_value)

    def get(self) -> T:
        return self._value

    def set(self, new_value: T, force: bool = False) -> bool:
        """
        Store new_value and notify listeners.

        Returns False (and notifies nobody) when the value is unchanged,
        unless force is set.
        """
        if not force and _equal(self._value, new_value):
            return False
        self._value = new_value
        self.notify()
        return True

    def notify(self) -> None:
        """Run every listener with the current value, in subscription order."""
        for listener in list(self._listeners):
            listener(self._value)

    def subscribe(self, listener: Listener) -> Listener:
        """Register a listener. Returns it so callers can unsubscribe later."""
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            logger.debug(f"unsubscribe: listener not registered on {self!r}")

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def map(self, fn: Callable[[T], S], name: str = "") -> "Observable[S]":
        """Derived observable holding fn(value), recomputed on every change."""
        derived: Observable[S] = Observable(fn(self._value), name=name)
        self.subscribe(lambda v: derived.set(fn(v)))
        return derived

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        return f"<Observable{label} {self._value!r}>"


class ObservablePair:
    """
    Two observables kept consistent by a forward/backward transform pair.

        first  --f-->  second
        first  <--g--  second

    A write on either side propagates to the other. The echo coming back is
    absorbed by set-if-changed, and a guard flag stops the pair from
    re-entering itself while one direction is still propagating.
    """

    def __init__(
        self,
        first: Observable,
        second: Optional[Observable] = None,
        f: Callable[[Any], Any] = lambda x: x,
        g: Callable[[Any], Any] = lambda x: x,
    ):
        self.first = first
        self.second = second if second is not None else Observable(f(first.value))
        self.f = f
        self.g = g
        self._syncing = False
        first.subscribe(self._forward)
        self.second.subscribe(self._backward)

    def _forward(self, value: Any) -> None:
        if self._syncing:
            return
        self._syncing = True
        try:
            self.second.set(self.f(value))
        finally:
            self._syncing = False

    def _backward(self, value: Any) -> None:
        if self._syncing:
            return
        self._syncing = True
        try:
            self.first.set(self.g(value))
        finally:
            self._syncing = False
