"""
OptWidgets Index/Value Bridge — Keep a widget's selected index in sync with its value.

Templates bind to positions (``index``); callers observe values (``value``).
The bridge owns both observables and the transforms between them:

    to_index(value)  — value(s) → 1-based position(s) in the current options
    to_value(index)  — position(s) → value(s)

Single mode holds one value / one int. Multi mode holds a list of values /
a list of ints; both lists are kept without repeats, in option order.

Cycle handling: Observable.set() ignores equal writes, so the echo of a
propagation stops at the side it started from. A listener that writes a
different value mid-propagation is handled like any other write: the last
writer wins and both sides end up describing the same selection.
"""

from __future__ import annotations

import bisect
import logging
from enum import Enum
from typing import Any, List, Optional

from optwidgets.engine.errors import InvalidDefaultError
from optwidgets.engine.logging import log_widget_event
from optwidgets.engine.observable import Observable
from optwidgets.options import OptionCollection

logger = logging.getLogger("optwidgets.bridge")


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class SelectionPolicy(str, Enum):
    """Which position a single-select widget starts at when given no value."""
    FIRST = "first"
    MEDIAN = "median"

    def position(self, count: int) -> int:
        """1-based default position for count options (0 when empty)."""
        if count <= 0:
            return 0
        if self is SelectionPolicy.MEDIAN:
            return (count + 1) // 2
        return 1


class IndexValueBridge:
    """
    Bidirectional link between an external value observable and an internal
    index observable, relative to an OptionCollection.

    Usage:
        opts = OptionCollection({"good": 1, "better": 2, "amazing": 9001})
        bridge = IndexValueBridge(opts)
        bridge.index.value      # 1
        bridge.index.set(3)
        bridge.value.value      # 9001
    """

    def __init__(
        self,
        options: OptionCollection,
        value: Any = UNSET,
        multiple: bool = False,
        policy: SelectionPolicy = SelectionPolicy.FIRST,
        kind: str = "",
    ):
        self.options = options
        self.multiple = multiple
        self.policy = policy
        self.kind = kind

        if value is UNSET:
            value = self.default_value()
        self.value: Observable = value if isinstance(value, Observable) else Observable(value)
        self.value.name = self.value.name or "value"

        initial = self.to_index(self.value.value)
        if initial is None:
            raise InvalidDefaultError(
                f"Initial value {self.value.value!r} is not among the {len(options)} options",
                widget_kind=kind,
                value=self.value.value,
                option_count=len(options),
            )
        self.index: Observable = Observable(initial, name="index")
        if multiple:
            canonical = self.to_value(initial)
            if canonical != self.value.value:
                self.value.set(canonical)

        self.value.subscribe(self._on_value)
        self.index.subscribe(self._on_index)
        self.options.subscribe(self._on_options)

    # ── Defaults ──

    def default_value(self) -> Any:
        """Value the widget selects when none is given."""
        if self.multiple:
            return []
        position = self.policy.position(len(self.options))
        if position == 0:
            raise InvalidDefaultError(
                "Cannot pick a default selection from an empty option collection",
                widget_kind=self.kind,
                option_count=0,
            )
        return self.options.value_at(position)

    # ── Transforms ──

    def to_index(self, value: Any) -> Any:
        """
        Forward transform. Returns None in single mode when value is absent.
        In multi mode returns the sorted positions of the present values, or
        None if any value is absent.
        """
        if self.multiple:
            positions = [self.options.position_of(v) for v in (value or [])]
            if any(p is None for p in positions):
                return None
            return sorted(set(positions))
        return self.options.position_of(value)

    def to_value(self, index: Any) -> Any:
        """Backward transform. Raises IndexError for positions out of range."""
        if self.multiple:
            return [self.options.value_at(i) for i in sorted(index or [])]
        return self.options.value_at(index)

    def round_trip(self, value: Any) -> Any:
        return self.to_value(self.to_index(value))

    # ── Propagation ──

    def _on_value(self, value: Any) -> None:
        if self.multiple:
            kept = [v for v in (value or []) if v in self.options]
            if len(kept) != len(value or []):
                logger.warning(
                    f"{self.kind or 'widget'}: dropping values not in options: "
                    f"{[v for v in value if v not in self.options]!r}"
                )
            positions = self.to_index(kept)
            canonical = self.to_value(positions)
            if canonical != value:
                # The nested write carries the index update
                self.value.set(canonical)
                return
            self.index.set(positions)
            return

        position = self.options.position_of(value)
        if position is not None:
            self.index.set(position)
        elif value is None and self.index.value == 0:
            # Empty collection
            return
        else:
            logger.warning(
                f"{self.kind or 'widget'}: value {value!r} not in options, "
                f"keeping position {self.index.value}"
            )
            self.value.set(self._value_for_current_index())

    def _on_index(self, index: Any) -> None:
        if self.multiple:
            positions = sorted(set(index or []))
            if positions != index:
                self.index.set(positions)
                return
        elif index == 0 and not len(self.options):
            self.value.set(None)
            return
        try:
            new_value = self.to_value(index)
        except IndexError:
            # Put the index back where the value says it is before failing
            self.index.set(self.to_index(self.value.value))
            raise
        self.value.set(new_value)

    def _value_for_current_index(self) -> Any:
        if not self.index.value:
            return [] if self.multiple else None
        return self.to_value(self.index.value)

    def _on_options(self, pairs: List[Any]) -> None:
        """Re-derive the index after the options changed; recover stale selections."""
        current = self.value.value
        if self.multiple:
            kept = [v for v in (current or []) if v in self.options]
            if len(kept) != len(current or []):
                log_widget_event(
                    self.kind, "stale_selection",
                    dropped=len(current) - len(kept), option_count=len(pairs),
                )
            positions = self.to_index(kept)
            self.index.set(positions)
            self.value.set(self.to_value(positions))
            return

        position = self.options.position_of(current)
        if position is None:
            position = self.policy.position(len(pairs))
            log_widget_event(
                self.kind, "stale_selection",
                previous=repr(current), reset_to=position, option_count=len(pairs),
            )
        self.index.set(position)
        self.value.set(self.options.value_at(position) if position else None)

    # ── Multi-select editing ──

    def toggle(self, position: int) -> List[int]:
        """
        Add or remove a position from the selection (multi mode only).

        Reads the current index at call time and writes a fresh list, so
        remaining positions keep their option order.
        """
        if not self.multiple:
            raise TypeError("toggle() is only available on multi-select bridges")
        selected = list(self.index.value or [])
        if position in selected:
            selected.remove(position)
        else:
            bisect.insort(selected, position)
        self.index.set(selected)
        return selected

    def select(self, position: Optional[int]) -> None:
        """Select exactly one position (single mode)."""
        self.index.set(position)

    def __repr__(self) -> str:
        return f"<IndexValueBridge {self.kind or '?'} index={self.index.value!r} value={self.value.value!r}>"
