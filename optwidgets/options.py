"""
OptWidgets Options — Normalize caller data into an ordered label → value sequence.

Accepted sources:
    Mapping (dict / OrderedDict)        → items used as-is
    Sequence of values (list / tuple)   → labels = process(value), process defaults to str
    Observable holding either of those  → re-normalized on every change

Positions are 1-based and follow the order of the source.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from optwidgets.engine.errors import OptionsError
from optwidgets.engine.observable import Observable, ObservablePair

logger = logging.getLogger("optwidgets.options")

Pair = Tuple[Any, Any]


def normalize(source: Any, process: Callable[[Any], Any] = str) -> List[Pair]:
    """
    Turn a mapping or a sequence of raw values into a list of (label, value) pairs.

    Labels are not de-duplicated.
    """
    if source is None:
        return []
    if isinstance(source, Mapping):
        return list(source.items())
    if isinstance(source, (str, bytes)):
        raise OptionsError(
            f"Options must be a mapping or a sequence of values, got {type(source).__name__}",
            source_type=type(source).__name__,
        )
    try:
        values = list(source)
    except TypeError:
        raise OptionsError(
            f"Options must be a mapping or a sequence of values, got {type(source).__name__}",
            source_type=type(source).__name__,
        ) from None
    return [(process(v), v) for v in values]


class OptionCollection:
    """
    Ordered label → value options backing one widget.

    The normalized pairs live in an Observable (``self.pairs``). When built
    from a reactive source the two are linked both ways: a change of the
    source re-normalizes the pairs, and ``update()`` writes back to the source.

    Usage:
        opts = OptionCollection({"good": 1, "better": 2})
        opts.position_of(2)    # 2
        opts.value_at(1)       # 1
        opts.labels()          # ["good", "better"]
    """

    def __init__(self, source: Any = None, process: Callable[[Any], Any] = str):
        self._process = process
        self.source: Optional[Observable] = None
        self._link: Optional[ObservablePair] = None
        self._positions: Dict[Any, int] = {}
        self._unhashable = False

        if isinstance(source, Observable):
            self.source = source
            self._link = ObservablePair(
                source,
                f=lambda s: normalize(s, self._process),
                g=self._denormalize,
            )
            self.pairs: Observable = self._link.second
        else:
            self.pairs = Observable(normalize(source, process))

        self.pairs.name = "options"
        self._reindex(self.pairs.value)
        # Registered before any widget listener so lookups are fresh when they run
        self.pairs.subscribe(self._reindex)

    @classmethod
    def coerce(cls, options: Any, process: Callable[[Any], Any] = str) -> "OptionCollection":
        """Return options unchanged if already a collection, else wrap it."""
        if isinstance(options, OptionCollection):
            return options
        return cls(options, process=process)

    @classmethod
    def from_pairs(cls, pairs: List[Pair]) -> "OptionCollection":
        """Build from explicit (label, value) pairs, keeping duplicate labels."""
        collection = cls()
        collection.pairs.set([(label, value) for label, value in pairs])
        return collection

    @property
    def is_reactive(self) -> bool:
        return self.source is not None

    def _denormalize(self, pairs: List[Pair]) -> Any:
        # Write back in the shape the source was given in
        if isinstance(self.source.value, Mapping):
            return dict(pairs)
        return [value for _, value in pairs]

    def _reindex(self, pairs: List[Pair]) -> None:
        positions: Dict[Any, int] = {}
        unhashable = False
        for position, (_, value) in enumerate(pairs, start=1):
            try:
                positions.setdefault(value, position)
            except TypeError:
                unhashable = True
        self._positions = positions
        self._unhashable = unhashable
        logger.debug(f"Reindexed {len(pairs)} options")

    # ── Lookup ──

    def position_of(self, value: Any) -> Optional[int]:
        """1-based position of value (first occurrence), or None if absent."""
        try:
            position = self._positions.get(value)
        except TypeError:
            position = None
        if position is None and self._unhashable:
            for i, (_, candidate) in enumerate(self.pairs.value, start=1):
                if candidate == value:
                    return i
        return position

    def value_at(self, position: int) -> Any:
        """Value at a 1-based position. Raises IndexError when out of range."""
        pairs = self.pairs.value
        if not 1 <= position <= len(pairs):
            raise IndexError(f"Option position {position} out of range 1..{len(pairs)}")
        return pairs[position - 1][1]

    def label_at(self, position: int) -> Any:
        pairs = self.pairs.value
        if not 1 <= position <= len(pairs):
            raise IndexError(f"Option position {position} out of range 1..{len(pairs)}")
        return pairs[position - 1][0]

    def __contains__(self, value: Any) -> bool:
        return self.position_of(value) is not None

    def labels(self) -> List[Any]:
        return [label for label, _ in self.pairs.value]

    def values(self) -> List[Any]:
        return [value for _, value in self.pairs.value]

    def __len__(self) -> int:
        return len(self.pairs.value)

    def __iter__(self) -> Iterator[Pair]:
        return iter(list(self.pairs.value))

    # ── Mutation / observation ──

    def update(self, source: Any) -> None:
        """Replace the options. Propagates to the reactive source if there is one."""
        self.pairs.set(normalize(source, self._process))

    def subscribe(self, listener: Callable[[List[Pair]], None]) -> Callable:
        return self.pairs.subscribe(listener)

    def option_items(self) -> Observable:
        """
        Per-option view data, kept current with the options.

        Each item is ``{"key": label, "val": position, "id": unique element id}``.
        """
        def build(pairs: List[Pair]) -> List[Dict[str, Any]]:
            return [
                {"key": label, "val": i, "id": f"id{uuid.uuid4().hex[:12]}"}
                for i, (label, _) in enumerate(pairs, start=1)
            ]

        return self.pairs.map(build, name="option_items")

    def __repr__(self) -> str:
        kind = "reactive" if self.is_reactive else "static"
        return f"<OptionCollection {kind} {self.pairs.value!r}>"
