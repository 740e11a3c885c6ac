"""Unit tests for optwidgets.bridge — IndexValueBridge, SelectionPolicy."""

import logging

import pytest

from optwidgets.bridge import IndexValueBridge, SelectionPolicy
from optwidgets.engine.errors import InvalidDefaultError
from optwidgets.engine.observable import Observable
from optwidgets.options import OptionCollection


@pytest.fixture
def opts():
    return OptionCollection({"good": 1, "better": 2, "amazing": 9001})


class TestSelectionPolicy:

    def test_first(self):
        assert SelectionPolicy.FIRST.position(4) == 1

    def test_median_odd(self):
        assert SelectionPolicy.MEDIAN.position(5) == 3

    def test_median_even_takes_lower(self):
        assert SelectionPolicy.MEDIAN.position(4) == 2

    def test_median_single(self):
        assert SelectionPolicy.MEDIAN.position(1) == 1

    def test_empty(self):
        assert SelectionPolicy.FIRST.position(0) == 0
        assert SelectionPolicy.MEDIAN.position(0) == 0


class TestSingleBridge:
    """Single-select index ↔ value."""

    def test_default_first(self, opts):
        bridge = IndexValueBridge(opts)
        assert bridge.index.value == 1
        assert bridge.value.value == 1

    def test_default_median(self):
        bridge = IndexValueBridge(OptionCollection([10, 20, 30, 40, 50]), policy=SelectionPolicy.MEDIAN)
        assert bridge.index.value == 3
        assert bridge.value.value == 30

    def test_index_to_value(self, opts):
        bridge = IndexValueBridge(opts)
        bridge.index.set(3)
        assert bridge.value.value == 9001

    def test_value_to_index(self, opts):
        bridge = IndexValueBridge(opts)
        bridge.value.set(2)
        assert bridge.index.value == 2

    def test_round_trip(self, opts):
        bridge = IndexValueBridge(opts)
        for value in opts.values():
            assert bridge.to_value(bridge.to_index(value)) == value
            assert bridge.round_trip(value) == value

    def test_reuses_observable(self, opts):
        value = Observable(2)
        bridge = IndexValueBridge(opts, value)
        assert bridge.value is value
        assert bridge.index.value == 2
        value.set(9001)
        assert bridge.index.value == 3

    def test_plain_value_wrapped(self, opts):
        bridge = IndexValueBridge(opts, 9001)
        assert isinstance(bridge.value, Observable)
        assert bridge.index.value == 3

    def test_invalid_initial_value(self, opts):
        with pytest.raises(InvalidDefaultError) as exc:
            IndexValueBridge(opts, 42, kind="dropdown")
        assert exc.value.widget_kind == "dropdown"
        assert exc.value.option_count == 3

    def test_empty_options_without_value(self):
        with pytest.raises(InvalidDefaultError, match="empty"):
            IndexValueBridge(OptionCollection([]))

    def test_empty_options_with_value(self):
        with pytest.raises(InvalidDefaultError):
            IndexValueBridge(OptionCollection([]), 1)

    def test_same_index_write_does_not_touch_value(self, opts):
        bridge = IndexValueBridge(opts)
        writes = []
        bridge.value.subscribe(writes.append)
        assert bridge.index.set(bridge.index.value) is False
        assert writes == []

    def test_one_write_per_propagation(self, opts):
        bridge = IndexValueBridge(opts)
        value_writes, index_writes = [], []
        bridge.value.subscribe(value_writes.append)
        bridge.index.subscribe(index_writes.append)
        bridge.index.set(2)
        assert index_writes == [2]
        assert value_writes == [2]

    def test_absent_value_reverts(self, opts):
        bridge = IndexValueBridge(opts)
        bridge.index.set(2)
        bridge.value.set(42)
        assert bridge.value.value == 2
        assert bridge.index.value == 2

    def test_out_of_range_index_raises_and_restores(self, opts):
        bridge = IndexValueBridge(opts)
        with pytest.raises(IndexError):
            bridge.index.set(99)
        assert bridge.index.value == 1
        assert bridge.value.value == 1

    def test_toggle_rejected(self, opts):
        with pytest.raises(TypeError):
            IndexValueBridge(opts).toggle(1)

    def test_listener_rewriting_value_keeps_sides_in_sync(self, opts):
        bridge = IndexValueBridge(opts)
        # Clamp: never allow the last option
        bridge.value.subscribe(lambda v: bridge.value.set(2) if v == 9001 else None)
        bridge.index.set(3)
        assert bridge.value.value == 2
        assert bridge.index.value == 2
        assert bridge.to_value(bridge.index.value) == bridge.value.value

    def test_listener_rewriting_index_keeps_sides_in_sync(self, opts):
        bridge = IndexValueBridge(opts)
        bridge.index.subscribe(lambda i: bridge.index.set(1) if i == 2 else None)
        bridge.value.set(2)
        assert bridge.index.value == 1
        assert bridge.value.value == 1


class TestMultiBridge:
    """Multi-select index lists ↔ value lists."""

    def test_default_empty(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b"]), multiple=True)
        assert bridge.value.value == []
        assert bridge.index.value == []

    def test_index_in_option_order(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b", "c"]), ["c", "a"], multiple=True)
        assert bridge.index.value == [1, 3]
        assert bridge.value.value == ["a", "c"]

    def test_repeated_values_collapse(self):
        bridge = IndexValueBridge(OptionCollection([1, 2, 3]), [1, 1], multiple=True)
        assert bridge.index.value == [1]
        assert bridge.value.value == [1]
        bridge.value.set([3, 2, 3])
        assert bridge.index.value == [2, 3]
        assert bridge.value.value == [2, 3]

    def test_unordered_index_write_is_sorted(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b", "c"]), multiple=True)
        bridge.index.set([3, 1])
        assert bridge.index.value == [1, 3]
        assert bridge.value.value == ["a", "c"]

    def test_repeated_index_write_collapses(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b", "c"]), multiple=True)
        bridge.index.set([2, 2])
        assert bridge.index.value == [2]
        assert bridge.value.value == ["b"]

    def test_toggle_adds_and_removes(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b", "c"]), ["a", "c"], multiple=True)
        bridge.toggle(2)
        assert bridge.index.value == [1, 2, 3]
        assert bridge.value.value == ["a", "b", "c"]
        bridge.toggle(2)
        assert bridge.index.value == [1, 3]
        assert bridge.value.value == ["a", "c"]

    def test_toggle_twice_restores(self):
        bridge = IndexValueBridge(OptionCollection([1, 2, 3, 4]), [2, 4], multiple=True)
        before = list(bridge.index.value)
        bridge.toggle(3)
        bridge.toggle(3)
        assert bridge.index.value == before

    def test_invalid_initial_value(self):
        with pytest.raises(InvalidDefaultError):
            IndexValueBridge(OptionCollection(["a"]), ["z"], multiple=True)

    def test_absent_values_dropped(self):
        bridge = IndexValueBridge(OptionCollection(["a", "b"]), multiple=True)
        bridge.value.set(["a", "zz"])
        assert bridge.value.value == ["a"]
        assert bridge.index.value == [1]

    def test_set_of_values(self):
        bridge = IndexValueBridge(OptionCollection([1, 2, 3]), {3, 1}, multiple=True)
        assert bridge.index.value == [1, 3]


class TestStaleSelection:
    """Reactive options changing under a live bridge."""

    def test_selection_follows_moved_value(self):
        src = Observable(["x", "y", "z"])
        bridge = IndexValueBridge(OptionCollection(src), "y")
        src.set(["y", "z"])
        assert bridge.index.value == 1
        assert bridge.value.value == "y"

    def test_vanished_value_resets_to_first(self):
        src = Observable(["x", "y"])
        bridge = IndexValueBridge(OptionCollection(src), "y")
        src.set(["a", "b"])
        assert bridge.index.value == 1
        assert bridge.value.value == "a"

    def test_vanished_value_resets_to_median(self, caplog):
        src = Observable([1, 2, 3])
        bridge = IndexValueBridge(OptionCollection(src), 3, policy=SelectionPolicy.MEDIAN, kind="togglebuttons")
        with caplog.at_level(logging.WARNING, logger="optwidgets.events"):
            src.set([4, 5, 6, 7, 8])
        assert bridge.index.value == 3
        assert bridge.value.value == 6
        assert any("stale_selection" in r.getMessage() for r in caplog.records)

    def test_emptied_options(self):
        src = Observable(["x"])
        bridge = IndexValueBridge(OptionCollection(src))
        src.set([])
        assert bridge.index.value == 0
        assert bridge.value.value is None

    def test_multi_drops_vanished_values(self):
        src = Observable(["a", "b", "c"])
        bridge = IndexValueBridge(OptionCollection(src), ["b", "c"], multiple=True)
        src.set(["c", "d"])
        assert bridge.value.value == ["c"]
        assert bridge.index.value == [1]

    def test_multi_positions_shift(self):
        src = Observable(["a", "b", "c"])
        bridge = IndexValueBridge(OptionCollection(src), ["c"], multiple=True)
        src.set(["z", "y", "x", "c"])
        assert bridge.index.value == [4]
        assert bridge.value.value == ["c"]
