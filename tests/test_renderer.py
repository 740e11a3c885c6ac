"""Smoke tests for optwidgets.ui.renderer — requires reflex."""

import pytest

rx = pytest.importorskip("reflex")

from optwidgets.ui import renderer  # noqa: E402
from optwidgets.ui.renderer import (  # noqa: E402
    PROP_ALIASES,
    bound_snapshot,
    render_node,
    render_widget,
    unmount_widget,
)
from optwidgets.ui.scope import RenderedNode  # noqa: E402
from optwidgets.ui.widgets import tabulator, togglebuttons  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_mounted():
    renderer._mounted.clear()
    yield
    renderer._mounted.clear()


def active_ids(snapshot, activeclass="is-selected"):
    return [k for k, props in snapshot.items() if activeclass in props.get("class_name", "")]


class TestRenderer:

    def test_text_passthrough(self):
        assert render_node("hello", "sid") == "hello"
        assert render_node(None, "sid") == ""

    def test_plain_element(self):
        node = RenderedNode(tag="div", key="0", class_name="box", children=["hi"])
        assert isinstance(render_node(node, "sid"), rx.Component)

    def test_render_togglebuttons(self, theme):
        component = render_widget(togglebuttons(theme, ["a", "b", "c"]))
        assert isinstance(component, rx.Component)

    def test_aliases(self):
        assert PROP_ALIASES == {"for": "html_for"}


class TestBoundSnapshot:
    """The data WidgetState.bound serves to the page."""

    def test_mount_registers_widget(self, theme):
        w = togglebuttons(theme, ["a", "b", "c"])
        render_widget(w)
        snapshot = bound_snapshot()
        assert snapshot
        assert all(k.startswith(f"{w.root.id}/") for k in snapshot)

    def test_active_class_follows_index(self, theme):
        w = togglebuttons(theme, ["a", "b", "c"])
        render_widget(w)
        before = active_ids(bound_snapshot())
        assert len(before) == 1
        w.bridge.select(1)
        after = active_ids(bound_snapshot())
        assert len(after) == 1
        assert after != before

    def test_click_updates_snapshot(self, theme):
        w = togglebuttons(theme, ["a", "b", "c"])
        render_widget(w)
        first = [n for n in w.render().find_all("button")][0]
        w.dispatch(first.key, "click")
        assert active_ids(bound_snapshot()) == [f"{w.root.id}/{first.key}"]

    def test_tabulator_display_follows_selection(self, theme):
        w = tabulator(theme, ["one", "two"], ["A", "B"])
        render_widget(w)

        def shown():
            return sorted(
                k for k, props in bound_snapshot().items()
                if props.get("style.display") not in (None, "none")
            )

        before = shown()
        assert len(before) == 1
        w["index"].set(2)
        after = shown()
        assert len(after) == 1
        assert after != before

    def test_unmount(self, theme):
        w = togglebuttons(theme, ["a", "b"])
        render_widget(w)
        unmount_widget(w)
        assert bound_snapshot() == {}
