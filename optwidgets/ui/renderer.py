"""
OptWidgets Reflex Renderer — Converts resolved widget trees to Reflex components.

The renderer is the only module that imports reflex. It takes the output of
``Widget.render()`` (RenderedNode trees) and produces ``rx.el.*`` elements.

Static parts of the tree (tags, fixed classes, labels) are emitted as
literals. Every bound property (active class, checked/selected flags, the
mask's display style) is read from ``WidgetState.bound``, a computed var
holding ``Scope.bound_props()`` of every mounted widget. Input events go
through WidgetState.dispatch, which looks the owning scope up in the live
scope registry and hands the event to the node's handler; the state update
that follows recomputes ``bound`` and the page re-renders.

Usage:
    import reflex as rx
    from optwidgets.ui.renderer import render_widget

    def index() -> rx.Component:
        return render_widget(picker)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import reflex as rx

from optwidgets.ui.scope import RenderedNode, Scope, get_scope

logger = logging.getLogger("optwidgets.ui.renderer")

# Attribute names that Reflex exposes as regular props under another name
PROP_ALIASES: Dict[str, str] = {
    "for": "html_for",
}

# Root scopes of widgets handed to render_widget, by scope id
_mounted: Dict[str, Scope] = {}


def bound_snapshot() -> Dict[str, Dict[str, str]]:
    """Bound props of every mounted widget, keyed "<scope id>/<node key>"."""
    snapshot: Dict[str, Dict[str, str]] = {}
    for scope_id, scope in list(_mounted.items()):
        for key, props in scope.bound_props().items():
            snapshot[f"{scope_id}/{key}"] = props
    return snapshot


# ---------------------------------------------------------------------------
# Renderer State — routes browser events into live widget scopes
# ---------------------------------------------------------------------------

class WidgetState(rx.State):
    """
    Shared Reflex state for rendered widgets.

    ``revision`` is bumped after every handled event; ``bound`` is recomputed
    on every state update, so each handled event re-renders the bound props.
    """

    revision: int = 0
    error_message: str = ""

    @rx.var(cache=False)
    def bound(self) -> Dict[str, Dict[str, str]]:
        return bound_snapshot()

    def dispatch(self, scope_id: str, key: str, event: str, payload: str):
        """Deliver a DOM event to the scope that rendered the node."""
        scope = get_scope(scope_id)
        if scope is None:
            logger.warning(f"Event {event} for unknown scope {scope_id}")
            self.error_message = "Widget is no longer available"
            return
        try:
            scope.dispatch(key, event, payload)
        except (KeyError, ValueError, IndexError) as e:
            logger.error(f"Failed to dispatch {event} to {key}: {e}", exc_info=True)
            self.error_message = str(e)
            return
        self.error_message = ""
        self.revision += 1


# ---------------------------------------------------------------------------
# Tree conversion
# ---------------------------------------------------------------------------

def _style(style: Dict[str, Any]) -> Dict[str, Any]:
    return {k.replace("-", "_"): v for k, v in style.items()}


def _bound(node_id: str, prop: str) -> Any:
    return WidgetState.bound[node_id][prop]


def _event_props(node: RenderedNode, scope_id: str) -> Dict[str, Any]:
    props: Dict[str, Any] = {}
    if "click" in node.events:
        props["on_click"] = WidgetState.dispatch(scope_id, node.key, "click", "")
    if "change" in node.events:
        key = node.key
        props["on_change"] = lambda value: WidgetState.dispatch(scope_id, key, "change", value)
    return props


def render_node(node: Any, scope_id: str) -> Any:
    """Convert one RenderedNode (or text) to a Reflex component."""
    if not isinstance(node, RenderedNode):
        return "" if node is None else str(node)

    node_id = f"{scope_id}/{node.key}"
    bound = set(node.bound)

    children: List[Any] = [render_node(c, scope_id) for c in node.children]
    if "text" in bound and children:
        children[0] = _bound(node_id, "text")

    if node.tag == "fragment":
        return rx.fragment(*children)

    props: Dict[str, Any] = {}
    custom_attrs: Dict[str, Any] = {}
    for name, value in node.attributes.items():
        # Multi-select <select> value: the <option> selected flags carry it
        if isinstance(value, (list, tuple)):
            continue
        if name in bound:
            var = _bound(node_id, name)
            custom_attrs[name] = (var == "true") if isinstance(value, bool) else var
            continue
        if value is None or value is False:
            continue
        if name == "key":
            name = "data-key"
        if name in PROP_ALIASES:
            props[PROP_ALIASES[name]] = str(value)
        else:
            custom_attrs[name] = value if value is True else str(value)

    if "class" in bound:
        props["class_name"] = _bound(node_id, "class_name")
    elif node.class_name:
        props["class_name"] = node.class_name

    style = dict(node.style)
    if "style" in bound:
        style.update({k: _bound(node_id, f"style.{k}") for k in node.style})
    if style:
        props["style"] = _style(style)
    if custom_attrs:
        props["custom_attrs"] = custom_attrs
    props.update(_event_props(node, scope_id))

    element = getattr(rx.el, node.tag, None)
    if element is None:
        logger.warning(f"No Reflex element for <{node.tag}>, using <div>")
        element = rx.el.div
    return element(*children, **props)


def render_widget(widget: Any) -> rx.Component:
    """
    Render a Widget (anything with ``render()`` and ``root``) to Reflex and
    mount it, so its bound props follow the widget's observables.
    """
    root = widget.root
    _mounted[root.id] = root
    return render_node(widget.render(), root.id)


def unmount_widget(widget: Any) -> None:
    _mounted.pop(widget.root.id, None)
