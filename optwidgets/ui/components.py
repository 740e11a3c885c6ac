"""
OptWidgets Node Tree — Declarative view templates as plain data.

Widgets describe their view as a tree of Node dataclasses. Nothing here knows
about a UI engine: a Scope (optwidgets.ui.scope) resolves the bindings against
its observables, and the renderer (optwidgets.ui.renderer) turns the resolved
tree into Reflex components.

Building blocks:
    Node      → one element: tag, class, attributes, style, bindings, events, children
    Binding   → a property computed from a named scope observable
    Foreach   → repeat a template once per item of a list observable
    vbox / hbox / flex_row / wdglabel / vskip → small layout helpers
"""

from __future__ import annotations

from dataclasses import dataclass, field as datafield, replace
from typing import Any, Callable, Dict, List, Optional

EventHandler = Callable[[Any], None]


@dataclass
class Binding:
    """
    A node property computed from a scope observable.

    ``Binding("index", lambda i: i == 3)`` resolves to ``scope["index"].value == 3``
    each time the scope renders.
    """
    source: str
    transform: Optional[Callable[[Any], Any]] = None

    def resolve(self, value: Any) -> Any:
        return self.transform(value) if self.transform else value


@dataclass
class Node:
    """
    One element of a view template.

    Calling a node with children returns a copy with those children appended,
    so templates read like markup:

        Node("div", class_name="select")(Node("select"))
    """
    tag: str
    children: List[Any] = datafield(default_factory=list)
    class_name: str = ""
    attributes: Dict[str, Any] = datafield(default_factory=dict)
    style: Dict[str, Any] = datafield(default_factory=dict)
    bindings: Dict[str, Binding] = datafield(default_factory=dict)
    events: Dict[str, EventHandler] = datafield(default_factory=dict)

    def __call__(self, *children: Any) -> "Node":
        return replace(self, children=[*self.children, *children])

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the static shape (bindings and events by name only)."""
        children_out = []
        for c in self.children:
            if hasattr(c, "to_dict"):
                children_out.append(c.to_dict())
            else:
                children_out.append(c)
        return {
            "tag": self.tag,
            "class_name": self.class_name,
            "attributes": dict(self.attributes),
            "style": dict(self.style),
            "bindings": {k: b.source for k, b in self.bindings.items()},
            "events": sorted(self.events),
            "children": children_out,
        }


@dataclass
class Foreach:
    """Render ``template(item)`` for every item of the scope list observable ``source``."""
    source: str
    template: Callable[[Dict[str, Any]], Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"foreach": self.source}


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------

def vbox(*children: Any, **style: Any) -> Node:
    """Vertical stack."""
    return Node(
        "div",
        children=list(children),
        style={"display": "flex", "flex-direction": "column", **style},
    )


def hbox(*children: Any, **style: Any) -> Node:
    """Horizontal stack."""
    return Node(
        "div",
        children=list(children),
        style={"display": "flex", "flex-direction": "row", **style},
    )


def flex_row(*children: Any) -> Node:
    """Horizontal stack with children vertically centered."""
    return hbox(*children, **{"align-items": "center"})


def wdglabel(text: Any, class_name: str = "", padding_right: str = "1em") -> Node:
    """Label shown next to a widget."""
    return Node(
        "label",
        children=[text],
        class_name=class_name,
        style={"padding-right": padding_right},
    )


def vskip(size: str = "1em") -> Node:
    """Vertical blank space."""
    return Node("div", style={"height": size})
