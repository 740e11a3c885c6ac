"""
OptWidgets Scope — Binds a node template to named observables.

A Scope is the unit the UI engine works with:
    - ``render()`` walks the template, expands Foreach nodes, resolves every
      Binding against the current observable values and returns a tree of
      RenderedNode with stable path keys ("0", "0.1", "0.1.3", ...).
    - ``dispatch(key, event, payload)`` delivers an input event (click, change)
      to the handler of the node rendered under ``key``.

Live scopes are tracked in a weak registry so an engine adapter can route
events by scope id without keeping widgets alive.
"""

from __future__ import annotations

import logging
import uuid
import weakref
from dataclasses import dataclass, field as datafield
from typing import Any, Dict, Iterator, List, Optional

from optwidgets.engine.errors import BindingError
from optwidgets.engine.logging import log_widget_event
from optwidgets.engine.observable import Observable
from optwidgets.ui.components import Foreach, Node

logger = logging.getLogger("optwidgets.ui.scope")

_live_scopes: "weakref.WeakValueDictionary[str, Scope]" = weakref.WeakValueDictionary()


@dataclass
class RenderedNode:
    """A node with every binding resolved to a concrete value."""
    tag: str
    key: str
    class_name: str = ""
    attributes: Dict[str, Any] = datafield(default_factory=dict)
    style: Dict[str, Any] = datafield(default_factory=dict)
    children: List[Any] = datafield(default_factory=list)
    events: List[str] = datafield(default_factory=list)
    scope_id: str = ""
    # Properties computed from bindings ("class", "style", "text" or an attribute name)
    bound: List[str] = datafield(default_factory=list)

    def walk(self) -> Iterator["RenderedNode"]:
        """Depth-first iteration over this node and its element descendants."""
        yield self
        for child in self.children:
            if isinstance(child, RenderedNode):
                yield from child.walk()

    def find_all(self, tag: str) -> List["RenderedNode"]:
        return [n for n in self.walk() if n.tag == tag]

    @property
    def text(self) -> str:
        """Concatenated text content of this subtree."""
        parts = []
        for child in self.children:
            if isinstance(child, RenderedNode):
                parts.append(child.text)
            elif child is not None:
                parts.append(str(child))
        return "".join(parts)

    @property
    def visible(self) -> bool:
        return self.style.get("display") != "none"


class Scope:
    """
    A template plus the observables its bindings refer to.

    Usage:
        index = Observable(1)
        scope = Scope(Node("p", bindings={"text": Binding("index")}), {"index": index})
        scope.render().text     # "1"
    """

    def __init__(self, template: Any, observables: Optional[Dict[str, Observable]] = None):
        self.template = template
        self.observables: Dict[str, Observable] = dict(observables or {})
        self.id = uuid.uuid4().hex
        self._handlers: Dict[str, Dict[str, Any]] = {}
        _live_scopes[self.id] = self

    def __getitem__(self, name: str) -> Observable:
        try:
            return self.observables[name]
        except KeyError:
            raise BindingError(
                f"Scope has no observable named '{name}'",
                binding=name,
                available=sorted(self.observables),
            ) from None

    def __contains__(self, name: str) -> bool:
        return name in self.observables

    # ── Rendering ──

    def render(self) -> RenderedNode:
        """Resolve the template against the current observable values."""
        self._handlers = {}
        nodes = self._render_child(self.template, "0", self)
        if len(nodes) == 1 and isinstance(nodes[0], RenderedNode):
            return nodes[0]
        return RenderedNode(tag="fragment", key="0", children=nodes, scope_id=self.id)

    def _render_child(self, child: Any, key: str, scope: "Scope") -> List[Any]:
        # Widgets and nested scopes render against their own observables
        if isinstance(child, Scope):
            return self._render_child(child.template, key, child)
        if hasattr(child, "view") and hasattr(child, "scope"):
            return self._render_child(child.view, key, scope)

        if isinstance(child, Foreach):
            out: List[Any] = []
            for item in scope[child.source].value or []:
                produced = child.template(item)
                if not isinstance(produced, (list, tuple)):
                    produced = [produced]
                for node in produced:
                    out.extend(self._render_child(node, f"{key}.{len(out)}", scope))
            return out

        if isinstance(child, (list, tuple)):
            out = []
            for node in child:
                out.extend(self._render_child(node, f"{key}.{len(out)}", scope))
            return out

        if isinstance(child, Node):
            return [self._render_node(child, key, scope)]

        return [child]

    def _render_node(self, node: Node, key: str, scope: "Scope") -> RenderedNode:
        class_name = node.class_name
        attributes = dict(node.attributes)
        style = dict(node.style)
        text = None

        for prop, binding in node.bindings.items():
            value = binding.resolve(scope[binding.source].value)
            if prop == "class":
                class_name = " ".join(c for c in (class_name, value) if c)
            elif prop == "style":
                style.update(value or {})
            elif prop == "text":
                text = value
            else:
                attributes[prop] = value

        children: List[Any] = [] if text is None else [text]
        for child in node.children:
            children.extend(self._render_child(child, f"{key}.{len(children)}", scope))

        if node.events:
            self._handlers[key] = dict(node.events)

        return RenderedNode(
            tag=node.tag,
            key=key,
            class_name=class_name,
            attributes=attributes,
            style=style,
            children=children,
            events=sorted(node.events),
            scope_id=scope.id,
            bound=sorted(node.bindings),
        )

    def bound_props(self) -> Dict[str, Dict[str, str]]:
        """
        Current value of every bound property, keyed by node key.

        Class bindings are reported as "class_name", style entries as
        "style.<name>", flags as "true"/"false". An engine adapter ships this
        as plain data and points the rendered elements at it.
        """
        props: Dict[str, Dict[str, str]] = {}
        for node in self.render().walk():
            if not node.bound:
                continue
            entry: Dict[str, str] = {}
            for prop in node.bound:
                if prop == "class":
                    entry["class_name"] = node.class_name
                elif prop == "style":
                    entry.update({f"style.{k}": _as_text(v) for k, v in node.style.items()})
                elif prop == "text":
                    entry["text"] = _as_text(node.children[0] if node.children else None)
                else:
                    entry[prop] = _as_text(node.attributes.get(prop))
            props[node.key] = entry
        return props

    # ── Events ──

    def dispatch(self, key: str, event: str, payload: Any = None) -> None:
        """
        Deliver an input event to the node rendered under key.

        Renders first if the scope has never been rendered.
        """
        if not self._handlers:
            self.render()
        handler = self._handlers.get(key, {}).get(event)
        if handler is None:
            raise KeyError(f"No '{event}' handler on node {key}")
        log_widget_event("scope", "dispatch", scope_id=self.id, key=key, dispatched=event)
        handler(payload)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_scope(scope_id: str) -> Optional[Scope]:
    """Look up a live scope by id."""
    return _live_scopes.get(scope_id)


def live_scope_count() -> int:
    return len(_live_scopes)
