"""
OptWidgets Option Inputs — Widgets that pick one or more values from a set of options.

Every builder takes the WidgetTheme as its first argument, then the options
(mapping label → value, sequence of values, or an Observable of either):

    dropdown       → <select>, single or multiple
    radiobuttons   → radio inputs, exactly one selected
    checkboxes     → checkbox inputs, zero or more selected
    toggles        → checkboxes styled as switches
    togglebuttons  → a row of buttons, exactly one active
    tabs           → togglebuttons as list items
    tabulator      → togglebuttons driving which content panel is shown

Each returns a Widget whose ``output`` observable holds the selected value(s).
The templates bind to the selected *position(s)* (``widget["index"]``); an
IndexValueBridge keeps positions and values in sync.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Sequence

from optwidgets.bridge import UNSET, IndexValueBridge, SelectionPolicy
from optwidgets.engine.config import WidgetTheme, mergeclasses
from optwidgets.engine.errors import OptionsError
from optwidgets.engine.logging import log_widget_event
from optwidgets.engine.observable import Observable
from optwidgets.options import OptionCollection
from optwidgets.ui.components import Binding, Foreach, Node, flex_row, vbox, wdglabel
from optwidgets.ui.components import vskip as vspace
from optwidgets.ui.scope import RenderedNode, Scope

logger = logging.getLogger("optwidgets.ui.widgets")

# entry(item, bridge) → Node or tuple of Nodes, item = {"key", "val", "id"}
EntryFactory = Callable[[Dict[str, Any], IndexValueBridge], Any]


def _identity(x: Any) -> Any:
    return x


def _is_selected(index: Any, position: int) -> bool:
    if isinstance(index, (list, tuple, set)):
        return position in index
    return index == position


def _as_positions(payload: Any) -> List[int]:
    if payload is None:
        return []
    if isinstance(payload, (list, tuple, set)):
        return sorted({int(p) for p in payload})
    return [int(payload)]


# ---------------------------------------------------------------------------
# Widget handle
# ---------------------------------------------------------------------------

class Widget:
    """
    Handle returned by every builder.

    - ``output`` / ``value``: the widget's public result
    - ``scope``: template + observables ("index", "options", ...)
    - ``view``: node tree to embed in a larger layout
    - ``render()`` / ``dispatch()``: resolve the view, deliver input events
    """

    def __init__(
        self,
        kind: str,
        scope: Scope,
        output: Observable,
        bridge: Optional[IndexValueBridge] = None,
        layout: Optional[Callable[[Scope], Any]] = None,
        **extra: Any,
    ):
        self.kind = kind
        self.scope = scope
        self.output = output
        self.bridge = bridge
        self.layout = layout or _identity
        self.extra: Dict[str, Any] = extra
        self._root: Optional[Scope] = None

    @property
    def value(self) -> Any:
        return self.output.value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.output.set(new_value)

    @property
    def view(self) -> Any:
        return self.layout(self.scope)

    @property
    def selector_scope(self) -> Optional[Scope]:
        return self.extra.get("selector_scope")

    def __getitem__(self, name: str) -> Any:
        if name == "value":
            return self.output
        if name in self.scope:
            return self.scope[name]
        if name in self.extra:
            return self.extra[name]
        raise KeyError(f"{self.kind} widget has no '{name}'")

    @property
    def root(self) -> Scope:
        """Scope that renders the full view and receives its events."""
        if self._root is None:
            self._root = Scope(self.view)
        return self._root

    def render(self) -> RenderedNode:
        return self.root.render()

    def dispatch(self, key: str, event: str, payload: Any = None) -> None:
        self.root.dispatch(key, event, payload)

    def with_layout(self, layout: Callable[[Scope], Any]) -> "Widget":
        return Widget(self.kind, self.scope, self.output, self.bridge, layout, **self.extra)

    def __repr__(self) -> str:
        return f"<Widget {self.kind} value={self.output.value!r}>"


def wrapfield(theme: WidgetTheme, widget: Widget) -> Widget:
    """Wrap the widget's view in the theme's form-field container."""
    return widget.with_layout(lambda s: Node("div", class_name=theme.getclass("field"))(s))


def _created(widget: Widget, options: OptionCollection) -> Widget:
    log_widget_event(
        widget.kind, "created",
        option_count=len(options),
        reactive=options.is_reactive,
        multiple=bool(widget.bridge and widget.bridge.multiple),
    )
    return widget


# ---------------------------------------------------------------------------
# Dropdown
# ---------------------------------------------------------------------------

def dropdown_option(item: Dict[str, Any], bridge: IndexValueBridge) -> Node:
    """Default <option> entry for dropdown."""
    val = item["val"]
    return Node(
        "option",
        attributes={"value": val},
        bindings={"selected": Binding("index", lambda i, v=val: _is_selected(i, v))},
    )(item["key"])


def dropdown(
    theme: WidgetTheme,
    options: Any,
    *,
    value: Any = UNSET,
    label: Any = None,
    multiple: bool = False,
    class_name: Optional[str] = None,
    attributes: Optional[Dict[str, Any]] = None,
    style: Optional[Dict[str, Any]] = None,
    outer: Callable[..., Node] = vbox,
    div_select: Optional[Node] = None,
    entry: Optional[EntryFactory] = None,
    process: Callable[[Any], Any] = str,
    **attrs: Any,
) -> Widget:
    """
    A dropdown menu whose item labels are the option labels.

    With ``multiple=True`` the output holds a list with the values of all
    selected items, in option order. A ``label`` is placed after the control,
    as ``outer(select, label)``.

    e.g. ``dropdown(theme, {"good": 1, "better": 2, "amazing": 9001})``
    """
    options = OptionCollection.coerce(options, process)
    bridge = IndexValueBridge(
        options, value, multiple=multiple, policy=SelectionPolicy.FIRST, kind="dropdown",
    )

    attributes = {**(attributes or {}), **attrs}
    if multiple:
        attributes["multiple"] = True

    def on_change(payload: Any) -> None:
        if multiple:
            bridge.index.set(_as_positions(payload))
        else:
            bridge.select(int(payload))

    make_entry = entry or dropdown_option
    select = Node(
        "select",
        class_name=mergeclasses(theme.getclass("dropdown"), class_name),
        attributes=attributes,
        style=dict(style or {}),
        bindings={"value": Binding("index")},
        events={"change": on_change},
    )(Foreach("options", lambda item: make_entry(item, bridge)))

    if div_select is None:
        div_select = Node(
            "div",
            class_name=mergeclasses(
                theme.getclass("select"),
                theme.getclass("select", "multiple") if multiple else "",
            ),
        )
    template: Node = div_select(select)
    if label is not None:
        template = outer(template, wdglabel(label, theme.getclass("label")))

    scope = Scope(template, {"index": bridge.index, "options": options.option_items()})
    return _created(wrapfield(theme, Widget("dropdown", scope, bridge.value, bridge)), options)


# ---------------------------------------------------------------------------
# Radiobuttons / checkboxes / toggles
# ---------------------------------------------------------------------------

def option_entry(
    theme: WidgetTheme,
    item: Dict[str, Any],
    bridge: IndexValueBridge,
    *,
    group: str,
    typ: str = "radio",
    wdgtyp: Optional[str] = None,
    class_name: str = "",
    stack: Optional[bool] = None,
) -> Any:
    """One <input> + <label> for multiselect. Stacked in a field div unless radio."""
    wdgtyp = wdgtyp or typ
    stack = (typ != "radio") if stack is None else stack
    val = item["val"]

    if typ == "radio":
        def on_change(payload: Any) -> None:
            bridge.select(val)
    else:
        def on_change(payload: Any) -> None:
            # A checked state equal to the current membership is a repeat event
            if isinstance(payload, bool) and _is_selected(bridge.index.value or [], val) == payload:
                return
            bridge.toggle(val)

    control = Node(
        "input",
        class_name=mergeclasses(theme.getclass("input", wdgtyp), class_name),
        attributes={"name": group, "type": typ, "id": item["id"], "value": val},
        bindings={"checked": Binding("index", lambda i, v=val: _is_selected(i, v))},
        events={"change": on_change},
    )
    text = Node("label", attributes={"for": item["id"]})(item["key"])
    if stack:
        return Node("div", class_name=theme.getclass("field"))(control, text)
    return (control, text)


def multiselect(
    theme: WidgetTheme,
    options: Any,
    *,
    label: Any = None,
    typ: str = "radio",
    wdgtyp: Optional[str] = None,
    value: Any = UNSET,
    entry: Optional[EntryFactory] = None,
    class_name: str = "",
    stack: Optional[bool] = None,
    process: Callable[[Any], Any] = str,
    kind: str = "radiobuttons",
    attributes: Optional[Dict[str, Any]] = None,
    style: Optional[Dict[str, Any]] = None,
    **attrs: Any,
) -> Widget:
    """
    A list of inputs, one per option. ``typ="radio"`` selects exactly one value;
    ``typ="checkbox"`` holds a list of the checked values, in option order.

    Extra keyword arguments become attributes of the container element.
    """
    multiple = typ != "radio"
    options = OptionCollection.coerce(options, process)
    bridge = IndexValueBridge(
        options, value, multiple=multiple, policy=SelectionPolicy.FIRST, kind=kind,
    )
    group = f"group{uuid.uuid4().hex[:12]}"

    if entry is None:
        def make_entry(item: Dict[str, Any], b: IndexValueBridge) -> Any:
            return option_entry(
                theme, item, b,
                group=group, typ=typ, wdgtyp=wdgtyp, class_name=class_name, stack=stack,
            )
    else:
        make_entry = entry

    template = Node(
        "div",
        class_name=theme.getclass("radiobuttons"),
        attributes={**(attributes or {}), **attrs},
        style=dict(style or {}),
    )(Foreach("options", lambda item: make_entry(item, bridge)))
    if label is not None:
        template = flex_row(wdglabel(label, theme.getclass("label")), template)

    scope = Scope(template, {"index": bridge.index, "options": options.option_items()})
    return _created(wrapfield(theme, Widget(kind, scope, bridge.value, bridge)), options)


def radiobuttons(theme: WidgetTheme, options: Any, **kwargs: Any) -> Widget:
    """
    Radio buttons whose labels are the option labels; defaults to the first value.

    e.g. ``radiobuttons(theme, {"good": 1, "better": 2, "amazing": 9001})``
    """
    return multiselect(theme, options, typ="radio", kind="radiobuttons", **kwargs)


def checkboxes(theme: WidgetTheme, options: Any, **kwargs: Any) -> Widget:
    """
    A list of checkboxes. The output holds a list with the values of all
    checked items, in option order.
    """
    return multiselect(theme, options, typ="checkbox", kind="checkboxes", **kwargs)


def toggles(theme: WidgetTheme, options: Any, **kwargs: Any) -> Widget:
    """Like checkboxes, rendered as toggle switches."""
    return multiselect(theme, options, typ="checkbox", wdgtyp="toggle", kind="toggles", **kwargs)


# ---------------------------------------------------------------------------
# Togglebuttons / tabs
# ---------------------------------------------------------------------------

def _button_group(
    kind: str,
    tag: str,
    single: str,
    container: str,
    theme: WidgetTheme,
    options: Any,
    *,
    value: Any = UNSET,
    label: Any = None,
    class_name: Optional[str] = None,
    activeclass: Optional[str] = None,
    entry: Optional[EntryFactory] = None,
    process: Callable[[Any], Any] = str,
    attributes: Optional[Dict[str, Any]] = None,
    style: Optional[Dict[str, Any]] = None,
    **attrs: Any,
) -> Widget:
    options = OptionCollection.coerce(options, process)
    bridge = IndexValueBridge(options, value, policy=SelectionPolicy.MEDIAN, kind=kind)

    if class_name is None:
        class_name = theme.getclass(single, "fullwidth")
    class_name = mergeclasses(theme.getclass(single), class_name)
    if activeclass is None:
        activeclass = theme.getclass(single, "active")

    def button(item: Dict[str, Any], b: IndexValueBridge) -> Node:
        val = item["val"]
        return Node(
            tag,
            class_name=class_name,
            bindings={"class": Binding("index", lambda i, v=val: activeclass if i == v else "")},
            events={"click": lambda _payload, v=val: b.select(v)},
        )(Node("label")(item["key"]))

    make_entry = entry or button
    template = Node(
        container,
        class_name=theme.getclass(kind),
        attributes={**(attributes or {}), **attrs},
        style=dict(style or {}),
    )(Foreach("options", lambda item: make_entry(item, bridge)))
    if label is not None:
        template = flex_row(wdglabel(label, theme.getclass("label")), template)

    scope = Scope(template, {"index": bridge.index, "options": options.option_items()})
    return _created(wrapfield(theme, Widget(kind, scope, bridge.value, bridge)), options)


def togglebuttons(theme: WidgetTheme, options: Any, **kwargs: Any) -> Widget:
    """
    A set of toggle buttons whose labels are the option labels. Exactly one is
    active; defaults to the middle option.
    """
    return _button_group("togglebuttons", "button", "button", "div", theme, options, **kwargs)


def tabs(theme: WidgetTheme, options: Any, *, process: Callable[[Any], Any] = _identity, **kwargs: Any) -> Widget:
    """Togglebuttons rendered as <li> tabs in a <ul>. Sequence values are their own labels."""
    return _button_group("tabs", "li", "tab", "ul", theme, options, process=process, **kwargs)


# ---------------------------------------------------------------------------
# Mask / tabulator
# ---------------------------------------------------------------------------

def mask(
    key: Observable,
    keyvals: Sequence[Any],
    contents: Sequence[Any],
    display: str = "block",
    class_name: str = "",
) -> Scope:
    """
    Render every content payload in its own container; only the one whose key
    equals ``key.value`` is displayed.
    """
    keyvals = list(keyvals)
    contents = list(contents)
    if len(keyvals) != len(contents):
        raise OptionsError(
            f"mask needs one key per content payload, got {len(keyvals)} keys "
            f"and {len(contents)} payloads",
            widget_kind="mask",
        )

    panels = [
        Node(
            "div",
            attributes={"key": k},
            bindings={"style": Binding(
                "key", lambda current, k=k: {"display": display if current == k else "none"},
            )},
        )(content)
        for k, content in zip(keyvals, contents)
    ]
    template = Node("div", class_name=class_name, attributes={"id": f"mask{uuid.uuid4().hex[:12]}"})(*panels)
    return Scope(template, {"key": key})


def tabulator(
    theme: WidgetTheme,
    options: Any,
    contents: Optional[Sequence[Any]] = None,
    *,
    value: int = 1,
    display: Optional[str] = None,
    vskip: Optional[str] = None,
    **kwargs: Any,
) -> Widget:
    """
    Togglebuttons over ``options`` (tab labels) that show the matching entry
    of ``contents``. Also accepts a single mapping label → content.

    The output is the selected 1-based position.
    """
    if contents is None:
        if not isinstance(options, Mapping):
            raise OptionsError(
                "tabulator needs a mapping label → content, or labels and contents",
                widget_kind="tabulator",
                source_type=type(options).__name__,
            )
        options, contents = list(options.keys()), list(options.values())

    labels = list(options)
    contents = list(contents)
    if len(labels) != len(contents):
        raise OptionsError(
            f"tabulator got {len(labels)} labels and {len(contents)} contents",
            widget_kind="tabulator",
        )

    display = display or theme.tabulator.display
    vskip = vskip or theme.tabulator.vskip

    selector_options = OptionCollection.from_pairs(
        [(str(lbl), i) for i, lbl in enumerate(labels, start=1)]
    )
    buttons = togglebuttons(theme, selector_options, value=value, **kwargs)
    key = buttons["index"]

    content = mask(key, range(1, len(labels) + 1), contents, display=display,
                   class_name=theme.getclass("mask"))
    ui = vbox(buttons, vspace(vskip), content)
    ui.class_name = theme.getclass("tabulator")

    scope = Scope(ui, {"index": key})
    widget = Widget(
        "tabulator", scope, key,
        bridge=buttons.bridge,
        selector_scope=buttons.scope,
        selector=buttons,
        content=content,
    )
    return _created(widget, selector_options)
