"""
OptWidgets UI — Node templates, scopes, option-input widgets.

Public API:
    Nodes:    Node, Binding, Foreach, vbox, hbox, flex_row, wdglabel, vskip
    Scope:    Scope, RenderedNode
    Widgets:  dropdown, radiobuttons, multiselect, checkboxes, toggles,
              togglebuttons, tabs, tabulator, mask, Widget

The Reflex renderer lives in optwidgets.ui.renderer and is imported on demand.
"""

from optwidgets.ui.components import (
    Binding,
    Foreach,
    Node,
    flex_row,
    hbox,
    vbox,
    vskip,
    wdglabel,
)
from optwidgets.ui.scope import RenderedNode, Scope
from optwidgets.ui.widgets import (
    Widget,
    checkboxes,
    dropdown,
    mask,
    multiselect,
    radiobuttons,
    tabs,
    tabulator,
    togglebuttons,
    toggles,
)

__all__ = [
    "Binding",
    "Foreach",
    "Node",
    "RenderedNode",
    "Scope",
    "Widget",
    "checkboxes",
    "dropdown",
    "flex_row",
    "hbox",
    "mask",
    "multiselect",
    "radiobuttons",
    "tabs",
    "tabulator",
    "togglebuttons",
    "toggles",
    "vbox",
    "vskip",
    "wdglabel",
]
