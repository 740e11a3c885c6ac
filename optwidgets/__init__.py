"""
OptWidgets — Reactive option-input widgets for notebook and document front ends.

Public API:
    Widgets:  dropdown, radiobuttons, multiselect, checkboxes, toggles,
              togglebuttons, tabs, tabulator, mask, Widget
    Data:     OptionCollection, IndexValueBridge, SelectionPolicy, Observable
    Theme:    WidgetTheme, get_theme, load_config
"""

from optwidgets.bridge import IndexValueBridge, SelectionPolicy
from optwidgets.engine.config import WidgetTheme, get_theme, load_config
from optwidgets.engine.errors import InvalidDefaultError, OptionsError, OptWidgetsError
from optwidgets.engine.observable import Observable, ObservablePair
from optwidgets.options import OptionCollection
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

__version__ = "0.3.0"
__all__ = [
    "IndexValueBridge",
    "InvalidDefaultError",
    "Observable",
    "ObservablePair",
    "OptWidgetsError",
    "OptionCollection",
    "OptionsError",
    "SelectionPolicy",
    "Widget",
    "WidgetTheme",
    "checkboxes",
    "dropdown",
    "get_theme",
    "load_config",
    "mask",
    "multiselect",
    "radiobuttons",
    "tabs",
    "tabulator",
    "togglebuttons",
    "toggles",
]
