"""OptWidgets Engine — Observables, configuration, errors, structured logging."""

from optwidgets.engine.observable import Observable, ObservablePair  # noqa: F401
from optwidgets.engine.config import WidgetTheme, WidgetsConfig  # noqa: F401

__all__ = [
    "Observable",
    "ObservablePair",
    "WidgetTheme",
    "WidgetsConfig",
]
