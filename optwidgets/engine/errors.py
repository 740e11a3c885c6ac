"""
OptWidgets Error Hierarchy — Structured exceptions raised while building widgets.

Every error carries the widget kind (when known) plus arbitrary keyword
context, and serializes to JSON for the structured event log.

Hierarchy:
    OptWidgetsError
    ├── InvalidDefaultError    — Initial selection is not among the options
    ├── OptionsError           — Option source cannot be normalized
    ├── BindingError           — Template binding names an unknown observable
    └── OptWidgetsConfigError  — Invalid optwidgets.yaml

Stale selections (options changed under a live widget) are recovered by the
bridge and logged, never raised.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class OptWidgetsError(Exception):
    """
    Base error for all widget construction and binding failures.
    All context is serializable to JSON.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.widget_kind: Optional[str] = context.get("widget_kind")
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "widget_kind": self.widget_kind,
            "timestamp": self.timestamp,
            "context": {
                k: str(v) for k, v in self.context.items()
                if k != "widget_kind"
            },
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        if self.widget_kind:
            parts.append(f"widget_kind={self.widget_kind}")
        return " | ".join(parts)


class InvalidDefaultError(OptWidgetsError):
    """
    The initial selection is not present among the options, or the option
    collection is empty while a single selection is required.
    """

    def __init__(self, message: str, **context: Any):
        self.value: Any = context.get("value")
        self.option_count: Optional[int] = context.get("option_count")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["value"] = repr(self.value)
        d["option_count"] = self.option_count
        return d


class OptionsError(OptWidgetsError):
    """Option source is neither a mapping nor a sequence of values."""

    def __init__(self, message: str, **context: Any):
        self.source_type: Optional[str] = context.get("source_type")
        super().__init__(message, **context)


class BindingError(OptWidgetsError):
    """A template binding references an observable the scope does not hold."""

    def __init__(self, message: str, **context: Any):
        self.binding: Optional[str] = context.get("binding")
        super().__init__(message, **context)


class OptWidgetsConfigError(OptWidgetsError):
    """Configuration error — invalid optwidgets.yaml."""
    pass
