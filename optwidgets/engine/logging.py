"""
OptWidgets Logging — Structured JSON log entries on top of the stdlib logging tree.

Every module logs through ``logging.getLogger("optwidgets.<module>")``.
Widget lifecycle events (construction, stale selection recovery) are also
emitted as structured entries on the ``optwidgets.events`` logger so a host
can route them to a JSONL file or a notebook log panel.

Usage:
    from optwidgets.engine.logging import configure_logging, log_widget_event
    configure_logging(get_config().logging)
    log_widget_event("dropdown", "created", option_count=3)
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from optwidgets.engine.config import LoggingConfig

logger = logging.getLogger("optwidgets.engine.logging")
event_logger = logging.getLogger("optwidgets.events")

EVENT_TYPES = ("created", "stale_selection", "dispatch", "config_loaded")


class LogEntry:
    """A structured widget event."""

    __slots__ = ("widget_kind", "event", "data", "timestamp")

    def __init__(self, widget_kind: str, event: str, data: Dict[str, Any]):
        self.widget_kind = widget_kind
        self.event = event
        self.data = data
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "widget_kind": self.widget_kind,
            "event": self.event,
            **self.data,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str, separators=(",", ":"))


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line. Structured entries pass through."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Optional[LogEntry] = getattr(record, "entry", None)
        if entry is not None:
            return entry.to_json()
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


def log_widget_event(widget_kind: str, event: str, **data: Any) -> LogEntry:
    """
    Emit a structured event. Stale selections log at WARNING, everything
    else at DEBUG.
    """
    if event not in EVENT_TYPES:
        logger.debug(f"Unregistered widget event type: {event}")
    entry = LogEntry(widget_kind or "widget", event, data)
    level = logging.WARNING if event == "stale_selection" else logging.DEBUG
    event_logger.log(level, f"{entry.widget_kind}: {event} {data}", extra={"entry": entry})
    return entry


def configure_logging(config: "LoggingConfig") -> logging.Logger:
    """
    Attach a single stream handler to the ``optwidgets`` logger tree.

    Safe to call repeatedly — the previously installed handler is replaced.
    """
    root = logging.getLogger("optwidgets")
    root.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_optwidgets_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    if config.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._optwidgets_handler = True
    root.addHandler(handler)
    return root
