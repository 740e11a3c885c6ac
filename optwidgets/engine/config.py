"""
OptWidgets Configuration — Load and validate optwidgets.yaml, resolve theme classes.

Usage:
    from optwidgets.engine.config import load_config, get_config, WidgetTheme
    theme = WidgetTheme.from_config(get_config())
    theme.getclass("button", "active")    # "is-primary is-selected"
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from optwidgets.engine.errors import OptWidgetsConfigError
from optwidgets.engine.logging import log_widget_event

CONFIG_FILENAME = "optwidgets.yaml"

# Semantic "kind" / "kind.role" tags → CSS classes (Bulma vocabulary)
DEFAULT_CLASSES: Dict[str, str] = {
    "field": "field",
    "label": "label",
    "dropdown": "",
    "select": "select",
    "select.multiple": "is-multiple",
    "radiobuttons": "field",
    "input.radio": "is-checkradio",
    "input.checkbox": "is-checkradio",
    "input.toggle": "switch",
    "togglebuttons": "buttons has-addons",
    "button": "button",
    "button.fullwidth": "is-fullwidth",
    "button.active": "is-primary is-selected",
    "tabs": "tabs",
    "tab": "",
    "tab.fullwidth": "",
    "tab.active": "is-active",
    "tabulator": "",
    "mask": "",
}


# ---------------------------------------------------------------------------
# Pydantic models for optwidgets.yaml
# ---------------------------------------------------------------------------

class ThemeConfig(BaseModel):
    name: str = "bulma"
    classes: Dict[str, str] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a logging level name, got '{v}'")
        return v.upper()

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in ("json", "text"):
            raise ValueError(f"format must be json/text, got '{v}'")
        return v


class TabulatorConfig(BaseModel):
    display: str = "block"
    vskip: str = "1em"


class WidgetsConfig(BaseModel):
    """Root model for optwidgets.yaml."""
    theme: ThemeConfig = ThemeConfig()
    logging: LoggingConfig = LoggingConfig()
    tabulator: TabulatorConfig = TabulatorConfig()


# ---------------------------------------------------------------------------
# Theme context — passed explicitly to every widget builder
# ---------------------------------------------------------------------------

class WidgetTheme(BaseModel):
    """Visual presentation variant. Maps semantic tags to CSS class strings."""
    name: str = "bulma"
    classes: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CLASSES))
    tabulator: TabulatorConfig = TabulatorConfig()

    @classmethod
    def from_config(cls, config: WidgetsConfig) -> "WidgetTheme":
        classes = dict(DEFAULT_CLASSES)
        classes.update(config.theme.classes)
        return cls(name=config.theme.name, classes=classes, tabulator=config.tabulator)

    def getclass(self, *tags: str) -> str:
        """Class string for a tag path such as ("button", "active"); "" if unknown."""
        return self.classes.get(".".join(t for t in tags if t), "")


def mergeclasses(*classes: Optional[str]) -> str:
    """Join class strings, skipping empties and repeated classes."""
    seen: list = []
    for cls_str in classes:
        for name in (cls_str or "").split():
            if name not in seen:
                seen.append(name)
    return " ".join(seen)


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_config: Optional[WidgetsConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for optwidgets.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_config(config_path: Optional[str] = None) -> WidgetsConfig:
    """
    Load and validate optwidgets.yaml.

    Args:
        config_path: Explicit path to optwidgets.yaml. If None, auto-discovers.

    Returns:
        Validated WidgetsConfig instance (defaults if the file does not exist).
    """
    global _config

    if config_path is None:
        config_path = str(_find_project_root() / CONFIG_FILENAME)

    path = Path(config_path)
    if not path.exists():
        _config = WidgetsConfig()
        return _config

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    # Allow everything nested under a top-level "optwidgets:" key
    data = raw.get("optwidgets", raw)

    try:
        _config = WidgetsConfig(**data)
    except ValidationError as e:
        raise OptWidgetsConfigError(f"Invalid {path.name}: {e}", path=str(path)) from e
    log_widget_event("config", "config_loaded", path=str(path))
    return _config


def get_config() -> WidgetsConfig:
    """Get the currently loaded config, loading if necessary."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_theme() -> WidgetTheme:
    """Theme built from the loaded config."""
    return WidgetTheme.from_config(get_config())
