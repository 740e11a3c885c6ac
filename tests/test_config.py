"""Unit tests for optwidgets.engine.config — WidgetsConfig, WidgetTheme, loading."""

import pytest

from optwidgets.engine.config import (
    DEFAULT_CLASSES,
    LoggingConfig,
    WidgetsConfig,
    WidgetTheme,
    get_config,
    get_theme,
    load_config,
    mergeclasses,
)
from optwidgets.engine.errors import OptWidgetsConfigError


class TestWidgetsConfig:
    """Pydantic models."""

    def test_defaults(self):
        cfg = WidgetsConfig()
        assert cfg.theme.name == "bulma"
        assert cfg.logging.level == "INFO"
        assert cfg.logging.format == "text"
        assert cfg.tabulator.display == "block"
        assert cfg.tabulator.vskip == "1em"

    def test_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="logging level"):
            LoggingConfig(level="loud")

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="json/text"):
            LoggingConfig(format="xml")


class TestWidgetTheme:
    """Semantic tag → class resolution."""

    def test_getclass(self):
        theme = WidgetTheme()
        assert theme.getclass("button") == "button"
        assert theme.getclass("button", "active") == "is-primary is-selected"
        assert theme.getclass("tab", "active") == "is-active"

    def test_unknown_tag(self):
        assert WidgetTheme().getclass("slider", "handle") == ""

    def test_from_config_overrides(self):
        cfg = WidgetsConfig(theme={"name": "plain", "classes": {"button": "btn"}})
        theme = WidgetTheme.from_config(cfg)
        assert theme.name == "plain"
        assert theme.getclass("button") == "btn"
        assert theme.getclass("tabs") == DEFAULT_CLASSES["tabs"]

    def test_mergeclasses(self):
        assert mergeclasses("a b", None, "", "b c") == "a b c"
        assert mergeclasses() == ""


class TestLoadConfig:
    """load_config() from file."""

    def test_load_from_file(self, project_root):
        cfg = load_config(str(project_root / "optwidgets.yaml"))
        assert cfg.theme.name == "custom"
        assert cfg.theme.classes == {"button.active": "is-link"}
        assert cfg.logging.level == "DEBUG"
        assert cfg.logging.format == "json"
        assert cfg.tabulator.display == "flex"

    def test_autodiscover(self, project_root, monkeypatch):
        nested = project_root / "notebooks" / "deep"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert load_config().theme.name == "custom"

    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = load_config(str(tmp_path / "nonexistent.yaml"))
        assert cfg == WidgetsConfig()

    def test_nested_under_key(self, tmp_path):
        path = tmp_path / "optwidgets.yaml"
        path.write_text("optwidgets:\n  tabulator:\n    vskip: 2em\n", encoding="utf-8")
        assert load_config(str(path)).tabulator.vskip == "2em"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "optwidgets.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == WidgetsConfig()

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "optwidgets.yaml"
        path.write_text("logging:\n  format: xml\n", encoding="utf-8")
        with pytest.raises(OptWidgetsConfigError, match="Invalid optwidgets.yaml"):
            load_config(str(path))

    def test_get_config_caches(self, project_root, monkeypatch):
        monkeypatch.chdir(project_root)
        first = get_config()
        assert get_config() is first

    def test_get_theme(self, project_root, monkeypatch):
        monkeypatch.chdir(project_root)
        theme = get_theme()
        assert theme.getclass("button", "active") == "is-link"
        assert theme.tabulator.display == "flex"
