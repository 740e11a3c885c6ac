"""
OptWidgets Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _isolate_config():
    """Reset the cached config between tests."""
    import optwidgets.engine.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture
def theme():
    """Default Bulma-flavoured theme."""
    from optwidgets.engine.config import WidgetTheme

    return WidgetTheme()


@pytest.fixture
def project_root(tmp_path):
    """
    Create a project directory with an optwidgets.yaml.
    Returns the root Path.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "optwidgets.yaml").write_text(
        "theme:\n"
        "  name: custom\n"
        "  classes:\n"
        "    button.active: is-link\n"
        "logging:\n"
        "  level: debug\n"
        "  format: json\n"
        "tabulator:\n"
        "  display: flex\n",
        encoding="utf-8",
    )
    return root
