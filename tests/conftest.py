"""
Pytest fixtures and configuration for form_engine tests.
Provides common definition sources and isolated engine state.
"""

import json
import textwrap
from pathlib import Path

import pytest

from form_engine.config.settings import CONFIG_ENV_VAR, EngineSettings, clear_settings_cache
from form_engine.diagnostics import DiagnosticsCollector
from form_engine.loader.registry import ComponentRegistry, reset_registry
from form_engine.schemas.definition import DefinitionSource


@pytest.fixture(autouse=True)
def isolated_engine_state(monkeypatch):
    """Every test starts with an empty default registry and default settings."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    clear_settings_cache()
    reset_registry()
    yield
    reset_registry()
    clear_settings_cache()


@pytest.fixture
def collector():
    """Diagnostics sink that records messages."""
    return DiagnosticsCollector()


@pytest.fixture
def registry():
    """Fresh injectable registry store."""
    return ComponentRegistry()


@pytest.fixture
def settings():
    return EngineSettings()


@pytest.fixture
def definitions_dir(tmp_path):
    """Definitions root with folder and loose-file layouts.

    Layout:
        Banner.py                 loose definition
        Scale5/index.py           with identity.json
        HonosQuestion/index.py    references Scale5, with identity.yaml
        notes/                    folder without index.py (ignored)
        README.md                 ignored
    """
    root = tmp_path / "definitions"
    root.mkdir()

    (root / "Banner.py").write_text(
        textwrap.dedent(
            """
            def Banner(*children, **props):
                return create_element("h1", {"className": "banner"}, *children)
            """
        ),
        encoding="utf-8",
    )

    scale = root / "Scale5"
    scale.mkdir()
    (scale / "index.py").write_text(
        textwrap.dedent(
            """
            LABELS = ["0", "1", "2", "3", "4"]

            def render(value=None, **props):
                return create_element("select", {"value": value}, *LABELS)
            """
        ),
        encoding="utf-8",
    )
    (scale / "identity.json").write_text(
        json.dumps({"title": "Five point scale", "version": {"major": 1, "minor": 2, "patch": 0}}),
        encoding="utf-8",
    )

    honos = root / "HonosQuestion"
    honos.mkdir()
    (honos / "index.py").write_text(
        textwrap.dedent(
            """
            initial_data = {"answer": 2}

            def render(**props):
                return create_element("div", {"className": "question"}, Scale5(value=initial_data["answer"]))
            """
        ),
        encoding="utf-8",
    )
    (honos / "identity.yaml").write_text(
        "title: HoNOS question\ncomponents:\n  - Scale5\n",
        encoding="utf-8",
    )

    (root / "notes").mkdir()
    (root / "README.md").write_text("not a definition", encoding="utf-8")
    return root


@pytest.fixture
def write_file(tmp_path):
    """Write a text file under tmp_path and return its path."""
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_source():
    """Build a DefinitionSource from indented test text."""
    def _make(name: str, text: str, **kwargs) -> DefinitionSource:
        return DefinitionSource(name=name, text=textwrap.dedent(text), **kwargs)
    return _make
