"""Shared CLI utilities."""

import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from form_engine.config.settings import EngineSettings, get_engine_settings, load_engine_settings
from form_engine.errors import SettingsError
from form_engine.startup import ensure_initialized as _ensure_initialized

logger = logging.getLogger(__name__)


def ensure_initialized() -> None:
    """Initialize environment (.env)."""
    _ensure_initialized()


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging with Rich handler."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def setup_signal_handlers() -> None:
    """Set up signal handlers for graceful shutdown."""
    def handler(signum, frame):
        from form_engine.cli._console import console
        console.print("\n[yellow]![/yellow] Interrupted. Exiting...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, handler)


def resolve_settings(config_path: Optional[Path]) -> EngineSettings:
    """Load settings from --config, or from the environment.

    Raises:
        SystemExit: If the settings file is invalid.
    """
    try:
        if config_path is not None:
            return load_engine_settings(config_path)
        return get_engine_settings()
    except SettingsError as e:
        from form_engine.cli._console import print_err
        print_err(str(e))
        raise SystemExit(1)


def build_scope_builder(kind: str):
    """Scope builder for the --scope option ('form' or 'base')."""
    from form_engine.scope.builder import BaseScopeBuilder
    from form_engine.scope.form_scope import FormScopeBuilder

    if kind == "form":
        return FormScopeBuilder()
    if kind == "base":
        return BaseScopeBuilder()
    raise ValueError(f"Unknown scope '{kind}'. Valid scopes: base, form")
