"""CLI package, Typer-based command-line interface.

Usage:
    python -m form_engine.cli --help
    form-engine load definitions/
"""

from form_engine.cli._app import app

# Register command modules (side-effect imports)
import form_engine.cli.cmd_load  # noqa: F401
import form_engine.cli.cmd_render  # noqa: F401
import form_engine.cli.cmd_preview  # noqa: F401
import form_engine.cli.cmd_bindings  # noqa: F401

__all__ = ["app"]
