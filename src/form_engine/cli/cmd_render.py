"""Render command: load a directory and render one definition to a tree."""

from pathlib import Path

import typer

from form_engine.cli._app import app
from form_engine.cli._common import ensure_initialized, setup_logging
from form_engine.cli._console import output_render, print_err
from form_engine.cli.cmd_load import load_directory


@app.command("render", help="Render one definition from a directory as a JSON tree.")
def render_cmd(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Definitions directory"),
    name: str = typer.Argument(..., help="Definition name to render"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Engine settings YAML"),
    scope: str = typer.Option("form", "--scope", help="Capability scope: form or base"),
    show_data: bool = typer.Option(False, "--show-data", help="Include the definition's initial data"),
):
    """Batch-load DIRECTORY and render NAME behind an error boundary."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    from form_engine.runtime.preview import render_safely

    result, _, _ = load_directory(
        directory, config_path=config_path, cross_references=True, scope=scope
    )

    entry_points = result.components.get(name)
    if entry_points is None:
        error = result.errors.get(name)
        print_err(error.message if error else f"No definition named '{name}' in {directory}")
        raise SystemExit(1)

    data = {"name": name, "tree": render_safely(entry_points.render)}
    if show_data:
        data["initial_data"] = entry_points.initial_data if entry_points.initial_data is not None else {}
    output_render(data, ctx=ctx, title=name)
