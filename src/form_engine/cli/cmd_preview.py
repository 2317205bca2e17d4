"""Preview command: render a single file the way the live preview does."""

from pathlib import Path

import typer

from form_engine.cli._app import app
from form_engine.cli._common import (
    build_scope_builder,
    ensure_initialized,
    resolve_settings,
    setup_logging,
)
from form_engine.cli._console import output_render, print_err, print_warn


@app.command("preview", help="Render a definition, snippet or text file.")
def preview_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="File with definition text"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Engine settings YAML"),
    scope: str = typer.Option("form", "--scope", help="Capability scope: form or base"),
):
    """Render FILE and print the tree and any initial data."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    from form_engine.diagnostics import DiagnosticsCollector
    from form_engine.errors import SourceDiscoveryError
    from form_engine.loader import ComponentRegistry, read_definition_file
    from form_engine.runtime.preview import render_preview
    from form_engine.transformer.code_transformer import TransformOptions

    settings = resolve_settings(config_path)
    try:
        text = read_definition_file(file)
        scope_builder = build_scope_builder(scope)
    except (SourceDiscoveryError, ValueError) as e:
        print_err(str(e))
        raise SystemExit(1)

    collector = DiagnosticsCollector()
    registry = ComponentRegistry()
    options = TransformOptions(
        scope_builder=scope_builder,
        settings=settings,
        diagnostics=collector,
        filename=file.name,
    )
    tree = render_preview(text, options, registry=registry)

    if collector.missing_names and not ctx.obj["json"]:
        print_warn(f"Unresolved names: {', '.join(sorted(set(collector.missing_names)))}")
    output_render(
        {
            "tree": tree,
            "initial_data": registry.get_initial_data(),
            "diagnostics": collector.messages,
        },
        ctx=ctx,
        title=file.name,
    )
