"""Load command: batch-load a definitions directory and report the outcome."""

from pathlib import Path

import typer

from form_engine.cli._app import app
from form_engine.cli._common import (
    build_scope_builder,
    ensure_initialized,
    resolve_settings,
    setup_logging,
)
from form_engine.cli._console import console, output_json, print_definitions, print_err, print_ok, print_warn


def load_directory(
    directory: Path,
    *,
    config_path: Path | None,
    cross_references: bool,
    scope: str,
):
    """Discover and batch-load a directory.

    Returns:
        (BatchLoadResult, DiagnosticsCollector, ComponentRegistry)
    """
    from form_engine.diagnostics import DiagnosticsCollector
    from form_engine.errors import SourceDiscoveryError
    from form_engine.loader import ComponentRegistry, LoaderConfig, discover_sources, load_batch

    settings = resolve_settings(config_path)
    try:
        sources = discover_sources(directory, settings)
        scope_builder = build_scope_builder(scope)
    except (SourceDiscoveryError, ValueError) as e:
        print_err(str(e))
        raise SystemExit(1)

    collector = DiagnosticsCollector()
    registry = ComponentRegistry()
    config = LoaderConfig(
        scope_builder=scope_builder,
        settings=settings,
        enable_cross_references=cross_references,
        registry=registry,
        diagnostics=collector,
    )
    return load_batch(sources, config), collector, registry


@app.command("load", help="Load every definition in a directory.")
def load_cmd(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Definitions directory"),
    cross_references: bool = typer.Option(
        True,
        "--cross-refs/--no-cross-refs",
        help="Run the second pass so definitions can reference each other",
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Engine settings YAML"),
    scope: str = typer.Option("form", "--scope", help="Capability scope: form or base"),
    strict: bool = typer.Option(False, "--strict", help="Exit with status 1 if any definition failed"),
):
    """Batch-load a directory and list components, errors and missing names."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    result, collector, _ = load_directory(
        directory, config_path=config_path, cross_references=cross_references, scope=scope
    )

    rows = []
    for name in sorted(set(result.components) | set(result.errors)):
        identity = result.metadata.get(name)
        error = result.errors.get(name)
        rows.append({
            "name": name,
            "status": "error" if error else "ok",
            "title": identity.title if identity else "",
            "version": str(identity.version) if identity and identity.version else "",
            "error": error.message if error else "",
        })

    if ctx.obj["json"]:
        output_json({
            "components": sorted(result.components),
            "errors": {name: e.to_dict() for name, e in result.errors.items()},
            "missing": sorted(set(collector.missing_names)),
            "definitions": rows,
        })
    else:
        print_definitions(rows, title=f"Definitions in {directory}")
        missing = sorted(set(collector.missing_names))
        if missing:
            print_warn(f"Unresolved names: {', '.join(missing)}")
        if result.errors:
            print_err(f"{len(result.errors)} definition(s) failed to load")
        elif not ctx.obj["quiet"]:
            print_ok(f"Loaded {len(result.components)} definition(s)")
        if ctx.obj["verbose"]:
            for message in collector.messages:
                console.print(f"  {message}")

    if strict and result.errors:
        raise SystemExit(1)
