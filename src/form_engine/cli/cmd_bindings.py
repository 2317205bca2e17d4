"""Bindings command: show the names a definition declares for itself."""

from pathlib import Path

import typer

from form_engine.cli._app import app
from form_engine.cli._common import ensure_initialized, setup_logging
from form_engine.cli._console import console, output_json, print_err


@app.command("bindings", help="List the local bindings of a definition file.")
def bindings_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="File with definition text"),
):
    """Preprocess and compile FILE, then list its unit-local names."""
    ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    from form_engine.errors import CompileError, SourceDiscoveryError
    from form_engine.loader import read_definition_file
    from form_engine.transformer.compiler import CompileOptions, PythonCompiler
    from form_engine.transformer.local_bindings import find_local_bindings
    from form_engine.transformer.preprocessor import preprocess

    try:
        text = preprocess(read_definition_file(file))
        code = PythonCompiler().compile(text, CompileOptions(filename=file.name)).code
    except (SourceDiscoveryError, CompileError) as e:
        print_err(e.message if isinstance(e, CompileError) else str(e))
        raise SystemExit(1)

    names = sorted(find_local_bindings(code))
    if ctx.obj["json"]:
        output_json({"file": str(file), "bindings": names})
        return

    console.print(f"Local bindings in {file.name} ({len(names)}):")
    for name in names:
        console.print(f"  {name}")
