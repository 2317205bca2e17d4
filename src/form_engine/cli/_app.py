"""Root Typer application for form-engine with global output options."""

import typer

app = typer.Typer(
    name="form-engine",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)


def _print_version(value: bool) -> None:
    if value:
        from form_engine import __version__

        typer.echo(f"form-engine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level logging, diagnostics listed"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings and errors only"),
    json_output: bool = typer.Option(False, "--json", help="Render trees and load results as JSON on stdout"),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show the form-engine version"
    ),
):
    """Load, render and inspect form definitions."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["json"] = json_output
