"""Rich consoles and output for definition tables and render trees."""

import json as json_mod
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

# Status/progress to stderr so it doesn't pollute piped JSON output
console = Console(stderr=True)

# Data output to stdout (pipeable to jq), resolved at write time
stdout_console = Console()

STATUS_STYLES = {"ok": "green", "error": "red"}


def print_ok(msg: str) -> None:
    console.print(f"[green]✓[/green] {msg}")


def print_err(msg: str) -> None:
    console.print(f"[red]✗[/red] {msg}")


def print_warn(msg: str) -> None:
    console.print(f"[yellow]![/yellow] {msg}")


def output_json(data: Any) -> None:
    """Print data as JSON on stdout."""
    stdout_console.print_json(data=data, default=str)


def definitions_table(rows: list[dict], title: str = "") -> Table:
    """Table of load outcomes; the error column only appears when needed."""
    show_errors = any(row.get("error") for row in rows)
    table = Table(title=title, show_lines=False)
    table.add_column("Name", style="bold")
    table.add_column("Status")
    table.add_column("Title")
    table.add_column("Version")
    if show_errors:
        table.add_column("Error", style="red", overflow="fold")

    for row in rows:
        status = row.get("status", "")
        style = STATUS_STYLES.get(status, "")
        cells = [
            row.get("name", ""),
            f"[{style}]{status}[/{style}]" if style else status,
            row.get("title", ""),
            row.get("version", ""),
        ]
        if show_errors:
            cells.append(row.get("error", ""))
        table.add_row(*cells)
    return table


def _element_label(node: dict) -> str:
    props = node.get("props") or {}
    if "data-missing" in props:
        return f"[yellow]<missing {escape(str(props['data-missing']))}>[/yellow]"
    if props.get("className") == "error-message":
        return "[red]<error>[/red]"
    tag = " ".join([str(node.get("type"))] + [f"{key}={value!r}" for key, value in props.items()])
    return f"[cyan]{escape(f'<{tag}>')}[/cyan]"


def _add_nodes(branch: Tree, node: Any) -> None:
    if node is None:
        return
    if isinstance(node, list):
        for child in node:
            _add_nodes(branch, child)
        return
    if isinstance(node, dict):
        sub = branch.add(_element_label(node))
        _add_nodes(sub, node.get("children") or [])
        return
    branch.add(escape(repr(node) if isinstance(node, str) else str(node)))


def element_tree(tree: Any, label: str) -> Tree:
    """Rich tree view of a rendered element tree."""
    root = Tree(f"[bold]{escape(label)}[/bold]")
    _add_nodes(root, tree)
    return root


def print_definitions(rows: list[dict], title: str = "") -> None:
    """Print load outcomes as a Rich table on stderr."""
    if not rows:
        console.print("[dim]No definitions found[/dim]")
        return
    console.print(definitions_table(rows, title=title))


def output_render(data: dict, *, ctx: typer.Context, title: str) -> None:
    """Print a render result: JSON on stdout, or a tree plus extras on stderr.

    ``data`` carries the rendered ``tree`` and optional ``initial_data`` and
    ``diagnostics`` entries.
    """
    if ctx.obj.get("json"):
        output_json(data)
        return

    console.print(element_tree(data.get("tree"), title))
    extras = {key: value for key, value in data.items() if key not in ("name", "tree")}
    if extras:
        formatted = json_mod.dumps(extras, indent=2, ensure_ascii=False, default=str)
        console.print(Panel(formatted, title="data", border_style="blue"))
