"""`strata validate` - pre-flight checks on a collection file."""

from pathlib import Path

import typer
from rich.markup import escape

from ...validator import validate_collection
from ..app import app, console, load_collection_or_exit


@app.command("validate")
def validate_command(
    collection: Path = typer.Argument(..., help="Collection YAML file"),
) -> None:
    """Report problems in a collection before generating."""
    spec = load_collection_or_exit(collection)
    result = validate_collection(spec)

    for issue in result.errors:
        console.print(f"[red]ERROR[/red] {escape(str(issue))}")
    for issue in result.warnings:
        console.print(f"[yellow]WARNING[/yellow] {escape(str(issue))}")

    if not result.valid:
        console.print(f"[red]x[/red] {len(result.errors)} error(s)")
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/green] {collection} is valid "
        f"({len(spec.active_layers)} active layers, {len(spec.rules)} rules, "
        f"{len(result.warnings)} warning(s))"
    )
