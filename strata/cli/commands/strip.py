"""`strata strip-json` - drop the .json suffix from files."""

from pathlib import Path

import typer

from ...errors import ExportError
from ...export import renamed_archive, save_archive
from ..app import app, console


@app.command("strip-json")
def strip_json_command(
    files: list[Path] = typer.Argument(..., help="Files to rename"),
    output: Path = typer.Option(Path("metadata_update.zip"), "--output", "-o"),
) -> None:
    """Re-package files without their .json suffix (some marketplaces expect bare names)."""
    contents = []
    for f in files:
        if not f.is_file():
            console.print(f"[red]x[/red] Not a file: {f}")
            raise typer.Exit(1)
        contents.append((f.name, f.read_bytes()))

    try:
        save_archive(renamed_archive(contents), output)
    except ExportError as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] {len(contents)} file(s) written to {output}")
