"""`strata preview` - render one random combination."""

import random
from pathlib import Path

import typer

from ...config import StrataConfig, resolve_canvas
from ...generator import generate_preview
from ..app import app, console, load_collection_or_exit


@app.command("preview")
def preview_command(
    collection: Path = typer.Argument(..., help="Collection YAML file"),
    output: Path = typer.Option(Path("preview.png"), "--output", "-o"),
    width: int | None = typer.Option(None, "--width"),
    height: int | None = typer.Option(None, "--height"),
    seed: int | None = typer.Option(None, "--seed"),
) -> None:
    """Composite a single combination to a PNG file."""
    spec = load_collection_or_exit(collection)
    config = StrataConfig.load()
    canvas = resolve_canvas(
        width if width is not None else config.generation.canvas_width,
        height if height is not None else config.generation.canvas_height,
    )

    png = generate_preview(spec, canvas=canvas, rng=random.Random(seed if seed is not None else config.generation.seed))
    try:
        output.write_bytes(png)
    except OSError as e:
        console.print(f"[red]x[/red] Failed to write {output}: {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Preview written to {output}")
