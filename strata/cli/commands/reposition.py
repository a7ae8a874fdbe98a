"""`strata reposition` - shift every generated image by an offset."""

from pathlib import Path

import typer

from ...config import StrataConfig, resolve_canvas
from ...errors import ExportError
from ...export import shift_png
from ..app import app, console


@app.command("reposition")
def reposition_command(
    images_dir: Path = typer.Argument(..., help="Directory of <n>.png images"),
    dx: int = typer.Option(0, "--dx", help="Horizontal offset in pixels"),
    dy: int = typer.Option(0, "--dy", help="Vertical offset in pixels"),
    output: Path = typer.Option(Path("repositioned"), "--output", "-o"),
    width: int | None = typer.Option(None, "--width"),
    height: int | None = typer.Option(None, "--height"),
) -> None:
    """Redraw all images at (dx, dy) on the background fill."""
    if not images_dir.is_dir():
        console.print(f"[red]x[/red] Images directory not found: {images_dir}")
        raise typer.Exit(1)

    settings = StrataConfig.load().generation
    canvas = resolve_canvas(
        width if width is not None else settings.canvas_width,
        height if height is not None else settings.canvas_height,
    )

    pngs = sorted(images_dir.glob("*.png"))
    try:
        output.mkdir(parents=True, exist_ok=True)
        for path in pngs:
            shifted = shift_png(path.read_bytes(), dx, dy, canvas, settings.background)
            (output / path.name).write_bytes(shifted)
    except (ExportError, OSError) as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Repositioned {len(pngs)} image(s) into {output}")
