"""`strata generate` - produce a full collection."""

from pathlib import Path

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table

from ...config import StrataConfig, resolve_canvas
from ...errors import ExportError
from ...export import images_archive, metadata_archive, save_archive, write_collection
from ...generator import BatchDriver
from ..app import app, console, load_collection_or_exit


@app.command("generate")
def generate_command(
    collection: Path = typer.Argument(..., help="Collection YAML file"),
    output: Path = typer.Option(Path("output"), "--output", "-o", help="Output directory"),
    count: int | None = typer.Option(None, "--count", "-n", help="Number of editions"),
    width: int | None = typer.Option(None, "--width"),
    height: int | None = typer.Option(None, "--height"),
    seed: int | None = typer.Option(None, "--seed", help="Seed for a reproducible run"),
    zip_output: bool = typer.Option(False, "--zip", help="Also write images.zip and metadata.zip"),
) -> None:
    """Generate editions: images/<n>.png and metadata/<n>.json.

    Ctrl-C stops after the current edition; completed editions are kept.
    """
    spec = load_collection_or_exit(collection)
    config = StrataConfig.load()
    settings = config.generation

    canvas = resolve_canvas(
        width if width is not None else settings.canvas_width,
        height if height is not None else settings.canvas_height,
    )
    driver = BatchDriver(
        spec,
        count=count if count is not None else settings.edition_count,
        canvas=canvas,
        background=settings.background,
        seed=seed if seed is not None else settings.seed,
        placeholder_hash=config.export.placeholder_hash,
    )

    editions = []
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Generating", total=driver.count)
        try:
            for edition in driver.iter_editions(
                on_progress=lambda done, total: progress.update(task, completed=done)
            ):
                editions.append(edition)
        except KeyboardInterrupt:
            driver.cancel()

    try:
        images_dir, metadata_dir = write_collection(editions, output)
        if zip_output:
            save_archive(images_archive(editions), output / "images.zip")
            save_archive(metadata_archive([e.metadata for e in editions]), output / "metadata.zip")
    except ExportError as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    stats = driver.stats
    table = Table(show_header=False)
    table.add_row("Editions", f"{stats.completed}/{stats.requested}")
    table.add_row("Canvas", f"{canvas.width}x{canvas.height}")
    table.add_row("Rule fallbacks", str(stats.fallback))
    table.add_row("Skipped assets", str(stats.skipped_assets))
    table.add_row("Failed", str(stats.failed))
    table.add_row("Images", str(images_dir))
    table.add_row("Metadata", str(metadata_dir))
    console.print(table)

    if driver.cancelled:
        console.print(f"[yellow]Cancelled[/yellow] after {stats.completed} editions")
    if stats.fallback:
        console.print(
            f"[yellow]![/yellow] {stats.fallback} edition(s) could not satisfy the exclusion rules"
        )
