"""`strata init` - create a collection file from a layers directory."""

from pathlib import Path

import typer

from ...loader import build_collection
from ..app import app, console


@app.command("init")
def init_command(
    layers_dir: Path = typer.Argument(..., help="Directory with one sub-directory per layer"),
    output: Path = typer.Option(Path("collection.yaml"), "--output", "-o", help="Collection file to write"),
    name: str = typer.Option("", "--name", help="Collection name"),
    description: str = typer.Option("", "--description", help="Collection description"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Scan layer folders and write an editable collection file."""
    if output.exists() and not force:
        console.print(f"[red]x[/red] {output} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        spec = build_collection(layers_dir, name=name, description=description)
    except NotADirectoryError as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    spec.to_yaml(output)

    image_count = sum(len(layer.images) for layer in spec.layers)
    console.print(
        f"[green]✓[/green] Wrote {output}: {len(spec.layers)} layers, {image_count} images"
    )
    console.print("[dim]Edit rarities and add exclusion rules under 'rules:' before generating.[/dim]")
