"""`strata rewrite-cid` - point metadata at published images."""

from pathlib import Path

import typer

from ...config import StrataConfig
from ...errors import ExportError
from ...export import load_metadata_dir, metadata_archive, save_archive, write_metadata
from ...generator import rewrite_image_locators
from ..app import app, console


@app.command("rewrite-cid")
def rewrite_cid_command(
    metadata_dir: Path = typer.Argument(..., help="Directory of <n>.json records"),
    cid: str = typer.Argument(..., help="IPFS CID of the uploaded images folder"),
    output: Path = typer.Option(Path("metadata_cid"), "--output", "-o", help="Output directory or .zip file"),
    zip_output: bool = typer.Option(False, "--zip", help="Write a zip archive instead of a directory"),
    gateway: str | None = typer.Option(None, "--gateway", help="Gateway host, e.g. lighthouse.storage"),
) -> None:
    """Rewrite each record's image to https://gateway.<host>/ipfs/<cid>/<n>.png.

    Writes a zip archive when --zip is given or OUTPUT ends in .zip.
    """
    config = StrataConfig.load()
    try:
        records = load_metadata_dir(metadata_dir)
        updated = rewrite_image_locators(records, cid, gateway or config.export.gateway_host)
    except (NotADirectoryError, ValueError) as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    if zip_output and output.suffix != ".zip":
        output = output.with_suffix(".zip")

    try:
        if output.suffix == ".zip":
            save_archive(metadata_archive(updated), output)
        else:
            write_metadata(updated, output)
    except ExportError as e:
        console.print(f"[red]x[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Rewrote {len(updated)} records to {output}")
