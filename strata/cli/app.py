"""Strata command line application."""

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..core.models import CollectionSpec


app = typer.Typer(
    name="strata",
    help="Generate layered art collections with rarity weights and exclusion rules.",
    no_args_is_help=True,
)
console = Console()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_collection_or_exit(path: Path) -> CollectionSpec:
    """Load a collection file, exiting with code 1 on failure."""
    if not path.exists():
        console.print(f"[red]x[/red] Collection file not found: {path}")
        raise typer.Exit(1)
    try:
        return CollectionSpec.from_yaml(path)
    except Exception as e:
        console.print(f"[red]x[/red] Failed to load collection: {e}")
        raise typer.Exit(1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"strata {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    setup_logging(verbose)


# Register commands
from . import commands  # noqa: E402,F401
