"""`strata config` - show or change persisted settings."""

import typer
from rich.table import Table

from ...config import StrataConfig, get_config_path
from ..app import app, console


@app.command("config")
def config_command(
    action: str = typer.Argument(..., help="show | set"),
    key: str | None = typer.Argument(None, help="Dotted key, e.g. generation.canvas_width"),
    value: str | None = typer.Argument(None, help="New value"),
) -> None:
    """Show or set configuration values."""
    config = StrataConfig.load()

    if action == "show":
        table = Table(title=f"Config ({get_config_path()})", show_header=False)
        table.add_column("Key", style="cyan")
        table.add_column("Value")

        table.add_row("[bold]Generation[/bold]", "")
        for name, val in config.generation.model_dump().items():
            table.add_row(f"  generation.{name}", str(val))
        table.add_row("[bold]Export[/bold]", "")
        for name, val in config.export.model_dump().items():
            table.add_row(f"  export.{name}", str(val))

        console.print(table)
        return

    if action == "set":
        if key is None or value is None:
            console.print("[red]x[/red] Usage: strata config set KEY VALUE")
            raise typer.Exit(1)
        try:
            config.set_value(key, value)
        except KeyError:
            console.print(f"[red]x[/red] Unknown key: {key}")
            raise typer.Exit(1)
        except ValueError as e:
            console.print(f"[red]x[/red] {e}")
            raise typer.Exit(1)

        path = config.save()
        console.print(f"[green]✓[/green] {key} = {value} (saved to {path})")
        return

    console.print(f"[red]x[/red] Unknown action: {action} (expected show or set)")
    raise typer.Exit(1)
