"""Top-level ``repokeeper config`` command."""

from __future__ import annotations

import typer
from rich.table import Table

from repokeeper.cli.helpers import console, fail, get_state
from repokeeper.config import RepoKeeperConfig, default_config_path, save_config
from repokeeper.errors import RepoKeeperError


def config(
    ctx: typer.Context,
    init: bool = typer.Option(
        False,
        "--init",
        help="Write a default config file if none exists",
    ),
) -> None:
    """Display the resolved configuration."""
    state = get_state(ctx)

    if init:
        path = state.config_path or default_config_path()
        if path.exists():
            console.print(f"[yellow]Config already exists:[/yellow] {path}", highlight=False)
            raise typer.Exit(0)
        save_config(RepoKeeperConfig(), path)
        console.print(f"[green]✓[/green] Wrote {path}", highlight=False)
        raise typer.Exit(0)

    try:
        resolved = state.config
    except RepoKeeperError as exc:
        fail(exc)

    table = Table(title="Repokeeper Configuration", show_lines=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for section, values in resolved.to_dict().items():
        for key, value in values.items():
            table.add_row(f"{section}.{key}", "[dim]null[/dim]" if value is None else str(value))
    console.print(table)
