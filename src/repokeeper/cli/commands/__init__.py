"""CLI command modules for repokeeper."""

from __future__ import annotations

import typer

from . import config_cmd, repo


def register_commands(app: typer.Typer) -> None:
    """Attach every command to *app*."""
    app.command()(repo.sync)
    app.command()(repo.branch)
    app.command()(repo.head)
    app.command()(repo.status)
    app.command()(repo.diff)
    app.command()(repo.author)
    app.command()(repo.show)
    app.command(name="show-deleted")(repo.show_deleted)
    app.command()(repo.publish)
    app.command()(config_cmd.config)


__all__ = ["register_commands"]
