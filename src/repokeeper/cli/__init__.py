"""Repokeeper command-line interface.

Usage:
    repokeeper sync https://example.com/org/project.git --branch main -d ~/src
    repokeeper diff HEAD~1 HEAD --repo ~/src/project
    repokeeper show-deleted docs/old.md --repo ~/src/project
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .commands import register_commands
from .helpers import CliState, configure_logging

app = typer.Typer(
    name="repokeeper",
    help="Keep local working copies in line with their remotes and inspect their history",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def callback(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a config file (default: ./.repokeeper/config.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every git invocation"),
) -> None:
    ctx.obj = CliState(config_path=config_path, verbose=verbose)
    configure_logging(verbose)


register_commands(app)


def main() -> None:
    app()


__all__ = ["app", "main"]
