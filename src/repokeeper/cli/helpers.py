"""Shared console, logging and handle helpers for CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from repokeeper.config import RepoKeeperConfig, load_config
from repokeeper.errors import RepoKeeperError
from repokeeper.repository import RepositoryHandle

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliState:
    """Per-invocation state stored on ``ctx.obj``."""

    config_path: Path | None = None
    verbose: bool = False
    _config: RepoKeeperConfig | None = field(default=None, repr=False)

    @property
    def config(self) -> RepoKeeperConfig:
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


def configure_logging(verbose: bool) -> None:
    """Route ``repokeeper`` log records through rich when *verbose* is set."""
    root = logging.getLogger("repokeeper")
    if not verbose:
        root.setLevel(logging.WARNING)
        return
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False, markup=False))
    root.setLevel(logging.DEBUG)


def get_state(ctx: typer.Context) -> CliState:
    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState()
    return ctx.obj


def fail(exc: RepoKeeperError) -> NoReturn:
    """Print *exc* and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False)
    raise typer.Exit(1)


def attach_handle(ctx: typer.Context, repo: Path) -> RepositoryHandle:
    """Attach to the working copy at *repo* using the configured runner."""
    state = get_state(ctx)
    try:
        config = state.config
        return RepositoryHandle.attach(
            repo,
            options=config.options(),
            runner=config.make_runner(),
        )
    except RepoKeeperError as exc:
        fail(exc)


__all__ = [
    "CliState",
    "attach_handle",
    "configure_logging",
    "console",
    "err_console",
    "fail",
    "get_state",
]
