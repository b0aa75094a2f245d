"""Working-copy commands: sync, inspect, diff, recover and publish."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from repokeeper.cli.helpers import attach_handle, console, fail, get_state
from repokeeper.errors import RepoKeeperError
from repokeeper.repository import RepositoryHandle
from repokeeper.types import ChangeKind

REPO_OPTION = typer.Option(
    Path("."),
    "--repo",
    "-r",
    help="Path to an existing working copy",
)

_KIND_STYLES = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
}


def sync(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Remote repository URL"),
    branch: str = typer.Option("main", "--branch", "-b", help="Branch to check out"),
    parent_dir: Optional[Path] = typer.Option(
        None,
        "--parent-dir",
        "-d",
        help="Directory the working copy lives under (default: config or cwd)",
    ),
    clone_dir: str = typer.Option("", "--clone-dir", help="Override the working copy directory name"),
    rebase: Optional[bool] = typer.Option(
        None,
        "--rebase/--no-rebase",
        help="Default rebase behaviour for later pulls",
    ),
) -> None:
    """Clone or update a repository and check out BRANCH."""
    state = get_state(ctx)
    try:
        config = state.config
        parent = parent_dir or config.parent_dir or Path.cwd()
        repo = RepositoryHandle.open(
            url,
            branch,
            parent,
            options=config.options(clone_dir=clone_dir, rebase_on_pull=rebase),
            runner=config.make_runner(),
        )
        head = repo.current_commit_id()
    except RepoKeeperError as exc:
        fail(exc)

    console.print(f"[green]✓[/green] {repo.name} ready at {repo.local_dir}", highlight=False)
    console.print(f"  branch: [cyan]{branch}[/cyan]  head: [dim]{head}[/dim]", highlight=False)


def branch(ctx: typer.Context, repo: Path = REPO_OPTION) -> None:
    """Print the checked-out branch."""
    handle = attach_handle(ctx, repo)
    try:
        typer.echo(handle.current_branch())
    except RepoKeeperError as exc:
        fail(exc)


def head(ctx: typer.Context, repo: Path = REPO_OPTION) -> None:
    """Print the HEAD commit id."""
    handle = attach_handle(ctx, repo)
    try:
        typer.echo(handle.current_commit_id())
    except RepoKeeperError as exc:
        fail(exc)


def status(ctx: typer.Context, repo: Path = REPO_OPTION) -> None:
    """Fetch and report whether the working copy is clean."""
    handle = attach_handle(ctx, repo)
    if handle.is_clean():
        console.print("[green]clean[/green]")
    else:
        console.print("[yellow]not clean[/yellow] (or the remote could not be checked)")


def diff(
    ctx: typer.Context,
    commit1: str = typer.Argument(..., help="Base revision"),
    commit2: str = typer.Argument(..., help="Target revision"),
    repo: Path = REPO_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table"),
) -> None:
    """List paths added, modified or deleted between two revisions."""
    handle = attach_handle(ctx, repo)
    try:
        records = handle.diff_status(commit1, commit2)
    except RepoKeeperError as exc:
        fail(exc)

    if as_json:
        typer.echo(json.dumps([record.to_dict() for record in records], indent=2))
        return

    if not records:
        console.print("[dim]No added, modified or deleted paths[/dim]")
        return

    table = Table(title=f"{commit1}..{commit2}")
    table.add_column("Change", style="bold")
    table.add_column("Path")
    for record in records:
        style = _KIND_STYLES[record.change_kind]
        table.add_row(f"[{style}]{record.change_kind.value}[/{style}]", record.path)
    console.print(table)


def author(
    ctx: typer.Context,
    commit: str = typer.Argument(..., help="Commit id"),
    repo: Path = REPO_OPTION,
) -> None:
    """Print the author email of COMMIT as git formats it."""
    handle = attach_handle(ctx, repo)
    try:
        typer.echo(handle.commit_author(commit), nl=False)
    except RepoKeeperError as exc:
        fail(exc)


def show(
    ctx: typer.Context,
    commit: str = typer.Argument(..., help="Commit id"),
    path: str = typer.Argument(..., help="Repository-relative path"),
    repo: Path = REPO_OPTION,
) -> None:
    """Print PATH as of COMMIT."""
    handle = attach_handle(ctx, repo)
    try:
        typer.echo(handle.show_for_commit(commit, path), nl=False)
    except RepoKeeperError as exc:
        fail(exc)


def show_deleted(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Repository-relative path of a deleted file"),
    repo: Path = REPO_OPTION,
) -> None:
    """Print the last content of PATH before it was deleted."""
    handle = attach_handle(ctx, repo)
    try:
        typer.echo(handle.show_deleted_file(path), nl=False)
    except RepoKeeperError as exc:
        fail(exc)


def publish(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Commit message"),
    repo: Path = REPO_OPTION,
) -> None:
    """Stage everything, commit with MESSAGE and push."""
    handle = attach_handle(ctx, repo)
    try:
        handle.add_commit_push(message)
    except RepoKeeperError as exc:
        fail(exc)
    console.print(f"[green]✓[/green] Published {handle.name}", highlight=False)
