from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Sequence

import pytest

from repokeeper.types import CommandResult

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


class ScriptedRunner:
    """Fake command runner returning queued results keyed by argv.

    Unscripted commands succeed with empty output. When several results are
    queued for the same argv they are consumed in order; the last one repeats.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path]] = []
        self._responses: dict[tuple[str, ...], list[CommandResult]] = {}

    def script(self, *argv: str, output: str = "", returncode: int = 0) -> None:
        self._responses.setdefault(tuple(argv), []).append(
            CommandResult(returncode=returncode, output=output)
        )

    def run(self, argv: Sequence[str], cwd: Path) -> CommandResult:
        self.calls.append((list(argv), Path(cwd)))
        queue = self._responses.get(tuple(argv))
        if not queue:
            return CommandResult(returncode=0, output="")
        if len(queue) > 1:
            return queue.pop(0)
        return queue[0]

    @property
    def commands(self) -> list[list[str]]:
        return [argv for argv, _cwd in self.calls]

    def subcommands(self) -> list[str]:
        return [argv[0] for argv in self.commands]


def git(*args: str, cwd: Path) -> str:
    completed = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return completed.stdout
