"""Command runners used to invoke the external version-control tool.

:class:`RepositoryHandle` never calls :mod:`subprocess` directly; it goes
through a :class:`CommandRunner` so tests can substitute a scripted fake.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from .types import CommandResult

logger = logging.getLogger(__name__)

__all__ = [
    "CommandRunner",
    "SubprocessRunner",
    "NOT_FOUND_RC",
    "TIMEOUT_RC",
]

NOT_FOUND_RC = 127
TIMEOUT_RC = 124


@runtime_checkable
class CommandRunner(Protocol):
    """Anything that can run ``<tool> <argv...>`` inside a directory."""

    def run(self, argv: Sequence[str], cwd: Path) -> CommandResult:
        """Run the tool with *argv* in *cwd* and return its combined output."""
        ...


class SubprocessRunner:
    """Run the tool as a child process, capturing stdout and stderr together.

    No retries. ``timeout=None`` (the default) waits for the process to exit
    however long it takes.
    """

    def __init__(self, executable: str = "git", timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    def run(self, argv: Sequence[str], cwd: Path) -> CommandResult:
        cmd = [self.executable, *argv]
        logger.debug("%s (cwd=%s)", " ".join(cmd), cwd)
        try:
            completed = subprocess.run(
                cmd,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            # Raised both for a missing executable and a missing cwd.
            if not Path(cwd).is_dir():
                detail = f"working directory does not exist: {cwd}"
            else:
                detail = f"{self.executable} executable not found on PATH"
            logger.debug("launch failed: %s", exc)
            return CommandResult(returncode=NOT_FOUND_RC, output=detail)
        except OSError as exc:
            return CommandResult(
                returncode=NOT_FOUND_RC,
                output=f"failed to launch {self.executable}: {exc}",
            )
        except subprocess.TimeoutExpired:
            return CommandResult(
                returncode=TIMEOUT_RC,
                output=f"command timed out: {' '.join(cmd)}",
            )
        return CommandResult(returncode=completed.returncode, output=completed.stdout or "")

    def __repr__(self) -> str:
        return f"SubprocessRunner(executable={self.executable!r}, timeout={self.timeout!r})"
