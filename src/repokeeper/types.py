"""
Repokeeper Types
================

Enums and dataclasses shared by the runner, the parsers and
:class:`repokeeper.repository.RepositoryHandle`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeKind(str, Enum):
    """Kind of change reported by ``git diff --name-status``."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeRecord:
    """One entry of a diff summary. Produced per query, never persisted."""

    change_kind: ChangeKind
    path: str

    def to_dict(self) -> dict[str, str]:
        return {"change_kind": self.change_kind.value, "path": self.path}


@dataclass(frozen=True)
class RepoOptions:
    """Options consumed while opening a handle.

    Attributes:
        rebase_on_pull: Default for :meth:`RepositoryHandle.pull` when no
            explicit ``rebase`` flag is passed.
        clone_dir: Directory name under the parent directory. Empty means
            use the short name derived from the remote URL.
    """

    rebase_on_pull: bool = False
    clone_dir: str = ""


@dataclass(frozen=True)
class CommandResult:
    """Normalized outcome of one external invocation."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


__all__ = [
    "ChangeKind",
    "ChangeRecord",
    "RepoOptions",
    "CommandResult",
]
