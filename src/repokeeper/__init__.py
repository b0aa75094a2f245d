"""
Repokeeper
==========

A thin layer over the ``git`` command line that keeps one local working
copy in line with its remote and reads branch, commit, diff and history
information back out of git's text output.

Usage:
    from repokeeper import RepositoryHandle, RepoOptions

    repo = RepositoryHandle.open(
        "https://example.com/org/project.git",
        "main",
        "/srv/checkouts",
        options=RepoOptions(rebase_on_pull=True),
    )
    for change in repo.diff_status("HEAD~1", "HEAD"):
        print(change.change_kind.value, change.path)
"""

from __future__ import annotations

__version__ = "0.3.0"

# Types
from .types import (
    ChangeKind,
    ChangeRecord,
    CommandResult,
    RepoOptions,
)

# Runner
from .runner import CommandRunner, SubprocessRunner

# Handle
from .repository import RepositoryHandle

# Exceptions
from .errors import (
    ActionFailedError,
    AddFailedError,
    CheckoutFailedError,
    CloneFailedError,
    CommandFailedError,
    CommitFailedError,
    ConfigError,
    HistoryTooShortError,
    IntrospectionFailedError,
    InvalidURLError,
    MissingParentDirectoryError,
    PullFailedError,
    PushFailedError,
    ReconciliationFailedError,
    RepoKeeperError,
    StatFailureError,
    UnrecognizedOutputError,
)

__all__ = [
    "__version__",
    # Types
    "ChangeKind",
    "ChangeRecord",
    "CommandResult",
    "RepoOptions",
    # Runner
    "CommandRunner",
    "SubprocessRunner",
    # Handle
    "RepositoryHandle",
    # Exceptions
    "RepoKeeperError",
    "ConfigError",
    "InvalidURLError",
    "MissingParentDirectoryError",
    "StatFailureError",
    "CommandFailedError",
    "ActionFailedError",
    "CloneFailedError",
    "PullFailedError",
    "CheckoutFailedError",
    "AddFailedError",
    "CommitFailedError",
    "PushFailedError",
    "UnrecognizedOutputError",
    "HistoryTooShortError",
    "ReconciliationFailedError",
    "IntrospectionFailedError",
]
