"""Exception hierarchy for repository reconciliation and inspection."""

from __future__ import annotations

from typing import Sequence


class RepoKeeperError(Exception):
    """Base exception for repokeeper errors."""


class ConfigError(RepoKeeperError):
    """Raised when the configuration file cannot be parsed or validated."""


class InvalidURLError(RepoKeeperError):
    """Remote URL has no usable final path segment."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Cannot derive a repository name from URL {url!r}")


class MissingParentDirectoryError(RepoKeeperError):
    """The directory a clone should land in does not exist."""

    def __init__(self, parent_dir: str):
        self.parent_dir = parent_dir
        super().__init__(f"Parent directory does not exist: {parent_dir}")


class StatFailureError(RepoKeeperError):
    """The parent directory exists but could not be inspected."""

    def __init__(self, parent_dir: str, reason: str):
        self.parent_dir = parent_dir
        self.reason = reason
        super().__init__(f"Failed to stat parent directory {parent_dir}: {reason}")


class CommandFailedError(RepoKeeperError):
    """The external tool exited non-zero or could not be launched.

    Attributes:
        argv: Argument vector passed after the executable
        output: Combined stdout/stderr of the invocation
        returncode: Exit status (127 when the tool is missing, 124 on timeout)
        repo_name: Short name of the repository the command ran against
    """

    def __init__(
        self,
        argv: Sequence[str],
        output: str,
        returncode: int,
        repo_name: str = "",
    ):
        self.argv = list(argv)
        self.output = output
        self.returncode = returncode
        self.repo_name = repo_name
        target = f" on repo {repo_name}" if repo_name else ""
        super().__init__(
            f"failed to run command '{' '.join(self.argv)}'{target} "
            f"(rc={returncode}): {output.strip()}"
        )


class ActionFailedError(RepoKeeperError):
    """Base for failures named after the action that triggered them.

    Carries the argument vector and combined output of the failing command.
    """

    action = "run command"

    def __init__(self, argv: Sequence[str] = (), output: str = "", detail: str | None = None):
        self.argv = list(argv)
        self.output = output
        message = f"Failed to {self.action}"
        if detail:
            message = f"{message}: {detail}"
        elif output.strip():
            message = f"{message}: {output.strip()}"
        super().__init__(message)

    @classmethod
    def from_command(cls, exc: CommandFailedError) -> "ActionFailedError":
        return cls(exc.argv, exc.output)


class CloneFailedError(ActionFailedError):
    action = "clone repo"


class PullFailedError(ActionFailedError):
    action = "pull repo"


class CheckoutFailedError(ActionFailedError):
    action = "checkout"


class AddFailedError(ActionFailedError):
    action = "add"


class CommitFailedError(ActionFailedError):
    action = "commit"


class PushFailedError(ActionFailedError):
    action = "push"


class UnrecognizedOutputError(RepoKeeperError):
    """Tool output did not have the shape a parser expects."""

    def __init__(self, what: str, output: str):
        self.what = what
        self.output = output
        super().__init__(f"Unexpected command output while reading {what}")


class HistoryTooShortError(RepoKeeperError):
    """Fewer than two history entries exist for a path."""

    def __init__(self, path: str, found: int):
        self.path = path
        self.found = found
        super().__init__(
            f"History for {path} has {found} commit(s); need 2 to locate the "
            "revision before deletion"
        )


class ReconciliationFailedError(RepoKeeperError):
    """Clone-or-pull failed while opening a handle."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to reconcile {url}: {reason}")


class IntrospectionFailedError(RepoKeeperError):
    """The checked-out branch could not be determined while opening a handle."""

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to read current branch of {url}: {reason}")


__all__ = [
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
