"""RepositoryHandle: one managed working copy of one remote repository.

Every operation blocks on a single git invocation through the handle's
:class:`~repokeeper.runner.CommandRunner`. Handles are not safe for
concurrent use against the same local directory; callers serialize access.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from .errors import (
    AddFailedError,
    CheckoutFailedError,
    CloneFailedError,
    CommandFailedError,
    CommitFailedError,
    HistoryTooShortError,
    IntrospectionFailedError,
    MissingParentDirectoryError,
    PullFailedError,
    PushFailedError,
    ReconciliationFailedError,
    RepoKeeperError,
    StatFailureError,
)
from .parsing import (
    derive_short_name,
    parse_current_branch,
    parse_history_commits,
    parse_name_status,
    status_is_clean,
    strip_trailing_newline,
)
from .runner import CommandRunner, SubprocessRunner
from .types import ChangeRecord, RepoOptions

logger = logging.getLogger(__name__)

__all__ = ["RepositoryHandle", "METADATA_DIR"]

METADATA_DIR = ".git"


class RepositoryHandle:
    """A local working copy of *url* living under *parent_dir*.

    Use :meth:`open` to get a reconciled handle (cloned or pulled, on the
    desired branch) or :meth:`attach` to wrap an existing checkout as-is.

    Attributes:
        url: Remote URL, fixed for the handle's lifetime
        name: Short name derived from the URL
        parent_dir: Directory the working copy lives under
        local_dir: ``parent_dir`` joined with the clone-dir override or ``name``
    """

    def __init__(
        self,
        url: str,
        parent_dir: str | Path,
        options: RepoOptions | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self._url = url
        self._name = derive_short_name(url)
        # Absolute so clone targets do not depend on the cwd git runs in.
        self._parent_dir = Path(parent_dir).absolute()
        self.options = options or RepoOptions()
        self.runner: CommandRunner = runner or SubprocessRunner()
        self._local_dir = self._parent_dir / (self.options.clone_dir or self._name)

    @classmethod
    def open(
        cls,
        url: str,
        branch: str,
        parent_dir: str | Path,
        options: RepoOptions | None = None,
        runner: CommandRunner | None = None,
    ) -> "RepositoryHandle":
        """Clone or pull *url* under *parent_dir* and check out *branch*.

        Raises:
            InvalidURLError: if no name can be derived from *url*
            ReconciliationFailedError: if clone-or-pull failed
            IntrospectionFailedError: if the current branch cannot be read
            CheckoutFailedError: if switching to *branch* failed
        """
        repo = cls(url, parent_dir, options=options, runner=runner)

        try:
            repo.clone_or_pull()
        except RepoKeeperError as exc:
            raise ReconciliationFailedError(url, str(exc)) from exc

        try:
            current = repo.current_branch()
        except RepoKeeperError as exc:
            raise IntrospectionFailedError(url, str(exc)) from exc

        if current != branch:
            repo.checkout(branch)
        return repo

    @classmethod
    def attach(
        cls,
        local_dir: str | Path,
        options: RepoOptions | None = None,
        runner: CommandRunner | None = None,
    ) -> "RepositoryHandle":
        """Wrap an existing working copy without reconciling it.

        The remote URL is read from the ``origin`` remote.
        """
        local_dir = Path(local_dir).resolve()
        runner = runner or SubprocessRunner()
        argv = ["remote", "get-url", "origin"]
        result = runner.run(argv, local_dir)
        if not result.ok:
            raise CommandFailedError(argv, result.output, result.returncode, local_dir.name)
        url = strip_trailing_newline(result.output).strip()
        opts = RepoOptions(
            rebase_on_pull=(options or RepoOptions()).rebase_on_pull,
            clone_dir=local_dir.name,
        )
        return cls(url, local_dir.parent, options=opts, runner=runner)

    @property
    def url(self) -> str:
        return self._url

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent_dir(self) -> Path:
        return self._parent_dir

    @property
    def local_dir(self) -> Path:
        return self._local_dir

    def __repr__(self) -> str:
        return f"RepositoryHandle(url={self._url!r}, local_dir={str(self._local_dir)!r})"

    # -- Command primitive ----------------------------------------------------

    def run_command(self, *args: str) -> str:
        """Run ``git <args>`` inside :attr:`local_dir` and return its output.

        Raises:
            CommandFailedError: on non-zero exit or launch failure
        """
        result = self.runner.run(list(args), self._local_dir)
        if not result.ok:
            raise CommandFailedError(args, result.output, result.returncode, self._name)
        return result.output

    # -- Reconciliation -------------------------------------------------------

    def has_metadata(self) -> bool:
        """Return True if :attr:`local_dir` already holds a checkout."""
        return (self._local_dir / METADATA_DIR).exists()

    def clone_or_pull(self) -> None:
        """Clone when there is no checkout yet; pull with rebase when dirty.

        A clean working copy is assumed current and left alone.
        """
        if not self.has_metadata():
            self.clone()
        elif not self.is_clean():
            self.pull(rebase=True)

    def clone(self) -> None:
        """Clone :attr:`url` into :attr:`local_dir` and pin ``origin`` to it."""
        logger.debug("cloning repo %s into %s", self._url, self._local_dir)
        try:
            st = os.stat(self._parent_dir)
        except FileNotFoundError:
            raise MissingParentDirectoryError(str(self._parent_dir)) from None
        except OSError as exc:
            raise StatFailureError(str(self._parent_dir), str(exc)) from exc
        if not stat.S_ISDIR(st.st_mode):
            raise StatFailureError(str(self._parent_dir), "not a directory")

        argv = ["clone", self._url, str(self._local_dir)]
        result = self.runner.run(argv, self._parent_dir)
        if not result.ok:
            raise CloneFailedError(argv, result.output)

        # Guard against redirects rewriting the recorded remote.
        try:
            self.run_command("remote", "set-url", "origin", self._url)
        except CommandFailedError as exc:
            raise CloneFailedError.from_command(exc) from exc
        logger.info("Cloned %s -> %s", self._url, self._local_dir)

    def pull(self, rebase: bool | None = None) -> None:
        """Pull from the tracked remote, optionally rebasing local commits.

        ``rebase=None`` falls back to ``options.rebase_on_pull``.
        """
        if rebase is None:
            rebase = self.options.rebase_on_pull
        logger.debug("pulling repo %s (rebase=%s)", self._name, rebase)
        argv = ["pull"]
        if rebase:
            argv.append("--rebase")
        try:
            self.run_command(*argv)
        except CommandFailedError as exc:
            raise PullFailedError.from_command(exc) from exc
        logger.info("Pulled %s", self._name)

    def checkout(self, branch: str) -> None:
        logger.debug("checkout %s on %s", branch, self._name)
        try:
            self.run_command("checkout", branch)
        except CommandFailedError as exc:
            raise CheckoutFailedError.from_command(exc) from exc

    def is_clean(self) -> bool:
        """Fetch, then report whether nothing is pending in either direction.

        Any failure reads as "not clean": a dirty tree and an unreachable
        remote are indistinguishable to the caller.
        """
        try:
            self.run_command("fetch")
            output = self.run_command("status")
        except CommandFailedError as exc:
            logger.warning("Treating %s as not clean: %s", self._name, exc)
            return False
        return status_is_clean(output)

    # -- Introspection --------------------------------------------------------

    def current_branch(self) -> str:
        """Return the checked-out branch name.

        Raises:
            CommandFailedError: if ``git branch`` fails
            UnrecognizedOutputError: if no branch is marked as current
        """
        return parse_current_branch(self.run_command("branch"))

    def current_commit_id(self) -> str:
        """Return the ``HEAD`` commit id."""
        return strip_trailing_newline(self.run_command("rev-parse", "HEAD"))

    def commit_author(self, commit_id: str) -> str:
        """Return the author email of *commit_id*, exactly as git prints it.

        The format argument carries literal single quotes, so the result
        looks like ``'dev@example.com'\\n``.
        """
        return self.run_command("log", "--format='%ae'", f"{commit_id}^!")

    def diff_status(self, commit1: str, commit2: str) -> list[ChangeRecord]:
        """Return added, modified and deleted paths between two revisions."""
        return parse_name_status(self.run_command("diff", "--name-status", commit1, commit2))

    # -- History --------------------------------------------------------------

    def show_deleted_file(self, path: str) -> str:
        """Return *path*'s content from the commit before it was deleted.

        Assumes the deletion is the newest history event for *path*; a file
        that was deleted and later recreated resolves to the wrong revision.

        Raises:
            HistoryTooShortError: if fewer than two commits touch *path*
        """
        output = self.run_command("log", "--no-decorate", "--full-history", "-2", "--", path)
        commits = parse_history_commits(output)
        if len(commits) < 2:
            raise HistoryTooShortError(path, len(commits))
        logger.debug("resolved pre-deletion commit %s for %s", commits[1], path)
        return self.show_for_commit(commits[1], path)

    def show_for_commit(self, commit_id: str, path: str) -> str:
        """Return the raw content of *path* at *commit_id*."""
        return self.run_command("show", f"{commit_id}:{path}")

    # -- Mutations ------------------------------------------------------------

    def add(self, pattern: str) -> None:
        try:
            self.run_command("add", pattern)
        except CommandFailedError as exc:
            raise AddFailedError.from_command(exc) from exc

    def commit(self, message: str) -> None:
        try:
            self.run_command("commit", "-m", message)
        except CommandFailedError as exc:
            raise CommitFailedError.from_command(exc) from exc

    def push(self) -> None:
        logger.debug("pushing repo %s", self._name)
        try:
            self.run_command("push")
        except CommandFailedError as exc:
            raise PushFailedError.from_command(exc) from exc

    def add_commit_push(self, message: str) -> None:
        """Stage everything, commit with *message* and push; stop at the first failure."""
        self.add(".")
        self.commit(message)
        self.push()
