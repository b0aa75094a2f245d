"""Parsers for the human-readable git output consumed by repokeeper.

Each function handles exactly one output format so that drift in git's
phrasing stays a local fix. All functions are pure.

Provides:
- derive_short_name(): repository name from a remote URL
- parse_current_branch(): checked-out branch from ``git branch``
- parse_name_status(): change records from ``git diff --name-status``
- parse_history_commits(): commit ids from ``git log``
- status_is_clean(): clean-state heuristic over ``git status``
- strip_trailing_newline(): drop exactly one trailing newline
"""

from __future__ import annotations

from .errors import InvalidURLError, UnrecognizedOutputError
from .types import ChangeKind, ChangeRecord

__all__ = [
    "REPO_SUFFIX",
    "STATUS_CODES",
    "UP_TO_DATE_MARKERS",
    "NOTHING_TO_COMMIT_MARKERS",
    "derive_short_name",
    "parse_current_branch",
    "parse_name_status",
    "parse_history_commits",
    "status_is_clean",
    "strip_trailing_newline",
]

REPO_SUFFIX = ".git"

STATUS_CODES: dict[str, ChangeKind] = {
    "A": ChangeKind.ADDED,
    "M": ChangeKind.MODIFIED,
    "D": ChangeKind.DELETED,
}

# Older git releases print the hyphenated / "directory" forms.
UP_TO_DATE_MARKERS = ("up-to-date", "up to date")
NOTHING_TO_COMMIT_MARKERS = ("working directory clean", "working tree clean")


def derive_short_name(url: str) -> str:
    """Return the last ``/`` segment of *url* without a trailing ``.git``.

    Raises:
        InvalidURLError: if no non-empty name remains
    """
    name = url.split("/")[-1]
    if name.endswith(REPO_SUFFIX):
        name = name[: -len(REPO_SUFFIX)]
    if not name:
        raise InvalidURLError(url)
    return name


def parse_current_branch(output: str) -> str:
    """Return the branch marked with ``*`` in ``git branch`` output.

    The text after the marker and its following space is returned verbatim,
    so a detached head yields e.g. ``(HEAD detached at 1a2b3c4)``.

    Raises:
        UnrecognizedOutputError: if no line starts with ``*``
    """
    for line in output.split("\n"):
        if line.startswith("*"):
            return line[2:]
    raise UnrecognizedOutputError("current branch", output)


def parse_name_status(output: str) -> list[ChangeRecord]:
    """Parse ``git diff --name-status`` output into change records.

    Only lines with exactly two whitespace-separated fields are considered.
    Codes outside :data:`STATUS_CODES` (renames, copies, type changes) are
    skipped rather than misclassified.
    """
    records: list[ChangeRecord] = []
    for line in output.split("\n"):
        fields = line.split()
        if len(fields) != 2:
            continue
        kind = STATUS_CODES.get(fields[0])
        if kind is None:
            continue
        records.append(ChangeRecord(change_kind=kind, path=fields[1]))
    return records


def parse_history_commits(output: str) -> list[str]:
    """Return commit ids from ``git log`` output, newest first.

    A commit boundary is a line starting with ``commit``; the id is whatever
    follows the first space on that line.
    """
    commits: list[str] = []
    for line in output.split("\n"):
        if line.startswith("commit"):
            commits.append(line[line.find(" ") + 1 :])
    return commits


def status_is_clean(output: str) -> bool:
    """Return True when ``git status`` reports nothing to fetch or commit.

    Substring matching on English output: a localized git, or a future
    rewording, reads as "not clean".
    """
    up_to_date = any(marker in output for marker in UP_TO_DATE_MARKERS)
    nothing_to_commit = any(marker in output for marker in NOTHING_TO_COMMIT_MARKERS)
    return up_to_date and nothing_to_commit


def strip_trailing_newline(text: str) -> str:
    """Remove one trailing ``\\n``; other whitespace is kept."""
    if text.endswith("\n"):
        return text[:-1]
    return text
