"""
Git utilities for relbump.

Provides the MergeHistory protocol that changelog mining depends on, a
GitPython-backed implementation, and the few repository operations the
release flow needs (current branch, staging, status).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from relbump.core.exceptions import GitOperationError

logger = logging.getLogger(__name__)

# Field separator for --format output; cannot occur in a commit summary.
_SEP = "\x1f"


class MergeHistory(Protocol):
    """Read access to a repository's merge commits."""

    @property
    def label(self) -> str:
        """Short repository name used as a changelog section header."""
        ...

    def merge_summaries(self) -> list[tuple[str, str]]:
        """Return (sha, summary) for every merge commit reachable from HEAD, newest first."""
        ...

    def merge_commits_since(self, sha: str) -> list[tuple[str, str]]:
        """Return (sha, summary) for merge commits in sha..HEAD, newest first."""
        ...

    def show(self, sha: str) -> str:
        """Return the full ``git show --no-patch`` text of a commit."""
        ...


def open_repo(path: Path) -> Repo:
    """
    Open a git repository.

    Raises:
        GitOperationError: If path is not a git repository
    """
    try:
        return Repo(path)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise GitOperationError(f"Not a git repository: {path}", path=str(path)) from e


def parse_log_lines(output: str) -> list[tuple[str, str]]:
    """Parse ``%H<SEP>%s`` log output into (sha, summary) pairs."""
    commits: list[tuple[str, str]] = []
    for line in output.splitlines():
        if not line:
            continue
        sha, sep, summary = line.partition(_SEP)
        if not sep:
            continue
        commits.append((sha, summary))
    return commits


class GitHistory:
    """
    MergeHistory backed by GitPython.

    Example:
        >>> history = GitHistory(Path("."))
        >>> for sha, summary in history.merge_summaries()[:3]:
        ...     print(sha[:7], summary)
    """

    def __init__(self, path: Path, label: str | None = None) -> None:
        self.path = path
        self.repo = open_repo(path)
        self._label = label

    @property
    def label(self) -> str:
        if self._label:
            return self._label
        return Path(self.repo.working_tree_dir or self.path).resolve().name

    def _log(self, *args: str) -> list[tuple[str, str]]:
        try:
            output = self.repo.git.log("--merges", f"--format=%H{_SEP}%s", *args)
        except GitCommandError as e:
            raise GitOperationError(
                f"git log failed in {self.path}: {e.stderr.strip() if e.stderr else e}",
                path=str(self.path),
            ) from e
        return parse_log_lines(output)

    def merge_summaries(self) -> list[tuple[str, str]]:
        return self._log()

    def merge_commits_since(self, sha: str) -> list[tuple[str, str]]:
        return self._log(f"{sha}..HEAD")

    def show(self, sha: str) -> str:
        try:
            return str(self.repo.git.show("--no-patch", sha))
        except GitCommandError as e:
            raise GitOperationError(f"git show {sha} failed in {self.path}") from e


def get_current_branch(repo: Repo) -> str:
    """
    Get the name of the checked-out branch.

    Raises:
        GitOperationError: If HEAD is detached
    """
    try:
        return repo.active_branch.name
    except TypeError as e:
        raise GitOperationError(
            "HEAD is detached; pass the branch explicitly with --web-branch",
            path=str(repo.working_tree_dir),
        ) from e


def stage_files(repo: Repo, paths: list[Path]) -> None:
    """Stage files for the next commit."""
    try:
        repo.git.add("--", *[str(p) for p in paths])
    except GitCommandError as e:
        raise GitOperationError(f"git add failed: {e.stderr.strip() if e.stderr else e}") from e
    logger.info("Staged %s", ", ".join(str(p) for p in paths))


def get_status(repo: Repo) -> str:
    """Return ``git status`` output."""
    return str(repo.git.status())
