"""
Submodule checkout guard.

Makes sure the web dashboard submodule is initialized, clean, fetched and
checked out to the release branch before any changelog is mined from it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

from git import GitCommandError, Repo

from relbump.core.exceptions import DirtySubmoduleError, GitOperationError, InvalidBranchError
from relbump.utils.git import open_repo

logger = logging.getLogger(__name__)

OFFICIAL_BRANCH_PATTERNS = ("master", "dev", "release-*", "hotfix-*")


def is_official_branch(
    branch: str,
    patterns: tuple[str, ...] | list[str] = OFFICIAL_BRANCH_PATTERNS,
) -> bool:
    """
    Check whether a branch follows an official naming pattern.

    Example:
        >>> is_official_branch("release-10.8")
        True
        >>> is_official_branch("jane/experiment")
        False
    """
    return any(fnmatchcase(branch, pattern) for pattern in patterns)


@dataclass
class CheckoutResult:
    """
    Result of a submodule checkout.

    Attributes:
        path: Submodule path relative to the host repository
        branch: Requested branch name
        ref: Ref that was checked out (remote-tracking for official branches)
        remote_tracking: True if the remote-tracking ref was used
        initialized: True if the submodule had to be initialized first
    """

    path: str
    branch: str
    ref: str
    remote_tracking: bool
    initialized: bool = False


class SubmoduleSync:
    """
    Synchronizes the submodule checkout with the release branch.

    Example:
        >>> sync = SubmoduleSync(host_repo, "web")
        >>> result = sync.sync("release-10.8")
        >>> result.ref
        'origin/release-10.8'
    """

    def __init__(
        self,
        host_repo: Repo,
        path: str,
        *,
        remote: str = "origin",
        official_patterns: tuple[str, ...] | list[str] = OFFICIAL_BRANCH_PATTERNS,
    ) -> None:
        self.host_repo = host_repo
        self.path = path
        self.remote = remote
        self.official_patterns = tuple(official_patterns)

    @property
    def abs_path(self) -> Path:
        return Path(self.host_repo.working_tree_dir or ".") / self.path

    def _is_checked_out(self) -> bool:
        return (self.abs_path / ".git").exists()

    def ensure_present(self) -> bool:
        """
        Initialize the submodule if it has not been checked out.

        Returns:
            True if the submodule was initialized by this call
        """
        if self._is_checked_out():
            return False
        logger.info("Initializing submodule %s", self.path)
        try:
            self.host_repo.git.submodule("update", "--init", "--", self.path)
        except GitCommandError as e:
            raise GitOperationError(
                f"Failed to initialize submodule '{self.path}'",
                detail=str(e.stderr or e).strip(),
            ) from e
        return True

    def open(self) -> Repo:
        return open_repo(self.abs_path)

    def check_clean(self, repo: Repo) -> None:
        """
        Fail if the submodule index or working tree differs from HEAD.

        Raises:
            DirtySubmoduleError: If there are uncommitted changes
        """
        if repo.is_dirty(index=True, working_tree=True, untracked_files=False):
            raise DirtySubmoduleError(self.path)

    def checkout_ref(self, branch: str) -> tuple[str, bool]:
        """Return (ref, remote_tracking) to check out for a branch name."""
        if is_official_branch(branch, self.official_patterns):
            return f"{self.remote}/{branch}", True
        return branch, False

    def sync(self, branch: str) -> CheckoutResult:
        """
        Initialize, verify, fetch and check out the submodule.

        Raises:
            DirtySubmoduleError: If the submodule has uncommitted changes
            InvalidBranchError: If the branch cannot be checked out
            GitOperationError: If init or fetch fails
        """
        initialized = self.ensure_present()
        repo = self.open()
        self.check_clean(repo)

        logger.info("Fetching all remotes in %s", self.path)
        try:
            repo.git.fetch("--all")
        except GitCommandError as e:
            raise GitOperationError(
                f"git fetch failed in submodule '{self.path}'",
                detail=str(e.stderr or e).strip(),
            ) from e

        ref, remote_tracking = self.checkout_ref(branch)
        try:
            repo.git.checkout(ref)
        except GitCommandError as e:
            raise InvalidBranchError(branch, ref, detail=str(e.stderr or e).strip()) from e

        logger.info("Checked out %s in %s", ref, self.path)
        return CheckoutResult(
            path=self.path,
            branch=branch,
            ref=ref,
            remote_tracking=remote_tracking,
            initialized=initialized,
        )
