"""
Release service for bumping the version and generating changelogs.

Provides the end-to-end bump:
- Syncing the web dashboard submodule to the release branch
- Rewriting the version file
- Mining pull requests from both repositories since the last release
- Prepending reviewed entries to debian/changelog and the RPM spec
- Staging the edited files
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from git import Repo

from relbump.core.changelog import (
    ChangelogFragments,
    ChangelogMiner,
    RepositoryChangelog,
    render_fragments,
)
from relbump.core.config import BumpConfig, load_config
from relbump.core.exceptions import BumpError
from relbump.core.fileops import atomic_write
from relbump.core.packaging import (
    DEBIAN_INSTRUCTION,
    RPM_INSTRUCTION,
    assemble_debian_changelog,
    assemble_rpm_spec,
    build_debian_stanza,
    build_rpm_entry,
)
from relbump.core.review import (
    AutoApproveReviewer,
    EditorReviewer,
    Reviewer,
    review_content,
)
from relbump.core.submodule import CheckoutResult, SubmoduleSync
from relbump.core.version import read_version, rewrite_version, validate_version
from relbump.utils.git import (
    GitHistory,
    MergeHistory,
    get_current_branch,
    get_status,
    open_repo,
    stage_files,
)

logger = logging.getLogger(__name__)

HistoryFactory = Callable[[Path, Optional[str]], MergeHistory]


class ReleaseServiceError(BumpError):
    """Error from release service operations."""

    pass


@dataclass
class BumpResult:
    """Result of a version bump."""

    old_version: str
    new_version: str
    branch: str | None
    fragments: ChangelogFragments
    changelogs: list[RepositoryChangelog] = field(default_factory=list)
    checkout: CheckoutResult | None = None
    files_written: list[Path] = field(default_factory=list)
    status: str = ""
    dry_run: bool = False


class BumpService:
    """
    Service for bumping the release version.

    All new file contents are computed and reviewed before any file is
    written; the three files are installed only after both review gates pass.

    Example:
        >>> service = BumpService(Path.cwd())
        >>> result = service.bump("10.8.0")
        >>> print(result.fragments.github)
    """

    def __init__(
        self,
        project_dir: Path | None = None,
        config: BumpConfig | None = None,
        *,
        reviewer: Reviewer | None = None,
        auto_approve: bool = False,
        history_factory: HistoryFactory = GitHistory,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize BumpService.

        Args:
            project_dir: Host repository root (defaults to cwd)
            config: Configuration (defaults to load_config(project_dir))
            reviewer: Review strategy (defaults to the $EDITOR reviewer)
            auto_approve: Approve generated changelogs without an editor
            history_factory: Builds a MergeHistory for (path, label)
            clock: Returns the release timestamp
        """
        self.project_dir = project_dir or Path.cwd()
        self.config = config or load_config(self.project_dir)
        self.history_factory = history_factory
        self.clock = clock or (lambda: datetime.now().astimezone())

        if reviewer is None and auto_approve:
            reviewer = AutoApproveReviewer(DEBIAN_INSTRUCTION, RPM_INSTRUCTION)
        self._reviewer = reviewer
        self._repo: Repo | None = None

    @property
    def repo(self) -> Repo:
        """Get host repository (lazy initialization)."""
        if self._repo is None:
            self._repo = open_repo(self.project_dir)
        return self._repo

    @property
    def version_file(self) -> Path:
        return self.project_dir / self.config.files.version_file

    @property
    def debian_changelog(self) -> Path:
        return self.project_dir / self.config.files.debian_changelog

    @property
    def rpm_spec(self) -> Path:
        return self.project_dir / self.config.files.rpm_spec

    @property
    def submodule_dir(self) -> Path:
        return self.project_dir / self.config.submodule.path

    def _read(self, path: Path) -> str:
        if not path.is_file():
            raise ReleaseServiceError(f"Required file not found: {path}", path=str(path))
        return path.read_text(encoding="utf-8")

    def sync_submodule(self, branch: str) -> CheckoutResult:
        sub = self.config.submodule
        sync = SubmoduleSync(
            self.repo,
            sub.path,
            remote=sub.remote,
            official_patterns=sub.official_branch_patterns,
        )
        return sync.sync(branch)

    def histories(self) -> list[MergeHistory]:
        """Build merge histories for the host repository and the submodule."""
        histories = [self.history_factory(self.project_dir, self.config.host_label)]
        if (self.submodule_dir / ".git").exists():
            histories.append(
                self.history_factory(self.submodule_dir, self.config.submodule.label)
            )
        else:
            logger.warning(
                "Submodule %s is not checked out; its changes are not included",
                self.config.submodule.path,
            )
        return histories

    def mine(self, old_version: str) -> list[RepositoryChangelog]:
        """Collect pull requests from every repository since the old release."""
        history = self.config.history
        miner = ChangelogMiner(
            old_version,
            release_marker=history.release_marker,
            pr_marker=history.pr_marker,
            skip_malformed=history.skip_malformed,
        )
        return [miner.mine(h) for h in self.histories()]

    def install(self, changes: list[tuple[Path, str, str]], written: list[Path]) -> None:
        """
        Atomically replace each file, restoring earlier ones if a later one fails.

        Args:
            changes: (path, original content, new content) triples
            written: Receives the paths that were replaced
        """
        done: list[tuple[Path, str]] = []
        try:
            for path, original, content in changes:
                atomic_write(path, content)
                done.append((path, original))
                written.append(path)
        except OSError as e:
            for path, original in reversed(done):
                logger.warning("Restoring %s", path)
                atomic_write(path, original)
            written.clear()
            raise ReleaseServiceError(f"Failed to install updated files: {e}") from e

    def bump(
        self,
        new_version: str,
        web_branch: str | None = None,
        *,
        dry_run: bool = False,
        skip_submodule: bool = False,
    ) -> BumpResult:
        """
        Bump the version and update the changelogs.

        Args:
            new_version: Version to release (e.g., "10.8.0")
            web_branch: Submodule branch (defaults to the host's current branch
                when the submodule is synced)
            dry_run: Mine and render only; change nothing
            skip_submodule: Leave the submodule checkout alone

        Returns:
            BumpResult with rendered fragments and written files

        Raises:
            BumpError: On any failure; no file is written unless every
                step up to and including review succeeded
        """
        validate_version(new_version)

        # Resolve the reviewer first so a missing $EDITOR fails before any change
        # (None on a dry run)
        reviewer: Reviewer | None = None
        if not dry_run:
            reviewer = self._reviewer or EditorReviewer()

        logger.info("Bumping to %s", new_version)

        # The branch is only needed to sync the submodule
        branch = web_branch
        checkout = None
        if not dry_run and not skip_submodule:
            branch = branch or get_current_branch(self.repo)
            checkout = self.sync_submodule(branch)

        version_text = self._read(self.version_file)
        old_version = read_version(version_text, self.config.files.version_pattern)
        logger.info("Current version is %s", old_version)

        debian_text = self._read(self.debian_changelog)
        spec_text = self._read(self.rpm_spec)

        changelogs = self.mine(old_version)
        fragments = render_fragments(changelogs)

        result = BumpResult(
            old_version=old_version,
            new_version=new_version,
            branch=branch,
            fragments=fragments,
            changelogs=changelogs,
            checkout=checkout,
            dry_run=dry_run,
        )
        if reviewer is None:
            return result

        when = self.clock()
        new_version_text = rewrite_version(version_text, old_version, new_version)

        stanza = build_debian_stanza(
            self.config.package_name,
            new_version,
            fragments.debian,
            self.config.packager,
            when,
        )
        new_debian = review_content(
            self.debian_changelog.name,
            assemble_debian_changelog(stanza, debian_text),
            reviewer,
            DEBIAN_INSTRUCTION,
        )

        entry = build_rpm_entry(new_version, fragments.yum, self.config.packager, when)
        new_spec = review_content(
            self.rpm_spec.name,
            assemble_rpm_spec(spec_text, old_version, new_version, entry, RPM_INSTRUCTION),
            reviewer,
            RPM_INSTRUCTION,
        )

        self.install(
            [
                (self.version_file, version_text, new_version_text),
                (self.debian_changelog, debian_text, new_debian),
                (self.rpm_spec, spec_text, new_spec),
            ],
            result.files_written,
        )

        stage_files(self.repo, result.files_written)
        result.status = get_status(self.repo)
        return result
