"""
Mine pull request entries from a repository's merge history.

For one repository the miner:
1. Finds the merge commit whose summary mentions the previous release
   branch (``release-<old_version>`` by default)
2. Lists merge commits after it whose summary contains the PR marker
3. Parses each one into a PullRequestEntry

A repository without a release merge contributes an empty changelog.
"""

from __future__ import annotations

import logging

from relbump.core.changelog.models import PullRequestEntry, RepositoryChangelog
from relbump.core.changelog.parser import PR_MARKER, parse_pull_request_merge
from relbump.core.exceptions import MalformedMergeCommitError
from relbump.utils.git import MergeHistory

logger = logging.getLogger(__name__)

DEFAULT_RELEASE_MARKER = "release-{version}"


class ChangelogMiner:
    """
    Extracts pull request entries since the previous release.

    Example:
        >>> miner = ChangelogMiner("10.7.0")
        >>> changelog = miner.mine(GitHistory(Path(".")))
        >>> [e.identifier for e in changelog.entries]
        ['#98', '#100']
    """

    def __init__(
        self,
        old_version: str,
        *,
        release_marker: str = DEFAULT_RELEASE_MARKER,
        pr_marker: str = PR_MARKER,
        skip_malformed: bool = False,
    ) -> None:
        """
        Initialize the miner.

        Args:
            old_version: Version of the previous release
            release_marker: Format string for the release branch name,
                formatted with ``version``
            pr_marker: Text identifying PR merge summaries
            skip_malformed: Log and skip unparseable PR merges instead of raising
        """
        self.old_version = old_version
        self.release_branch = release_marker.format(version=old_version)
        self.pr_marker = pr_marker
        self.skip_malformed = skip_malformed

    def find_release_merge(self, history: MergeHistory) -> str | None:
        """Return the hash of the newest merge mentioning the release branch."""
        for sha, summary in history.merge_summaries():
            if self.release_branch in summary:
                return sha
        return None

    def mine(self, history: MergeHistory) -> RepositoryChangelog:
        """
        Collect PR entries merged into a repository since the last release.

        Raises:
            MalformedMergeCommitError: If a PR merge does not parse and
                skip_malformed is False
        """
        label = history.label
        since = self.find_release_merge(history)
        if since is None:
            logger.info(
                "No merge of %s found in %s; skipping its changelog",
                self.release_branch,
                label,
            )
            return RepositoryChangelog(label=label)

        entries: list[PullRequestEntry] = []
        for sha, summary in history.merge_commits_since(since):
            if self.pr_marker not in summary:
                logger.debug("Skipping non-PR merge %s: %s", sha[:10], summary)
                continue
            try:
                entry = parse_pull_request_merge(history.show(sha), sha=sha, marker=self.pr_marker)
            except MalformedMergeCommitError as e:
                if not self.skip_malformed:
                    raise
                logger.warning("Skipping %s", e)
                continue
            entries.append(entry)

        logger.info("Found %d pull request(s) in %s since %s", len(entries), label, since[:10])
        return RepositoryChangelog.from_entries(label, entries, since=since)
