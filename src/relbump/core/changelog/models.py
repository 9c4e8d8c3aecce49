"""
Data models for mined changelog entries.

All models are immutable; a run builds one RepositoryChangelog per
repository and renders them with the functions in formatters.py.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PullRequestEntry:
    """
    A pull request parsed from a merge commit.

    Attributes:
        identifier: PR identifier as written in the merge summary (e.g. "#1234")
        description: Single-line description taken from the commit body
        sha: Merge commit hash, if known
    """

    identifier: str
    description: str
    sha: str = ""

    @property
    def number(self) -> int:
        """Numeric PR id used for ordering."""
        return int(self.identifier.lstrip("#"))

    @property
    def tag(self) -> str:
        """Identifier with '#' replaced by 'PR' (e.g. "PR1234")."""
        return self.identifier.replace("#", "PR")


@dataclass(frozen=True)
class RepositoryChangelog:
    """
    Pull requests merged into one repository since the last release.

    Attributes:
        label: Short repository name, used as a section header
        entries: Entries in ascending PR number order
        since: Hash of the release merge commit the range starts after
    """

    label: str
    entries: tuple[PullRequestEntry, ...] = field(default_factory=tuple)
    since: str | None = None

    @classmethod
    def from_entries(
        cls,
        label: str,
        entries: list[PullRequestEntry],
        since: str | None = None,
    ) -> RepositoryChangelog:
        """Build a changelog with entries sorted by PR number."""
        ordered = tuple(sorted(entries, key=lambda e: e.number))
        return cls(label=label, entries=ordered, since=since)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class ChangelogFragments:
    """
    Rendered changelog text for each target format.

    Attributes:
        github: Markdown list for release notes / PR descriptions
        debian: Entry lines for a debian/changelog stanza
        yum: Entry lines for an RPM spec %changelog stanza
    """

    github: str = ""
    debian: str = ""
    yum: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.github or self.debian or self.yum)
