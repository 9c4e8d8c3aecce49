"""
Render repository changelogs into the three target formats.

Each formatter takes the ordered list of repository changelogs (host
repository first) and returns a string; repositories without entries
contribute nothing.
"""

from __future__ import annotations

from collections.abc import Sequence

from relbump.core.changelog.models import (
    ChangelogFragments,
    PullRequestEntry,
    RepositoryChangelog,
)


def github_line(entry: PullRequestEntry) -> str:
    return f"* {entry.identifier}: {entry.description}"


def debian_line(entry: PullRequestEntry) -> str:
    return f"  * {entry.tag} {entry.description}"


def yum_line(entry: PullRequestEntry) -> str:
    return f"- {entry.tag} {entry.description}"


def _ordered(changelog: RepositoryChangelog) -> list[PullRequestEntry]:
    return sorted(changelog.entries, key=lambda e: e.number)


def format_github(changelogs: Sequence[RepositoryChangelog]) -> str:
    """
    Render a markdown changelog with one ``### <label>`` section per repository.

    Example:
        ### server
        * #98: Add metrics endpoint
        * #100: Fix crash on startup
    """
    sections: list[str] = []
    for changelog in changelogs:
        if changelog.is_empty:
            continue
        lines = [f"### {changelog.label}"]
        lines.extend(github_line(e) for e in _ordered(changelog))
        sections.append("\n".join(lines) + "\n")
    return "\n".join(sections)


def format_debian(changelogs: Sequence[RepositoryChangelog]) -> str:
    """Render debian/changelog entry lines, one per PR."""
    return "".join(
        debian_line(e) + "\n" for changelog in changelogs for e in _ordered(changelog)
    )


def format_yum(changelogs: Sequence[RepositoryChangelog]) -> str:
    """Render RPM %changelog entry lines, one per PR."""
    return "".join(
        yum_line(e) + "\n" for changelog in changelogs for e in _ordered(changelog)
    )


def render_fragments(changelogs: Sequence[RepositoryChangelog]) -> ChangelogFragments:
    """Render all three target formats."""
    return ChangelogFragments(
        github=format_github(changelogs),
        debian=format_debian(changelogs),
        yum=format_yum(changelogs),
    )
