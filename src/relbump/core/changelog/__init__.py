"""
Changelog mining and rendering.

Turns pull request merge commits into GitHub, Debian and Yum changelog
fragments.
"""

from .formatters import (
    format_debian,
    format_github,
    format_yum,
    render_fragments,
)
from .miner import ChangelogMiner
from .models import ChangelogFragments, PullRequestEntry, RepositoryChangelog
from .parser import PR_MARKER, parse_pull_request_merge

__all__ = [
    "ChangelogFragments",
    "ChangelogMiner",
    "PR_MARKER",
    "PullRequestEntry",
    "RepositoryChangelog",
    "format_debian",
    "format_github",
    "format_yum",
    "parse_pull_request_merge",
    "render_fragments",
]
