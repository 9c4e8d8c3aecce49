"""
Parser for pull request merge commits.

Works on ``git show --no-patch`` output, where the header lines (commit,
Merge:, Author:, Date:) start at column 0 and the message is indented:

    commit 3f2a...
    Merge: 1a2b 3c4d
    Author: Jane <jane@example.com>
    Date:   Mon Oct 5 10:00:00 2026 +0000

        Merge pull request #100 from jane/fix-crash

        Fix crash on startup

Grammar:
    header      := first line containing PR_MARKER
    identifier  := 4th whitespace-delimited token of header, matching #<digits>
    description := non-empty lines not starting with a letter, other than
                   the header, stripped and joined with single spaces
"""

from __future__ import annotations

import re

from relbump.core.changelog.models import PullRequestEntry
from relbump.core.exceptions import MalformedMergeCommitError

PR_MARKER = "Merge pull request"

IDENTIFIER_RE = re.compile(r"^#\d+$")
_LEADING_LETTER_RE = re.compile(r"^[A-Za-z]")
_WHITESPACE_RUN_RE = re.compile(r"\s{2,}")


def find_header(text: str, marker: str = PR_MARKER) -> str | None:
    """Return the first line containing the PR marker, or None."""
    for line in text.splitlines():
        if marker in line:
            return line
    return None


def parse_identifier(header: str) -> str:
    """
    Extract the PR identifier from a merge header line.

    Raises:
        MalformedMergeCommitError: If the token is missing or not ``#<digits>``
    """
    tokens = header.split()
    if len(tokens) < 4:
        raise MalformedMergeCommitError(f"no PR identifier in header {header.strip()!r}")
    identifier = tokens[3]
    if not IDENTIFIER_RE.match(identifier):
        raise MalformedMergeCommitError(
            f"PR identifier {identifier!r} is not of the form #<number>"
        )
    return identifier


def collapse_description(lines: list[str]) -> str:
    """
    Join body lines into one line, collapsing runs of whitespace.

    Lines are joined with a single space rather than concatenated, and
    whitespace runs become one space rather than being removed, so words
    on either side of a line break stay separate.

    Example:
        >>> collapse_description(["    Fix crash", "    on  startup"])
        'Fix crash on startup'
    """
    joined = " ".join(line.strip() for line in lines if line.strip())
    return _WHITESPACE_RUN_RE.sub(" ", joined).strip()


def parse_pull_request_merge(
    text: str,
    sha: str = "",
    marker: str = PR_MARKER,
) -> PullRequestEntry:
    """
    Parse a PR merge commit into a PullRequestEntry.

    Args:
        text: Full ``git show --no-patch`` output of the commit
        sha: Commit hash, recorded on the entry and in errors
        marker: Text identifying the merge header line

    Returns:
        Parsed entry

    Raises:
        MalformedMergeCommitError: If the header, identifier or description
            is missing

    Example:
        >>> entry = parse_pull_request_merge(
        ...     "    Merge pull request #100 from a/b\\n\\n    Fix crash on startup\\n"
        ... )
        >>> entry.identifier, entry.description
        ('#100', 'Fix crash on startup')
    """
    header = find_header(text, marker)
    if header is None:
        raise MalformedMergeCommitError(f"no '{marker}' line", sha=sha or None)

    try:
        identifier = parse_identifier(header)
    except MalformedMergeCommitError as e:
        raise MalformedMergeCommitError(e.reason, sha=sha or None) from e

    body = [
        line
        for line in text.splitlines()
        if line.strip()
        and not _LEADING_LETTER_RE.match(line)
        and line != header
    ]
    description = collapse_description(body)
    if not description:
        raise MalformedMergeCommitError(
            f"pull request {identifier} has no description", sha=sha or None
        )

    return PullRequestEntry(identifier=identifier, description=description, sha=sha)
