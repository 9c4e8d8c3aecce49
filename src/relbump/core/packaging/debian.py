"""
Debian changelog assembly.

A new stanza is prepended to debian/changelog:

    <package> (<version>-1) unstable; urgency=medium

      * PR100 Fix crash on startup

     -- <maintainer>  <RFC 2822 date>

"""

from __future__ import annotations

from datetime import datetime
from email.utils import format_datetime

DEBIAN_INSTRUCTION = "# Verify the debian changelog stanza below, then delete this line"


def debian_date(when: datetime) -> str:
    """Format a timestamp the way dpkg-parsechangelog expects (RFC 2822)."""
    if when.tzinfo is None:
        when = when.astimezone()
    return format_datetime(when)


def build_debian_stanza(
    package: str,
    version: str,
    entries: str,
    maintainer: str,
    when: datetime,
    revision: str = "1",
) -> str:
    """
    Build a debian/changelog stanza.

    Args:
        package: Source package name
        version: Upstream version being released
        entries: Rendered entry lines (``  * PR<n> ...``), newline terminated
        maintainer: ``Name <email>`` for the trailer line
        when: Release timestamp
        revision: Debian revision appended to the version

    Returns:
        Stanza text ending with a blank line
    """
    # dpkg rejects a stanza without change lines
    if not entries:
        entries = f"  * New upstream release {version}\n"
    return (
        f"{package} ({version}-{revision}) unstable; urgency=medium\n"
        "\n"
        f"{entries}"
        "\n"
        f" -- {maintainer}  {debian_date(when)}\n"
        "\n"
    )


def assemble_debian_changelog(stanza: str, existing: str) -> str:
    """Build the review document: instruction line, new stanza, prior changelog."""
    return f"{DEBIAN_INSTRUCTION}\n{stanza}{existing}"
