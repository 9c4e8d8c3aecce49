"""
RPM spec %changelog assembly.

The spec is split at the first ``%changelog`` line. The version is rewritten
in the part before the marker only; the new entry goes directly after the
marker, ahead of the existing entries.
"""

from __future__ import annotations

from datetime import datetime

from relbump.core.exceptions import SpecFormatError

CHANGELOG_MARKER = "%changelog"

RPM_INSTRUCTION = "# Verify the %changelog entry below, then delete this line"


def _is_marker(line: str) -> bool:
    return line.rstrip() == CHANGELOG_MARKER


def split_spec(text: str) -> tuple[str, str, str]:
    """
    Split a spec file at its %changelog line.

    The marker line is returned as found, with its trailing whitespace and
    line ending, so ``join_spec(*split_spec(text)) == text``.

    Returns:
        (before, marker, after): before ends just ahead of the marker line,
        marker is the marker line itself, after starts just past it

    Raises:
        SpecFormatError: If there is no %changelog line
    """
    lines = text.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if _is_marker(line):
            return "".join(lines[:index]), line, "".join(lines[index + 1 :])
    raise SpecFormatError(f"No {CHANGELOG_MARKER} line found in spec file")


def join_spec(before: str, marker: str, after: str) -> str:
    """Inverse of split_spec."""
    return f"{before}{marker}{after}"


_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def rpm_date(when: datetime) -> str:
    """
    Format a date for a %changelog entry line (e.g. ``Sun Oct 18 2026``).

    Day and month names are always English; rpmbuild rejects localized ones.
    """
    day = _DAY_NAMES[when.weekday()]
    month = _MONTH_NAMES[when.month - 1]
    return f"{day} {month} {when.day:02d} {when.year}"


def build_rpm_entry(
    version: str,
    entries: str,
    packager: str,
    when: datetime,
    release: str = "1",
) -> str:
    """
    Build one %changelog entry.

    Args:
        version: Version being released
        entries: Rendered entry lines (``- PR<n> ...``), newline terminated
        packager: ``Name <email>``
        when: Release timestamp
        release: RPM release number

    Returns:
        Entry text ending with a blank line
    """
    if not entries:
        entries = f"- New upstream release {version}\n"
    return f"* {rpm_date(when)} {packager} - {version}-{release}\n{entries}\n"


def assemble_rpm_spec(
    text: str,
    old_version: str,
    new_version: str,
    entry: str,
    instruction: str | None = RPM_INSTRUCTION,
) -> str:
    """
    Build the updated spec file.

    Args:
        text: Current spec file contents
        old_version: Version to replace in the preamble
        new_version: Version to write
        entry: New %changelog entry from build_rpm_entry
        instruction: Review line to place above the marker, or None

    Returns:
        New spec contents

    Raises:
        SpecFormatError: If the spec has no %changelog line
    """
    before, marker, after = split_spec(text)
    before = before.replace(old_version, new_version)
    header = f"{instruction}\n" if instruction else ""
    # Spec ending at the marker line
    if marker == marker.rstrip("\r\n"):
        marker += "\n"
    return f"{before}{header}{marker}{entry}{after}"
