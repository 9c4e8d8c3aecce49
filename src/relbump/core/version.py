"""
Version extraction and substitution.

The current version is read from a single declaration in the version file
(matched by a configurable regex with a ``version`` group) and then replaced
everywhere it occurs in that file.
"""

from __future__ import annotations

import logging
import re

from relbump.core.exceptions import InvalidVersionError, VersionNotFoundError

logger = logging.getLogger(__name__)

VERSION_RE = re.compile(r"\d+(\.\d+)+")

DEFAULT_VERSION_PATTERN = r"""version\s*=\s*['"](?P<version>\d+(?:\.\d+)+)['"]"""


def is_valid_version(version: str) -> bool:
    """Return True if version is a dotted-numeric token such as ``10.8.0``."""
    return VERSION_RE.fullmatch(version) is not None


def validate_version(version: str) -> str:
    """
    Validate a version string supplied by the user.

    Returns:
        The version, unchanged

    Raises:
        InvalidVersionError: If the version is not dotted-numeric
    """
    if not is_valid_version(version):
        raise InvalidVersionError(version)
    return version


def read_version(text: str, pattern: str = DEFAULT_VERSION_PATTERN) -> str:
    """
    Extract the declared version from version file contents.

    Args:
        text: Contents of the version file
        pattern: Regex with a named group ``version`` (or a single group)

    Returns:
        The declared version

    Raises:
        VersionNotFoundError: If the pattern does not match or the captured
            value is not dotted-numeric

    Example:
        >>> read_version("setup(name='x', version='10.7.0')")
        '10.7.0'
    """
    match = re.search(pattern, text)
    if match is None:
        raise VersionNotFoundError(
            "No version declaration found in version file",
            pattern=pattern,
        )

    if "version" in match.groupdict():
        version = match.group("version")
    elif match.groups():
        version = match.group(1)
    else:
        version = match.group(0)

    if not version or not is_valid_version(version):
        raise VersionNotFoundError(
            f"Version declaration does not hold a dotted-numeric version: {version!r}",
            pattern=pattern,
        )
    return version


def rewrite_version(text: str, old_version: str, new_version: str) -> str:
    """
    Replace every occurrence of old_version with new_version.

    The replacement is not scoped to the declaration line: any other literal
    occurrence of the old version in the file is rewritten too.

    Args:
        text: File contents
        old_version: Version currently declared
        new_version: Version to write

    Returns:
        Rewritten file contents
    """
    count = text.count(old_version)
    if count > 1:
        logger.warning(
            "Old version %s occurs %d times in version file; all occurrences are replaced",
            old_version,
            count,
        )
    else:
        logger.debug("Replacing %d occurrence(s) of %s", count, old_version)
    return text.replace(old_version, new_version)
