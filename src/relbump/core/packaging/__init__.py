"""
Debian and RPM changelog file assembly.
"""

from .debian import DEBIAN_INSTRUCTION, assemble_debian_changelog, build_debian_stanza
from .rpm import (
    CHANGELOG_MARKER,
    RPM_INSTRUCTION,
    assemble_rpm_spec,
    build_rpm_entry,
    join_spec,
    split_spec,
)

__all__ = [
    "CHANGELOG_MARKER",
    "DEBIAN_INSTRUCTION",
    "RPM_INSTRUCTION",
    "assemble_debian_changelog",
    "assemble_rpm_spec",
    "build_debian_stanza",
    "build_rpm_entry",
    "join_spec",
    "split_spec",
]
