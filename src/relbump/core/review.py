"""
Human review gate for generated changelogs.

Generated content is written to a private temporary directory together with
an instruction line, handed to a Reviewer, and read back. The reviewer
confirms the content by deleting the instruction line; if it is still there
the run is aborted and nothing is installed.

Reviewers:
    EditorReviewer       opens the file in $EDITOR and waits for it to exit
    AutoApproveReviewer  removes the instruction line without human input
    StaticReviewer       replaces the file with supplied content
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

from relbump.core.exceptions import EditorNotConfiguredError, ReviewAbortedError

logger = logging.getLogger(__name__)


class Reviewer(Protocol):
    """Strategy that inspects and possibly edits a file in place."""

    def review(self, path: Path) -> None:
        ...


def resolve_editor(environ: dict[str, str] | None = None) -> list[str]:
    """
    Get the editor command from $EDITOR (or $VISUAL).

    Returns:
        Editor command split into argv words

    Raises:
        EditorNotConfiguredError: If neither variable is set
    """
    env = os.environ if environ is None else environ
    editor = env.get("EDITOR") or env.get("VISUAL")
    if not editor or not editor.strip():
        raise EditorNotConfiguredError(
            "No editor configured: set $EDITOR to review the generated changelogs"
        )
    return shlex.split(editor)


class EditorReviewer:
    """Opens the file in the user's editor and blocks until it exits."""

    def __init__(self, command: list[str] | None = None) -> None:
        self.command = command if command is not None else resolve_editor()

    def review(self, path: Path) -> None:
        logger.debug("Opening %s with %s", path, self.command)
        try:
            result = subprocess.run([*self.command, str(path)], check=False)
        except FileNotFoundError as e:
            raise EditorNotConfiguredError(
                f"Editor not found: {self.command[0]}", editor=" ".join(self.command)
            ) from e
        if result.returncode != 0:
            raise ReviewAbortedError(
                f"Editor exited with code {result.returncode}", path=str(path)
            )


class AutoApproveReviewer:
    """Approves the content unchanged by deleting the instruction lines."""

    def __init__(self, *instructions: str) -> None:
        self.instructions = set(instructions)

    def review(self, path: Path) -> None:
        content = path.read_text(encoding="utf-8")
        kept = [
            line
            for line in content.splitlines(keepends=True)
            if line.rstrip() not in self.instructions
        ]
        path.write_text("".join(kept), encoding="utf-8")


class StaticReviewer:
    """Replaces the content under review with pre-approved content."""

    def __init__(self, content: str) -> None:
        self.content = content

    def review(self, path: Path) -> None:
        path.write_text(self.content, encoding="utf-8")


def review_content(
    filename: str,
    content: str,
    reviewer: Reviewer,
    instruction: str,
) -> str:
    """
    Put generated content through the review gate.

    Args:
        filename: Name for the review copy (shown in the editor title)
        content: Document to review, including the instruction line
        reviewer: Review strategy
        instruction: Line the reviewer must delete to confirm

    Returns:
        Reviewed content

    Raises:
        ReviewAbortedError: If the instruction line is still present or the
            reviewer emptied the file
    """
    with tempfile.TemporaryDirectory(prefix="relbump-") as tmp:
        path = Path(tmp) / filename
        path.write_text(content, encoding="utf-8")
        reviewer.review(path)
        reviewed = path.read_text(encoding="utf-8")

    if any(line.rstrip() == instruction for line in reviewed.splitlines()):
        raise ReviewAbortedError(
            f"Review of {filename} not confirmed: the instruction line was not deleted",
            instruction=instruction,
        )
    if not reviewed.strip():
        raise ReviewAbortedError(f"Review of {filename} produced an empty file")
    return reviewed
