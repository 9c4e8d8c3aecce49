"""
Standardized error handling and exit codes for the relbump CLI.

This module provides consistent error messaging with actionable guidance
and standardized exit codes.
"""

from enum import IntEnum

from rich.console import Console

from relbump.core.exceptions import (
    BumpError,
    DirtySubmoduleError,
    EditorNotConfiguredError,
    InvalidBranchError,
    InvalidVersionError,
    MalformedMergeCommitError,
    ReviewAbortedError,
    SpecFormatError,
    VersionNotFoundError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for relbump."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Generic error, failed precondition, or missing arguments."""

    USER_ERROR = 2
    """Invalid input (actionable by user)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Submodule 'web' has uncommitted changes",
        ...     reason="Checking out the release branch would discard them",
        ...     solution="cd web && git stash",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}", highlight=False)

    if reason:
        console.print(f"[dim]{reason}[/dim]", highlight=False)

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}", highlight=False)


def print_dirty_submodule_error(error: DirtySubmoduleError) -> None:
    """Print error when the submodule has uncommitted changes."""
    print_error(
        str(error),
        reason="Checking out the release branch could discard your changes",
        solution=f"cd {error.path} && git stash  # or commit them",
    )


def print_invalid_branch_error(error: InvalidBranchError) -> None:
    """Print error when the requested web branch cannot be checked out."""
    detail = error.context.get("detail")
    print_error(
        str(error),
        reason=str(detail) if detail else "The branch does not exist locally or on the remote",
        solution="relbump --web-branch <existing-branch> <version>",
    )


def print_editor_error(error: EditorNotConfiguredError) -> None:
    """Print error when no editor is available for the review gate."""
    print_error(
        str(error),
        reason="Generated changelogs are opened in $EDITOR for review before they are saved",
        solution="export EDITOR=vim  # or pass --yes to approve without review",
    )


def print_review_aborted_error(error: ReviewAbortedError) -> None:
    """Print error when the review gate was not confirmed."""
    print_error(
        str(error),
        reason="No files were changed",
        solution="Rerun and delete the '# Verify ...' line once the changelog looks right",
    )


def print_bump_error(error: BumpError) -> ExitCode:
    """
    Print any relbump error and return the exit code for it.

    Returns:
        USER_ERROR for invalid input, GENERAL_ERROR otherwise
    """
    if isinstance(error, InvalidVersionError):
        print_error(str(error), solution="relbump 10.8.0")
        return ExitCode.USER_ERROR
    if isinstance(error, DirtySubmoduleError):
        print_dirty_submodule_error(error)
    elif isinstance(error, InvalidBranchError):
        print_invalid_branch_error(error)
    elif isinstance(error, EditorNotConfiguredError):
        print_editor_error(error)
    elif isinstance(error, ReviewAbortedError):
        print_review_aborted_error(error)
    elif isinstance(error, VersionNotFoundError):
        print_error(
            str(error),
            reason=f"Pattern: {error.context.get('pattern', '')}",
            solution="Set files.version_pattern in .relbump.json",
        )
    elif isinstance(error, MalformedMergeCommitError):
        print_error(
            str(error),
            reason="Expected 'Merge pull request #<number> from ...' followed by a description",
            solution="Set history.skip_malformed to skip such commits",
        )
    elif isinstance(error, SpecFormatError):
        print_error(str(error), solution="Add a %changelog line to the RPM spec")
    else:
        print_error(str(error))
    return ExitCode.GENERAL_ERROR


__all__ = [
    "ExitCode",
    "console",
    "print_bump_error",
    "print_dirty_submodule_error",
    "print_editor_error",
    "print_error",
    "print_invalid_branch_error",
    "print_review_aborted_error",
]
