"""
Custom exceptions for relbump.

Exception Hierarchy:
    BumpError (base)
    ├── InvalidVersionError (new version is not dotted-numeric)
    ├── VersionNotFoundError (old version could not be extracted)
    ├── DirtySubmoduleError (submodule has uncommitted changes)
    ├── InvalidBranchError (branch cannot be checked out)
    ├── MalformedMergeCommitError (PR merge commit does not parse)
    ├── SpecFormatError (RPM spec has no %changelog marker)
    ├── EditorNotConfiguredError ($EDITOR is unset)
    ├── ReviewAbortedError (reviewer did not confirm the changelog)
    └── GitOperationError (git command failed)

Every error carries a message and optional keyword context, which the CLI
shows alongside the message.
"""


class BumpError(Exception):
    """
    Base exception for all relbump errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class InvalidVersionError(BumpError):
    """Raised when the requested version is not a dotted-numeric token."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Invalid version '{version}': expected dotted numbers such as 10.8.0",
            version=version,
        )
        self.version = version


class VersionNotFoundError(BumpError):
    """Raised when the current version cannot be extracted from the version file."""

    pass


class DirtySubmoduleError(BumpError):
    """Raised when the submodule working tree has uncommitted changes."""

    def __init__(self, path: str) -> None:
        super().__init__(
            f"Submodule '{path}' has uncommitted changes",
            path=path,
        )
        self.path = path


class InvalidBranchError(BumpError):
    """Raised when a branch cannot be checked out in the submodule."""

    def __init__(self, branch: str, ref: str, detail: str = "") -> None:
        super().__init__(
            f"Cannot check out branch '{branch}' ({ref})",
            ref=ref,
            detail=detail,
        )
        self.branch = branch
        self.ref = ref


class MalformedMergeCommitError(BumpError):
    """
    Raised when a commit looks like a PR merge but does not parse.

    Attributes:
        sha: Commit hash, when known
        reason: What part of the message failed to parse
    """

    def __init__(self, reason: str, sha: str | None = None) -> None:
        message = f"Malformed pull request merge commit: {reason}"
        if sha:
            message = f"Malformed pull request merge commit {sha[:10]}: {reason}"
        super().__init__(message, sha=sha or "")
        self.sha = sha
        self.reason = reason


class SpecFormatError(BumpError):
    """Raised when the RPM spec file has no %changelog marker line."""

    pass


class EditorNotConfiguredError(BumpError):
    """Raised when the interactive reviewer has no editor to launch."""

    pass


class ReviewAbortedError(BumpError):
    """Raised when the reviewer leaves the confirmation line in place or the editor fails."""

    pass


class GitOperationError(BumpError):
    """Raised when a git command fails."""

    pass
