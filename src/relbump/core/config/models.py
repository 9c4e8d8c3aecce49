"""
Configuration data models for relbump.

These models define the structure of .relbump.json and
~/.config/relbump/config.json files, with validation via Pydantic.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from relbump.core.version import DEFAULT_VERSION_PATTERN


class FilesConfig(BaseModel):
    """
    Locations of the files a release edits.

    Paths are relative to the host repository root.
    """
    version_file: str = Field(
        default="setup.py",
        description="File holding the version declaration"
    )
    version_pattern: str = Field(
        default=DEFAULT_VERSION_PATTERN,
        description="Regex locating the declared version (named group 'version')"
    )
    debian_changelog: str = Field(
        default="debian/changelog",
        description="Debian changelog to prepend a stanza to"
    )
    rpm_spec: str = Field(
        default="rpm/package.spec",
        description="RPM spec file with a %changelog section"
    )

    @field_validator("version_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Reject patterns that do not compile."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid version_pattern: {e}") from e
        return v


class SubmoduleConfig(BaseModel):
    """
    The web dashboard submodule.

    Official branches are checked out from the remote-tracking ref;
    anything else is treated as a local branch.
    """
    path: str = Field(
        default="web",
        description="Submodule path relative to the host repository"
    )
    label: str | None = Field(
        default=None,
        description="Changelog section header (defaults to the directory name)"
    )
    remote: str = Field(
        default="origin",
        description="Remote whose tracking refs are used for official branches"
    )
    official_branch_patterns: list[str] = Field(
        default_factory=lambda: ["master", "dev", "release-*", "hotfix-*"],
        description="Glob patterns of branches checked out from the remote"
    )


class HistoryConfig(BaseModel):
    """
    How pull requests are found in merge history.
    """
    release_marker: str = Field(
        default="release-{version}",
        description="Branch name of the previous release, formatted with {version}"
    )
    pr_marker: str = Field(
        default="Merge pull request",
        min_length=1,
        description="Text identifying pull request merge summaries"
    )
    skip_malformed: bool = Field(
        default=False,
        description="Skip unparseable PR merges instead of aborting"
    )

    @field_validator("release_marker")
    @classmethod
    def validate_release_marker(cls, v: str) -> str:
        """Require the {version} placeholder and no other replacement fields."""
        if "{version}" not in v:
            raise ValueError("release_marker must contain '{version}'")
        try:
            v.format(version="0.0")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(
                f"release_marker may only use the '{{version}}' field: {e!r}"
            ) from e
        return v


class BumpConfig(BaseModel):
    """
    Top-level relbump configuration.

    Loaded from defaults, user config, project config, and env vars.

    Example:
        >>> config = BumpConfig(
        ...     package_name="server",
        ...     packager="Release Team <release@example.com>",
        ...     files=FilesConfig(rpm_spec="rpm/server.spec"),
        ... )
        >>> config.submodule.path
        'web'
    """
    package_name: str = Field(
        default="server",
        min_length=1,
        description="Package name used in the Debian stanza header"
    )
    packager: str = Field(
        default="Release Manager <release@localhost>",
        description="Name <email> written in Debian and RPM changelog entries"
    )
    host_label: str | None = Field(
        default=None,
        description="Changelog section header for the host repository"
    )
    files: FilesConfig = Field(
        default_factory=FilesConfig,
        description="Files edited by a release"
    )
    submodule: SubmoduleConfig = Field(
        default_factory=SubmoduleConfig,
        description="Web dashboard submodule"
    )
    history: HistoryConfig = Field(
        default_factory=HistoryConfig,
        description="Merge history parsing"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,
    )
