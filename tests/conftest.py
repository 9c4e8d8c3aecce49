"""
Pytest configuration and shared fixtures.

Provides a fake merge history, helpers for building ``git show`` output,
and a temporary host project with a version file, debian/changelog and
RPM spec.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from relbump.core.config import clear_cache
from relbump.core.config.models import BumpConfig, FilesConfig

# ==============================================================================
# Commit Helpers
# ==============================================================================


def show_output(sha: str, message: str) -> str:
    """Render a commit message the way ``git show --no-patch`` prints it."""
    body = "\n".join(f"    {line}" if line else "" for line in message.splitlines())
    return (
        f"commit {sha}\n"
        "Merge: 1111111 2222222\n"
        "Author: Jane Doe <jane@example.com>\n"
        "Date:   Mon Oct 5 10:00:00 2026 +0000\n"
        "\n"
        f"{body}\n"
    )


def pr_merge(number: int, description: str, branch: str = "jane/topic") -> str:
    """Build a GitHub pull request merge commit message."""
    return f"Merge pull request #{number} from {branch}\n\n{description}\n"


@dataclass
class FakeHistory:
    """
    In-memory MergeHistory.

    commits are (sha, message) pairs, newest first; the summary is the
    message's first line.
    """

    label: str
    commits: list[tuple[str, str]] = field(default_factory=list)

    def _summaries(self, commits: list[tuple[str, str]]) -> list[tuple[str, str]]:
        return [(sha, message.splitlines()[0]) for sha, message in commits]

    def merge_summaries(self) -> list[tuple[str, str]]:
        return self._summaries(self.commits)

    def merge_commits_since(self, sha: str) -> list[tuple[str, str]]:
        shas = [c[0] for c in self.commits]
        return self._summaries(self.commits[: shas.index(sha)])

    def show(self, sha: str) -> str:
        message = dict(self.commits)[sha]
        return show_output(sha, message)


def release_history(label: str, old_version: str, prs: list[tuple[int, str]]) -> FakeHistory:
    """History with a release merge followed by the given PR merges (oldest first)."""
    commits = [("r000", f"Merge branch 'release-{old_version}'\n")]
    for i, (number, description) in enumerate(prs, start=1):
        commits.insert(0, (f"c{i:03d}", pr_merge(number, description)))
    return FakeHistory(label=label, commits=commits)


# ==============================================================================
# Project Fixtures
# ==============================================================================

SPEC_TEMPLATE = """Name:           server
Version:        {version}
Release:        1%{{?dist}}
Summary:        Example server

%description
Example server.

%changelog
* Mon Aug 03 2026 Release Manager <release@localhost> - {version}-1
- PR90 Previous release

"""

DEBIAN_TEMPLATE = """server ({version}-1) unstable; urgency=medium

  * PR90 Previous release

 -- Release Manager <release@localhost>  Mon, 03 Aug 2026 10:00:00 +0000

"""


@pytest.fixture(autouse=True)
def _clear_config_cache(monkeypatch, tmp_path):
    """Isolate config loading from the developer's environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in (
        "RELBUMP_PACKAGE_NAME",
        "RELBUMP_PACKAGER",
        "RELBUMP_RELEASE_MARKER",
        "RELBUMP_SKIP_MALFORMED",
        "RELBUMP_SUBMODULE_PATH",
    ):
        # setenv first so teardown also removes values set by the code under test
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """
    Provide a host project at version 10.7.0.

    Creates:
    - setup.py with version='10.7.0'
    - debian/changelog
    - rpm/server.spec
    """
    project = tmp_path / "project"
    project.mkdir()
    (project / "setup.py").write_text(
        "from setuptools import setup\n\nsetup(name='server', version='10.7.0')\n"
    )
    (project / "debian").mkdir()
    (project / "debian" / "changelog").write_text(DEBIAN_TEMPLATE.format(version="10.7.0"))
    (project / "rpm").mkdir()
    (project / "rpm" / "server.spec").write_text(SPEC_TEMPLATE.format(version="10.7.0"))
    return project


@pytest.fixture
def bump_config() -> BumpConfig:
    """Configuration matching the project_dir fixture."""
    return BumpConfig(
        package_name="server",
        packager="Release Team <release@example.com>",
        files=FilesConfig(rpm_spec="rpm/server.spec"),
    )
