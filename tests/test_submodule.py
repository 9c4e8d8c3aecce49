"""
Tests for SubmoduleSync.

Git is mocked at the GitPython Repo level.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from git import GitCommandError

from relbump.core.exceptions import DirtySubmoduleError, GitOperationError, InvalidBranchError
from relbump.core.submodule import SubmoduleSync, is_official_branch


@pytest.fixture
def host_repo(tmp_path):
    """Provide a mock host git.Repo with an initialized 'web' submodule."""
    repo = MagicMock()
    repo.working_tree_dir = str(tmp_path)
    (tmp_path / "web").mkdir()
    (tmp_path / "web" / ".git").write_text("gitdir: ../.git/modules/web\n")
    return repo


@pytest.fixture
def sub_repo():
    """Provide a clean mock submodule git.Repo."""
    repo = MagicMock()
    repo.is_dirty.return_value = False
    return repo


@pytest.fixture
def sync(host_repo, sub_repo):
    """Provide a SubmoduleSync whose submodule opens as sub_repo."""
    with patch("relbump.core.submodule.open_repo", return_value=sub_repo):
        yield SubmoduleSync(host_repo, "web")


class TestIsOfficialBranch:
    """Tests for is_official_branch."""

    @pytest.mark.parametrize("branch", ["master", "dev", "release-10.8", "hotfix-10.7.1"])
    def test_official(self, branch: str) -> None:
        assert is_official_branch(branch)

    @pytest.mark.parametrize("branch", ["main", "feature/x", "develop", "my-release-1"])
    def test_local(self, branch: str) -> None:
        assert not is_official_branch(branch)

    def test_custom_patterns(self) -> None:
        assert is_official_branch("main", ["main"])
        assert not is_official_branch("master", ["main"])


class TestSync:
    """Tests for SubmoduleSync.sync."""

    def test_official_branch_uses_remote_tracking_ref(self, sync, sub_repo) -> None:
        result = sync.sync("release-10.8")

        sub_repo.git.fetch.assert_called_once_with("--all")
        sub_repo.git.checkout.assert_called_once_with("origin/release-10.8")
        assert result.ref == "origin/release-10.8"
        assert result.remote_tracking is True
        assert result.initialized is False

    def test_local_branch_checked_out_directly(self, sync, sub_repo) -> None:
        result = sync.sync("jane/experiment")

        sub_repo.git.checkout.assert_called_once_with("jane/experiment")
        assert result.remote_tracking is False

    def test_custom_remote(self, host_repo, sub_repo) -> None:
        with patch("relbump.core.submodule.open_repo", return_value=sub_repo):
            result = SubmoduleSync(host_repo, "web", remote="upstream").sync("dev")
        assert result.ref == "upstream/dev"

    def test_dirty_submodule_aborts_before_fetch(self, sync, sub_repo) -> None:
        sub_repo.is_dirty.return_value = True

        with pytest.raises(DirtySubmoduleError, match="uncommitted changes"):
            sync.sync("dev")

        sub_repo.git.fetch.assert_not_called()
        sub_repo.git.checkout.assert_not_called()

    def test_checkout_failure_names_branch(self, sync, sub_repo) -> None:
        sub_repo.git.checkout.side_effect = GitCommandError(
            "checkout", 1, stderr="error: pathspec 'origin/release-9' did not match"
        )

        with pytest.raises(InvalidBranchError, match="release-9") as exc_info:
            sync.sync("release-9")

        assert exc_info.value.ref == "origin/release-9"

    def test_fetch_failure(self, sync, sub_repo) -> None:
        sub_repo.git.fetch.side_effect = GitCommandError("fetch", 128, stderr="no network")

        with pytest.raises(GitOperationError, match="fetch failed"):
            sync.sync("dev")

    def test_uninitialized_submodule_is_initialized(self, host_repo, sub_repo, tmp_path) -> None:
        (tmp_path / "web" / ".git").unlink()

        with patch("relbump.core.submodule.open_repo", return_value=sub_repo):
            result = SubmoduleSync(host_repo, "web").sync("dev")

        host_repo.git.submodule.assert_called_once_with("update", "--init", "--", "web")
        assert result.initialized is True

    def test_abs_path(self, host_repo, tmp_path) -> None:
        assert SubmoduleSync(host_repo, "web").abs_path == Path(tmp_path) / "web"
