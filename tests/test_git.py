"""Tests for git revision collection."""

import subprocess

import pytest

from rummage.exceptions import RevisionUnavailableError
from rummage.metadata.git import DESCRIBE_ARGS, GitRevisionCollector, describe_revision


class TestDescribeRevision:
    """Test the raw revision descriptor."""

    def test_clean_repo(self, git_repo, head_commit):
        """Test a clean tree describes as the full commit hash."""
        assert describe_revision(git_repo) == head_commit

    def test_dirty_repo(self, git_repo, head_commit):
        """Test a modified tree gets the -dirty suffix."""
        (git_repo / "test.txt").write_text("modified")
        assert describe_revision(git_repo) == f"{head_commit}-dirty"

    def test_tags_are_ignored(self, git_repo, head_commit):
        """Test a tag on HEAD does not replace the hash."""
        subprocess.run(
            ["git", "tag", "v1.0.0"], cwd=git_repo, check=True, capture_output=True
        )
        assert describe_revision(git_repo) == head_commit

    def test_not_a_git_repo(self, tmp_path):
        """Test best-effort mode returns an empty descriptor."""
        assert describe_revision(tmp_path) == ""

    def test_custom_fallback(self, tmp_path):
        """Test the best-effort fallback is configurable."""
        assert describe_revision(tmp_path, fallback="nogit") == "nogit"

    def test_strict_not_a_git_repo(self, tmp_path):
        """Test strict mode raises instead of falling back."""
        with pytest.raises(RevisionUnavailableError):
            describe_revision(tmp_path, strict=True)

    def test_git_not_available(self, tmp_path, monkeypatch):
        """Test when git command is not available."""
        def mock_run(*args, **kwargs):
            raise FileNotFoundError("git not found")

        monkeypatch.setattr(subprocess, "run", mock_run)

        assert describe_revision(tmp_path) == ""
        with pytest.raises(RevisionUnavailableError, match="git not found"):
            describe_revision(tmp_path, strict=True)

    def test_git_timeout_handling(self, tmp_path, monkeypatch):
        """Test that git command timeouts are handled gracefully."""
        def mock_run(*args, **kwargs):
            raise subprocess.TimeoutExpired("git", timeout=5)

        monkeypatch.setattr(subprocess, "run", mock_run)

        assert describe_revision(tmp_path) == ""

    def test_describe_arguments(self, tmp_path, monkeypatch):
        """Test git is asked for an untagged, full, dirty-aware description."""
        calls = []

        def mock_run(cmd, **kwargs):
            calls.append(cmd)
            return subprocess.CompletedProcess(cmd, 0, stdout="abc123\n", stderr="")

        monkeypatch.setattr(subprocess, "run", mock_run)

        assert describe_revision(tmp_path) == "abc123"
        assert calls == [["git", *DESCRIBE_ARGS]]
        assert "--always" in DESCRIBE_ARGS
        assert "--abbrev=0" in DESCRIBE_ARGS
        assert "--dirty=-dirty" in DESCRIBE_ARGS


class TestGitRevisionCollector:
    """Test the collector wrapper."""

    def test_collect_dirty(self, git_repo, head_commit):
        """Test collecting a dirty revision."""
        (git_repo / "test.txt").write_text("modified")
        revision = GitRevisionCollector(git_repo).collect()

        assert revision.commit_hash == head_commit
        assert revision.is_dirty is True

    def test_collect_clean(self, git_repo, head_commit):
        """Test collecting a clean revision."""
        revision = GitRevisionCollector(git_repo).collect()

        assert revision.commit_hash == head_commit
        assert revision.is_dirty is False

    def test_collect_outside_repo(self, tmp_path):
        """Test best-effort collection outside a repository."""
        revision = GitRevisionCollector(tmp_path).collect()

        assert revision.commit_hash == ""
        assert revision.is_dirty is False

    def test_collect_strict(self, tmp_path):
        """Test strict collection outside a repository."""
        with pytest.raises(RevisionUnavailableError):
            GitRevisionCollector(tmp_path, strict=True).collect()
