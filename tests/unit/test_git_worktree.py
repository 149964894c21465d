"""Tests for the git worktree helpers."""

import shutil
import subprocess
import sys

import pytest

from codeAgent.utils.git_worktree import (
    GitError,
    commit_all,
    create_worktree,
    current_branch,
    find_git_root,
    remove_worktree,
    sanitize_branch,
    worktree_base_dir,
    worktree_path,
)

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture
def home(tmp_path, monkeypatch):
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    monkeypatch.delenv("LOCALAPPDATA", raising=False)
    return home_dir


@pytest.fixture
def repo(tmp_path, monkeypatch):
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    root = tmp_path / "repo"
    root.mkdir()
    subprocess.run(["git", "init", "-q"], cwd=root, check=True)
    (root / "README.md").write_text("hello\n", encoding="utf-8")
    subprocess.run(["git", "add", "-A"], cwd=root, check=True)
    subprocess.run(["git", "commit", "-q", "-m", "initial"], cwd=root, check=True)
    return root


def test_sanitize_branch():
    assert sanitize_branch("bg-fix-login") == "bg-fix-login"
    assert sanitize_branch("feature/new thing") == "feature-new-thing"
    assert sanitize_branch("///") == "branch"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX layout")
def test_worktree_path_lives_under_local_agent(home):
    assert worktree_base_dir() == home / ".local" / "agent"
    assert worktree_path("bg-add-tests") == home / ".local" / "agent" / "project-bg-add-tests"


def test_find_git_root_outside_repository(tmp_path):
    with pytest.raises(GitError):
        find_git_root(tmp_path)


@requires_git
def test_find_git_root_from_subdirectory(repo):
    nested = repo / "src" / "pkg"
    nested.mkdir(parents=True)

    assert find_git_root(nested) == repo.resolve()


@requires_git
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX layout")
def test_worktree_lifecycle(repo, home):
    base = current_branch(repo)

    path = create_worktree("bg-add-license", repo)

    assert path == worktree_path("bg-add-license")
    assert (path / "README.md").read_text(encoding="utf-8") == "hello\n"
    assert current_branch(path) == "bg-add-license"

    assert commit_all(path, "nothing yet") is False
    (path / "LICENSE").write_text("MIT\n", encoding="utf-8")
    assert commit_all(path, "bg-add-license: add license") is True

    remove_worktree("bg-add-license", repo)

    assert not path.exists()
    assert current_branch(repo) == base
    branches = subprocess.run(
        ["git", "branch", "--list", "bg-add-license"], cwd=repo, capture_output=True, text=True, check=True
    ).stdout
    assert "bg-add-license" in branches


@requires_git
@pytest.mark.skipif(sys.platform == "win32", reason="POSIX layout")
def test_existing_worktree_directory_is_replaced(repo, home):
    stale = worktree_path("bg-stale")
    stale.mkdir(parents=True)
    (stale / "junk.txt").write_text("old", encoding="utf-8")

    path = create_worktree("bg-stale", repo)

    assert not (path / "junk.txt").exists()
    assert (path / "README.md").exists()


@requires_git
def test_git_failure_raises(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()

    with pytest.raises(GitError) as exc_info:
        commit_all(plain, "msg")

    assert "git" in str(exc_info.value)
