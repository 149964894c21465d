"""Git worktree helpers for background runs."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Union

from codeAgent.utils.error_handler import AgentError

LOGGER = logging.getLogger(__name__)

__all__ = [
    "GitError",
    "commit_all",
    "create_worktree",
    "current_branch",
    "find_git_root",
    "remove_worktree",
    "sanitize_branch",
    "worktree_base_dir",
    "worktree_path",
]


class GitError(AgentError):
    """A git command failed or no repository was found."""
    pass


def _git(args: List[str], cwd: Union[str, Path]) -> str:
    LOGGER.debug(f"git {' '.join(args)} (cwd={cwd})")
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise GitError(
            f"git {' '.join(args)} failed with exit code {result.returncode}: {result.stderr.strip()}"
        )
    return result.stdout.strip()


def find_git_root(start: Optional[Union[str, Path]] = None) -> Path:
    """Walk up from ``start`` (default: cwd) to the directory holding ``.git``."""
    current = Path(start or os.getcwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / ".git").exists():
            return candidate
    raise GitError(f"Not inside a git repository: {current}")


def current_branch(repo: Union[str, Path]) -> str:
    return _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd=repo)


def sanitize_branch(branch: str) -> str:
    """Make a branch name safe for use as a directory name."""
    return re.sub(r"[^A-Za-z0-9._-]+", "-", branch).strip("-") or "branch"


def worktree_base_dir() -> Path:
    """``%LOCALAPPDATA%\\agent`` on Windows, ``~/.local/agent`` elsewhere."""
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / "agent"
    return Path.home() / ".local" / "agent"


def worktree_path(branch: str) -> Path:
    return worktree_base_dir() / f"project-{sanitize_branch(branch)}"


def create_worktree(branch: str, repo: Optional[Union[str, Path]] = None) -> Path:
    """Create a new branch off the current one, checked out in its own worktree.

    An existing directory at the target path is deleted first.

    Returns:
        Path of the new worktree
    """
    root = find_git_root(repo)
    base = current_branch(root)
    target = worktree_path(branch)

    if target.exists():
        LOGGER.warning(f"Removing existing worktree directory: {target}")
        shutil.rmtree(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    _git(["worktree", "add", "-b", branch, str(target), base], cwd=root)
    LOGGER.info(f"Created worktree {target} on branch {branch} (from {base})")
    return target


def remove_worktree(branch: str, repo: Optional[Union[str, Path]] = None) -> None:
    """Remove the worktree created for ``branch``; the branch itself is kept."""
    root = find_git_root(repo)
    target = worktree_path(branch)
    _git(["worktree", "remove", "--force", str(target)], cwd=root)
    LOGGER.info(f"Removed worktree {target}")


def commit_all(path: Union[str, Path], message: str) -> bool:
    """Stage and commit every change under ``path``.

    Returns:
        False when there was nothing to commit
    """
    _git(["add", "-A"], cwd=path)
    if not _git(["status", "--porcelain"], cwd=path):
        LOGGER.info(f"Nothing to commit in {path}")
        return False
    _git(["commit", "-m", message], cwd=path)
    LOGGER.info(f"Committed changes in {path}")
    return True
