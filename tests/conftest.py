"""Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and ensures proper test environment setup.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root and this directory are importable
tests_dir = Path(__file__).parent
project_root = tests_dir.parent
for path in (project_root, tests_dir):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from fakes import make_settings  # noqa: E402


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Temporary working directory used by file and shell tools."""
    root = tmp_path / "workspace"
    root.mkdir()
    monkeypatch.setenv("AGENT_WORKSPACE_PATH", str(root))
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def settings():
    return make_settings()
