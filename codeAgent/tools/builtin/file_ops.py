"""File operation tools rooted at the agent's working directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated

from langchain_core.tools import tool

LOGGER = logging.getLogger(__name__)

__all__ = ["list_files", "read_file", "resolve_path", "workspace_root", "write_file"]


def workspace_root() -> Path:
    """AGENT_WORKSPACE_PATH when set, otherwise the current directory."""
    return Path(os.environ.get("AGENT_WORKSPACE_PATH") or os.getcwd()).resolve()


def resolve_path(path: str) -> Path:
    """Resolve ``path`` against the workspace root (absolute paths pass through)."""
    candidate = Path(path).expanduser()
    if candidate.is_absolute():
        return candidate
    return workspace_root() / candidate


@tool
def list_files(
    path: Annotated[str, "Directory to list, relative to the working directory"] = ".",
) -> str:
    """List the files and directories directly inside a directory.

    Examples:
        list_files(".")
        list_files("src/utils")
    """
    try:
        target = resolve_path(path)
        if not target.exists():
            return f"Error: Directory not found: {path}"
        if not target.is_dir():
            return f"Error: Not a directory: {path}"

        entries = sorted(target.iterdir(), key=lambda p: p.name)
        files = [entry.name for entry in entries if entry.is_file()]
        directories = [entry.name for entry in entries if entry.is_dir()]

        LOGGER.info(f"Listed {path}: {len(files)} files, {len(directories)} directories")
        return (
            "Files:\n" + ("\n".join(files) or "(none)")
            + "\n\nDirectories:\n" + ("\n".join(directories) or "(none)")
        )
    except Exception as e:
        LOGGER.error(f"Failed to list {path}: {e}")
        return f"Error: {str(e)}"


@tool
def read_file(
    path: Annotated[str, "File path, relative to the working directory"],
) -> str:
    """Read the full text of a file.

    Always read a file before editing it with edit_file.
    """
    try:
        target = resolve_path(path)
        if not target.is_file():
            return f"Error: File not found: {path}"

        content = target.read_text(encoding="utf-8")
        LOGGER.info(f"Read file: {path} ({len(content)} chars)")
        return content
    except UnicodeDecodeError:
        return f"Error: File is not a text file (binary content detected): {path}"
    except Exception as e:
        LOGGER.error(f"Failed to read file {path}: {e}")
        return f"Error: {str(e)}"


@tool
def write_file(
    path: Annotated[str, "File path, relative to the working directory"],
    content: Annotated[str, "Complete new content of the file"],
) -> str:
    """Create or completely overwrite a file. Parent directories are created.

    Prefer edit_file for changes to existing files.
    """
    try:
        target = resolve_path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        LOGGER.info(f"Wrote file: {path} ({len(content)} chars)")
        return f"Wrote content to {path}"
    except Exception as e:
        LOGGER.error(f"Failed to write file {path}: {e}")
        return f"Error: {str(e)}"
