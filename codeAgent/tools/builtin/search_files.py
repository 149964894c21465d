"""Ripgrep-backed content search over the working tree."""

from __future__ import annotations

import logging
import subprocess
from typing import Annotated

from langchain_core.tools import tool

from .file_ops import workspace_root

LOGGER = logging.getLogger(__name__)

__all__ = ["search_files"]

MAX_OUTPUT_CHARS = 20_000


@tool
def search_files(
    query: Annotated[str, "Regular expression to search for (ripgrep syntax)"],
) -> str:
    """Search file contents under the working directory with ripgrep.

    Returns matching lines with two lines of context, prefixed by file name.

    Examples:
        search_files("def build_graph")
        search_files("TODO|FIXME")
    """
    # -e keeps a pattern that starts with "-" from being read as a flag
    command = ["rg", "-C", "2", "--max-columns", "200", "-H", "-N", "-e", query, "."]
    LOGGER.info(f"Searching files: {query}")
    try:
        result = subprocess.run(
            command,
            cwd=workspace_root(),
            capture_output=True,
            text=True,
            timeout=60,
        )
    except FileNotFoundError:
        return "Error: ripgrep (rg) is not installed"
    except subprocess.TimeoutExpired:
        return "Error: Search timeout (60s)"

    # rg exits 1 when nothing matched
    if result.returncode == 1:
        return f"No matches found for: {query}"
    if result.returncode != 0:
        return f"Error: Ripgrep failed with exit code {result.returncode}: {result.stderr.strip()}"

    output = result.stdout
    if len(output) > MAX_OUTPUT_CHARS:
        output = output[:MAX_OUTPUT_CHARS] + "\n... (output truncated)"
    return output
