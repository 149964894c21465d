"""Edit file tool backed by the fuzzy patch engine."""

from __future__ import annotations

import logging
from typing import Annotated

from langchain_core.tools import tool

from codeAgent.patching import MatchNotFoundError, PatchEngine

from .file_ops import resolve_path

LOGGER = logging.getLogger(__name__)

__all__ = ["edit_file"]


@tool
def edit_file(
    path: Annotated[str, "File path, relative to the working directory"],
    search: Annotated[str, "Lines to find, copied from the file (empty string inserts at the top)"],
    replace: Annotated[str, "Lines that replace the found block (empty string deletes it)"],
) -> str:
    """Replace a block of lines in a file.

    MUST use read_file first to see the current contents.
    The search block is matched line by line; leading and trailing whitespace
    and small typos are tolerated, and the closest block in the file is
    replaced. If nothing is close enough the closest candidate is reported.

    Examples:
        edit_file("app.py", "def main():\\n    run()", "def main():\\n    run(debug=True)")
        edit_file("notes.md", "", "# Notes")
    """
    try:
        return PatchEngine().apply(resolve_path(path), search, replace)
    except FileNotFoundError:
        return f"Error: File not found: {path}"
    except MatchNotFoundError as e:
        LOGGER.info(f"Edit of {path} failed: distance {e.distance}, threshold {e.threshold}")
        return f"Error: {e}"
    except UnicodeDecodeError:
        return f"Error: File is not a text file (binary content detected): {path}"
    except Exception as e:
        LOGGER.error(f"Failed to edit file {path}: {e}")
        return f"Error: {str(e)}"
