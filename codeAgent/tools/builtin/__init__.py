"""Builtin tools offered to agent runs."""

from .delegate_task import build_delegation_tools
from .edit_file import edit_file
from .file_ops import list_files, read_file, write_file
from .mark_complete import mark_complete
from .read_page import build_read_page_tool
from .run_command import build_run_command_tool
from .search_files import search_files
from .think import think
from .web_search import build_web_search_tool

__all__ = [
    "build_delegation_tools",
    "build_read_page_tool",
    "build_run_command_tool",
    "build_web_search_tool",
    "edit_file",
    "list_files",
    "mark_complete",
    "read_file",
    "search_files",
    "think",
    "write_file",
]
