"""Completion signal for bounded runs."""

from langchain_core.tools import tool

__all__ = ["MARK_COMPLETE", "mark_complete"]

MARK_COMPLETE = "mark_complete"


@tool(MARK_COMPLETE)
def mark_complete() -> str:
    """Call this to mark the task as completed. Put your final summary in the
    same message; it is what the caller receives."""
    return "Completed"
