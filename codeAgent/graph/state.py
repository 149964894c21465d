"""Shared state definition for the LangGraph run loop."""

from __future__ import annotations

from typing import Annotated, List, Optional, TypedDict

from langchain_core.messages import BaseMessage
from langgraph.graph import add_messages


class RunState(TypedDict, total=False):
    """Conversation state of one run (root, sub-run or chat session).

    Every child run gets a fresh RunState; nothing is shared with the parent
    except the final text returned through the delegation tool.
    """

    # ========== Messages ==========
    messages: Annotated[List[BaseMessage], add_messages]

    # ========== Run identity ==========
    run_id: str   # "root", "root.1", "root.1.2", ...
    role: str     # Prompt / tool set selector
    depth: int    # Delegation depth (root is 0)

    # ========== Execution control ==========
    iterations: int                # Assistant turns so far
    max_iterations: Optional[int]  # Budget; None for chat sessions
    completed: bool                # Set once mark_complete has been called
