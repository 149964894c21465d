"""Scratchpad tool: lets the model reason out loud without side effects."""

from __future__ import annotations

import logging
from typing import Annotated

from langchain_core.tools import tool

LOGGER = logging.getLogger(__name__)

__all__ = ["think"]


@tool
def think(
    thought: Annotated[str, "Your reasoning, plan or reflection"],
) -> str:
    """Use this tool to think about something. It does not fetch new information
    or change anything; it only records the thought. Use it to plan before
    acting or to reflect on tool results."""
    LOGGER.info(f"Thought: {thought}")
    return "Your thought has been logged"
