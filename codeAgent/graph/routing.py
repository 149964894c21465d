"""Conditional routing for the run loop.

Bounded runs:

    agent -> tools (if the reply has tool calls)
    agent/tools -> END when mark_complete was called or the budget is spent
    agent/tools -> nudge -> agent otherwise

Chat sessions loop agent <-> tools until the model replies without tool calls.
"""

from __future__ import annotations

import logging
from typing import Literal

from codeAgent.utils.logging_utils import log_routing_decision

from .state import RunState

LOGGER = logging.getLogger("codeAgent.graph.routing")


def _has_tool_calls(state: RunState) -> bool:
    messages = state.get("messages", [])
    if not messages:
        return False
    return bool(getattr(messages[-1], "tool_calls", None))


def _iteration_outcome(state: RunState) -> tuple[str, str]:
    iterations = state.get("iterations", 0)
    max_iterations = state.get("max_iterations")
    if state.get("completed", False):
        return "end", "mark_complete was called"
    if max_iterations is not None and iterations >= max_iterations:
        return "end", f"Iteration budget spent ({iterations}/{max_iterations})"
    return "nudge", f"Not complete ({iterations}/{max_iterations}), nudging"


def agent_route(state: RunState) -> Literal["tools", "nudge", "end"]:
    """Route after the agent node of a bounded run."""
    if _has_tool_calls(state):
        decision = "tools"
        reason = f"LLM requested {len(state['messages'][-1].tool_calls)} tool call(s)"
    else:
        decision, reason = _iteration_outcome(state)
    log_routing_decision(LOGGER, "agent", decision, reason)
    return decision


def tools_route(state: RunState) -> Literal["nudge", "end"]:
    """Route after the tools node of a bounded run."""
    decision, reason = _iteration_outcome(state)
    log_routing_decision(LOGGER, "tools", decision, reason)
    return decision


def chat_agent_route(state: RunState) -> Literal["tools", "end"]:
    """Route after the agent node of a chat session."""
    if _has_tool_calls(state):
        decision, reason = "tools", "LLM requested tool calls"
    else:
        decision, reason = "end", "No tool calls, replying to the user"
    log_routing_decision(LOGGER, "agent", decision, reason)
    return decision
