"""Factory for assembling the LangGraph run loop."""

from __future__ import annotations

import logging

from langchain_core.language_models import BaseChatModel
from langgraph.graph import END, START, StateGraph

from codeAgent.graph.nodes import SequentialToolNode, build_agent_node, nudge_node
from codeAgent.graph.routing import agent_route, chat_agent_route, tools_route
from codeAgent.graph.state import RunState
from codeAgent.tools import ToolRegistry

LOGGER = logging.getLogger(__name__)


def build_run_graph(model: BaseChatModel, registry: ToolRegistry, *, bounded: bool = True):
    """Compose the run loop for one run.

    Bounded runs (task mode):

        START -> agent -> tools -> nudge -> agent -> ... -> END
                   |        |
                   +--------+-> END (mark_complete called or budget spent)

    Chat sessions:

        START -> agent <-> tools, agent -> END when the reply has no tool calls

    Args:
        model: Chat model serving the run's tier
        registry: Tools the run may call
        bounded: Build the budgeted task loop (True) or the chat loop (False)
    """
    graph = StateGraph(RunState)

    graph.add_node("agent", build_agent_node(model, registry.list_tools()))
    graph.add_node("tools", SequentialToolNode(registry))
    graph.add_edge(START, "agent")

    if bounded:
        graph.add_node("nudge", nudge_node)
        graph.add_conditional_edges(
            "agent",
            agent_route,
            {"tools": "tools", "nudge": "nudge", "end": END},
        )
        graph.add_conditional_edges(
            "tools",
            tools_route,
            {"nudge": "nudge", "end": END},
        )
        graph.add_edge("nudge", "agent")
    else:
        graph.add_conditional_edges(
            "agent",
            chat_agent_route,
            {"tools": "tools", "end": END},
        )
        graph.add_edge("tools", "agent")

    LOGGER.debug(f"Built {'bounded' if bounded else 'chat'} run graph with {len(registry.tool_names())} tools")
    return graph.compile()


def recursion_limit_for(max_iterations: int) -> int:
    """LangGraph step limit that never cuts a run short of its budget.

    Each iteration visits at most three nodes (agent, tools, nudge).
    """
    return 3 * max_iterations + 5
