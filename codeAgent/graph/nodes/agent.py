"""Agent node: one model call per visit."""

from __future__ import annotations

import logging
from typing import List

from langchain_core.language_models import BaseChatModel
from langchain_core.tools import BaseTool

from codeAgent.graph.message_utils import message_text
from codeAgent.graph.state import RunState
from codeAgent.utils.error_handler import ModelInvocationError, handle_model_error
from codeAgent.utils.logging_utils import log_node_entry, log_node_exit, log_visible_tools

LOGGER = logging.getLogger(__name__)


def build_agent_node(model: BaseChatModel, tools: List[BaseTool]):
    """Build the agent node bound to ``model`` and the run's ``tools``.

    Each visit appends exactly one AIMessage and counts one iteration.

    Raises (from the node):
        ModelInvocationError: If the completion endpoint fails
    """
    bound = model.bind_tools(tools) if tools else model

    async def agent_node(state: RunState) -> RunState:
        log_node_entry(LOGGER, "agent", state)
        run_id = state.get("run_id", "root")
        iteration = state.get("iterations", 0) + 1
        log_visible_tools(LOGGER, f"{run_id} iteration {iteration}", tools)

        try:
            response = await bound.ainvoke(state["messages"])
        except ModelInvocationError:
            raise
        except Exception as e:
            LOGGER.error(f"Model call failed in {run_id}: {e}")
            raise ModelInvocationError(str(e), user_message=handle_model_error(e)) from e

        LOGGER.info(f"[{run_id}] iteration {iteration}: {len(response.tool_calls)} tool call(s)")
        text = message_text(response)
        if text:
            LOGGER.debug(f"[{run_id}] assistant: {text[:300]}")

        updates = {"messages": [response], "iterations": iteration}
        log_node_exit(LOGGER, "agent", updates)
        return updates

    return agent_node
