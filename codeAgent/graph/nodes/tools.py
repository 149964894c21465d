"""Sequential tool dispatch.

Tool calls of one assistant message are executed one at a time in the order
the model produced them, each answered by exactly one ToolMessage before the
next model call. Tool failures become text results; a model failure inside a
child run propagates.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from langchain_core.messages import AIMessage, ToolMessage

from codeAgent.graph.state import RunState
from codeAgent.tools.builtin.mark_complete import MARK_COMPLETE
from codeAgent.tools.registry import ToolRegistry
from codeAgent.utils.error_handler import safe_tool_call
from codeAgent.utils.logging_utils import log_node_entry, log_node_exit, log_tool_call, log_tool_result

LOGGER = logging.getLogger(__name__)


class SequentialToolNode:
    """Dispatch the last assistant message's tool calls in order."""

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def _dispatch(self, call: Dict[str, Any]) -> ToolMessage:
        name = call.get("name", "")
        call_id = call.get("id") or ""
        args = call.get("args", {}) or {}
        log_tool_call(LOGGER, name, args)

        if not self.registry.has_tool(name):
            LOGGER.warning(f"Model called unknown tool: {name}")
            result = f"Error: Unknown tool: {name}. Available tools: {', '.join(self.registry.tool_names())}"
            log_tool_result(LOGGER, name, result, success=False)
            return ToolMessage(content=result, tool_call_id=call_id, name=name)

        tool = self.registry.get_tool(name)
        meta = self.registry.get_meta(name)
        if meta.recursion_control or meta.risk == "high":
            LOGGER.info(f"Dispatching {name} (risk={meta.risk}, recursion_control={meta.recursion_control})")
        invoke = safe_tool_call(name)(tool.ainvoke)
        output = await invoke({"name": name, "args": args, "id": call_id, "type": "tool_call"})

        if isinstance(output, ToolMessage):
            message = output
        else:
            message = ToolMessage(content=str(output), tool_call_id=call_id, name=name)

        text = message.content if isinstance(message.content, str) else str(message.content)
        log_tool_result(LOGGER, name, text, success=not text.startswith("Error"))
        return message

    async def __call__(self, state: RunState) -> RunState:
        log_node_entry(LOGGER, "tools", state)
        messages = state.get("messages", [])
        last = messages[-1] if messages else None
        if not isinstance(last, AIMessage) or not last.tool_calls:
            return {"messages": []}

        results: List[ToolMessage] = []
        completed = state.get("completed", False)
        for call in last.tool_calls:
            results.append(await self._dispatch(call))
            if call.get("name") == MARK_COMPLETE and self.registry.has_tool(MARK_COMPLETE):
                completed = True

        updates: RunState = {"messages": results}
        if completed:
            updates["completed"] = True
        log_node_exit(LOGGER, "tools", updates)
        return updates
