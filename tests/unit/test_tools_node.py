"""Tests for sequential tool dispatch."""

import pytest
from langchain_core.messages import AIMessage, ToolMessage
from langchain_core.tools import tool

from codeAgent.graph.nodes import SequentialToolNode
from codeAgent.tools import ToolRegistry
from codeAgent.tools.builtin import mark_complete

from fakes import tool_call


def _registry(*tools):
    return ToolRegistry(tools=list(tools))


@pytest.mark.asyncio
async def test_calls_run_in_order_with_one_result_each():
    order = []

    @tool
    def first(x: str) -> str:
        """First."""
        order.append(("first", x))
        return "one"

    @tool
    async def second(x: str) -> str:
        """Second."""
        order.append(("second", x))
        return "two"

    node = SequentialToolNode(_registry(first, second))
    message = AIMessage(content="", tool_calls=[
        tool_call("second", {"x": "a"}, "c1"),
        tool_call("first", {"x": "b"}, "c2"),
    ])

    updates = await node({"messages": [message]})

    assert order == [("second", "a"), ("first", "b")]
    assert [m.tool_call_id for m in updates["messages"]] == ["c1", "c2"]
    assert [m.content for m in updates["messages"]] == ["two", "one"]
    assert "completed" not in updates


@pytest.mark.asyncio
async def test_mark_complete_sets_completed():
    node = SequentialToolNode(_registry(mark_complete))

    updates = await node({"messages": [AIMessage(content="done", tool_calls=[tool_call("mark_complete")])]})

    assert updates["completed"] is True
    assert updates["messages"][0].content == "Completed"


@pytest.mark.asyncio
async def test_failing_tool_becomes_error_text():
    @tool
    def explode() -> str:
        """Always fails."""
        raise RuntimeError("boom")

    node = SequentialToolNode(_registry(explode))

    updates = await node({"messages": [AIMessage(content="", tool_calls=[tool_call("explode")])]})

    result = updates["messages"][0]
    assert isinstance(result, ToolMessage)
    assert result.content == "Error: explode failed: boom"


@pytest.mark.asyncio
async def test_unknown_tool_is_reported():
    node = SequentialToolNode(_registry(mark_complete))

    updates = await node({"messages": [AIMessage(content="", tool_calls=[tool_call("teleport")])]})

    assert updates["messages"][0].content.startswith("Error: Unknown tool: teleport")


@pytest.mark.asyncio
async def test_mark_complete_ignored_when_not_offered():
    @tool
    def noop() -> str:
        """Nothing."""
        return "ok"

    node = SequentialToolNode(_registry(noop))

    updates = await node({"messages": [AIMessage(content="", tool_calls=[tool_call("mark_complete")])]})

    assert "completed" not in updates
