"""Tests for the delegation tools."""

import pytest

from codeAgent.agents.schema import RunResult
from codeAgent.config.settings import GovernanceSettings
from codeAgent.models import ModelTier
from codeAgent.tools.builtin.delegate_task import DELEGATION_TOOLS, build_delegation_tools


class RecordingSpawner:
    def __init__(self, result: RunResult):
        self.result = result
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return self.result


def _tools(spawner, **governance):
    tools = build_delegation_tools(spawner, GovernanceSettings(**governance))
    return {t.name: t for t in tools}


def test_tool_names_match_delegation_set():
    tools = _tools(RecordingSpawner(RunResult()))
    assert tuple(tools) == DELEGATION_TOOLS


@pytest.mark.asyncio
async def test_delegate_subtask_uses_medium_tier_and_subtask_budget():
    spawner = RecordingSpawner(RunResult(content="child says hi", completed=True, iterations=2))
    tools = _tools(spawner, subtask_max_iterations=4)

    output = await tools["delegate_subtask"].ainvoke({"task_definition": "rename foo to bar"})

    assert output == "child says hi"
    request = spawner.requests[0]
    assert request.task == "rename foo to bar"
    assert request.tier == ModelTier.MEDIUM
    assert request.max_iterations == 4
    assert request.role == "subtask"


@pytest.mark.asyncio
async def test_consult_expert_uses_large_tier():
    spawner = RecordingSpawner(RunResult(content="use a heap"))
    tools = _tools(spawner, subtask_max_iterations=6)

    output = await tools["consult_expert"].ainvoke({"question": "fastest top-k?"})

    assert output == "use a heap"
    request = spawner.requests[0]
    assert request.tier == ModelTier.LARGE
    assert request.max_iterations == 6
    assert request.role == "expert"


@pytest.mark.asyncio
async def test_planner_uses_planner_budget():
    spawner = RecordingSpawner(RunResult(content="plan executed"))
    tools = _tools(spawner, planner_max_iterations=30)

    await tools["start_planner_task"].ainvoke({"task_definition": "migrate the build"})

    request = spawner.requests[0]
    assert request.tier == ModelTier.MEDIUM
    assert request.max_iterations == 30
    assert request.role == "planner"


@pytest.mark.asyncio
async def test_incomplete_child_still_returns_its_text():
    spawner = RecordingSpawner(RunResult(content="partial progress", completed=False, iterations=10))
    tools = _tools(spawner)

    output = await tools["delegate_subtask"].ainvoke({"task_definition": "long job"})

    assert output == "partial progress"
