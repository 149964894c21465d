"""Delegate work to isolated child runs.

Each tool starts a fresh child run (own conversation, own budget) through the
``spawn`` callback of the calling Delegator and returns only the child's final
text. Sibling calls are awaited one after another.
"""

from __future__ import annotations

import logging
from typing import Annotated, Awaitable, Callable, List

from langchain_core.tools import BaseTool, tool

from codeAgent.agents.schema import RunResult, TaskRequest
from codeAgent.config.settings import GovernanceSettings
from codeAgent.models import ModelTier

LOGGER = logging.getLogger(__name__)

__all__ = ["DELEGATION_TOOLS", "build_delegation_tools"]

DELEGATION_TOOLS = ("delegate_subtask", "consult_expert", "start_planner_task")

Spawner = Callable[[TaskRequest], Awaitable[RunResult]]


def build_delegation_tools(spawn: Spawner, governance: GovernanceSettings) -> List[BaseTool]:
    """Build the delegation tools bound to ``spawn``.

    Args:
        spawn: Runs a TaskRequest as a child of the calling run
        governance: Supplies the per-tool iteration budgets
    """

    async def _run(request: TaskRequest) -> str:
        LOGGER.info(f"Starting {request.role} run ({request.tier.value}, budget {request.max_iterations})")
        LOGGER.debug(f"  Task: {request.task}")
        result = await spawn(request)
        if not result.completed:
            LOGGER.info(f"{request.role} run stopped after {result.iterations} iteration(s) without completing")
        return result.content

    @tool
    async def delegate_subtask(
        task_definition: Annotated[str, "Detailed, self-contained description of the sub-task and the result you need"],
    ) -> str:
        """Ask an agent to run a subtask for you. Give it a *detailed* and *specific*
        prompt of what you want it to do; it cannot see this conversation.
        Whenever you have a large problem, use this agent to do sub tasks so you
        can stay focused on the big picture. Make a plan for how the subtasks
        will accomplish your main task before starting them.
        """
        return await _run(TaskRequest(
            task=task_definition,
            tier=ModelTier.MEDIUM,
            max_iterations=governance.subtask_max_iterations,
            role="subtask",
        ))

    @tool
    async def consult_expert(
        question: Annotated[str, "The question, with all the context and the output format you need"],
    ) -> str:
        """Ask an expert agent a question. Provide a detailed task definition
        including the output you need and as much context as you can.
        Use it to get a plan of action for a complex task, or help with a
        complicated problem (algorithms, tricky code).
        """
        return await _run(TaskRequest(
            task=question,
            tier=ModelTier.LARGE,
            max_iterations=governance.subtask_max_iterations,
            role="expert",
        ))

    @tool
    async def start_planner_task(
        task_definition: Annotated[str, "Detailed description of the multi-step task"],
    ) -> str:
        """Ask a planning agent to create a plan and execute it. The agent
        researches first, writes the plan to plan.md, then executes it step by
        step, updating the plan as it goes. Use this for complex tasks that need
        multi-step planning and execution.
        """
        return await _run(TaskRequest(
            task=task_definition,
            tier=ModelTier.MEDIUM,
            max_iterations=governance.planner_max_iterations,
            role="planner",
        ))

    return [delegate_subtask, consult_expert, start_planner_task]
