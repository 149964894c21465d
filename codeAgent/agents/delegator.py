"""Bounded recursive task delegation.

A Delegator drives one run through ``Seeded -> Running -> {Completed,
BudgetExhausted}``:

* Seeded: a fresh conversation of one system prompt and the task text.
* Running: the LangGraph loop in ``codeAgent.graph``; every assistant turn
  counts as one iteration, tool calls are dispatched in order, and an
  unfinished turn is followed by a nudge.
* Completed: mark_complete was called; BudgetExhausted: the budget ran out.
  Neither is an error, both produce a RunResult.

Delegation tools call ``spawn_child``, which runs the request in a new
Delegator one level deeper with its own conversation. Delegation tools stop
being offered at ``governance.max_delegation_depth``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from codeAgent.agents.schema import NO_CONTENT, RunResult, TaskRequest
from codeAgent.graph.builder import build_run_graph, recursion_limit_for
from codeAgent.graph.message_utils import clean_message_history, last_assistant_text
from codeAgent.models import ModelTier
from codeAgent.tools import ToolSurface
from codeAgent.tools.builtin.delegate_task import DELEGATION_TOOLS
from codeAgent.utils.logging_utils import log_prompt, log_run_result
from codeAgent.utils.prompt_builder import PromptBuilder

LOGGER = logging.getLogger(__name__)


class Delegator:
    """Runs TaskRequests and spawns isolated child runs.

    Args:
        model_factory: Resolves model tiers to chat models
        surface: Builds each run's tool registry
        prompts: Renders role system prompts
        depth: Delegation depth of runs started here (root is 0)
        run_id: Identifier used in logs; children append ``.<n>``
        prompt_params: Extra template parameters for this delegator's prompts
    """

    def __init__(
        self,
        model_factory,
        surface: ToolSurface,
        prompts: Optional[PromptBuilder] = None,
        *,
        depth: int = 0,
        run_id: str = "root",
        prompt_params: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.model_factory = model_factory
        self.surface = surface
        self.prompts = prompts or PromptBuilder()
        self.depth = depth
        self.run_id = run_id
        self.prompt_params = dict(prompt_params or {})
        self._children = 0

    def _system_prompt(self, role: str, tool_names: List[str]) -> str:
        delegation_enabled = any(name in DELEGATION_TOOLS for name in tool_names)
        prompt = self.prompts.load_role_prompt(role, delegation_enabled=delegation_enabled, **self.prompt_params)
        log_prompt(
            LOGGER,
            f"{self.run_id} ({role})",
            prompt,
            self.surface.settings.observability.log_prompt_max_length,
        )
        return prompt

    async def run(self, request: TaskRequest) -> RunResult:
        """Run ``request`` until mark_complete is called or its budget is spent.

        Raises:
            ConfigurationError: If the model endpoint is not configured
            ModelInvocationError: If a model call fails
        """
        LOGGER.info(
            f"[{self.run_id}] starting {request.role} run at depth {self.depth} "
            f"({request.tier.value}, budget {request.max_iterations})"
        )
        registry = self.surface.build_registry(
            request.role,
            self.depth,
            spawn=self.spawn_child,
            tool_names=request.tools,
            bounded=True,
        )
        model = self.model_factory.get(request.tier)
        graph = build_run_graph(model, registry, bounded=True)

        initial_state = {
            "messages": [
                SystemMessage(content=self._system_prompt(request.role, registry.tool_names())),
                HumanMessage(content=request.task),
            ],
            "run_id": self.run_id,
            "role": request.role,
            "depth": self.depth,
            "iterations": 0,
            "max_iterations": request.max_iterations,
            "completed": False,
        }
        final_state = await graph.ainvoke(
            initial_state,
            config={"recursion_limit": recursion_limit_for(request.max_iterations)},
        )

        messages = final_state.get("messages", [])
        result = RunResult(
            content=last_assistant_text(messages) or NO_CONTENT,
            completed=bool(final_state.get("completed", False)),
            iterations=final_state.get("iterations", 0),
            messages=messages,
        )
        log_run_result(LOGGER, self.run_id, result.completed, result.iterations, result.content)
        return result

    def child(self) -> "Delegator":
        """Return a Delegator one level deeper with a fresh run id."""
        self._children += 1
        return Delegator(
            self.model_factory,
            self.surface,
            self.prompts,
            depth=self.depth + 1,
            run_id=f"{self.run_id}.{self._children}",
        )

    async def spawn_child(self, request: TaskRequest) -> RunResult:
        return await self.child().run(request)


class ChatSession:
    """Interactive, unbounded conversation at depth 0.

    Each ``send`` loops agent and tools until the model answers without tool
    calls. There is no budget, no nudge and no mark_complete.
    """

    def __init__(
        self,
        delegator: Delegator,
        tier: ModelTier = ModelTier.LARGE,
        role: str = "chat",
        recursion_limit: int = 500,
    ) -> None:
        self.delegator = delegator
        self.tier = ModelTier(tier)
        self.role = role
        self.recursion_limit = recursion_limit
        self.registry = delegator.surface.build_registry(
            role,
            delegator.depth,
            spawn=delegator.spawn_child,
            bounded=False,
        )
        self._graph = None
        self.messages: List[BaseMessage] = []
        self.reset()

    def reset(self) -> None:
        """Forget the conversation, keeping only the system prompt."""
        prompt = self.delegator._system_prompt(self.role, self.registry.tool_names())
        self.messages = [SystemMessage(content=prompt)]
        LOGGER.info("Chat session reset")

    def _get_graph(self):
        if self._graph is None:
            model = self.delegator.model_factory.get(self.tier)
            self._graph = build_run_graph(model, self.registry, bounded=False)
        return self._graph

    async def send(self, text: str) -> str:
        """Send one user message and return the assistant's reply.

        The history is only extended when the turn succeeds.
        """
        history = clean_message_history(self.messages) + [HumanMessage(content=text)]
        turn_start = len(history)
        final_state = await self._get_graph().ainvoke(
            {
                "messages": history,
                "run_id": f"{self.delegator.run_id}.chat",
                "role": self.role,
                "depth": self.delegator.depth,
                "iterations": 0,
                "max_iterations": None,
                "completed": False,
            },
            config={"recursion_limit": self.recursion_limit},
        )
        self.messages = final_state["messages"]
        return last_assistant_text(self.messages[turn_start:]) or NO_CONTENT
