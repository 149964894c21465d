"""Runtime assembly: settings, model factory, tool surface and delegators.

One AgentRuntime is built per CLI invocation and passed down explicitly; it
owns the only ModelFactory (and therefore the only model clients) of the
process.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from codeAgent.agents.delegator import ChatSession, Delegator
from codeAgent.agents.schema import RunResult, TaskRequest
from codeAgent.config.settings import Settings, get_settings
from codeAgent.graph.message_utils import message_text
from codeAgent.hitl import ConsoleConfirmer
from codeAgent.models import ModelTier
from codeAgent.tools import ToolSurface, ToolsetConfig
from codeAgent.utils.prompt_builder import PromptBuilder

from .model_resolver import ModelFactory

LOGGER = logging.getLogger(__name__)

BRANCH_PREFIX = "bg-"


def branch_slug(text: Optional[str]) -> str:
    """Turn a model-suggested branch name into a safe slug.

    Falls back to a random hex id when nothing usable remains.
    """
    slug = (text or "").strip().lower().replace(" ", "-")
    slug = re.sub(r"[^a-z0-9-]+", "", slug).strip("-")
    slug = re.sub(r"-{2,}", "-", slug)
    return slug or uuid.uuid4().hex


@dataclass
class AgentRuntime:
    """Everything a run needs, wired once per process."""

    settings: Settings
    model_factory: ModelFactory
    surface: ToolSurface
    prompts: PromptBuilder
    confirmer: ConsoleConfirmer

    def delegator(self, prompt_params: Optional[Dict[str, Any]] = None) -> Delegator:
        """Return a depth-0 Delegator."""
        return Delegator(
            self.model_factory,
            self.surface,
            self.prompts,
            depth=0,
            run_id="root",
            prompt_params=prompt_params,
        )

    async def run_task(self, request: TaskRequest, prompt_params: Optional[Dict[str, Any]] = None) -> RunResult:
        return await self.delegator(prompt_params).run(request)

    def root_request(self, task: str, role: str = "root", max_iterations: Optional[int] = None) -> TaskRequest:
        """TaskRequest for a top-level run (LARGE tier, root budget unless overridden)."""
        return TaskRequest(
            task=task,
            tier=ModelTier.LARGE,
            max_iterations=self.settings.governance.root_max_iterations if max_iterations is None else max_iterations,
            role=role,
        )

    def chat_session(self) -> ChatSession:
        return ChatSession(
            self.delegator(),
            tier=ModelTier.LARGE,
            role="chat",
            recursion_limit=self.settings.governance.chat_recursion_limit,
        )

    async def generate_branch_name(self, task: str) -> str:
        """Ask the SMALL tier for a branch name; ``bg-`` prefixed slug."""
        suggestion = None
        try:
            model = self.model_factory.get(ModelTier.SMALL)
            response = await model.ainvoke([
                SystemMessage(content=self.prompts.load_branch_name_prompt()),
                HumanMessage(content=task),
            ])
            suggestion = message_text(response)
        except Exception as e:
            LOGGER.warning(f"Branch name generation failed, using a random name: {e}")
        branch = f"{BRANCH_PREFIX}{branch_slug(suggestion)}"
        LOGGER.info(f"Branch name: {branch}")
        return branch


def build_runtime(
    settings: Optional[Settings] = None,
    *,
    model_factory: Optional[ModelFactory] = None,
    confirmer: Optional[ConsoleConfirmer] = None,
    toolsets: Optional[ToolsetConfig] = None,
    auto_approve: bool = False,
) -> AgentRuntime:
    """Wire an AgentRuntime from settings.

    Args:
        settings: Application settings; ``get_settings()`` when omitted
        model_factory: Pre-built factory (tests inject fake models here)
        confirmer: Confirmation step for run_command
        toolsets: Role tool sets; the packaged toolsets.yaml when omitted
        auto_approve: Approve every command without asking (``--yes``)

    Raises:
        ConfigurationError: If the model endpoint has no API key
    """
    settings = settings or get_settings()
    governance = settings.governance

    model_factory = model_factory or ModelFactory(settings)
    model_factory.validate()

    confirmer = confirmer or ConsoleConfirmer(
        timeout_seconds=governance.confirm_timeout_seconds,
        on_timeout=governance.confirm_on_timeout,
        auto_approve=auto_approve or governance.auto_approve_commands,
    )
    surface = ToolSurface(settings, model_factory, confirmer=confirmer, toolsets=toolsets)

    LOGGER.info(
        f"Runtime ready: environment={settings.environment}, "
        f"max_delegation_depth={governance.max_delegation_depth}"
    )
    return AgentRuntime(
        settings=settings,
        model_factory=model_factory,
        surface=surface,
        prompts=PromptBuilder(),
        confirmer=confirmer,
    )
