"""Scripted fake models and settings shared by the tests."""

import queue
from typing import Dict, List, Optional

from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, BaseMessage
from pydantic import Field

from codeAgent.config.settings import (
    GovernanceSettings,
    ModelRoutingSettings,
    ObservabilitySettings,
    Settings,
    WebSettings,
)
from codeAgent.hitl import ConsoleConfirmer
from codeAgent.models import ModelTier
from codeAgent.runtime.app import build_runtime
from codeAgent.runtime.model_resolver import ModelFactory


class ScriptedChatModel(GenericFakeChatModel):
    """Fake chat model replaying scripted AIMessages.

    Records the messages it receives on each call in ``received``.
    """

    received: List[List[BaseMessage]] = Field(default_factory=list)
    disable_streaming: bool = True

    def bind_tools(self, tools, **kwargs):
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.received.append(list(messages))
        return super()._generate(messages, stop=stop, run_manager=run_manager, **kwargs)


def scripted(*replies) -> ScriptedChatModel:
    """Build a ScriptedChatModel from AIMessages or plain strings."""
    messages = [r if isinstance(r, AIMessage) else AIMessage(content=r) for r in replies]
    return ScriptedChatModel(messages=iter(messages))


def tool_call(name: str, args: Optional[dict] = None, call_id: Optional[str] = None) -> dict:
    return {"name": name, "args": args or {}, "id": call_id or f"call_{name}", "type": "tool_call"}


def ai(content: str = "", *calls: dict) -> AIMessage:
    """AIMessage with optional tool calls."""
    return AIMessage(content=content, tool_calls=list(calls))


def make_settings(**governance) -> Settings:
    return Settings(
        models=ModelRoutingSettings(api_key="test-key"),
        governance=GovernanceSettings(**governance),
        web=WebSettings(),
        observability=ObservabilitySettings(),
    )


def make_runtime(models: Dict[ModelTier, ScriptedChatModel], settings: Optional[Settings] = None):
    """Runtime whose ModelFactory serves the given fake models per tier."""
    settings = settings or make_settings()

    def builder(tier, model_id):
        if tier not in models:
            raise AssertionError(f"No scripted model for tier {tier.value}")
        return models[tier]

    factory = ModelFactory(settings, builder=builder)
    return build_runtime(settings, model_factory=factory, confirmer=ConsoleConfirmer(auto_approve=True))


class ScriptedStdin:
    """Blocking line source for LineReader; the test feeds ``lines``."""

    def __init__(self) -> None:
        self.lines: "queue.Queue[str]" = queue.Queue()
        self.reads = 0

    def __call__(self) -> str:
        self.reads += 1
        return self.lines.get(timeout=5)
