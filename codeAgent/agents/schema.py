"""Data types exchanged between delegating runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from codeAgent.models import ModelTier

NO_CONTENT = "No Content"


@dataclass(slots=True)
class TaskRequest:
    """One bounded unit of work handed to a Delegator.

    Attributes:
        task: Task text, becomes the first user message of the run
        tier: Model tier serving the run
        max_iterations: Assistant-turn budget (must be positive)
        role: Selects the system prompt template and default tool set
        tools: Declared tool names; the role's tool set is used when empty
    """

    task: str
    tier: ModelTier = ModelTier.MEDIUM
    max_iterations: int = 10
    role: str = "subtask"
    tools: Optional[List[str]] = None

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        self.tier = ModelTier(self.tier)


@dataclass(slots=True)
class RunResult:
    """Outcome of a bounded run."""

    content: str = NO_CONTENT
    completed: bool = False
    iterations: int = 0
    messages: List = field(default_factory=list, repr=False)
