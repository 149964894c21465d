"""Model tier management."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from codeAgent.config.settings import ModelRoutingSettings


class ModelTier(str, Enum):
    """Cost/capability classes of the completion endpoint."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    SEARCH = "search"


@dataclass(frozen=True, slots=True)
class ModelSpec:
    """Normalized description of the model serving one tier."""

    tier: ModelTier
    model_id: str
    can_tools: bool
    purpose: str


class ModelRegistry:
    """Central registry mapping tiers to model specs."""

    def __init__(self, specs: Optional[Iterable[ModelSpec]] = None) -> None:
        self._specs: Dict[ModelTier, ModelSpec] = {}
        if specs:
            for spec in specs:
                self.register(spec)

    def register(self, spec: ModelSpec) -> None:
        """Store a spec under its tier."""

        self._specs[spec.tier] = spec

    def get(self, tier: ModelTier) -> ModelSpec:
        """Return the spec for a given tier."""

        tier = ModelTier(tier)
        if tier not in self._specs:
            raise KeyError(f"Unknown model tier: {tier.value}")
        return self._specs[tier]


def build_default_registry(models: ModelRoutingSettings) -> ModelRegistry:
    """Instantiate the registry with the model ids from configuration."""

    return ModelRegistry(
        [
            ModelSpec(tier=ModelTier.SMALL, model_id=models.small, can_tools=False, purpose="helper calls"),
            ModelSpec(tier=ModelTier.MEDIUM, model_id=models.medium, can_tools=True, purpose="sub-tasks"),
            ModelSpec(tier=ModelTier.LARGE, model_id=models.large, can_tools=True, purpose="root and expert runs"),
            ModelSpec(tier=ModelTier.SEARCH, model_id=models.search, can_tools=False, purpose="web search"),
        ]
    )
