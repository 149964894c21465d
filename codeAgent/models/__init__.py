"""Model tiers and specs."""

from .registry import ModelRegistry, ModelSpec, ModelTier, build_default_registry

__all__ = ["ModelRegistry", "ModelSpec", "ModelTier", "build_default_registry"]
