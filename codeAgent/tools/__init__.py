"""Tool registry, tool set configuration and the per-run tool surface."""

from .config_loader import ToolsetConfig, load_toolset_config
from .registry import ToolMeta, ToolRegistry
from .surface import ToolSurface

__all__ = ["ToolMeta", "ToolRegistry", "ToolSurface", "ToolsetConfig", "load_toolset_config"]
