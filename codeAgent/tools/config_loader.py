"""Tool set configuration loader.

Loads and parses toolsets.yaml: per-tool metadata and the tool names offered
to each role.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .registry import ToolMeta

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "toolsets.yaml"


class ToolsetConfig:
    """Tool set configuration manager."""

    def __init__(self, config_path: Optional[Path] = None, data: Optional[dict] = None):
        """Initialize tool set config.

        Args:
            config_path: Path to toolsets.yaml (defaults to the packaged file)
            data: Already-parsed configuration, bypassing the file
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.config = data if data is not None else self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Tool set configuration not found: {self.config_path}")
        with open(self.config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def get_tool_metadata(self, name: str) -> ToolMeta:
        entry = self.config.get("tools", {}).get(name) or {}
        return ToolMeta(
            name=name,
            risk=entry.get("risk", "low"),
            tags=list(entry.get("tags", [])),
            recursion_control=bool(entry.get("recursion_control", False)),
        )

    def list_roles(self) -> List[str]:
        return list(self.config.get("roles", {}))

    def get_role_tools(self, role: str) -> List[str]:
        """Return the tool names declared for ``role``.

        Raises:
            KeyError: If the role is not configured
        """
        roles: Dict[str, List[str]] = self.config.get("roles", {})
        if role not in roles:
            raise KeyError(f"Unknown role: {role}")
        return list(roles[role] or [])


def load_toolset_config(config_path: Optional[Path] = None) -> ToolsetConfig:
    config = ToolsetConfig(config_path)
    LOGGER.debug(f"Loaded tool sets for roles: {config.list_roles()}")
    return config
