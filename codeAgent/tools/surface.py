"""Per-run tool surface.

ToolSurface owns the tool catalogue of a runtime and hands every run an
explicit ToolRegistry holding exactly the tools that run may call.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from langchain_core.tools import BaseTool

from codeAgent.config.settings import Settings
from codeAgent.hitl import ConsoleConfirmer

from .builtin import (
    build_delegation_tools,
    build_read_page_tool,
    build_run_command_tool,
    build_web_search_tool,
    edit_file,
    list_files,
    mark_complete,
    read_file,
    search_files,
    think,
    write_file,
)
from .builtin.delegate_task import DELEGATION_TOOLS, Spawner
from .builtin.mark_complete import MARK_COMPLETE
from .config_loader import ToolsetConfig, load_toolset_config
from .registry import ToolRegistry

LOGGER = logging.getLogger(__name__)


class ToolSurface:
    """Builds the tool registry of each run.

    Args:
        settings: Application settings (governance, web)
        model_factory: Serves the SEARCH tier for web_search
        confirmer: Confirmation step for run_command (None runs unconfirmed)
        toolsets: Role tool sets; loaded from toolsets.yaml when omitted
    """

    def __init__(
        self,
        settings: Settings,
        model_factory,
        confirmer: Optional[ConsoleConfirmer] = None,
        toolsets: Optional[ToolsetConfig] = None,
    ) -> None:
        self.settings = settings
        self.toolsets = toolsets or load_toolset_config()
        catalogue: List[BaseTool] = [
            build_web_search_tool(model_factory),
            build_read_page_tool(settings.web),
            list_files,
            read_file,
            write_file,
            edit_file,
            search_files,
            build_run_command_tool(confirmer, settings.governance.command_timeout_seconds),
            think,
            mark_complete,
        ]
        self._catalogue = {t.name: t for t in catalogue}

    def delegation_allowed(self, depth: int) -> bool:
        return depth < self.settings.governance.max_delegation_depth

    def _offer(self, registry: ToolRegistry, item: BaseTool) -> None:
        registry.add(item, self.toolsets.get_tool_metadata(item.name))

    def build_registry(
        self,
        role: str,
        depth: int,
        *,
        spawn: Optional[Spawner] = None,
        tool_names: Optional[Iterable[str]] = None,
        bounded: bool = True,
    ) -> ToolRegistry:
        """Assemble the registry for one run.

        Args:
            role: Role whose tool set applies when ``tool_names`` is not given
            depth: Delegation depth of the run (root is 0)
            spawn: Child-run callback; delegation tools need it
            tool_names: Explicit tool names overriding the role's set
            bounded: Bounded runs get mark_complete, chat runs never do

        Raises:
            KeyError: If a requested tool or the role is unknown
        """
        names = list(tool_names) if tool_names else self.toolsets.get_role_tools(role)
        can_delegate = spawn is not None and self.delegation_allowed(depth)

        registry = ToolRegistry()
        for name in names:
            if name in DELEGATION_TOOLS or name == MARK_COMPLETE:
                continue
            if name not in self._catalogue:
                raise KeyError(f"Unknown tool: {name}")
            self._offer(registry, self._catalogue[name])

        if can_delegate:
            for delegation_tool in build_delegation_tools(spawn, self.settings.governance):
                if delegation_tool.name in names:
                    self._offer(registry, delegation_tool)

        if bounded:
            self._offer(registry, self._catalogue[MARK_COMPLETE])

        LOGGER.debug(f"Tools for {role} at depth {depth}: {registry.tool_names()}")
        return registry
