"""Per-run tool registry: name -> (tool, governance metadata)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional

from langchain_core.tools import BaseTool


@dataclass(frozen=True, slots=True)
class ToolMeta:
    """Governance attributes of a tool, as declared in toolsets.yaml."""

    name: str
    risk: str = "low"
    tags: List[str] = field(default_factory=list)
    recursion_control: bool = False  # Spawns a child run or ends the current one


class _Entry(NamedTuple):
    tool: BaseTool
    meta: ToolMeta


class ToolRegistry:
    """The exact set of tools one run may call, in registration order.

    Lookups of names outside the set raise ``KeyError``; the tools node turns
    that into an ``Unknown tool`` result for the model.
    """

    def __init__(self, tools: Optional[Iterable[BaseTool]] = None) -> None:
        self._entries: Dict[str, _Entry] = {}
        for item in tools or ():
            self.add(item)

    def add(self, tool: BaseTool, meta: Optional[ToolMeta] = None) -> None:
        """Offer ``tool`` to the run; a later add with the same name replaces it."""
        self._entries[tool.name] = _Entry(tool, meta or ToolMeta(name=tool.name))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def has_tool(self, name: str) -> bool:
        return name in self._entries

    def get_tool(self, name: str) -> BaseTool:
        try:
            return self._entries[name].tool
        except KeyError:
            raise KeyError(f"Unknown tool: {name}") from None

    def get_meta(self, name: str) -> ToolMeta:
        entry = self._entries.get(name)
        return entry.meta if entry is not None else ToolMeta(name=name)

    def list_tools(self) -> List[BaseTool]:
        return [entry.tool for entry in self._entries.values()]

    def tool_names(self) -> List[str]:
        return list(self._entries)
