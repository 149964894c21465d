"""Node factories for the run loop."""

from .agent import build_agent_node
from .nudge import NUDGE_TEXT, nudge_node
from .tools import SequentialToolNode

__all__ = ["NUDGE_TEXT", "SequentialToolNode", "build_agent_node", "nudge_node"]
