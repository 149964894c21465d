"""Nudge node: reminds an unfinished bounded run to finish or keep going."""

from __future__ import annotations

import logging

from langchain_core.messages import SystemMessage

from codeAgent.graph.state import RunState
from codeAgent.tools.builtin.mark_complete import MARK_COMPLETE

LOGGER = logging.getLogger(__name__)

NUDGE_TEXT = f"call the {MARK_COMPLETE} tool if you are finished. otherwise, keep thinking"


def nudge_node(state: RunState) -> RunState:
    LOGGER.debug(f"[{state.get('run_id', 'root')}] nudge after iteration {state.get('iterations', 0)}")
    return {"messages": [SystemMessage(content=NUDGE_TEXT)]}
