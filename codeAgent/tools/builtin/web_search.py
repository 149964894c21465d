"""Web search answered by the search-capable model tier."""

from __future__ import annotations

import logging
from typing import Annotated

from langchain_core.messages import HumanMessage
from langchain_core.tools import BaseTool, tool

from codeAgent.graph.message_utils import message_text
from codeAgent.models import ModelTier

LOGGER = logging.getLogger(__name__)

__all__ = ["build_web_search_tool"]


def build_web_search_tool(model_factory) -> BaseTool:
    """Build web_search bound to a ModelFactory's SEARCH tier."""

    @tool
    async def web_search(
        query: Annotated[str, "What to search the web for, phrased as a question"],
    ) -> str:
        """Search the web and return an answer with sources.

        Examples:
            web_search("latest stable release of langgraph")
            web_search("how to configure pytest-asyncio auto mode")
        """
        LOGGER.info(f"Web search query: {query}")
        try:
            model = model_factory.get(ModelTier.SEARCH)
            response = await model.ainvoke([HumanMessage(content=query)])
        except Exception as e:
            LOGGER.error(f"Web search failed: {e}")
            return f"Error: Web search failed: {str(e)}"

        answer = message_text(response)
        LOGGER.info(f"Web search answer: {len(answer)} chars")
        LOGGER.debug(f"  Answer: {answer[:500]}")
        return answer or "No results"

    return web_search
