"""Utilities for reading and cleaning message histories."""

from __future__ import annotations

from typing import List, Optional, Set

from langchain_core.messages import AIMessage, BaseMessage, ToolMessage


def message_text(message: BaseMessage) -> str:
    """Plain text of a message; content blocks are concatenated."""
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


def last_assistant_text(messages: List[BaseMessage]) -> Optional[str]:
    """Text of the most recent assistant message that has any.

    Returns:
        The text, or None when no assistant message carries text
    """
    for message in reversed(messages):
        if isinstance(message, AIMessage):
            text = message_text(message).strip()
            if text:
                return text
    return None


def clean_message_history(messages: List[BaseMessage]) -> List[BaseMessage]:
    """Remove AI messages with unanswered tool_calls.

    OpenAI-compatible endpoints reject a history in which an AI message with
    tool_calls is not followed by a ToolMessage for each call, which happens
    when a chat turn is aborted mid-dispatch.

    Args:
        messages: List of conversation messages

    Returns:
        Cleaned list with unanswered tool_calls removed
    """
    answered_call_ids: Set[str] = {
        msg.tool_call_id for msg in messages if isinstance(msg, ToolMessage) and msg.tool_call_id
    }

    cleaned: List[BaseMessage] = []
    for msg in messages:
        if isinstance(msg, AIMessage) and msg.tool_calls:
            if any(tc.get("id") not in answered_call_ids for tc in msg.tool_calls):
                continue
        cleaned.append(msg)
    return cleaned
