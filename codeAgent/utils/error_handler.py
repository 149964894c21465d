"""Unified error handling for codeAgent runs and tools."""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, Callable

LOGGER = logging.getLogger(__name__)


class AgentError(Exception):
    """Base exception for codeAgent errors."""

    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigurationError(AgentError):
    """Required configuration (API key, endpoint) is missing or invalid."""
    pass


class ModelInvocationError(AgentError):
    """Error during model invocation."""
    pass


def safe_tool_call(tool_name: str):
    """Decorator for safe tool execution with error handling.

    Any exception escaping the wrapped callable is logged and converted to
    ``Error: <tool> failed: <reason>`` so the agent loop keeps running.

    Args:
        tool_name: Name of the tool for logging

    Example:
        @safe_tool_call("read_file")
        def read_file(path: str) -> str:
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> str:
            try:
                return func(*args, **kwargs)
            except ModelInvocationError:
                raise
            except Exception as e:
                LOGGER.exception(f"Tool {tool_name} failed", exc_info=e)
                return _failure_text(tool_name, e)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> str:
            try:
                return await func(*args, **kwargs)
            except ModelInvocationError:
                # A broken completion endpoint aborts the whole run.
                raise
            except Exception as e:
                LOGGER.exception(f"Tool {tool_name} failed", exc_info=e)
                return _failure_text(tool_name, e)

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


def _failure_text(tool_name: str, error: Exception) -> str:
    user_msg = getattr(error, "user_message", None) or str(error)
    return f"Error: {tool_name} failed: {user_msg}"


def handle_model_error(error: Exception) -> str:
    """Convert model invocation errors to user-friendly messages.

    Args:
        error: Exception raised during model invocation

    Returns:
        User-friendly error message
    """
    error_str = str(error).lower()

    if "rate_limit" in error_str or "429" in error_str:
        return "Rate limited by the model endpoint, try again later"

    if "timeout" in error_str:
        return "The model endpoint timed out, try again"

    if "context_length" in error_str or "token" in error_str:
        return "The conversation is too long for the model's context window"

    if "invalid_api_key" in error_str or "authentication" in error_str or "401" in error_str:
        return "The API key was rejected, check AGENT_API_KEY"

    if "quota" in error_str or "insufficient" in error_str:
        return "The model endpoint reports insufficient credits"

    return f"Model endpoint unavailable: {str(error)}"
