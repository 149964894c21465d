"""Logging utilities for codeAgent."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

LOGGER_NAME = "codeAgent"


def setup_logging(
    log_dir: str = "logs",
    level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> logging.Logger:
    """Setup logging configuration for codeAgent.

    Args:
        log_dir: Directory receiving the timestamped session log
        level: File handler level (default: DEBUG)
        console_level: Console handler level (default: WARNING)

    Returns:
        Configured logger instance
    """
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"codeagent_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Children decide, handlers filter
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers = []

    # File handler (detailed logs)
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_formatter)

    # Console handler (user-friendly)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("=" * 80)
    logger.info("codeAgent session started")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 80)

    return logger


def _truncate(text: str, max_length: int) -> str:
    if len(text) > max_length:
        return text[:max_length] + "... (truncated)"
    return text


def log_tool_call(logger: logging.Logger, tool_name: str, args: Dict[str, Any]) -> None:
    """Log tool invocation.

    Args:
        logger: Logger instance
        tool_name: Name of the tool being called
        args: Tool arguments
    """
    logger.info(f"Tool call: {tool_name}")
    logger.debug(f"  Arguments: {json.dumps(args, ensure_ascii=False, indent=2, default=str)}")


def log_tool_result(logger: logging.Logger, tool_name: str, result: Any, success: bool = True) -> None:
    """Log tool execution result.

    Args:
        logger: Logger instance
        tool_name: Name of the tool
        result: Tool execution result
        success: Whether the tool executed successfully
    """
    status = "ok" if success else "failed"
    logger.info(f"Tool result: {tool_name} - {status}")
    logger.debug(f"  Result: {_truncate(str(result), 500)}")


def log_routing_decision(logger: logging.Logger, from_node: str, decision: str, reason: str = "") -> None:
    """Log routing decision.

    Args:
        logger: Logger instance
        from_node: Source node making the decision
        decision: Routing destination
        reason: Reason for the routing decision
    """
    logger.info(f"Routing decision from {from_node}: -> {decision}")
    if reason:
        logger.info(f"  Reason: {reason}")


def log_node_entry(logger: logging.Logger, node_name: str, state: Dict[str, Any]) -> None:
    """Log node entry with a snapshot of the run state."""
    logger.debug(f"# ENTERING NODE: {node_name}")
    logger.debug(f"  - run_id: {state.get('run_id')}")
    logger.debug(f"  - depth: {state.get('depth')}")
    logger.debug(f"  - iterations: {state.get('iterations')}/{state.get('max_iterations')}")
    logger.debug(f"  - messages: {len(state.get('messages', []))}")
    logger.debug(f"  - completed: {state.get('completed')}")


def log_node_exit(logger: logging.Logger, node_name: str, updates: Dict[str, Any]) -> None:
    """Log node exit with state updates."""
    logger.debug(f"# EXITING NODE: {node_name}")
    for key, value in updates.items():
        if key == "messages":
            logger.debug(f"  - messages: +{len(value)} new messages")
        else:
            logger.debug(f"  - {key}: {value}")


def log_prompt(logger: logging.Logger, phase: str, prompt: str, max_length: int = 500) -> None:
    """Log system prompt being used.

    Args:
        logger: Logger instance
        phase: Role or phase name (root/subtask/expert/...)
        prompt: System prompt content
        max_length: Truncate the logged prompt to this many characters
    """
    logger.info(f"System prompt for {phase}:")
    logger.debug(_truncate(prompt, max_length))


def log_visible_tools(logger: logging.Logger, phase: str, tools: list) -> None:
    """Log visible tools for current phase.

    Args:
        logger: Logger instance
        phase: Phase name
        tools: List of tool names or tool objects
    """
    tool_names = [t.name if hasattr(t, "name") else str(t) for t in tools]
    logger.info(f"Visible tools for {phase}: [{', '.join(tool_names)}] ({len(tool_names)} total)")


def log_run_result(
    logger: logging.Logger,
    run_id: str,
    completed: bool,
    iterations: int,
    content: Optional[str] = None,
) -> None:
    """Log the outcome of a bounded run.

    Args:
        logger: Logger instance
        run_id: Identifier of the run (root or sub-run)
        completed: Whether mark_complete was called
        iterations: Number of assistant turns consumed
        content: Final assistant text, logged as a preview
    """
    outcome = "completed" if completed else "budget exhausted"
    logger.info(f"Run {run_id} finished: {outcome} after {iterations} iteration(s)")
    if content:
        logger.debug(f"  Final content: {_truncate(content, 200)}")

