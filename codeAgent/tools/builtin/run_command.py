"""Execute shell commands on the host after user confirmation."""

from __future__ import annotations

import asyncio
import logging
import subprocess
from typing import Annotated, Optional

from langchain_core.tools import BaseTool, tool

from codeAgent.hitl import ConsoleConfirmer

from .file_ops import workspace_root

LOGGER = logging.getLogger(__name__)

__all__ = ["build_run_command_tool", "execute_command"]

DENIED_MESSAGE = "Command execution denied by user."


def execute_command(command: str, timeout: int) -> str:
    """Run ``command`` through the host shell and describe the outcome.

    Never raises on a non-zero exit code.
    """
    LOGGER.info(f"Executing command: {command}")
    try:
        result = subprocess.run(
            command,
            cwd=workspace_root(),
            capture_output=True,
            text=True,
            timeout=timeout,
            shell=True,
        )
    except subprocess.TimeoutExpired:
        return f"Error: Command timeout ({timeout}s)"

    if result.returncode != 0:
        LOGGER.info(f"Command exited with code {result.returncode}")
        return (
            f"Command failed with exit code {result.returncode}. "
            f"Error: {result.stderr} Output: {result.stdout}"
        )

    output = result.stdout
    if result.stderr:
        output += f"\n[stderr]\n{result.stderr}"
    return f"Command executed successfully. Output:\n {output}"


def build_run_command_tool(confirmer: Optional[ConsoleConfirmer], timeout: int = 300) -> BaseTool:
    """Build the run_command tool bound to a confirmation policy.

    Args:
        confirmer: Asked before every command; None runs without asking
        timeout: Command timeout in seconds
    """

    @tool
    async def run_command(
        command: Annotated[str, "Shell command to execute in the working directory"],
    ) -> str:
        """Run a shell command in the working directory and return its output.

        The user is asked to confirm the command first. stdout, stderr and the
        exit code are reported; a failing command is not an error of this tool.

        Examples:
            run_command("pytest -q")
            run_command("git status")
        """
        if confirmer is not None:
            approved = await confirmer.confirm(f"Would you like to run {command}?")
            if not approved:
                LOGGER.info(f"Command denied: {command}")
                return DENIED_MESSAGE
        return await asyncio.to_thread(execute_command, command, timeout)

    return run_command
