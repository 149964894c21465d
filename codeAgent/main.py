"""codeAgent command-line entry point.

Usage:
    code-agent ask "add type hints to utils.py"
    code-agent chat
    code-agent bg "upgrade the test suite to pytest"
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from codeAgent import __version__
from codeAgent.cli import ChatCLI
from codeAgent.config.settings import get_settings
from codeAgent.runtime.app import AgentRuntime, build_runtime
from codeAgent.utils.error_handler import AgentError
from codeAgent.utils.git_worktree import commit_all, create_worktree, remove_worktree
from codeAgent.utils.logging_utils import setup_logging

LOGGER = logging.getLogger("codeAgent.main")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="code-agent",
        description="Command-line coding assistant that delegates bounded sub-tasks to nested agents.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Run shell commands without asking for confirmation",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Iteration budget of the top-level run (default: ROOT_MAX_ITERATIONS)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ask = subparsers.add_parser("ask", help="Run one task to completion")
    ask.add_argument("prompt", nargs="+", help="Task description")

    subparsers.add_parser("chat", help="Interactive conversation")

    bg = subparsers.add_parser("bg", help="Work on a task in a separate git worktree")
    bg.add_argument("task", nargs="+", help="Task description")
    bg.add_argument(
        "--keep-worktree",
        action="store_true",
        help="Leave the worktree in place after committing",
    )

    return parser.parse_args(argv)


async def run_ask(runtime: AgentRuntime, prompt: str, max_iterations: Optional[int] = None) -> int:
    result = await runtime.run_task(runtime.root_request(prompt, "root", max_iterations))
    print(result.content)
    if not result.completed:
        print(f"\n(stopped after {result.iterations} iterations without completing)", file=sys.stderr)
    return 0


async def run_chat(runtime: AgentRuntime) -> int:
    await ChatCLI(runtime.chat_session(), runtime.confirmer.lines).run()
    return 0


async def run_background(
    runtime: AgentRuntime,
    task: str,
    max_iterations: Optional[int] = None,
    keep_worktree: bool = False,
) -> int:
    branch = await runtime.generate_branch_name(task)
    worktree = create_worktree(branch)
    print(f"Created worktree at: {worktree}")

    original_dir = os.getcwd()
    os.chdir(worktree)
    print(f"Changed directory to worktree: {worktree}")
    try:
        result = await runtime.run_task(
            runtime.root_request(task, "background", max_iterations),
            prompt_params={"branch": branch},
        )
        print(result.content)
        committed = commit_all(worktree, f"{branch}: {task.splitlines()[0][:60]}")
        print(f"Changes committed on branch {branch}" if committed else "No changes to commit")
    finally:
        os.chdir(original_dir)
        if keep_worktree:
            print(f"Worktree kept at {worktree}")
        else:
            remove_worktree(branch)
            print(f"Removed worktree {worktree} (branch {branch} kept)")
    return 0


async def main_async(args: argparse.Namespace) -> int:
    settings = get_settings()
    runtime = build_runtime(settings, auto_approve=args.yes)

    if args.command == "ask":
        return await run_ask(runtime, " ".join(args.prompt), args.max_iterations)
    if args.command == "chat":
        return await run_chat(runtime)
    if args.command == "bg":
        return await run_background(runtime, " ".join(args.task), args.max_iterations, args.keep_worktree)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point; returns the process exit code."""
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(
        settings.observability.log_dir,
        level=getattr(logging, settings.observability.log_level.upper(), logging.INFO),
    )

    try:
        return asyncio.run(main_async(args))
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1
    except AgentError as e:
        LOGGER.error(f"Run failed: {e}", exc_info=True)
        print(f"Error: {e.user_message}")
        return 1
    except Exception as e:
        LOGGER.error(f"Run failed: {e}", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
