"""Agent runs: task requests, results and the Delegator."""

from .schema import NO_CONTENT, RunResult, TaskRequest

__all__ = ["NO_CONTENT", "RunResult", "TaskRequest"]
