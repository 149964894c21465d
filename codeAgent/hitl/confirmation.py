"""Console confirmation for commands the agent wants to run on the host."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Callable, Optional

LOGGER = logging.getLogger(__name__)

__all__ = ["ConsoleConfirmer", "LineReader", "is_affirmative"]


def is_affirmative(answer: Optional[str]) -> bool:
    """Answers starting with ``y`` or ``Y`` confirm; anything else denies."""
    return bool(answer) and answer.strip()[:1].lower() == "y"


class LineReader:
    """Reads stdin lines with at most one read in flight.

    A blocking read cannot be cancelled, so a read that outlives a timeout
    stays pending and delivers its line to the next caller. The confirmation
    step and the chat loop share one LineReader so no line is lost to an
    abandoned read.

    Args:
        reader: Blocking line reader; defaults to ``input``
    """

    def __init__(self, reader: Optional[Callable[[], str]] = None) -> None:
        self._reader = reader or input
        self._pending: Optional[asyncio.Future] = None

    def _start(self) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def deliver(setter, value) -> None:
            if not future.done():
                setter(value)

        def target() -> None:
            try:
                line = self._reader()
            except Exception as e:
                outcome = (future.set_exception, e)
            else:
                outcome = (future.set_result, line)
            try:
                loop.call_soon_threadsafe(deliver, *outcome)
            except RuntimeError:
                LOGGER.debug("Event loop closed before a stdin line arrived")

        # daemon thread: a blocked read must not keep the process alive at exit
        threading.Thread(target=target, name="stdin-reader", daemon=True).start()
        return future

    async def read(self, timeout: Optional[float] = None) -> str:
        """Return the next line.

        Raises:
            asyncio.TimeoutError: If no line arrives within ``timeout``;
                the read stays pending for the next caller
            EOFError: If stdin is closed
        """
        if self._pending is None:
            self._pending = self._start()
        pending = self._pending
        try:
            line = await asyncio.wait_for(asyncio.shield(pending), timeout)
        except EOFError:
            self._pending = None
            raise
        self._pending = None
        return line

    def discard_buffered(self) -> Optional[str]:
        """Drop a line that arrived while nobody was waiting for one."""
        pending = self._pending
        if pending is None or not pending.done() or pending.exception() is not None:
            return None
        self._pending = None
        return pending.result()


class ConsoleConfirmer:
    """Ask the user to approve a command, racing the answer against a timeout.

    Args:
        timeout_seconds: How long to wait for an answer
        on_timeout: Decision taken when nobody answers in time (True proceeds)
        auto_approve: Skip the prompt and approve every request
        reader: Blocking line reader; defaults to ``input``
        writer: Prompt writer; defaults to ``print``
        lines: Shared LineReader; built from ``reader`` when omitted
    """

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        on_timeout: bool = True,
        auto_approve: bool = False,
        reader: Optional[Callable[[], str]] = None,
        writer: Optional[Callable[[str], None]] = None,
        lines: Optional[LineReader] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.on_timeout = on_timeout
        self.auto_approve = auto_approve
        self.lines = lines or LineReader(reader)
        self._writer = writer or (lambda text: print(text, flush=True))

    async def confirm(self, question: str) -> bool:
        """Return True when the user approves ``question``."""
        if self.auto_approve:
            LOGGER.info(f"Auto-approved: {question}")
            return True

        # a line typed before this prompt appeared does not answer it
        stale = self.lines.discard_buffered()
        if stale is not None:
            LOGGER.info(f"Ignoring input typed before the prompt: {stale!r}")

        self._writer(f"{question} (y/n, {self.timeout_seconds:g}s timeout)")
        try:
            answer = await self.lines.read(timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            LOGGER.warning(
                f"No answer within {self.timeout_seconds:g}s, "
                f"{'proceeding' if self.on_timeout else 'denying'}"
            )
            return self.on_timeout
        except EOFError:
            LOGGER.warning("stdin closed while waiting for confirmation, denying")
            return False

        approved = is_affirmative(answer)
        LOGGER.info(f"Confirmation answer {answer!r}: {'approved' if approved else 'denied'}")
        return approved
