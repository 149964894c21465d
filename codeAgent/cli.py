"""Interactive chat CLI."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from codeAgent.agents.delegator import ChatSession
from codeAgent.hitl import LineReader
from codeAgent.utils.error_handler import AgentError

LOGGER = logging.getLogger(__name__)


class ChatCLI:
    """Read-eval-print loop over a ChatSession.

    Handles:
    1. Welcome message
    2. Input loop
    3. Command routing (/quit, /exit, /reset, /help)
    4. User message processing
    5. Graceful shutdown
    """

    COMMANDS: Dict[str, str] = {
        "/quit": "Exit",
        "/exit": "Exit",
        "/reset": "Start a new conversation",
        "/help": "Show this help",
    }

    def __init__(self, session: ChatSession, lines: Optional[LineReader] = None) -> None:
        self.session = session
        # shared with the confirmation step so a late answer is not lost
        self.lines = lines or LineReader()
        self._command_handlers = {
            "/quit": self._handle_quit,
            "/exit": self._handle_quit,
            "/reset": self._handle_reset,
            "/help": self._handle_help,
        }
        self._running = False

    def print_welcome(self) -> None:
        print("codeAgent chat. Type /help for commands.\n")

    async def get_input(self) -> str:
        print("You> ", end="", flush=True)
        return (await self.lines.read()).strip()

    async def run(self) -> None:
        """Main loop; returns when the user quits or stdin closes."""
        self._running = True
        self.print_welcome()

        while self._running:
            try:
                user_input = await self.get_input()
                if not user_input:
                    continue

                if user_input.startswith("/"):
                    if not await self.handle_command(user_input):
                        break
                else:
                    await self.handle_user_message(user_input)

            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye!")
                LOGGER.info("Session interrupted by user")
                break
            except AgentError as e:
                LOGGER.error(f"Turn failed: {e}")
                print(f"Error: {e.user_message}")
            except Exception as e:
                LOGGER.error(f"Unexpected error in main loop: {e}", exc_info=True)
                print(f"Error: {e}")

        LOGGER.info("CLI shutting down")

    async def handle_user_message(self, text: str) -> None:
        LOGGER.info(f"User input: {text[:100]}{'...' if len(text) > 100 else ''}")
        reply = await self.session.send(text)
        LOGGER.info(f"Agent response: {reply[:100]}{'...' if len(reply) > 100 else ''}")
        print(f"\nAgent> {reply}\n")

    async def handle_command(self, cmd: str) -> bool:
        """Handle a slash command.

        Returns:
            True to continue the main loop, False to exit
        """
        cmd_name = cmd.split(maxsplit=1)[0].lower()
        handler = self._command_handlers.get(cmd_name)
        if handler is None:
            print(f"Unknown command: {cmd_name}. Type /help for the list.")
            return True
        return await handler()

    async def _handle_quit(self) -> bool:
        print("Session ended.")
        LOGGER.info("Exit requested by command")
        return False

    async def _handle_reset(self) -> bool:
        self.session.reset()
        print("Conversation reset.\n")
        return True

    async def _handle_help(self) -> bool:
        print("\nCommands:")
        for cmd, desc in self.COMMANDS.items():
            print(f"  {cmd:<10} {desc}")
        print()
        return True
