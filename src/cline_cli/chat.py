from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from cline_cli.bootstrap import AppRuntime
from cline_cli.commands.router import CommandRouter, is_exit_command
from cline_cli.services.history_view import HistoryView

_DEFAULT_HISTORY_LIMIT = 10


class InteractiveChat:
    _USER_PROMPT = "You: "

    def __init__(self, runtime: AppRuntime, *, read_line: Callable[[str], str] = input):
        self._runtime = runtime
        self._read_line = read_line
        self._history_view = HistoryView(line_prefix="  ")
        self._command_router = CommandRouter(
            on_help=self._on_help,
            on_history=self._on_history,
            on_unknown=self._on_unknown_command,
        )

    async def start(self) -> None:
        print("Interactive chat started!")
        print("Commands: 'exit', 'quit', 'q', or 'bye' to end the session, '/help' for more.\n")

        try:
            while True:
                try:
                    user_input = self._read_line(self._USER_PROMPT)
                except (EOFError, KeyboardInterrupt):
                    print()
                    break

                if not await self.handle_input(user_input):
                    break
        finally:
            self._exit()

    async def handle_input(self, user_input: str) -> bool:
        """Process one line of input; returns False when the session should end."""
        trimmed = user_input.strip()
        if is_exit_command(trimmed):
            return False
        if not trimmed:
            return True
        if await self._command_router.try_handle(trimmed):
            return True

        printer = self._runtime.printer
        printer.begin()
        try:
            await self._runtime.agent.send_message(trimmed)
        except Exception as ex:
            logger.error(f"Error processing message: {ex}")
        finally:
            printer.end()
        return True

    async def _on_help(self) -> None:
        print("  /help              Show this help")
        print("  /history [limit]   Show recent tasks")
        print("  exit | quit | q | bye  End the session")

    async def _on_history(self, command: str) -> None:
        _, _, arg = command.partition(" ")
        try:
            limit = int(arg) if arg.strip() else _DEFAULT_HISTORY_LIMIT
        except ValueError:
            print("  Usage: /history [limit]")
            return
        records = self._runtime.store.read_history()
        for line in self._history_view.format_history_lines(records, limit=max(1, limit)):
            print(line)

    def _on_unknown_command(self, command: str) -> None:
        print(f"  Unknown command: {command}. Type /help for available commands.")

    def _exit(self) -> None:
        print("Thanks for using Cline! Goodbye!")
        try:
            self._runtime.agent.close()
        except Exception as ex:
            logger.warning(f"Warning during cleanup: {ex}")
