from __future__ import annotations

from collections.abc import Awaitable, Callable

EXIT_COMMANDS = frozenset({"exit", "quit", "q", "bye"})


def is_exit_command(user_input: str) -> bool:
    return user_input.strip().lower() in EXIT_COMMANDS


class CommandRouter:
    def __init__(
        self,
        *,
        on_help: Callable[[], Awaitable[None]],
        on_history: Callable[[str], Awaitable[None]],
        on_unknown: Callable[[str], None],
    ) -> None:
        self._on_help = on_help
        self._on_history = on_history
        self._on_unknown = on_unknown

    async def try_handle(self, user_message: str) -> bool:
        trimmed = user_message.strip()
        if not trimmed.startswith("/"):
            return False

        if trimmed == "/help":
            await self._on_help()
            return True
        if trimmed == "/history" or trimmed.startswith("/history "):
            await self._on_history(trimmed)
            return True

        self._on_unknown(trimmed)
        return True
