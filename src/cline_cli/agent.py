from __future__ import annotations

import asyncio
from contextlib import aclosing

from loguru import logger

from cline_cli.agent_config import AgentConfig
from cline_cli.chunk import ErrorChunk
from cline_cli.provider import ModelInfo, create_provider
from cline_cli.state import HistoryRecord, StateStore
from cline_cli.system_prompt import build_system_prompt


class Agent:
    """Runs one task turn at a time against the configured provider."""

    def __init__(self, config: AgentConfig):
        self._provider = create_provider(config.provider_config, transport=config.transport)
        self._store: StateStore = config.state_store
        self._working_directory = config.working_directory
        self._on_chunk = config.on_chunk
        self._on_completed = config.on_completed
        self._on_failed = config.on_failed
        self._run_lock = asyncio.Lock()

    @property
    def is_busy(self) -> bool:
        return self._run_lock.locked()

    @property
    def store(self) -> StateStore:
        return self._store

    def get_model(self) -> ModelInfo:
        return self._provider.get_model()

    async def execute_task(self, task: str) -> str:
        """Stream a response for ``task``, relaying chunks and recording history.

        Returns the concatenated response text. Faults are reported through
        ``on_failed`` and re-raised; the turn is then not recorded.
        """
        async with self._run_lock:
            try:
                response = await self._stream_response(task)
                self._save_to_history(task, response)
            except Exception as ex:
                logger.error(f"Task failed: {ex}")
                if self._on_failed is not None:
                    self._on_failed(ex)
                raise

        if self._on_completed is not None:
            self._on_completed()
        return response

    async def send_message(self, message: str) -> str:
        return await self.execute_task(message)

    async def _stream_response(self, task: str) -> str:
        system_prompt = build_system_prompt(self._working_directory)
        logger.debug(f"Starting task with model={self._provider.get_model().id}")

        parts: list[str] = []
        errors = 0
        async with aclosing(self._provider.create_message(system_prompt, task)) as chunks:
            async for chunk in chunks:
                self._on_chunk(chunk)
                parts.append(chunk.text)
                if isinstance(chunk, ErrorChunk):
                    errors += 1

        logger.debug(f"Task finished: chunks={len(parts)}, errors={errors}")
        return "".join(parts)

    def _save_to_history(self, task: str, response: str) -> None:
        record = HistoryRecord.create(task, response)
        if not self._store.append_history(record):
            logger.warning("Could not save task to history")

    def close(self) -> None:
        self._store.close()
