from __future__ import annotations

from collections.abc import AsyncIterator

import httpx

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import Chunk
from cline_cli.provider import ModelInfo
from cline_cli.providers.common import Frame, loads_or_none, stream_chunks, text_or_none


def parse_frame(line: str) -> Frame:
    """Parse one newline-delimited JSON object from ``/api/chat``.

    A frame may carry both the last piece of text and ``done: true``.
    """
    if not line.strip():
        return None, False
    parsed = loads_or_none(line)
    if not isinstance(parsed, dict):
        return None, False
    message = parsed.get("message")
    text = text_or_none(message.get("content")) if isinstance(message, dict) else None
    return text, parsed.get("done") is True


class OllamaProvider:
    def __init__(self, config: ProviderConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self._model_id = config.resolved_model()
        self._url = f"{config.resolved_base_url()}/api/chat"
        self._transport = transport

    def get_model(self) -> ModelInfo:
        return ModelInfo(id=self._model_id)

    def create_message(self, system_prompt: str, user_message: str) -> AsyncIterator[Chunk]:
        return stream_chunks(
            self._url,
            headers={"Content-Type": "application/json"},
            body={
                "model": self._model_id,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                "stream": True,
            },
            parse_frame=parse_frame,
            transport=self._transport,
        )
