from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import Chunk
from cline_cli.provider import ModelInfo
from cline_cli.providers.common import Frame, parse_sse_line, stream_chunks, text_or_none


def _extract_delta(event: dict[str, Any]) -> str | None:
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return None
    return text_or_none(delta.get("content"))


def parse_frame(line: str) -> Frame:
    return parse_sse_line(line, _extract_delta)


class OpenAIProvider:
    """OpenAI chat-completions streaming; also serves OpenAI-compatible hosts."""

    def __init__(self, config: ProviderConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self._api_key = config.api_key or ""
        self._model_id = config.resolved_model()
        self._url = f"{config.resolved_base_url()}/v1/chat/completions"
        self._transport = transport

    def get_model(self) -> ModelInfo:
        return ModelInfo(id=self._model_id)

    def create_message(self, system_prompt: str, user_message: str) -> AsyncIterator[Chunk]:
        return stream_chunks(
            self._url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
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
