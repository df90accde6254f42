from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import Chunk
from cline_cli.provider import ModelInfo
from cline_cli.providers.common import Frame, parse_sse_line, stream_chunks, text_or_none

ANTHROPIC_VERSION = "2023-06-01"
_MAX_TOKENS = 4096


def _extract_delta(event: dict[str, Any]) -> str | None:
    if event.get("type") != "content_block_delta":
        return None
    delta = event.get("delta")
    if not isinstance(delta, dict):
        return None
    return text_or_none(delta.get("text"))


def parse_frame(line: str) -> Frame:
    return parse_sse_line(line, _extract_delta)


class AnthropicProvider:
    def __init__(self, config: ProviderConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self._api_key = config.api_key or ""
        self._model_id = config.resolved_model()
        self._url = f"{config.resolved_base_url()}/v1/messages"
        self._transport = transport

    def get_model(self) -> ModelInfo:
        return ModelInfo(id=self._model_id)

    def create_message(self, system_prompt: str, user_message: str) -> AsyncIterator[Chunk]:
        return stream_chunks(
            self._url,
            headers={
                "Content-Type": "application/json",
                "x-api-key": self._api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            body={
                "model": self._model_id,
                "max_tokens": _MAX_TOKENS,
                "system": system_prompt,
                "messages": [{"role": "user", "content": user_message}],
                "stream": True,
            },
            parse_frame=parse_frame,
            transport=self._transport,
        )
