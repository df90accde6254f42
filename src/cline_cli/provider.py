from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from cline_cli.app_config import ApiProvider, ProviderConfig, normalize_provider
from cline_cli.chunk import Chunk


@dataclass(frozen=True)
class ModelInfo:
    id: str


@runtime_checkable
class StreamProvider(Protocol):
    def create_message(self, system_prompt: str, user_message: str) -> AsyncIterator[Chunk]:
        """Stream a single response as text/error chunks.

        The returned async iterator is single-pass and never raises: transport
        failures and non-success statuses arrive as one ErrorChunk.
        """
        ...

    def get_model(self) -> ModelInfo: ...


def create_provider(
    config: ProviderConfig,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StreamProvider:
    """Factory: create a StreamProvider for the configured provider.

    Unknown or unset providers get the mock provider so a response sequence can
    always be produced.
    """
    name = normalize_provider(config.api_provider)
    if name == ApiProvider.ANTHROPIC:
        from cline_cli.providers.anthropic_provider import AnthropicProvider
        return AnthropicProvider(config, transport=transport)
    if name in (ApiProvider.OPENAI_NATIVE, ApiProvider.SILICONFLOW):
        from cline_cli.providers.openai_provider import OpenAIProvider
        return OpenAIProvider(config, transport=transport)
    if name == ApiProvider.OLLAMA:
        from cline_cli.providers.ollama_provider import OllamaProvider
        return OllamaProvider(config, transport=transport)
    from cline_cli.providers.mock_provider import MockProvider
    return MockProvider(config)
