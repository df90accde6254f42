from __future__ import annotations

from collections.abc import AsyncIterator

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import Chunk, TextChunk
from cline_cli.provider import ModelInfo


class MockProvider:
    """Stands in for providers the CLI cannot stream from yet."""

    def __init__(self, config: ProviderConfig):
        self._provider = config.api_provider
        self._model_id = config.model_id or "mock-model"

    def get_model(self) -> ModelInfo:
        return ModelInfo(id=self._model_id)

    async def create_message(self, system_prompt: str, user_message: str) -> AsyncIterator[Chunk]:
        yield TextChunk(
            f'This is a mock response for provider "{self._provider}".\n'
            "\n"
            f'Your request: "{user_message}"\n'
            "\n"
            "To get real AI responses, please:\n"
            "1. Configure a supported provider (anthropic, openai-native, siliconflow, or ollama)\n"
            "2. Provide valid API credentials\n"
            "\n"
            "Supported providers in CLI:\n"
            "- anthropic: Requires API key\n"
            "- openai-native: Requires API key\n"
            "- siliconflow: Requires API key\n"
            "- ollama: Requires local Ollama server running\n"
            "\n"
            f"Current provider: {self._provider or 'none'}"
        )
