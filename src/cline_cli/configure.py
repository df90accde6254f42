from __future__ import annotations

from collections.abc import Callable

from cline_cli.app_config import ApiProvider, ProviderConfig, default_model
from cline_cli.state import StateStore

PROVIDER_CHOICES: list[tuple[str, str]] = [
    ("Anthropic (Claude)", ApiProvider.ANTHROPIC.value),
    ("OpenAI", ApiProvider.OPENAI_NATIVE.value),
    ("SiliconFlow", ApiProvider.SILICONFLOW.value),
    ("OpenRouter", ApiProvider.OPENROUTER.value),
    ("Google Gemini", ApiProvider.GEMINI.value),
    ("Ollama (Local)", ApiProvider.OLLAMA.value),
]


def _prompt_provider(read_line: Callable[[str], str]) -> str:
    print("Select AI provider:")
    for i, (label, _) in enumerate(PROVIDER_CHOICES, start=1):
        print(f"  {i}. {label}")
    while True:
        answer = read_line(f"Provider [1-{len(PROVIDER_CHOICES)}]: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(PROVIDER_CHOICES):
            return PROVIDER_CHOICES[int(answer) - 1][1]
        for _, value in PROVIDER_CHOICES:
            if answer == value:
                return value
        print("Please choose one of the listed providers.")


def _prompt_api_key(read_line: Callable[[str], str]) -> str:
    while True:
        answer = read_line("Enter your API key: ").strip()
        if answer:
            return answer
        print("API key is required")


def configure_settings(store: StateStore, *, read_line: Callable[[str], str] = input) -> ProviderConfig:
    """Prompt for provider settings and persist them as the stored API configuration."""
    print("Configuring Cline settings...")
    provider = _prompt_provider(read_line)
    api_key = None if provider == ApiProvider.OLLAMA else _prompt_api_key(read_line)
    model = read_line("Enter model ID (optional): ").strip()

    config = ProviderConfig(
        api_provider=provider,
        api_key=api_key,
        model_id=model or default_model(provider) or None,
    )
    store.save_api_configuration(config)
    print("Configuration saved successfully!")
    return config
