from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from cline_cli.state import StateStore


class ApiProvider(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI_NATIVE = "openai-native"
    SILICONFLOW = "siliconflow"
    OPENROUTER = "openrouter"
    GEMINI = "gemini"
    OLLAMA = "ollama"


DEFAULT_MODELS: dict[str, str] = {
    ApiProvider.ANTHROPIC.value: "claude-3-5-sonnet-20241022",
    ApiProvider.OPENAI_NATIVE.value: "gpt-4o",
    ApiProvider.SILICONFLOW.value: "Qwen/Qwen2.5-7B-Instruct",
    ApiProvider.OPENROUTER.value: "anthropic/claude-3.5-sonnet",
    ApiProvider.GEMINI.value: "gemini-1.5-pro-latest",
    ApiProvider.OLLAMA.value: "llama3.2",
}

DEFAULT_BASE_URLS: dict[str, str] = {
    ApiProvider.ANTHROPIC.value: "https://api.anthropic.com",
    ApiProvider.OPENAI_NATIVE.value: "https://api.openai.com",
    ApiProvider.SILICONFLOW.value: "https://api.siliconflow.cn",
    ApiProvider.OLLAMA.value: "http://localhost:11434",
}

API_KEY_ENV_VARS: dict[str, str] = {
    ApiProvider.ANTHROPIC.value: "ANTHROPIC_API_KEY",
    ApiProvider.OPENAI_NATIVE.value: "OPENAI_API_KEY",
    ApiProvider.SILICONFLOW.value: "SILICONFLOW_API_KEY",
    ApiProvider.OPENROUTER.value: "OPENROUTER_API_KEY",
    ApiProvider.GEMINI.value: "GEMINI_API_KEY",
}


def normalize_provider(name: str | None) -> str:
    return (name or "").strip().lower()


def default_model(provider: str | None) -> str:
    return DEFAULT_MODELS.get(normalize_provider(provider), "")


def _str_or_none(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


@dataclass(frozen=True)
class ProviderConfig:
    api_provider: str | None = None
    api_key: str | None = None
    model_id: str | None = None
    base_url: str | None = None

    def resolved_model(self, fallback: str = "") -> str:
        return self.model_id or default_model(self.api_provider) or fallback

    def resolved_base_url(self) -> str:
        url = self.base_url or DEFAULT_BASE_URLS.get(normalize_provider(self.api_provider), "")
        return url.rstrip("/")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProviderConfig:
        return cls(
            api_provider=_str_or_none(data.get("apiProvider")),
            api_key=_str_or_none(data.get("apiKey"), data.get("openAiNativeApiKey")),
            model_id=_str_or_none(data.get("apiModelId")),
            base_url=_str_or_none(data.get("baseUrl"), data.get("ollamaBaseUrl")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "apiProvider": self.api_provider,
            "apiKey": self.api_key,
            "apiModelId": self.model_id,
        }
        if self.base_url:
            out["baseUrl"] = self.base_url
        return out


@dataclass
class AppConfig:
    log_level: str
    log_consumers: list | None


def load_json_config() -> dict:
    config_path = Path.cwd() / "config.json"
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            return json.load(f)
    return {}


def parse_app_config(config: dict) -> AppConfig:
    return AppConfig(
        log_level=config.get("LogLevel", "WARNING"),
        log_consumers=config.get("LogConsumers"),
    )


def _api_key_from_environment(provider: str | None) -> str | None:
    env_var = API_KEY_ENV_VARS.get(normalize_provider(provider))
    if not env_var:
        return None
    return os.environ.get(env_var) or None


def resolve_provider_config(
    store: StateStore,
    *,
    provider: str | None = None,
    api_key: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    config_path: str | None = None,
) -> ProviderConfig | None:
    """Resolve the provider config for this invocation.

    Priority: explicit provider > ``config_path`` file > stored config.
    Returns None when nothing usable is configured.
    """
    config: ProviderConfig | None = None

    if provider:
        config = ProviderConfig(api_provider=provider, api_key=api_key, model_id=model, base_url=base_url)

    if config is None and config_path:
        try:
            with open(config_path, encoding="utf-8") as f:
                config = ProviderConfig.from_dict(json.load(f))
        except (OSError, ValueError, AttributeError) as ex:
            logger.warning(f"Could not load config file {config_path}: {ex}")

    if config is None:
        config = store.get_api_configuration()

    if config is None:
        return None

    if not config.api_key:
        key = _api_key_from_environment(config.api_provider)
        if key is None and config.api_provider:
            key = store.get_secret(f"{config.api_provider}ApiKey")
        if key:
            config = replace(config, api_key=key)

    return config
