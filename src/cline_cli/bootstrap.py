from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from cline_cli.agent import Agent
from cline_cli.agent_config import AgentConfig
from cline_cli.app_config import ProviderConfig, resolve_provider_config
from cline_cli.console import StreamPrinter
from cline_cli.state import StateStore


@dataclass
class RuntimeOptions:
    directory: str
    config_path: str | None = None
    api_key: str | None = None
    model: str | None = None
    provider: str | None = None
    base_url: str | None = None


@dataclass
class AppRuntime:
    agent: Agent
    store: StateStore
    printer: StreamPrinter
    provider_config: ProviderConfig
    working_directory: str


def bootstrap_runtime(options: RuntimeOptions, *, store: StateStore | None = None) -> AppRuntime | None:
    """Build the agent for one invocation, or None when no provider is configured."""
    working_directory = str(Path(options.directory).resolve())
    store = store or StateStore(working_directory)

    provider_config = resolve_provider_config(
        store,
        provider=options.provider,
        api_key=options.api_key,
        model=options.model,
        base_url=options.base_url,
        config_path=options.config_path,
    )
    if provider_config is None:
        logger.info("No API configuration found")
        return None

    printer = StreamPrinter()
    agent = Agent(
        AgentConfig(
            provider_config=provider_config,
            state_store=store,
            working_directory=working_directory,
            on_chunk=printer.on_chunk,
        )
    )
    return AppRuntime(
        agent=agent,
        store=store,
        printer=printer,
        provider_config=provider_config,
        working_directory=working_directory,
    )
