from collections.abc import Callable
from dataclasses import dataclass, field

import httpx

from cline_cli.app_config import ProviderConfig
from cline_cli.chunk import Chunk
from cline_cli.state import StateStore


def _ignore_chunk(chunk: Chunk) -> None:
    return None


@dataclass
class AgentConfig:
    provider_config: ProviderConfig
    state_store: StateStore
    working_directory: str
    on_chunk: Callable[[Chunk], None] = _ignore_chunk
    on_completed: Callable[[], None] | None = None
    on_failed: Callable[[BaseException], None] | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)
