from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

_last_ts = 0


def next_timestamp_ms() -> int:
    """Millisecond wall-clock timestamp, strictly increasing within the process."""
    global _last_ts
    ts = max(time.time_ns() // 1_000_000, _last_ts + 1)
    _last_ts = ts
    return ts


class StateNamespace(str, Enum):
    GLOBAL = "global"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class HistoryRecord:
    id: str
    ts: int
    task: str
    response: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    cache_writes: int = 0
    cache_reads: int = 0
    total_cost: float = 0
    is_favorited: bool = False

    @classmethod
    def create(cls, task: str, response: str) -> HistoryRecord:
        ts = next_timestamp_ms()
        return cls(id=str(ts), ts=ts, task=task, response=response)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryRecord:
        return cls(
            id=str(data["id"]),
            ts=int(data["ts"]),
            task=str(data["task"]),
            response=str(data.get("response", "")),
            tokens_in=int(data.get("tokensIn", 0)),
            tokens_out=int(data.get("tokensOut", 0)),
            cache_writes=int(data.get("cacheWrites", 0)),
            cache_reads=int(data.get("cacheReads", 0)),
            total_cost=float(data.get("totalCost", 0)),
            is_favorited=bool(data.get("isFavorited", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ts": self.ts,
            "task": self.task,
            "response": self.response,
            "tokensIn": self.tokens_in,
            "tokensOut": self.tokens_out,
            "cacheWrites": self.cache_writes,
            "cacheReads": self.cache_reads,
            "totalCost": self.total_cost,
            "isFavorited": self.is_favorited,
        }
