from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TextChunk:
    text: str
    type: str = field(default="text", init=False)


@dataclass(frozen=True)
class ErrorChunk:
    text: str
    type: str = field(default="error", init=False)


Chunk = TextChunk | ErrorChunk
