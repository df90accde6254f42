from __future__ import annotations

import codecs
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
from loguru import logger

from cline_cli.chunk import Chunk, ErrorChunk, TextChunk

# (text delta or None, end of stream)
Frame = tuple[str | None, bool]
FrameParser = Callable[[str], Frame]

SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"


class LineBuffer:
    """Incrementally decodes raw bytes and splits them into complete lines.

    The trailing fragment after the last newline stays buffered until more
    bytes arrive, and multi-byte characters split across reads are held back
    by the incremental decoder.
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer = ""

    def feed(self, data: bytes) -> list[str]:
        self._buffer += self._decoder.decode(data)
        *lines, self._buffer = self._buffer.split("\n")
        return [line.removesuffix("\r") for line in lines]

    def flush(self) -> str:
        tail = (self._buffer + self._decoder.decode(b"", final=True)).removesuffix("\r")
        self._buffer = ""
        return tail


def loads_or_none(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        logger.debug(f"Skipping unparsable frame: {text[:200]!r}")
        return None


def text_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def parse_sse_line(line: str, extract_delta: Callable[[Any], str | None]) -> Frame:
    if not line.startswith(SSE_DATA_PREFIX):
        return None, False
    data = line[len(SSE_DATA_PREFIX):]
    if data == SSE_DONE:
        return None, True
    parsed = loads_or_none(data)
    if not isinstance(parsed, dict):
        return None, False
    return extract_delta(parsed), False


async def stream_chunks(
    url: str,
    *,
    headers: dict[str, str],
    body: dict[str, Any],
    parse_frame: FrameParser,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[Chunk]:
    """POST ``body`` and decode the streamed response into chunks.

    Never raises: a non-success status or any failure of the request yields a
    single ErrorChunk and ends the stream.
    """
    try:
        logger.debug(f"API request: url={url}, model={body.get('model')}")
        async with httpx.AsyncClient(timeout=None, transport=transport) as client:
            async with client.stream("POST", url, headers=headers, json=body) as response:
                if not response.is_success:
                    logger.warning(f"API request failed: {response.status_code} {response.reason_phrase}")
                    yield ErrorChunk(f"API request failed: {response.status_code} {response.reason_phrase}")
                    return

                lines = LineBuffer()
                async for data in response.aiter_bytes():
                    for line in lines.feed(data):
                        text, done = parse_frame(line)
                        if text is not None:
                            yield TextChunk(text)
                        if done:
                            logger.debug("API response: end of stream sentinel")
                            return

                text, _ = parse_frame(lines.flush())
                if text is not None:
                    yield TextChunk(text)
                logger.debug("API response: body exhausted")
    except Exception as ex:
        logger.warning(f"Streaming request to {url} failed: {ex!r}")
        yield ErrorChunk(f"Error: {ex}")
