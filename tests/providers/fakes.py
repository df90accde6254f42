import json
from collections.abc import AsyncIterator, Callable

import httpx


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


def split_at(data: bytes, points: list[int]) -> list[bytes]:
    bounds = [0, *sorted(points), len(data)]
    return [data[a:b] for a, b in zip(bounds, bounds[1:])]


class RecordingTransport(httpx.MockTransport):
    """Serves one streamed body per request and records what was sent."""

    def __init__(
        self,
        pieces: list[bytes] | None = None,
        *,
        status_code: int = 200,
        error: Exception | None = None,
        after_pieces: Callable[[], None] | None = None,
    ):
        self.requests: list[httpx.Request] = []
        self.pieces_read = 0
        self._pieces = pieces or []
        self._status_code = status_code
        self._error = error
        self._after_pieces = after_pieces
        super().__init__(self._handle)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        return httpx.Response(self._status_code, content=self._body())

    async def _body(self) -> AsyncIterator[bytes]:
        for piece in self._pieces:
            self.pieces_read += 1
            yield piece
        if self._after_pieces is not None:
            self._after_pieces()


async def collect(chunks: AsyncIterator) -> list:
    return [c async for c in chunks]
