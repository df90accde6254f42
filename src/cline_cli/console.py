from __future__ import annotations

import sys
import threading

from cline_cli.chunk import Chunk, ErrorChunk

_SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


class Spinner:
    """Thread-based spinner that renders on the current line using \\r."""

    def __init__(self, label: str = " Processing task..."):
        self._label = label
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._stop.is_set():
            return
        self._stop.set()
        if self._thread:
            self._thread.join()
            sys.stdout.write("\r" + " " * (1 + len(self._label)) + "\r")
            sys.stdout.flush()

    def _run(self) -> None:
        i = 0
        try:
            while not self._stop.is_set():
                frame = _SPINNER_FRAMES[i % len(_SPINNER_FRAMES)] + self._label
                sys.stdout.write("\r" + frame)
                sys.stdout.flush()
                self._stop.wait(0.08)
                i += 1
        except (UnicodeEncodeError, OSError):
            pass  # Terminal doesn't support these characters; fail silently


class StreamPrinter:
    """Renders streamed chunks: text to stdout, errors to stderr.

    The spinner runs until the first chunk of a turn arrives.
    """

    def __init__(self, *, header: str = "Cline:"):
        self._header = header
        self._spinner: Spinner | None = None
        self._first_chunk = True

    def begin(self) -> None:
        self._first_chunk = True
        self._spinner = Spinner()
        self._spinner.start()

    def on_chunk(self, chunk: Chunk) -> None:
        if self._first_chunk:
            self._stop_spinner()
            print(self._header)
            self._first_chunk = False
        if isinstance(chunk, ErrorChunk):
            print(chunk.text, file=sys.stderr, flush=True)
        else:
            print(chunk.text, end="", flush=True)

    def end(self) -> None:
        self._stop_spinner()
        print("\n")

    def _stop_spinner(self) -> None:
        if self._spinner is not None:
            self._spinner.stop()
            self._spinner = None
