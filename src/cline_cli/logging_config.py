import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from loguru import logger

from cline_cli.state.store import default_global_storage_path

_CONSOLE_FORMAT = "<level>{level:<8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {name}:{function}:{line} - {message}"


def default_log_path() -> Path:
    return default_global_storage_path().parent / "logs" / "cline.log"


def _add_console_sink(level: str) -> str:
    # stdout is reserved for the streamed response
    logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT)
    return f"console (stderr, {level})"


def _add_file_sink(level: str, path: str | None = None, rotation: str = "5 MB", retention: int = 3) -> str:
    log_path = Path(path) if path else default_log_path()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(str(log_path), level=level, format=_FILE_FORMAT, rotation=rotation, retention=retention)
    return f"file ({log_path}, {level})"


_SINKS: dict[str, Callable[..., str]] = {
    "console": _add_console_sink,
    "file": _add_file_sink,
}

_DEFAULT_CONSUMERS: list[dict[str, Any]] = [
    {"type": "console"},
    {"type": "file", "level": "DEBUG"},
]


def setup_logging(
    level: str = "WARNING",
    consumers: list[dict[str, Any]] | None = None,
) -> list[str]:
    """Replace all loguru sinks with the configured consumers.

    Each consumer is a ``{"type": "console" | "file", "level": ..., ...}`` entry
    from ``LogConsumers`` in config.json; extra keys are passed to the sink
    (``path``, ``rotation``, ``retention`` for files). A consumer that cannot be
    registered is skipped with a warning. Returns one description per sink.
    """
    logger.remove()

    descriptions: list[str] = []
    for config in consumers if consumers is not None else _DEFAULT_CONSUMERS:
        sink_type = config.get("type", "")
        add_sink = _SINKS.get(sink_type)
        if add_sink is None:
            logger.warning(f"Unknown log consumer type: {sink_type!r}")
            continue

        options = {k: v for k, v in config.items() if k not in ("type", "level")}
        try:
            descriptions.append(add_sink(config.get("level", level), **options))
        except (OSError, TypeError) as ex:
            logger.warning(f"Could not register {sink_type} log consumer: {ex}")

    return descriptions
