from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger


class StateWriteError(OSError):
    pass


class JsonFile:
    """One pretty-printed UTF-8 JSON document on disk.

    Reads never fail: a missing or malformed file yields ``default``. Writes go
    to a temporary sibling that replaces the target, so a failed write leaves
    the previous contents intact.
    """

    def __init__(self, path: Path, *, mode: int = 0o644):
        self._path = path
        self._mode = mode

    @property
    def path(self) -> Path:
        return self._path

    def read(self, expected_type: type, default: Any) -> Any:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return default
        except (OSError, ValueError) as ex:
            logger.warning(f"Ignoring unreadable state file {self._path}: {ex}")
            return default
        if not isinstance(data, expected_type):
            logger.warning(f"Ignoring state file {self._path}: expected {expected_type.__name__}")
            return default
        return data

    def write(self, data: Any) -> None:
        """Replace the file with ``data``; raises StateWriteError on failure."""
        text = json.dumps(data, indent=2, ensure_ascii=False)
        tmp_path: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.chmod(tmp_path, self._mode)
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as ex:
            raise StateWriteError(f"Failed to write {self._path}: {ex}") from ex
        finally:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)

    def try_write(self, data: Any) -> bool:
        try:
            self.write(data)
        except StateWriteError as ex:
            logger.warning(str(ex))
            return False
        return True
