from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from cline_cli.app_config import ProviderConfig
from cline_cli.state.json_file import JsonFile
from cline_cli.state.models import HistoryRecord, StateNamespace

MAX_HISTORY_RECORDS = 100
STATE_DIR_NAME = ".cline"


def default_global_storage_path() -> Path:
    home = os.environ.get("CLINE_HOME")
    root = Path(home) if home else Path.home() / STATE_DIR_NAME
    return root / "global"


def _reject_non_string_keys(value: Any) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"State object keys must be strings, got {type(key).__name__}")
            _reject_non_string_keys(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _reject_non_string_keys(item)


def _json_copy(value: Any) -> Any:
    # Round-trips through JSON so stored values are detached from the caller
    # and non-serializable values fail before any state changes.
    _reject_non_string_keys(value)
    return json.loads(json.dumps(value))


class StateStore:
    """JSON-backed global/workspace settings, secrets, provider config and history.

    Every mutation rewrites the affected file before returning. Read failures
    degrade to empty state; write failures are logged and reported through the
    boolean return value while the in-memory state stays authoritative.

    Values must be JSON-serializable with string object keys. Tuples come back
    as lists.
    """

    def __init__(self, workspace_folder: str | Path, *, global_storage_path: str | Path | None = None):
        self._workspace_folder = Path(workspace_folder)
        self._global_storage_path = (
            Path(global_storage_path) if global_storage_path is not None else default_global_storage_path()
        )
        self._workspace_storage_path = self._workspace_folder / STATE_DIR_NAME

        self._state_files = {
            StateNamespace.GLOBAL: JsonFile(self._global_storage_path / "state.json"),
            StateNamespace.WORKSPACE: JsonFile(self._workspace_storage_path / "state.json"),
        }
        self._secrets_file = JsonFile(self._global_storage_path / "secrets.json", mode=0o600)
        self._api_config_file = JsonFile(self._global_storage_path / "api-config.json", mode=0o600)
        self._history_file = JsonFile(self._global_storage_path / "task-history.json")

        self._state: dict[StateNamespace, dict[str, Any]] = {
            ns: f.read(dict, {}) for ns, f in self._state_files.items()
        }
        self._secrets: dict[str, str] = {
            k: v for k, v in self._secrets_file.read(dict, {}).items() if isinstance(v, str)
        }
        self._history: list[HistoryRecord] = self._load_history()

    @property
    def workspace_folder(self) -> Path:
        return self._workspace_folder

    @property
    def global_storage_path(self) -> Path:
        return self._global_storage_path

    # -- key/value state --

    def get(self, namespace: StateNamespace | str, key: str, default: Any = None) -> Any:
        values = self._state[StateNamespace(namespace)]
        if key not in values:
            return default
        return copy.deepcopy(values[key])

    def set(self, namespace: StateNamespace | str, key: str, value: Any) -> bool:
        ns = StateNamespace(namespace)
        self._state[ns][key] = _json_copy(value)
        return self._state_files[ns].try_write(self._state[ns])

    def keys(self, namespace: StateNamespace | str) -> list[str]:
        return list(self._state[StateNamespace(namespace)])

    # -- secrets --

    def get_secret(self, key: str) -> str | None:
        return self._secrets.get(key)

    def set_secret(self, key: str, value: str) -> bool:
        if not isinstance(value, str):
            raise TypeError(f"Secret values must be strings, got {type(value).__name__}")
        self._secrets[key] = value
        return self._secrets_file.try_write(self._secrets)

    def delete_secret(self, key: str) -> bool:
        if self._secrets.pop(key, None) is None:
            return True
        return self._secrets_file.try_write(self._secrets)

    # -- provider configuration --

    def get_api_configuration(self) -> ProviderConfig | None:
        data = self._api_config_file.read(dict, None)
        if data is None:
            return None
        return ProviderConfig.from_dict(data)

    def save_api_configuration(self, config: ProviderConfig) -> None:
        """Persist the provider config; raises StateWriteError on failure."""
        self._api_config_file.write(config.to_dict())
        logger.info(f"Saved API configuration to {self._api_config_file.path}")

    # -- task history --

    def _load_history(self) -> list[HistoryRecord]:
        records: list[HistoryRecord] = []
        for item in self._history_file.read(list, []):
            try:
                records.append(HistoryRecord.from_dict(item))
            except (KeyError, TypeError, ValueError, OverflowError) as ex:
                logger.debug(f"Skipping malformed history record: {ex}")
        return records[:MAX_HISTORY_RECORDS]

    def read_history(self) -> list[HistoryRecord]:
        return list(self._history)

    def append_history(self, record: HistoryRecord) -> bool:
        self._history.insert(0, record)
        del self._history[MAX_HISTORY_RECORDS:]
        return self._history_file.try_write([r.to_dict() for r in self._history])

    # -- lifecycle --

    def close(self) -> None:
        for ns, f in self._state_files.items():
            if self._state[ns]:
                f.try_write(self._state[ns])
        if self._secrets:
            self._secrets_file.try_write(self._secrets)
