from cline_cli.state.json_file import JsonFile, StateWriteError
from cline_cli.state.models import HistoryRecord, StateNamespace
from cline_cli.state.store import MAX_HISTORY_RECORDS, StateStore

__all__ = [
    "HistoryRecord",
    "JsonFile",
    "MAX_HISTORY_RECORDS",
    "StateNamespace",
    "StateStore",
    "StateWriteError",
]
