from __future__ import annotations

from datetime import datetime

from cline_cli.state import HistoryRecord


class HistoryView:
    def __init__(self, *, line_prefix: str, preview_len: int = 60):
        self._line_prefix = line_prefix
        self._preview_len = preview_len

    def preview(self, value: str) -> str:
        flat = " ".join(value.split())
        if len(flat) <= self._preview_len:
            return flat
        return flat[: self._preview_len - 3] + "..."

    def format_entry(self, record: HistoryRecord) -> str:
        marker = "*" if record.is_favorited else " "
        created = datetime.fromtimestamp(record.ts / 1000).strftime("%Y-%m-%d %H:%M:%S")
        return f"{self._line_prefix}{marker} [{created}] {self.preview(record.task)} (id={record.id})"

    def format_history_lines(self, records: list[HistoryRecord], *, limit: int) -> list[str]:
        if not records:
            return [f"{self._line_prefix}No task history yet."]
        lines = [f"{self._line_prefix}Recent tasks (newest first):"]
        lines.extend(self.format_entry(r) for r in records[:limit])
        return lines
