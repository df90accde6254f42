import json

from cline_cli.state import MAX_HISTORY_RECORDS, HistoryRecord
from tests.state.base import StateStoreTestCase


class HistoryRecordTests(StateStoreTestCase):
    def test_create_defaults(self) -> None:
        record = HistoryRecord.create("task", "response")
        self.assertEqual(str(record.ts), record.id)
        self.assertEqual(0, record.tokens_in)
        self.assertEqual(0, record.tokens_out)
        self.assertEqual(0, record.cache_writes)
        self.assertEqual(0, record.cache_reads)
        self.assertEqual(0, record.total_cost)
        self.assertFalse(record.is_favorited)

    def test_ids_are_unique_and_increasing(self) -> None:
        records = [HistoryRecord.create(f"t{i}", "") for i in range(50)]
        ids = [int(r.id) for r in records]
        self.assertEqual(len(ids), len(set(ids)))
        self.assertEqual(sorted(ids), ids)

    def test_disk_format_uses_camel_case(self) -> None:
        self._store.append_history(HistoryRecord.create("do it", "done"))
        on_disk = json.loads((self._global / "task-history.json").read_text(encoding="utf-8"))
        self.assertEqual(
            {"id", "ts", "task", "response", "tokensIn", "tokensOut", "cacheWrites", "cacheReads", "totalCost", "isFavorited"},
            set(on_disk[0]),
        )
        self.assertEqual("do it", on_disk[0]["task"])


class AppendHistoryTests(StateStoreTestCase):
    def test_newest_first(self) -> None:
        self._store.append_history(HistoryRecord.create("first", "a"))
        self._store.append_history(HistoryRecord.create("second", "b"))
        self.assertEqual(["second", "first"], [r.task for r in self._store.read_history()])

    def test_capped_at_most_recent_records(self) -> None:
        for i in range(MAX_HISTORY_RECORDS + 1):
            self._store.append_history(HistoryRecord.create(f"task {i}", ""))

        history = self._store.read_history()
        self.assertEqual(100, len(history))
        self.assertEqual(f"task {MAX_HISTORY_RECORDS}", history[0].task)
        self.assertEqual("task 1", history[-1].task)
        self.assertNotIn("task 0", [r.task for r in history])

        reopened = self._open_store().read_history()
        self.assertEqual([r.id for r in history], [r.id for r in reopened])

    def test_history_survives_reopen(self) -> None:
        record = HistoryRecord.create("persist me", "ok")
        self._store.append_history(record)
        self.assertEqual([record], self._open_store().read_history())

    def test_malformed_entries_are_skipped(self) -> None:
        self._global.mkdir(parents=True, exist_ok=True)
        good = HistoryRecord.create("good", "r").to_dict()
        (self._global / "task-history.json").write_text(
            json.dumps([good, {"id": "x"}, "junk", {"id": "2", "ts": "not-int", "task": "t"}]),
            encoding="utf-8",
        )
        history = self._open_store().read_history()
        self.assertEqual(["good"], [r.task for r in history])

    def test_read_history_returns_a_copy(self) -> None:
        self._store.append_history(HistoryRecord.create("t", ""))
        self._store.read_history().clear()
        self.assertEqual(1, len(self._store.read_history()))

    def test_out_of_range_numbers_are_skipped(self) -> None:
        self._global.mkdir(parents=True, exist_ok=True)
        (self._global / "task-history.json").write_text(
            '[{"id": "1", "ts": Infinity, "task": "t"},'
            ' {"id": "3", "ts": 7, "task": "t", "tokensIn": -Infinity},'
            ' {"id": "2", "ts": 5, "task": "ok"}]',
            encoding="utf-8",
        )
        history = self._open_store().read_history()
        self.assertEqual(["2"], [r.id for r in history])
