from __future__ import annotations

import os
import tempfile
import unittest

from services.gateway.app.store import VALID_KINDS, DatasetStore


class DatasetStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.NamedTemporaryFile(delete=False)
        self._tmp.close()
        self.store = DatasetStore(self._tmp.name)

    def tearDown(self) -> None:
        try:
            os.remove(self._tmp.name)
        except FileNotFoundError:
            pass

    def test_create_and_fetch(self) -> None:
        record = self.store.create_dataset(
            "Studio 8",
            "smaart",
            {"rt60_by_freq": {"125": 0.52}, "sti_by_freq": {}, "average_sti": 0.0},
            filename="room.txt",
        )
        fetched = self.store.get_dataset(record.id)
        self.assertIsNotNone(fetched)
        assert fetched is not None
        self.assertEqual(fetched.room, "Studio 8")
        self.assertEqual(fetched.kind, "smaart")
        self.assertEqual(fetched.filename, "room.txt")
        self.assertEqual(fetched.payload["rt60_by_freq"], {"125": 0.52})

    def test_unknown_id_returns_none(self) -> None:
        self.assertIsNone(self.store.get_dataset("missing"))

    def test_invalid_kind_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            self.store.create_dataset("Studio 8", "wav", {})
        with self.assertRaises(ValueError):
            self.store.list_datasets(kind="wav")

    def test_list_datasets_returns_newest_first(self) -> None:
        first = self.store.create_dataset("Studio 8", "csv", {"records": []})
        second = self.store.create_dataset("Studio 8", "csv", {"records": []})
        datasets = self.store.list_datasets()
        self.assertEqual([record.id for record in datasets[:2]], [second.id, first.id])

    def test_list_datasets_filters_by_kind_and_room(self) -> None:
        csv_record = self.store.create_dataset("Studio 8", "csv", {"records": []})
        smaart_record = self.store.create_dataset("Studio 8", "smaart", {})
        other_room = self.store.create_dataset("Booth", "smaart", {})

        smaart_ids = [record.id for record in self.store.list_datasets(kind="smaart")]
        self.assertIn(smaart_record.id, smaart_ids)
        self.assertIn(other_room.id, smaart_ids)
        self.assertNotIn(csv_record.id, smaart_ids)

        studio_smaart = self.store.list_datasets(kind="smaart", room="Studio 8", limit=1)
        self.assertEqual([record.id for record in studio_smaart], [smaart_record.id])

    def test_kind_counts_include_all_kinds(self) -> None:
        self.store.create_dataset("Studio 8", "csv", {})
        self.store.create_dataset("Studio 8", "csv", {})
        counts = self.store.kind_counts()
        self.assertEqual(set(counts), VALID_KINDS)
        self.assertEqual(counts["csv"], 2)
        self.assertEqual(counts["smaart"], 0)

    def test_delete_dataset_and_delete_all(self) -> None:
        record = self.store.create_dataset("Studio 8", "csv", {})
        self.store.delete_dataset(record.id)
        self.assertIsNone(self.store.get_dataset(record.id))
        with self.assertRaises(KeyError):
            self.store.delete_dataset(record.id)

        self.store.create_dataset("Studio 8", "smaart", {})
        self.store.delete_all()
        self.assertEqual(self.store.list_datasets(), [])

    def test_summary_omits_payload(self) -> None:
        record = self.store.create_dataset("Studio 8", "csv", {"records": [{"frequency": 20.0}]})
        summary = record.summary()
        self.assertNotIn("payload", summary)
        self.assertEqual(summary["kind"], "csv")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
