"""Persistence helpers for uploaded measurement datasets."""

from __future__ import annotations

import json
import sqlite3
import threading
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_DB_PATH = Path(__file__).resolve().parent / "gateway.db"
VALID_KINDS = {"csv", "smaart"}


@dataclass(slots=True)
class DatasetRecord:
    """Represents a parsed upload kept for the dashboard."""

    id: str
    room: str
    kind: str
    created_at: float
    filename: str | None
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "room": self.room,
            "kind": self.kind,
            "created_at": self.created_at,
            "filename": self.filename,
            "payload": self.payload,
        }

    def summary(self) -> dict[str, Any]:
        data = self.to_dict()
        data.pop("payload")
        return data


class DatasetStore:
    """Lightweight SQLite-backed store for parsed measurement uploads."""

    def __init__(self, db_path: str | Path | None = None) -> None:
        self._path = Path(db_path) if db_path else DEFAULT_DB_PATH
        parent = self._path.parent
        if str(parent) not in {"", "."} and not parent.exists():
            parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(
            str(self._path), timeout=30, isolation_level=None, check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS datasets (
                    id TEXT PRIMARY KEY,
                    room TEXT NOT NULL,
                    kind TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    filename TEXT,
                    payload TEXT NOT NULL
                )
                """
            )

    def create_dataset(
        self,
        room: str,
        kind: str,
        payload: dict[str, Any],
        *,
        filename: str | None = None,
    ) -> DatasetRecord:
        if kind not in VALID_KINDS:
            raise ValueError(f"Unsupported dataset kind: {kind}")
        record = DatasetRecord(
            id=uuid.uuid4().hex,
            room=room,
            kind=kind,
            created_at=time.time(),
            filename=filename,
            payload=dict(payload),
        )
        row = (
            record.id,
            record.room,
            record.kind,
            record.created_at,
            record.filename,
            json.dumps(record.payload),
        )
        with self._lock:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO datasets (id, room, kind, created_at, filename, payload) VALUES (?, ?, ?, ?, ?, ?)",
                    row,
                )
        return record

    def get_dataset(self, dataset_id: str) -> DatasetRecord | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM datasets WHERE id = ?", (dataset_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    def list_datasets(
        self,
        *,
        limit: int = 20,
        kind: str | None = None,
        room: str | None = None,
    ) -> list[DatasetRecord]:
        if kind is not None and kind not in VALID_KINDS:
            raise ValueError(f"Unsupported kind filter: {kind}")

        clauses: list[str] = []
        params: list[Any] = []
        if kind is not None:
            clauses.append("kind = ?")
            params.append(kind)
        if room is not None:
            clauses.append("room = ?")
            params.append(room)

        query = "SELECT * FROM datasets"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        params.append(max(limit, 1))

        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_record(row) for row in rows]

    def delete_dataset(self, dataset_id: str) -> None:
        with self._lock:
            with self._connect() as conn:
                cursor = conn.execute("DELETE FROM datasets WHERE id = ?", (dataset_id,))
                if cursor.rowcount == 0:
                    raise KeyError(f"Unknown dataset id: {dataset_id}")

    def kind_counts(self) -> dict[str, int]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT kind, COUNT(*) as count FROM datasets GROUP BY kind"
            ).fetchall()
        counts: dict[str, int] = {kind: 0 for kind in VALID_KINDS}
        for row in rows:
            counts[row["kind"]] = int(row["count"])
        return counts

    def delete_all(self) -> None:
        with self._lock:
            with self._connect() as conn:
                conn.execute("DELETE FROM datasets")

    def _row_to_record(self, row: sqlite3.Row) -> DatasetRecord:
        payload = json.loads(row["payload"]) if row["payload"] else {}
        return DatasetRecord(
            id=row["id"],
            room=row["room"],
            kind=row["kind"],
            created_at=row["created_at"],
            filename=row["filename"] if row["filename"] else None,
            payload=payload,
        )


__all__ = ["DatasetStore", "DatasetRecord", "VALID_KINDS"]
