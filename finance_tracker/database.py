"""SQLite persistence layer for the finance tracker backend.

Each module collection is a table of JSON documents, which keeps the flat,
schema-per-module records of a document store while relying only on the
standard library :mod:`sqlite3` module. The repository exposes single-record
operations; bulk behaviour is built on top of them by the services.
"""
from __future__ import annotations

import json
import sqlite3
import threading
import time
import uuid
from pathlib import Path
from typing import Any, Mapping, Optional

from .models import SeedingSession, StoredRecord
from .modules import MODULES, get_module


def now_millis() -> int:
    return int(time.time() * 1000)


class SQLiteRepository:
    """Encapsulates all SQLite access for the application."""

    def __init__(self, database_path: Path | str) -> None:
        self._database_path = database_path
        # FastAPI serves sync routes from a worker thread pool, so the single
        # connection is shared and every statement runs under the lock.
        self._connection = sqlite3.connect(database_path, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._lock = threading.Lock()

    def close(self) -> None:
        """Close the underlying SQLite connection."""

        self._connection.close()

    def _write(self, sql: str, params: Any = ()) -> int:
        """Execute and commit one statement atomically, returning the row count."""

        with self._lock:
            cursor = self._connection.execute(sql, params)
            self._connection.commit()
            return cursor.rowcount

    def _fetch(self, sql: str, params: Any = ()) -> list[sqlite3.Row]:
        with self._lock:
            return self._connection.execute(sql, params).fetchall()

    # ------------------------------------------------------------------
    # Schema management
    # ------------------------------------------------------------------
    def initialise_schema(self) -> None:
        """Create all tables required by the application if they do not exist."""

        statements = [
            f"""
            CREATE TABLE IF NOT EXISTS {descriptor.table} (
                id TEXT PRIMARY KEY,
                creation_time INTEGER NOT NULL,
                is_seed_data INTEGER NOT NULL DEFAULT 0,
                document TEXT NOT NULL
            );
            """
            for descriptor in MODULES.values()
        ]
        statements.append(
            """
            CREATE TABLE IF NOT EXISTS seeding_sessions (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                start_time INTEGER NOT NULL,
                active INTEGER NOT NULL
            );
            """
        )
        with self._lock:
            self._connection.executescript("\n".join(statements))
            self._connection.commit()

    # ------------------------------------------------------------------
    # Module records
    # ------------------------------------------------------------------
    def insert_record(
        self,
        module_id: str,
        fields: Mapping[str, Any],
        *,
        is_seed_data: bool = False,
        creation_time: Optional[int] = None,
    ) -> StoredRecord:
        """Persist a new document and return it with its generated id."""

        table = get_module(module_id).table
        record = StoredRecord(
            id=uuid.uuid4().hex,
            module=module_id,
            creation_time=creation_time if creation_time is not None else now_millis(),
            is_seed_data=is_seed_data,
            fields=dict(fields),
        )
        self._write(
            f"""
            INSERT INTO {table} (id, creation_time, is_seed_data, document)
            VALUES (:id, :creation_time, :is_seed_data, :document)
            """,
            {
                "id": record.id,
                "creation_time": record.creation_time,
                "is_seed_data": int(record.is_seed_data),
                "document": json.dumps(record.fields),
            },
        )
        return record

    def get_record(self, module_id: str, record_id: str) -> Optional[StoredRecord]:
        table = get_module(module_id).table
        rows = self._fetch(f"SELECT * FROM {table} WHERE id = ?", (record_id,))
        if not rows:
            return None
        return _row_to_record(module_id, rows[0])

    def list_records(self, module_id: str, newest_first: bool = False) -> list[StoredRecord]:
        """Return every document of a module ordered by creation time."""

        table = get_module(module_id).table
        direction = "DESC" if newest_first else "ASC"
        rows = self._fetch(f"SELECT * FROM {table} ORDER BY creation_time {direction}, rowid {direction}")
        return [_row_to_record(module_id, row) for row in rows]

    def replace_record(self, module_id: str, record_id: str, fields: Mapping[str, Any]) -> bool:
        """Overwrite the document of an existing record.

        Returns ``False`` when no record matched ``record_id``.
        """

        table = get_module(module_id).table
        updated = self._write(
            f"UPDATE {table} SET document = ? WHERE id = ?",
            (json.dumps(dict(fields)), record_id),
        )
        return updated > 0

    def delete_record(self, module_id: str, record_id: str) -> bool:
        table = get_module(module_id).table
        return self._write(f"DELETE FROM {table} WHERE id = ?", (record_id,)) > 0

    def count_records(self, module_id: str) -> int:
        table = get_module(module_id).table
        rows = self._fetch(f"SELECT COUNT(*) AS total FROM {table}")
        return int(rows[0]["total"]) if rows else 0

    # ------------------------------------------------------------------
    # Seeding session
    # ------------------------------------------------------------------
    def mark_seeding_session(self, start_time: int) -> SeedingSession:
        """Open (or re-open) the single seeding session at ``start_time``."""

        self._write(
            """
            INSERT INTO seeding_sessions (id, start_time, active)
            VALUES (1, :start_time, 1)
            ON CONFLICT(id) DO UPDATE SET
                start_time=excluded.start_time,
                active=excluded.active
            ;
            """,
            {"start_time": start_time},
        )
        return SeedingSession(start_time=start_time, active=True)

    def get_active_seeding_session(self) -> Optional[SeedingSession]:
        rows = self._fetch(
            "SELECT start_time, active FROM seeding_sessions WHERE id = 1 AND active = 1"
        )
        if not rows:
            return None
        return SeedingSession(start_time=int(rows[0]["start_time"]), active=True)

    def deactivate_seeding_session(self) -> None:
        self._write("UPDATE seeding_sessions SET active = 0 WHERE id = 1")


def _row_to_record(module_id: str, row: sqlite3.Row) -> StoredRecord:
    return StoredRecord(
        id=row["id"],
        module=module_id,
        creation_time=int(row["creation_time"]),
        is_seed_data=bool(row["is_seed_data"]),
        fields=json.loads(row["document"]),
    )
