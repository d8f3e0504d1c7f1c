"""
File: repository.py
Purpose: Data access layer for the full-text record index (upsert, search, purge).

Rows live in `records_data` (id is UNIQUE, so delete-by-id is an index
lookup). `records` is an external-content FTS5 table over it, kept in step
by triggers.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Iterable, List

from .instrumentation import DB_TIME
from .schemas.records import Record

log = logging.getLogger("valsearch.repository")

_COLUMNS = "id, handle, name, normalized_name, body"

SCHEMA_SQL = [
    """
    CREATE TABLE IF NOT EXISTS records_data (
      seq             INTEGER PRIMARY KEY,
      id              TEXT NOT NULL UNIQUE,
      handle          TEXT NOT NULL,
      name            TEXT NOT NULL,
      normalized_name TEXT NOT NULL,
      body            TEXT NOT NULL
    );
    """,
    f"""
    CREATE VIRTUAL TABLE IF NOT EXISTS records
    USING fts5({_COLUMNS}, content='records_data', content_rowid='seq');
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS records_data_ai AFTER INSERT ON records_data BEGIN
      INSERT INTO records(rowid, {_COLUMNS})
      VALUES (new.seq, new.id, new.handle, new.name, new.normalized_name, new.body);
    END;
    """,
    f"""
    CREATE TRIGGER IF NOT EXISTS records_data_ad AFTER DELETE ON records_data BEGIN
      INSERT INTO records(records, rowid, {_COLUMNS})
      VALUES ('delete', old.seq, old.id, old.handle, old.name, old.normalized_name, old.body);
    END;
    """,
]


class IndexQueryError(Exception):
    """Raised when the FTS engine rejects a query string."""


class RecordIndex:
    """
    Full-text index of records keyed by id.

    The connection is used from the event loop (sync pass) and from FastAPI's
    threadpool (search), so every statement runs under one lock.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn
        self._lock = threading.Lock()

    def ensure_schema(self) -> None:
        """Create the data table, FTS table and sync triggers if missing (idempotent)."""
        with DB_TIME.labels(route="schema").time():
            with self._lock, self._conn:
                if self._is_legacy_layout():
                    # self-contained FTS table from older builds; the index is rebuilt by the next sync
                    log.warning("Dropping legacy records table; next sync repopulates it")
                    self._conn.execute("DROP TABLE records")
                for s in SCHEMA_SQL:
                    self._conn.execute(s)

    def _is_legacy_layout(self) -> bool:
        names = {r[0] for r in self._conn.execute(
            "SELECT name FROM sqlite_master WHERE name IN ('records', 'records_data')"
        )}
        return "records" in names and "records_data" not in names

    def upsert(self, record: Record) -> None:
        """Replace any row for record.id with record, in one transaction."""
        with DB_TIME.labels(route="upsert").time():
            with self._lock, self._conn:
                self._conn.execute("DELETE FROM records_data WHERE id = ?", (record.id,))
                self._conn.execute(
                    f"INSERT INTO records_data ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (record.id, record.handle, record.name, record.normalized_name, record.body),
                )

    def search(self, query: str | None) -> List[Record]:
        """Return records matching `query`, best match first. Empty query => no results."""
        if not query:
            return []
        sql = f"SELECT {_COLUMNS} FROM records WHERE records MATCH ? ORDER BY rank"
        with DB_TIME.labels(route="search").time():
            try:
                with self._lock:
                    rows = self._conn.execute(sql, (query,)).fetchall()
            except sqlite3.OperationalError as e:
                raise IndexQueryError(f"invalid query {query!r}: {e}") from e
        return [Record(**dict(r)) for r in rows]

    def get(self, record_id: str) -> List[Record]:
        """Return every row stored under `record_id` (at most one when upserts are respected)."""
        with self._lock:
            rows = self._conn.execute(
                f"SELECT {_COLUMNS} FROM records_data WHERE id = ?", (record_id,)
            ).fetchall()
        return [Record(**dict(r)) for r in rows]

    def count(self) -> int:
        """Number of rows in the index."""
        with self._lock:
            return self._conn.execute("SELECT count(*) FROM records_data").fetchone()[0]

    def purge_except(self, keep_ids: Iterable[str]) -> int:
        """Delete every row whose id is not in `keep_ids`; return how many ids were dropped."""
        keep = set(keep_ids)
        with DB_TIME.labels(route="purge").time():
            with self._lock, self._conn:
                stored = {r[0] for r in self._conn.execute("SELECT id FROM records_data")}
                stale = sorted(stored - keep)
                self._conn.executemany("DELETE FROM records_data WHERE id = ?", [(i,) for i in stale])
        if stale:
            log.info(f"Purged {len(stale)} records missing upstream")
        return len(stale)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
