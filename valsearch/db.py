"""
File: db.py
Purpose: Connection management for the SQLite FTS5 index file, schema
         bootstrap, and async wrappers for the FastAPI lifespan.

Env:
  DB_PATH=./valtown.db     # SQLite file holding the FTS5 table
"""

from __future__ import annotations

import asyncio
import sqlite3

from .config import settings
from .instrumentation import DB_TIME
from .repository import RecordIndex


def connect(path: str | None = None) -> sqlite3.Connection:
    """Open the index database. The connection is shared across threads; RecordIndex serializes access."""
    with DB_TIME.labels(route="connect").time():
        conn = sqlite3.connect(path or settings.DB_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA busy_timeout=5000")
    return conn


# ----------------------- SYNC implementations -----------------------

def open_index(path: str | None = None) -> RecordIndex:
    """Open the database and make sure the FTS table exists."""
    index = RecordIndex(connect(path))
    index.ensure_schema()
    return index


# ----------------------- ASYNC wrappers (awaitable in lifespan) -----------------------

async def init_index(app, path: str | None = None) -> RecordIndex:
    """Open the index and attach it to app.state; safe to `await` in FastAPI lifespan."""
    index = await asyncio.to_thread(open_index, path)
    app.state.index = index
    return index


async def close_index(app) -> None:
    """Close the index connection and clear the handle."""
    index: RecordIndex | None = getattr(app.state, "index", None)
    if index is not None:
        await asyncio.to_thread(index.close)
        app.state.index = None
