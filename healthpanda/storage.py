# -*- coding: utf-8 -*-
"""Client-local key-value storage (SQLite) and the token credential provider."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Optional, Protocol

TOKEN_KEY = "access_token"
PROFILE_KEY = "user_data"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, *keys: str) -> None: ...


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_store_db(db_path: Path) -> None:
    conn = connect(db_path)
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            );
            """
        )
        conn.commit()
    finally:
        conn.close()


@contextmanager
def db_conn(db_path: Path) -> Iterator[sqlite3.Connection]:
    conn = connect(db_path)
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


class SQLiteKeyValueStore:
    """Durable slots in a single SQLite table. Last writer wins; no locking."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = Path(db_path).expanduser()
        init_store_db(self.db_path)

    def get(self, key: str) -> Optional[str]:
        with db_conn(self.db_path) as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with db_conn(self.db_path) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, _utc_now()),
            )

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        with db_conn(self.db_path) as conn:
            conn.executemany("DELETE FROM kv WHERE key = ?", [(k,) for k in keys])


class MemoryKeyValueStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)


class TokenCredentials:
    """Owns the persisted bearer token. Shared by the HTTP auth stage and the session store."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get_token(self) -> Optional[str]:
        token = self.store.get(TOKEN_KEY)
        return token or None

    def save_token(self, token: str) -> None:
        self.store.set(TOKEN_KEY, token)

    def clear(self) -> None:
        self.store.delete(TOKEN_KEY, PROFILE_KEY)
