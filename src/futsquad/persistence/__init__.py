"""Persistence layer for saved roster sessions."""

from __future__ import annotations

import json
import logging
import math
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol


logger = logging.getLogger(__name__)

SESSION_KEY = "fut_club_data"
DEFAULT_SESSION_FILE_NAME = "saved_club.csv"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store; contents vanish with the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqliteKeyValueStore:
    """Simple SQLite-backed blob store keyed by fixed strings."""

    def __init__(self, db_path: Path | str):
        env_db = os.getenv("FUTSQUAD_DB_PATH")
        self.db_path = Path(env_db) if env_db else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS blobs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM blobs WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def remove(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM blobs WHERE key = ?", (key,))
            conn.commit()


@dataclass(frozen=True)
class SessionSnapshot:
    csv_text: str
    coins: int
    file_name: str


def save_session(store: KeyValueStore, snapshot: SessionSnapshot) -> None:
    payload = {
        "csv": snapshot.csv_text,
        "coins": snapshot.coins,
        "fileName": snapshot.file_name,
    }
    store.set(SESSION_KEY, json.dumps(payload))


def has_saved_session(store: KeyValueStore) -> bool:
    return store.get(SESSION_KEY) is not None


def load_session(store: KeyValueStore) -> Optional[SessionSnapshot]:
    """Return the saved session, or ``None`` when missing or unreadable.

    An unreadable blob is removed so it does not keep failing.
    """

    raw = store.get(SESSION_KEY)
    if raw is None:
        return None
    try:
        data = json.loads(raw)
        csv_text = data["csv"]
        if not isinstance(csv_text, str):
            raise TypeError("csv must be a string")
        coins = data.get("coins") or 0
        if isinstance(coins, bool) or not isinstance(coins, (int, float)) or coins < 0:
            coins = 0
        if not math.isfinite(coins):
            raise ValueError(f"coins must be finite, got {coins!r}")
        coins = int(coins)
        file_name = data.get("fileName") or DEFAULT_SESSION_FILE_NAME
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("Discarding corrupt saved session: %s", exc)
        store.remove(SESSION_KEY)
        return None
    return SessionSnapshot(csv_text=csv_text, coins=coins, file_name=str(file_name))


__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SESSION_KEY",
    "SessionSnapshot",
    "SqliteKeyValueStore",
    "has_saved_session",
    "load_session",
    "save_session",
]
