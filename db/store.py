"""Key-value persistence on top of the SQLite database."""

import json
import sqlite3
from typing import List, Optional

from logger import get_logger

logger = get_logger()

ACCOUNTS_KEY = "accounts"
CATEGORIES_KEY = "categories"
TRANSACTIONS_KEY = "transactions"


class KeyValueStore:
    """Stores whole blobs by key in the kv_store table.

    Storage errors, including an unreachable database location, are
    logged and swallowed: a failed read looks like a missing key
    and a failed write returns False. Callers keep their
    in-memory state as the source of truth.

    Args:
        db_manager: Database manager providing connections.
    """

    def __init__(self, db_manager):
        self.db_manager = db_manager

    def get(self, key: str) -> Optional[bytes]:
        """Read the blob stored under ``key``.

        Args:
            key: Blob key.

        Returns:
            The stored bytes, or None if absent or unreadable.
        """
        try:
            with self.db_manager.connect() as conn:
                cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
                row = cursor.fetchone()
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Could not read '{key}' from storage: {e}")
            return None

        if row is None:
            return None
        value = row[0]
        return value.encode("utf-8") if isinstance(value, str) else bytes(value)

    def set(self, key: str, value: bytes) -> bool:
        """Replace the blob stored under ``key``.

        Args:
            key: Blob key.
            value: Serialized collection.

        Returns:
            True if the write was committed, False otherwise.
        """
        try:
            with self.db_manager.connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, sqlite3.Binary(value)),
                )
                conn.commit()
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Could not save '{key}' to storage: {e}")
            return False
        return True


def load_records(store: KeyValueStore, key: str) -> Optional[List[dict]]:
    """Decode a JSON list stored under ``key``.

    Returns:
        The list of records, or None when the key is absent or the blob is
        not a readable JSON list.
    """
    raw = store.get(key)
    if raw is None:
        return None
    try:
        records = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning(f"Ignoring unreadable '{key}' blob: {e}")
        return None
    if not isinstance(records, list):
        logger.warning(f"Ignoring '{key}' blob: expected a list")
        return None
    return records


def save_records(store: KeyValueStore, key: str, records: List[dict]) -> bool:
    """Encode ``records`` as JSON and write them under ``key``."""
    return store.set(key, json.dumps(records, ensure_ascii=False).encode("utf-8"))
