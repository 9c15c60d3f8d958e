"""Key-value slot store backed by SQLite.

Each slot holds one JSON document (the character, the quest list, the deck
list, notes, ...). Reads and writes never raise: a storage or serialization
fault is logged and the read comes back as ``None`` / the write as ``False``.
There is no transaction spanning two slots.
"""
import json
import logging
import sqlite3
from pathlib import Path

from scholar_chronicle.config import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS slots (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the store, creating the slots table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def read_slot(db_path: str, key: str):
    """Return the decoded value stored under ``key``, or None."""
    try:
        conn = get_connection(db_path)
        try:
            row = conn.execute("SELECT value FROM slots WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return json.loads(row["value"])
    except (sqlite3.Error, ValueError, OSError) as e:
        logger.error("Failed to read slot %s: %s", key, e)
        return None


def write_slot(db_path: str, key: str, value) -> bool:
    """Store ``value`` as JSON under ``key``. Returns False if nothing was written."""
    try:
        payload = json.dumps(value)
        conn = get_connection(db_path)
        try:
            conn.execute(
                """INSERT INTO slots (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
                (key, payload),
            )
            conn.commit()
        finally:
            conn.close()
        return True
    except (sqlite3.Error, TypeError, ValueError, OSError) as e:
        logger.error("Failed to write slot %s: %s", key, e)
        return False


def delete_slot(db_path: str, key: str) -> bool:
    try:
        conn = get_connection(db_path)
        try:
            conn.execute("DELETE FROM slots WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
        return True
    except (sqlite3.Error, OSError) as e:
        logger.error("Failed to delete slot %s: %s", key, e)
        return False


def list_slots(db_path: str) -> list[str]:
    try:
        conn = get_connection(db_path)
        try:
            rows = conn.execute("SELECT key FROM slots ORDER BY key").fetchall()
        finally:
            conn.close()
        return [r["key"] for r in rows]
    except (sqlite3.Error, OSError) as e:
        logger.error("Failed to list slots: %s", e)
        return []


def clear_store(db_path: str) -> bool:
    """Remove every slot, including the character."""
    try:
        conn = get_connection(db_path)
        try:
            conn.execute("DELETE FROM slots")
            conn.commit()
        finally:
            conn.close()
        return True
    except (sqlite3.Error, OSError) as e:
        logger.error("Failed to clear store: %s", e)
        return False


def _split_records(key: str, data: list, from_dict) -> tuple[list, list]:
    """Parse each item; return (parsed records, raw items that failed to parse)."""
    parsed, malformed = [], []
    for item in data:
        try:
            parsed.append(from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Skipping malformed record in slot %s: %s", key, e)
            malformed.append(item)
    return parsed, malformed


def read_records(db_path: str, key: str, from_dict) -> list:
    """Read a slot holding a JSON list and parse each item with ``from_dict``.

    Malformed items are logged and skipped. A missing slot, or one that
    doesn't hold a list, reads as empty.
    """
    data = read_slot(db_path, key)
    if data is None:
        return []
    if not isinstance(data, list):
        logger.error("Slot %s does not hold a list", key)
        return []
    parsed, _ = _split_records(key, data, from_dict)
    return parsed


def write_records(db_path: str, key: str, records: list, from_dict) -> bool:
    """Persist ``records`` to a list slot.

    Raw items already in the slot that ``from_dict`` can't parse are kept at
    the end of the list. A slot holding something other than a list is left
    alone and the write returns False.
    """
    existing = read_slot(db_path, key)
    if existing is not None and not isinstance(existing, list):
        logger.error("Refusing to overwrite slot %s: it does not hold a list", key)
        return False
    _, malformed = _split_records(key, existing or [], from_dict)
    return write_slot(db_path, key, [r.to_dict() for r in records] + malformed)
