"""
SQLite-backed store. Records are kept as JSON documents per collection.
"""

import json
import re
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import StoreError
from ..models import utc_now
from .base import Record, TopicStore, matches_criteria


FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _where_clause(collection: str,
                  criteria: Optional[Dict[str, Any]]) -> Tuple[str, List[Any]]:
    """Translate exact-match criteria into a WHERE clause over the JSON data.

    ``None`` matches a missing or null field, like ``matches_criteria``.
    """
    clauses = ["collection = ?"]
    params: List[Any] = [collection]
    for key, value in (criteria or {}).items():
        if not FIELD_NAME.match(key):
            raise StoreError("find", reason=f"invalid field name: {key!r}")
        column = f"json_extract(data, '$.{key}')"
        if value is None:
            clauses.append(f"{column} IS NULL")
        elif isinstance(value, (bool, int, float, str)):
            clauses.append(f"{column} = ?")
            params.append(value)
    return " AND ".join(clauses), params


class SQLiteTopicStore(TopicStore):
    """Document store on top of a single SQLite table."""

    def __init__(self, db_path: Path = Path("topic_graph.db")):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(str(self.db_path))
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._create_tables()
        except sqlite3.Error as e:
            raise StoreError("connect", reason=str(e)) from e

    def _create_tables(self) -> None:
        """Create tables if they don't exist."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS records (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                collection TEXT NOT NULL,
                id TEXT NOT NULL,
                data TEXT NOT NULL,
                UNIQUE (collection, id)
            );
            CREATE INDEX IF NOT EXISTS idx_records_collection
                ON records (collection, seq);
            CREATE INDEX IF NOT EXISTS idx_records_parent
                ON records (collection, json_extract(data, '$.parent_topic_id'));
            CREATE INDEX IF NOT EXISTS idx_records_base
                ON records (collection, json_extract(data, '$.base_topic_id'));
        """)
        self._conn.commit()

    def _fetch(self, collection: str, record_id: str) -> Optional[Record]:
        row = self._conn.execute(
            "SELECT data FROM records WHERE collection = ? AND id = ?",
            (collection, record_id),
        ).fetchone()
        return json.loads(row[0]) if row else None

    async def create(self, collection: str, record: Record) -> Record:
        stored = dict(record)
        stored["id"] = stored.get("id") or str(uuid.uuid4())
        timestamp = utc_now()
        stored.setdefault("created_at", timestamp)
        stored.setdefault("updated_at", timestamp)
        try:
            self._conn.execute(
                "INSERT INTO records (collection, id, data) VALUES (?, ?, ?)",
                (collection, stored["id"], json.dumps(stored)),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError("create", reason=str(e), topic_id=stored["id"]) from e
        return stored

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        try:
            return self._fetch(collection, record_id)
        except sqlite3.Error as e:
            raise StoreError("find_by_id", reason=str(e), topic_id=record_id) from e

    async def find(self, collection: str,
                   criteria: Optional[Dict[str, Any]] = None) -> List[Record]:
        where, params = _where_clause(collection, criteria)
        try:
            rows = self._conn.execute(
                f"SELECT data FROM records WHERE {where} ORDER BY seq", params
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError("find", reason=str(e)) from e
        # non-scalar criteria are not pushed into SQL
        records = (json.loads(row[0]) for row in rows)
        return [record for record in records if matches_criteria(record, criteria)]

    async def update_by_id(self, collection: str, record_id: str,
                           changes: Record) -> Optional[Record]:
        try:
            existing = self._fetch(collection, record_id)
            if existing is None:
                return None
            updated = {**existing, "updated_at": utc_now(), **changes, "id": record_id}
            self._conn.execute(
                "UPDATE records SET data = ? WHERE collection = ? AND id = ?",
                (json.dumps(updated), collection, record_id),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError("update_by_id", reason=str(e), topic_id=record_id) from e
        return updated

    async def delete_by_id(self, collection: str, record_id: str) -> bool:
        try:
            cursor = self._conn.execute(
                "DELETE FROM records WHERE collection = ? AND id = ?",
                (collection, record_id),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError("delete_by_id", reason=str(e), topic_id=record_id) from e
        return cursor.rowcount > 0

    async def close(self) -> None:
        self._conn.close()
