"""
In-memory store - data is lost when the process stops
"""
import copy
import uuid
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import StoreError
from ..models import utc_now
from .base import Record, TopicStore, matches_criteria


class InMemoryTopicStore(TopicStore):
    """Dict-backed store; iteration order is insertion order."""

    def __init__(self):
        self._data: Dict[str, Dict[str, Record]] = {}

    def seed(self, collection: str, records: Iterable[Record]) -> None:
        """Load records as-is (test helper, no timestamps added)."""
        bucket = self._data.setdefault(collection, {})
        for record in records:
            bucket[record["id"]] = copy.deepcopy(record)

    def clear(self) -> None:
        self._data.clear()

    async def create(self, collection: str, record: Record) -> Record:
        bucket = self._data.setdefault(collection, {})
        stored = copy.deepcopy(record)
        stored["id"] = stored.get("id") or str(uuid.uuid4())
        if stored["id"] in bucket:
            raise StoreError("create", reason="duplicate id", topic_id=stored["id"])
        timestamp = utc_now()
        stored.setdefault("created_at", timestamp)
        stored.setdefault("updated_at", timestamp)
        bucket[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def find_by_id(self, collection: str, record_id: str) -> Optional[Record]:
        record = self._data.get(collection, {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def find(self, collection: str,
                   criteria: Optional[Dict[str, Any]] = None) -> List[Record]:
        return [
            copy.deepcopy(record)
            for record in self._data.get(collection, {}).values()
            if matches_criteria(record, criteria)
        ]

    async def update_by_id(self, collection: str, record_id: str,
                           changes: Record) -> Optional[Record]:
        bucket = self._data.get(collection, {})
        if record_id not in bucket:
            return None
        updated = {
            **bucket[record_id],
            "updated_at": utc_now(),
            **copy.deepcopy(changes),
            "id": record_id,
        }
        bucket[record_id] = updated
        return copy.deepcopy(updated)

    async def delete_by_id(self, collection: str, record_id: str) -> bool:
        return self._data.get(collection, {}).pop(record_id, None) is not None
