"""
Shared test fixtures for topic graph tests
"""

from typing import Any, Dict, Iterable, List, Optional

from topic_graph.accessor import TopicAccessor
from topic_graph.store import InMemoryTopicStore


def create_topic_record(
    topic_id: str,
    name: Optional[str] = None,
    parent_topic_id: Optional[str] = None,
    base_topic_id: Optional[str] = None,
    version: int = 1,
    is_latest: bool = True,
    content: str = "Test content",
) -> Dict[str, Any]:
    """Create a raw topic record as the store would hold it"""
    record = {
        "id": topic_id,
        "base_topic_id": base_topic_id or topic_id,
        "name": name or f"Topic {topic_id}",
        "content": content,
        "version": version,
        "is_latest": is_latest,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    }
    if parent_topic_id is not None:
        record["parent_topic_id"] = parent_topic_id
    return record


def create_store(records: Iterable[Dict[str, Any]] = ()) -> InMemoryTopicStore:
    """Create an in-memory store seeded with topic records"""
    store = InMemoryTopicStore()
    store.seed("topics", records)
    return store


def create_accessor(records: Iterable[Dict[str, Any]] = ()) -> TopicAccessor:
    return TopicAccessor(create_store(records))


def linear_chain(ids: List[str]) -> List[Dict[str, Any]]:
    """root -> ids[1] -> ids[2] ... each child pointing at the previous base id"""
    records = []
    parent = None
    for topic_id in ids:
        records.append(create_topic_record(topic_id, parent_topic_id=parent))
        parent = topic_id
    return records


def three_level_tree() -> List[Dict[str, Any]]:
    """
    root
    ├── a
    │   ├── a1
    │   └── a2
    │       └── a2x
    └── b
    """
    return [
        create_topic_record("root"),
        create_topic_record("a", parent_topic_id="root"),
        create_topic_record("b", parent_topic_id="root"),
        create_topic_record("a1", parent_topic_id="a"),
        create_topic_record("a2", parent_topic_id="a"),
        create_topic_record("a2x", parent_topic_id="a2"),
    ]


def versioned_topic() -> List[Dict[str, Any]]:
    """
    Topic T with v1 (stale) and v2 (latest), a child C of T and a root R above T.
    """
    return [
        create_topic_record("R"),
        create_topic_record("T", parent_topic_id="R", is_latest=False),
        create_topic_record("T-v2", name="Topic T v2", parent_topic_id="R",
                            base_topic_id="T", version=2),
        create_topic_record("C", parent_topic_id="T"),
    ]


class FailingStore(InMemoryTopicStore):
    """In-memory store that raises for chosen ids, parent lookups or writes"""

    def __init__(self, fail_ids: Iterable[str] = (), fail_parents: Iterable[str] = (),
                 fail_writes: bool = False):
        super().__init__()
        self.fail_ids = set(fail_ids)
        self.fail_parents = set(fail_parents)
        self.fail_writes = fail_writes

    async def create(self, collection, record):
        if self.fail_writes:
            raise RuntimeError("disk full")
        return await super().create(collection, record)

    async def delete_by_id(self, collection, record_id):
        if self.fail_writes:
            raise RuntimeError("disk full")
        return await super().delete_by_id(collection, record_id)

    async def find_by_id(self, collection, record_id):
        if record_id in self.fail_ids:
            raise RuntimeError(f"backend timeout reading {record_id}")
        return await super().find_by_id(collection, record_id)

    async def find(self, collection, criteria=None):
        if criteria and criteria.get("parent_topic_id") in self.fail_parents:
            raise RuntimeError(f"backend timeout listing children of {criteria['parent_topic_id']}")
        return await super().find(collection, criteria)
