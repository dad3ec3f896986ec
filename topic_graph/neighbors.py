"""
Undirected neighbor relation over the parent/child hierarchy
"""
from typing import List, Optional, Set

from .accessor import TopicAccessor
from .logging_config import get_logger
from .models import Topic

logger = get_logger("neighbors")


class NeighborResolver:
    """Computes the parent and child edges of a topic for graph traversal."""

    def __init__(self, accessor: TopicAccessor):
        self.accessor = accessor

    async def parent_of(self, topic: Topic, only_latest: bool = True) -> Optional[Topic]:
        """Resolve the parent edge of ``topic``.

        ``parent_topic_id`` is tried as a version id first and as a base id
        second. Historical rows reference parents both ways; new writes store
        the base id.
        """
        if not topic.parent_topic_id:
            return None

        parent = await self.accessor.resolve_topic(topic.parent_topic_id, only_latest)
        if parent is None:
            parent = await self.accessor.resolve_by_base_id(topic.parent_topic_id, only_latest)
        if parent is None:
            logger.debug("Parent %s of topic %s not found", topic.parent_topic_id, topic.id)
        return parent

    async def children_of(self, topic: Topic, only_latest: bool = True) -> List[Topic]:
        """Direct children, whether they reference the base id or the version id."""
        children = await self.accessor.find_children(topic.base_id, only_latest)
        if topic.id != topic.base_id:
            children = _merge_unique(
                children, await self.accessor.find_children(topic.id, only_latest)
            )
        return children

    async def neighbors(self, topic: Topic, only_latest: bool = True) -> List[Topic]:
        """Parent first (if any), then children in store order."""
        result: List[Topic] = []
        parent = await self.parent_of(topic, only_latest)
        if parent is not None:
            result.append(parent)
        return _merge_unique(result, await self.children_of(topic, only_latest))


def _merge_unique(first: List[Topic], second: List[Topic]) -> List[Topic]:
    """Concatenate, dropping repeated ids while keeping the first occurrence."""
    seen: Set[str] = set()
    merged = []
    for topic in first + second:
        if topic.id not in seen:
            seen.add(topic.id)
            merged.append(topic)
    return merged
