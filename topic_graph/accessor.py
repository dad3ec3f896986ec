"""
Read helpers over the store that resolve "latest version" vs "exact version"
"""
from typing import Any, Dict, List, Optional

from .exceptions import StoreError
from .logging_config import get_logger
from .models import Topic
from .store import TopicStore

logger = get_logger("accessor")


class TopicAccessor:
    """Resolves topic identifiers against the store under a version policy."""

    def __init__(self, store: TopicStore, collection: str = "topics"):
        self.store = store
        self.collection = collection

    async def _find_by_id(self, topic_id: str, operation: str) -> Optional[Topic]:
        try:
            record = await self.store.find_by_id(self.collection, topic_id)
            return Topic.model_validate(record) if record is not None else None
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(operation, reason=str(e), topic_id=topic_id) from e

    async def _find(self, criteria: Dict[str, Any], operation: str) -> List[Topic]:
        try:
            records = await self.store.find(self.collection, criteria)
            return [Topic.model_validate(record) for record in records]
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(operation, reason=str(e)) from e

    async def get_exact(self, topic_id: str) -> Optional[Topic]:
        """Return the version stored under ``topic_id`` without redirection."""
        return await self._find_by_id(topic_id, "get_exact")

    async def resolve_topic(self, topic_id: str, only_latest: bool = True) -> Optional[Topic]:
        """Return the topic the caller means by ``topic_id``.

        Under ``only_latest`` a stale version id is redirected to the current
        version of the same base topic.
        """
        topic = await self._find_by_id(topic_id, "resolve_topic")
        if topic is None or not only_latest or topic.is_latest:
            return topic

        latest = await self._find(
            {"base_topic_id": topic.base_id, "is_latest": True}, "resolve_topic"
        )
        if latest:
            logger.debug("Redirected stale version %s to %s", topic_id, latest[0].id)
            return latest[0]
        return None

    async def resolve_by_base_id(self, base_id: str, only_latest: bool = True) -> Optional[Topic]:
        """Latest version of a base topic, or the highest-numbered one when
        ``only_latest`` is off."""
        criteria: Dict[str, Any] = {"base_topic_id": base_id}
        if only_latest:
            criteria["is_latest"] = True
        topics = await self._find(criteria, "resolve_by_base_id")
        if not topics:
            return None
        if only_latest:
            return topics[0]
        return max(topics, key=lambda t: t.version)

    async def find_children(self, parent_ref: str, only_latest: bool = True) -> List[Topic]:
        """Topics whose ``parent_topic_id`` equals ``parent_ref``, in store order."""
        criteria: Dict[str, Any] = {"parent_topic_id": parent_ref}
        if only_latest:
            criteria["is_latest"] = True
        return await self._find(criteria, "find_children")

    async def has_children(self, parent_ref: str, only_latest: bool = True) -> bool:
        return bool(await self.find_children(parent_ref, only_latest))

    async def find_roots(self, only_latest: bool = True) -> List[Topic]:
        """Topics without a parent."""
        criteria: Dict[str, Any] = {"is_latest": True} if only_latest else {}
        topics = await self._find(criteria, "find_roots")
        return [topic for topic in topics if not topic.parent_topic_id]

    async def list_versions(self, base_id: str) -> List[Topic]:
        """All versions of a base topic, oldest first."""
        topics = await self._find({"base_topic_id": base_id}, "list_versions")
        return sorted(topics, key=lambda t: t.version)
