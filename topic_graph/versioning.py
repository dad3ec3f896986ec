"""
Topic lifecycle: create, new version, history and delete.

Versions are never edited in place; only ``is_latest`` is flipped when a
newer version supersedes them.
"""
import uuid
from typing import Any, Dict, List, Optional

from .accessor import TopicAccessor
from .exceptions import StoreError, TopicNotFoundError, TopicValidationError
from .logging_config import get_logger
from .models import Topic, TopicHistory, utc_now
from .neighbors import NeighborResolver

logger = get_logger("versioning")

UPDATABLE_FIELDS = ("name", "content", "description", "parent_topic_id")


def _require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TopicValidationError(f"Topic {field} is required", field=field, value=value)
    return value.strip()


def _store_error(operation: str, error: Exception, topic_id: str) -> StoreError:
    reason = error.reason if isinstance(error, StoreError) and error.reason else str(error)
    return StoreError(operation, reason=reason, topic_id=topic_id)


class TopicVersioning:
    """Write-side operations that keep the version invariants intact."""

    def __init__(self, accessor: TopicAccessor):
        self.accessor = accessor
        self.store = accessor.store
        self.collection = accessor.collection
        self.resolver = NeighborResolver(accessor)

    async def _resolve_parent(self, parent_ref: str) -> Topic:
        parent = await self.accessor.get_exact(parent_ref)
        if parent is None:
            parent = await self.accessor.resolve_by_base_id(parent_ref)
        if parent is None:
            raise TopicValidationError(
                "Parent topic not found", field="parent_topic_id", value=parent_ref
            )
        return parent

    async def create_topic(self, name: str, content: str,
                           description: Optional[str] = None,
                           parent_topic_id: Optional[str] = None,
                           created_by: Optional[str] = None,
                           topic_id: Optional[str] = None) -> Topic:
        """Create version 1 of a new topic.

        The parent may be given by version id or base id; it is stored as the
        parent's base id.
        """
        topic_id = topic_id or str(uuid.uuid4())
        if await self.accessor.get_exact(topic_id) is not None:
            raise TopicValidationError("Topic id already exists", field="id", value=topic_id)

        parent_ref = None
        if parent_topic_id:
            if parent_topic_id == topic_id:
                raise TopicValidationError(
                    "Topic cannot be its own parent", field="parent_topic_id",
                    value=parent_topic_id,
                )
            parent_ref = (await self._resolve_parent(parent_topic_id)).base_id

        now = utc_now()
        topic = Topic(
            id=topic_id,
            base_topic_id=topic_id,
            name=_require_text(name, "name"),
            content=_require_text(content, "content"),
            description=description.strip() if description else None,
            version=1,
            is_latest=True,
            parent_topic_id=parent_ref,
            created_at=now,
            updated_at=now,
            created_by=created_by,
        )
        try:
            record = await self.store.create(self.collection, topic.to_record())
        except Exception as e:
            raise _store_error("create_topic", e, topic.id) from e
        logger.info("Created topic %s (%s)", topic.id, topic.name)
        return Topic.model_validate(record)

    async def create_version(self, topic_id: str, changes: Dict[str, Any],
                             created_by: Optional[str] = None) -> Topic:
        """Supersede the current version of ``topic_id``'s base topic.

        ``topic_id`` may name any version; the new version builds on the
        latest one. Returns the new latest version.
        """
        existing = await self.accessor.get_exact(topic_id)
        if existing is None:
            raise TopicNotFoundError(topic_id)

        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise TopicValidationError(
                f"Fields cannot be changed: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )

        versions = await self.accessor.list_versions(existing.base_id)
        current = next((v for v in versions if v.is_latest), versions[-1] if versions else existing)

        data = current.model_dump()
        for field in ("name", "content"):
            if field in changes:
                data[field] = _require_text(changes[field], field)
        if "description" in changes:
            description = changes["description"]
            data["description"] = description.strip() if description else None
        if "parent_topic_id" in changes:
            data["parent_topic_id"] = await self._validated_parent(
                existing, changes["parent_topic_id"]
            )

        now = utc_now()
        data.update({
            "id": str(uuid.uuid4()),
            "base_topic_id": existing.base_id,
            "version": max((v.version for v in versions), default=existing.version) + 1,
            "is_latest": True,
            "created_at": now,
            "updated_at": now,
            "created_by": created_by or current.created_by,
        })

        flipped: List[str] = []
        try:
            for version in versions:
                if version.is_latest:
                    await self.store.update_by_id(
                        self.collection, version.id, {"is_latest": False, "updated_at": now}
                    )
                    flipped.append(version.id)
            record = await self.store.create(self.collection, data)
        except Exception as e:
            await self._restore_latest(flipped)
            raise _store_error("create_version", e, existing.base_id) from e
        logger.info(
            "Created version %d of topic %s as %s",
            data["version"], existing.base_id, data["id"],
        )
        return Topic.model_validate(record)

    async def _restore_latest(self, version_ids: List[str]) -> None:
        """Put back ``is_latest`` on versions flipped by a failed write."""
        for version_id in version_ids:
            try:
                await self.store.update_by_id(
                    self.collection, version_id, {"is_latest": True}
                )
            except Exception as e:
                logger.error("Could not restore latest flag on %s: %s", version_id, e)

    async def _validated_parent(self, topic: Topic, parent_ref: Optional[str]) -> Optional[str]:
        if not parent_ref:
            return None
        if parent_ref in (topic.id, topic.base_id):
            raise TopicValidationError(
                "Topic cannot be its own parent", field="parent_topic_id", value=parent_ref
            )
        parent = await self._resolve_parent(parent_ref)
        if parent.base_id == topic.base_id:
            raise TopicValidationError(
                "Topic cannot be its own parent", field="parent_topic_id", value=parent_ref
            )
        return parent.base_id

    async def get_history(self, base_topic_id: str) -> TopicHistory:
        versions = await self.accessor.list_versions(base_topic_id)
        if not versions:
            raise TopicNotFoundError(base_topic_id)
        latest = next((v for v in versions if v.is_latest), versions[-1])
        return TopicHistory(
            base_topic_id=base_topic_id,
            current_version=latest.version,
            versions=versions,
        )

    async def get_version(self, base_topic_id: str, version: int) -> Topic:
        for topic in await self.accessor.list_versions(base_topic_id):
            if topic.version == version:
                return topic
        raise TopicNotFoundError(base_topic_id, version=version)

    async def list_children(self, parent_id: str, only_latest: bool = True) -> List[Topic]:
        parent = await self.accessor.resolve_topic(parent_id, only_latest)
        if parent is None:
            raise TopicNotFoundError(parent_id)
        return await self.resolver.children_of(parent, only_latest)

    async def delete_topic(self, topic_id: str) -> int:
        """Delete every version of a childless topic. Returns versions removed."""
        topic = await self.accessor.get_exact(topic_id)
        if topic is None:
            raise TopicNotFoundError(topic_id)

        versions = await self.accessor.list_versions(topic.base_id) or [topic]
        for version in versions:
            if await self.resolver.children_of(version, only_latest=False):
                raise TopicValidationError(
                    "Cannot delete a topic that has child topics", field="id", value=topic_id
                )

        removed = 0
        try:
            for version in versions:
                if await self.store.delete_by_id(self.collection, version.id):
                    removed += 1
        except Exception as e:
            raise _store_error("delete_topic", e, topic.base_id) from e
        logger.info("Deleted %d version(s) of topic %s", removed, topic.base_id)
        return removed
