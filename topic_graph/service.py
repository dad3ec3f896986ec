"""
Facade exposing the topic graph queries to callers
"""
from typing import Any, Dict, List, Optional

from .accessor import TopicAccessor
from .config import Config
from .exceptions import TopicNotFoundError, TopicValidationError
from .logging_config import get_logger
from .models import ShortestPathResult, Topic
from .neighbors import NeighborResolver
from .nodes import serialize_node
from .shortest_path import ShortestPathEngine
from .store import TopicStore
from .tree_builder import TopicTreeBuilder
from .versioning import TopicVersioning

logger = get_logger("service")


def _require_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TopicValidationError(f"{field} is required", field=field, value=value)
    return value.strip()


class TopicGraphService:
    """Wires the accessor, tree builder, BFS engine and versioning over one store."""

    def __init__(self, store: TopicStore, config: Optional[Config] = None):
        self.config = config or Config()
        self.store = store
        self.accessor = TopicAccessor(store, collection=self.config.store.collection)
        self.resolver = NeighborResolver(self.accessor)
        self.trees = TopicTreeBuilder(self.accessor)
        self.paths = ShortestPathEngine(
            self.accessor,
            resolver=self.resolver,
            queue_compact_ratio=self.config.graph.queue_compact_ratio,
        )
        self.versions = TopicVersioning(self.accessor)

    def _only_latest(self, only_latest: Optional[bool]) -> bool:
        return self.config.graph.only_latest if only_latest is None else only_latest

    async def build_tree(self, root_id: str, only_latest: Optional[bool] = None) -> Dict[str, Any]:
        """Serialized tree rooted at ``root_id``; TopicNotFoundError when absent."""
        root_id = _require_id(root_id, "root_id")
        tree = await self.trees.build_tree(root_id, self._only_latest(only_latest))
        if tree is None:
            raise TopicNotFoundError(root_id)
        return serialize_node(tree)

    async def build_forest(self, only_latest: Optional[bool] = None) -> List[Dict[str, Any]]:
        trees = await self.trees.build_forest(self._only_latest(only_latest))
        return [serialize_node(tree) for tree in trees]

    async def get_path(self, topic_id: str, only_latest: Optional[bool] = None) -> List[Topic]:
        topic_id = _require_id(topic_id, "topic_id")
        return await self.trees.get_path(topic_id, self._only_latest(only_latest))

    async def get_descendants(self, topic_id: str,
                              only_latest: Optional[bool] = None) -> List[Topic]:
        topic_id = _require_id(topic_id, "topic_id")
        return await self.trees.get_descendants(topic_id, self._only_latest(only_latest))

    async def find_shortest_path(self, start_id: str, end_id: str,
                                 only_latest: Optional[bool] = None) -> Dict[str, Any]:
        result = await self.shortest_path_result(start_id, end_id, only_latest)
        return result.to_dict()

    async def shortest_path_result(self, start_id: str, end_id: str,
                                   only_latest: Optional[bool] = None) -> ShortestPathResult:
        """Same search as ``find_shortest_path`` without serialization."""
        start_id = _require_id(start_id, "start_id")
        end_id = _require_id(end_id, "end_id")
        result = await self.paths.find_shortest_path(
            start_id, end_id, self._only_latest(only_latest)
        )
        logger.info(
            "Shortest path %s -> %s: exists=%s distance=%d (%d nodes, %.1f ms)",
            start_id, end_id, result.path_exists, result.distance,
            result.search_stats.nodes_explored, result.search_stats.execution_time_ms,
        )
        return result
