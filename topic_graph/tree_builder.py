"""
Builds hierarchical views of topics: trees, the forest of all roots,
root-to-topic paths and flattened descendant lists.
"""
from typing import FrozenSet, List, Optional

from .accessor import TopicAccessor
from .exceptions import CircularReferenceError, StoreError, TopicGraphError
from .logging_config import get_logger
from .models import Topic
from .nodes import TopicNode, create_node, iter_descendants

logger = get_logger("tree_builder")


class TopicTreeBuilder:
    """Assembles immutable node trees from the store."""

    def __init__(self, accessor: TopicAccessor):
        self.accessor = accessor

    async def build_tree(self, root_id: str, only_latest: bool = True) -> Optional[TopicNode]:
        """Build the tree rooted at ``root_id``; None when the root is absent.

        Failures resolving the root propagate. Children that fail to expand
        are logged and skipped.
        """
        try:
            root = await self.accessor.resolve_topic(root_id, only_latest)
            if root is None:
                return None
            return await self._build_node(root, only_latest, frozenset())
        except StoreError as e:
            raise StoreError("build_tree", reason=e.reason or str(e), topic_id=root_id) from e

    async def _build_node(self, topic: Topic, only_latest: bool,
                          ancestry: FrozenSet[str]) -> TopicNode:
        children = await self.accessor.find_children(topic.base_id, only_latest)
        ancestry = ancestry | {topic.base_id}

        child_nodes: List[TopicNode] = []
        for child in children:
            if child.base_id in ancestry:
                logger.warning(
                    "Topic %s is its own ancestor below %s; not expanding it again",
                    child.id, topic.id,
                )
                continue
            try:
                child_nodes.append(await self._build_node(child, only_latest, ancestry))
            except StoreError as e:
                logger.warning("Skipping child %s of topic %s: %s", child.id, topic.id, e)

        return create_node(topic, has_children=bool(children), children=child_nodes)

    async def build_forest(self, only_latest: bool = True) -> List[TopicNode]:
        """One tree per topic without a parent; failing roots are skipped."""
        roots = await self.accessor.find_roots(only_latest)
        trees: List[TopicNode] = []
        for root in roots:
            try:
                tree = await self.build_tree(root.id, only_latest)
            except TopicGraphError as e:
                logger.error("Failed to build tree for root %s: %s", root.id, e)
                continue
            if tree is not None:
                trees.append(tree)
        logger.debug("Built %d of %d root trees", len(trees), len(roots))
        return trees

    async def get_path(self, topic_id: str, only_latest: bool = True) -> List[Topic]:
        """Topics from the root down to ``topic_id``, inclusive.

        Returns an empty list when the topic does not exist. Raises
        CircularReferenceError when the ancestor chain loops.
        """
        path: List[Topic] = []
        visited = set()
        try:
            current = await self.accessor.resolve_topic(topic_id, only_latest)
            while current is not None:
                if current.id in visited:
                    raise CircularReferenceError(
                        current.id, chain=[t.id for t in reversed(path)]
                    )
                visited.add(current.id)
                path.append(current)

                if not current.parent_topic_id:
                    break
                current = await self._resolve_parent(current.parent_topic_id, only_latest)
        except StoreError as e:
            raise StoreError("get_path", reason=e.reason or str(e), topic_id=topic_id) from e

        path.reverse()
        return path

    async def _resolve_parent(self, parent_ref: str, only_latest: bool) -> Optional[Topic]:
        parent = await self.accessor.resolve_by_base_id(parent_ref, only_latest)
        if parent is None:
            # legacy rows point at a version id
            parent = await self.accessor.resolve_topic(parent_ref, only_latest)
        return parent

    async def get_descendants(self, topic_id: str, only_latest: bool = True) -> List[Topic]:
        """Every topic below ``topic_id`` in pre-order, the topic itself excluded."""
        tree = await self.build_tree(topic_id, only_latest)
        if tree is None:
            return []
        return [node.topic for node in iter_descendants(tree)]
