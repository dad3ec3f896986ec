"""
Leaf/composite tree nodes built from topics.

A node's kind is decided once, at construction, from whether the topic had
children at that moment. Nodes are immutable; serialization and the tree
queries below are plain functions over the kind tag.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .models import Topic


class NodeKind(Enum):
    """Variants of a tree node"""
    LEAF = "leaf"
    COMPOSITE = "composite"


@dataclass(frozen=True)
class TopicNode:
    """One topic version plus its child nodes."""
    kind: NodeKind
    topic: Topic
    children: Tuple["TopicNode", ...] = ()

    @property
    def id(self) -> str:
        return self.topic.id

    @property
    def name(self) -> str:
        return self.topic.name

    @property
    def content(self) -> str:
        return self.topic.content

    @property
    def version(self) -> int:
        return self.topic.version

    @property
    def is_latest(self) -> bool:
        return self.topic.is_latest

    @property
    def is_composite(self) -> bool:
        return self.kind is NodeKind.COMPOSITE


def create_node(topic: Topic, has_children: bool = False,
                children: Iterable[TopicNode] = ()) -> TopicNode:
    """Build a composite when the topic has children, a leaf otherwise."""
    if not has_children:
        return TopicNode(kind=NodeKind.LEAF, topic=topic)
    return TopicNode(kind=NodeKind.COMPOSITE, topic=topic, children=tuple(children))


def total_descendants(node: TopicNode) -> int:
    """Count every node below ``node``."""
    return sum(1 + total_descendants(child) for child in node.children)


def iter_descendants(node: TopicNode) -> Iterator[TopicNode]:
    """Pre-order walk of the nodes below ``node`` (the node itself excluded)."""
    stack = list(reversed(node.children))
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_node(node: TopicNode, topic_id: str) -> Optional[TopicNode]:
    """Find a descendant by topic id."""
    for descendant in iter_descendants(node):
        if descendant.id == topic_id:
            return descendant
    return None


def leaf_nodes(node: TopicNode) -> List[TopicNode]:
    """All leaves below ``node``, left to right."""
    return [d for d in iter_descendants(node) if not d.is_composite]


def serialize_node(node: TopicNode) -> Dict[str, Any]:
    """Convert a node and its subtree to a plain nested dictionary."""
    result = node.topic.to_record()
    if node.kind is NodeKind.LEAF:
        result.update({
            "children": [],
            "is_composite": False,
            "child_count": 0,
            "total_descendants": 0,
        })
        return result

    result.update({
        "children": [serialize_node(child) for child in node.children],
        "is_composite": True,
        "child_count": len(node.children),
        "total_descendants": total_descendants(node),
    })
    return result
