"""
Topic graph engine - versioned topic hierarchies, trees and shortest paths
"""
from .models import Topic, TopicHistory, SearchStats, ShortestPathResult
from .exceptions import (
    TopicGraphError,
    TopicNotFoundError,
    CircularReferenceError,
    StoreError,
    TopicValidationError,
)
from .store import TopicStore, InMemoryTopicStore, SQLiteTopicStore, create_store
from .accessor import TopicAccessor
from .nodes import NodeKind, TopicNode, create_node, serialize_node
from .neighbors import NeighborResolver
from .bfs_queue import TopicQueue
from .tree_builder import TopicTreeBuilder
from .shortest_path import ShortestPathEngine
from .versioning import TopicVersioning
from .service import TopicGraphService

__all__ = [
    'Topic',
    'TopicHistory',
    'SearchStats',
    'ShortestPathResult',
    'TopicGraphError',
    'TopicNotFoundError',
    'CircularReferenceError',
    'StoreError',
    'TopicValidationError',
    'TopicStore',
    'InMemoryTopicStore',
    'SQLiteTopicStore',
    'create_store',
    'TopicAccessor',
    'NodeKind',
    'TopicNode',
    'create_node',
    'serialize_node',
    'NeighborResolver',
    'TopicQueue',
    'TopicTreeBuilder',
    'ShortestPathEngine',
    'TopicVersioning',
    'TopicGraphService',
]
