"""
Data models for topics, version history and shortest-path results
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


ALGORITHM_BFS = "unidirectional-bfs"


def utc_now() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


class Topic(BaseModel):
    """One version of a topic as stored in the ``topics`` collection."""

    id: str
    base_topic_id: str = ""
    name: str
    content: str = ""
    description: Optional[str] = None
    version: int = Field(ge=1, default=1)
    is_latest: bool = True
    parent_topic_id: Optional[str] = None
    created_at: str = Field(default_factory=utc_now)
    updated_at: str = Field(default_factory=utc_now)
    created_by: Optional[str] = None

    @property
    def base_id(self) -> str:
        """Version-independent identity, falling back to ``id`` for legacy rows."""
        return self.base_topic_id or self.id

    def to_record(self) -> Dict[str, Any]:
        """Plain dict suitable for the store."""
        return self.model_dump()


class TopicHistory(BaseModel):
    """All versions of one logical topic, oldest first."""

    base_topic_id: str
    current_version: int
    versions: List[Topic] = Field(default_factory=list)


@dataclass
class SearchStats:
    """Observability data collected during a shortest-path search"""
    nodes_explored: int = 0
    max_depth: int = 0
    execution_time_ms: float = 0.0
    algorithm_used: str = ALGORITHM_BFS
    queue_max_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes_explored": self.nodes_explored,
            "max_depth": self.max_depth,
            "execution_time_ms": self.execution_time_ms,
            "algorithm_used": self.algorithm_used,
            "queue_max_size": self.queue_max_size,
        }


@dataclass
class ShortestPathResult:
    """Outcome of a shortest-path query; a missing path is a valid result"""
    path: List[Topic] = field(default_factory=list)
    distance: int = -1
    path_exists: bool = False
    search_stats: SearchStats = field(default_factory=SearchStats)

    @property
    def path_ids(self) -> List[str]:
        return [topic.id for topic in self.path]

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-serializable dictionary."""
        return {
            "path_exists": self.path_exists,
            "distance": self.distance,
            "path": [topic.to_record() for topic in self.path],
            "search_stats": self.search_stats.to_dict(),
        }
