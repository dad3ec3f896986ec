"""
Shortest path between two topics, treating the hierarchy as an undirected graph
"""
import time
from typing import Dict, List, Optional

from .accessor import TopicAccessor
from .bfs_queue import TopicQueue
from .exceptions import TopicGraphError
from .logging_config import get_logger
from .models import SearchStats, ShortestPathResult, Topic
from .neighbors import NeighborResolver

logger = get_logger("shortest_path")


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class ShortestPathEngine:
    """Breadth-first search over the parent/child neighbor relation.

    Lookup failures never escape: the search degrades to a "no path" result
    carrying whatever statistics were gathered before the failure.
    """

    def __init__(self, accessor: TopicAccessor,
                 resolver: Optional[NeighborResolver] = None,
                 queue_compact_ratio: float = 0.5):
        self.accessor = accessor
        self.resolver = resolver or NeighborResolver(accessor)
        self.queue_compact_ratio = queue_compact_ratio

    async def find_shortest_path(self, start_id: str, end_id: str,
                                 only_latest: bool = True) -> ShortestPathResult:
        started = time.perf_counter()
        stats = SearchStats()

        try:
            start = await self.accessor.resolve_topic(start_id, only_latest)
            end = await self.accessor.resolve_topic(end_id, only_latest)
            if start is None or end is None:
                logger.debug("Endpoint missing: start=%s end=%s", start_id, end_id)
                return self._no_path(stats, started)

            # compared before resolution
            if start_id == end_id:
                stats.nodes_explored = 1
                stats.execution_time_ms = _elapsed_ms(started)
                return ShortestPathResult(
                    path=[start], distance=0, path_exists=True, search_stats=stats
                )

            return await self._bfs(start, end, only_latest, stats, started)
        except TopicGraphError as e:
            logger.warning(
                "Shortest path search %s -> %s aborted after %d nodes: %s",
                start_id, end_id, stats.nodes_explored, e,
            )
            return self._no_path(stats, started)

    async def _bfs(self, start: Topic, end: Topic, only_latest: bool,
                   stats: SearchStats, started: float) -> ShortestPathResult:
        queue: TopicQueue[str] = TopicQueue(self.queue_compact_ratio)
        visited = {start.id}
        parents: Dict[str, str] = {}
        depths: Dict[str, int] = {start.id: 0}
        topics: Dict[str, Topic] = {start.id: start}

        queue.enqueue(start.id)
        while not queue.is_empty():
            current_id = queue.dequeue()
            stats.nodes_explored += 1
            stats.max_depth = max(stats.max_depth, depths[current_id])
            stats.queue_max_size = queue.max_size

            if current_id == end.id:
                path = self._reconstruct_path(parents, topics, start.id, end.id)
                stats.execution_time_ms = _elapsed_ms(started)
                logger.debug(
                    "Found path %s -> %s (distance %d, %d nodes explored)",
                    start.id, end.id, len(path) - 1, stats.nodes_explored,
                )
                return ShortestPathResult(
                    path=path, distance=len(path) - 1, path_exists=True,
                    search_stats=stats,
                )

            current = await self.accessor.resolve_topic(current_id, only_latest)
            if current is None:
                continue

            for neighbor in await self.resolver.neighbors(current, only_latest):
                if neighbor.id in visited:
                    continue
                visited.add(neighbor.id)
                parents[neighbor.id] = current_id
                depths[neighbor.id] = depths[current_id] + 1
                topics[neighbor.id] = neighbor
                queue.enqueue(neighbor.id)

        stats.queue_max_size = queue.max_size
        logger.debug(
            "No path %s -> %s after exploring %d nodes",
            start.id, end.id, stats.nodes_explored,
        )
        return self._no_path(stats, started)

    @staticmethod
    def _reconstruct_path(parents: Dict[str, str], topics: Dict[str, Topic],
                          start_id: str, end_id: str) -> List[Topic]:
        """Walk parent pointers back from the end and reverse."""
        ids = [end_id]
        while ids[-1] != start_id:
            ids.append(parents[ids[-1]])
        ids.reverse()
        return [topics[topic_id] for topic_id in ids]

    @staticmethod
    def _no_path(stats: SearchStats, started: float) -> ShortestPathResult:
        stats.execution_time_ms = _elapsed_ms(started)
        return ShortestPathResult(
            path=[], distance=-1, path_exists=False, search_stats=stats
        )
