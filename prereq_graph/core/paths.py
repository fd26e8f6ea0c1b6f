"""
Path analysis over the graph store.

- Shortest path between two nodes (Dijkstra, O(V^2) scan)
- All simple paths between two nodes (exhaustive depth-first search)
- Longest simple path over every ordered pair of nodes
- Total weight of a path

Weights come from edge labels via parse_weight(). Every public method holds
the store lock for its whole run.

The longest path search enumerates every simple path between every pair of
nodes, which is exponential on dense graphs. It is meant for small
dependency graphs (tens of nodes).
"""

import logging
import math
from typing import List, Dict, Optional, FrozenSet

from .models import PathResult, LongestPathResult
from .storage import GraphStorage
from .weights import parse_weight

logger = logging.getLogger(__name__)


class PathAnalyzer:
    """Shortest, longest and exhaustive path searches over a GraphStorage."""

    def __init__(self, storage: GraphStorage):
        self._storage = storage

    def _edge_weight(self, from_id: int, to_id: int) -> Optional[int]:
        data = self._storage.graph.get_edge_data(from_id, to_id)
        if data is None:
            return None
        return parse_weight(data['data'].label)

    def find_shortest_path(self, start: int, end: int) -> Optional[PathResult]:
        """
        Find the cheapest path from `start` to `end` with Dijkstra's algorithm.

        Unvisited nodes are scanned in node insertion order and the first one
        with the strictly smallest distance is picked, which makes ties
        deterministic.

        Returns:
            PathResult with the node ids from start to end and the total
            weight, or None if either node is missing or end is unreachable.
            A query from a node to itself gives path [start], distance 0.
        """
        with self._storage.lock:
            if start not in self._storage.nodes or end not in self._storage.nodes:
                logger.warning(f"Shortest path {start}->{end}: start or end node does not exist")
                return None

            graph = self._storage.graph
            distances: Dict[int, float] = {node_id: math.inf for node_id in self._storage.nodes}
            previous: Dict[int, Optional[int]] = {node_id: None for node_id in self._storage.nodes}
            unvisited = dict.fromkeys(self._storage.nodes)

            distances[start] = 0

            while unvisited:
                current = None
                min_distance = math.inf
                for node_id in unvisited:
                    if distances[node_id] < min_distance:
                        min_distance = distances[node_id]
                        current = node_id

                if current is None or current == end:
                    break

                del unvisited[current]

                for neighbor, edge_data in graph.succ[current].items():
                    weight = parse_weight(edge_data['data'].label)
                    candidate = distances[current] + weight
                    if candidate < distances[neighbor]:
                        distances[neighbor] = candidate
                        previous[neighbor] = current

            if previous[end] is None and end != start:
                return None

            path = []
            seen = set()
            current = end
            while current is not None and current not in seen:
                seen.add(current)
                path.insert(0, current)
                current = previous[current]

            return PathResult(path=path, distance=int(distances[end]))

    def find_all_paths(self, start: int, end: int) -> List[List[int]]:
        """
        Enumerate every simple path from `start` to `end`.

        Paths are produced in depth-first order, following out-edges in
        insertion order. A path from a node to itself is the single path
        [start].
        """
        with self._storage.lock:
            if start not in self._storage.nodes or end not in self._storage.nodes:
                return []
            return self._walk(start, end, [], frozenset())

    def _walk(
        self,
        current: int,
        end: int,
        path: List[int],
        visited: FrozenSet[int],
    ) -> List[List[int]]:
        # Each branch gets its own visited set; siblings never see each other's visits
        current_path = path + [current]
        current_visited = visited | {current}

        if current == end:
            return [current_path]

        all_paths = []
        for neighbor in self._storage.graph.successors(current):
            if neighbor in current_visited:
                continue
            all_paths.extend(self._walk(neighbor, end, current_path, current_visited))

        return all_paths

    def calculate_path_distance(self, path: List[int]) -> int:
        """
        Sum the edge weights along a path.

        A consecutive pair with no edge between them adds nothing.
        """
        with self._storage.lock:
            distance = 0
            for from_id, to_id in zip(path, path[1:]):
                weight = self._edge_weight(from_id, to_id)
                if weight is not None:
                    distance += weight
            return distance

    def find_longest_path(self) -> LongestPathResult:
        """
        Find the heaviest simple path between any two distinct nodes.

        Every ordered pair of nodes is tried in node insertion order; a path
        replaces the current best only if it is strictly heavier, so the
        first path found wins ties.

        Returns:
            LongestPathResult; distance is -1 and path is None if the graph
            has no path between any two distinct nodes.
        """
        with self._storage.lock:
            result = LongestPathResult()
            node_ids = list(self._storage.nodes)

            for start in node_ids:
                for end in node_ids:
                    if start == end:
                        continue
                    for path in self.find_all_paths(start, end):
                        distance = self.calculate_path_distance(path)
                        if distance > result.distance:
                            result = LongestPathResult(
                                path=path,
                                distance=distance,
                                start=start,
                                end=end,
                            )

            logger.info(f"Longest path: {result.path} (distance {result.distance})")
            return result
