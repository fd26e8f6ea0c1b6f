"""
Presentation overlay: rendering styles keyed by node/edge id.

Styles are kept out of the Node and Edge records so path analysis never
depends on them. The overlay listens to the store and drops styles of
deleted nodes and edges.
"""

import logging
from typing import Dict, List, Optional

from .models import (
    NodeStyle, EdgeStyle, HighlightResult, LongestPathResult,
    GraphEvent, EventType, EntityKind
)
from .paths import PathAnalyzer
from .storage import GraphStorage

logger = logging.getLogger(__name__)

# (edge colour, node colour)
SHORTEST_PATH_COLORS = ("#00aa00", "#aaffaa")
LONGEST_PATH_COLORS = ("#aa0000", "#ffaaaa")
PATH_BORDER_COLOR = "#000000"
PATH_EDGE_WIDTH = 3


class PresentationOverlay:
    """
    Node and edge styles for a GraphStorage.

    Set only by path highlighting and cleared by reset_colors().
    """

    def __init__(
        self,
        storage: GraphStorage,
        analyzer: Optional[PathAnalyzer] = None,
        shortest_colors: tuple = SHORTEST_PATH_COLORS,
        longest_colors: tuple = LONGEST_PATH_COLORS,
        border_color: str = PATH_BORDER_COLOR,
        edge_width: float = PATH_EDGE_WIDTH,
    ):
        self._storage = storage
        self._analyzer = analyzer or PathAnalyzer(storage)
        self.shortest_colors = shortest_colors
        self.longest_colors = longest_colors
        self.border_color = border_color
        self.edge_width = edge_width

        self.node_styles: Dict[int, NodeStyle] = {}
        self.edge_styles: Dict[int, EdgeStyle] = {}

        storage.add_listener(self._on_graph_event)

    def _on_graph_event(self, event: GraphEvent) -> None:
        if event.event_type == EventType.NODE_DELETE:
            self.node_styles.pop(event.entity_id, None)
        elif event.event_type == EventType.EDGE_DELETE:
            self.edge_styles.pop(event.entity_id, None)
        elif event.entity_kind == EntityKind.GRAPH and event.event_type in (
            EventType.GRAPH_CLEAR, EventType.GRAPH_IMPORT
        ):
            self.reset_colors()

    def node_style(self, node_id: int) -> Optional[NodeStyle]:
        return self.node_styles.get(node_id)

    def edge_style(self, edge_id: int) -> Optional[EdgeStyle]:
        return self.edge_styles.get(edge_id)

    def set_node_style(self, node_id: int, style: NodeStyle) -> bool:
        if not self._storage.has_node(node_id):
            return False
        self.node_styles[node_id] = style
        return True

    def set_edge_style(self, edge_id: int, style: EdgeStyle) -> bool:
        if self._storage.get_edge(edge_id) is None:
            return False
        self.edge_styles[edge_id] = style
        return True

    def reset_colors(self) -> None:
        """Clear every node and edge style."""
        self.node_styles.clear()
        self.edge_styles.clear()

    def color_path(
        self,
        path: Optional[List[int]],
        edge_color: str,
        node_color: str,
    ) -> bool:
        """
        Colour the nodes and edges along a path.

        Returns:
            False if there is no path or it has fewer than two nodes
        """
        if not path or len(path) <= 1:
            return False

        with self._storage.lock:
            for node_id in path:
                self.set_node_style(
                    node_id,
                    NodeStyle(background=node_color, border=self.border_color),
                )

            for from_id, to_id in zip(path, path[1:]):
                edge = self._storage.get_edge_between(from_id, to_id)
                if edge is not None:
                    self.set_edge_style(
                        edge.id,
                        EdgeStyle(color=edge_color, highlight=edge_color, width=self.edge_width),
                    )
        return True

    def highlight_paths(self, start: int, end: int) -> HighlightResult:
        """
        Reset all styles, then colour the shortest path from start to end and
        the longest path in the whole graph.

        The longest path is coloured last, so it wins where the two overlap.
        """
        with self._storage.lock:
            self.reset_colors()

            shortest = self._analyzer.find_shortest_path(start, end)
            if shortest is not None:
                self.color_path(shortest.path, *self.shortest_colors)
                logger.info(f"Shortest path: {shortest.path} (distance {shortest.distance})")

            longest: LongestPathResult = self._analyzer.find_longest_path()
            if longest.found:
                self.color_path(longest.path, *self.longest_colors)

            return HighlightResult(shortest_path=shortest, longest_path=longest)
