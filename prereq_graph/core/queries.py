"""
Read-only queries over the graph store.

Prerequisites of a node are the sources of its incoming edges;
postrequisites are the targets of its outgoing edges. Both are listed in
edge insertion order.
"""

from typing import List, Optional

from .models import NodeInfo, NodeRef
from .storage import GraphStorage


class GraphQueries:
    """Derived, read-only queries over a GraphStorage."""

    def __init__(self, storage: GraphStorage):
        self._storage = storage

    def has_node(self, node_id: int) -> bool:
        return self._storage.has_node(node_id)

    def has_edge(self, from_id: int, to_id: int) -> bool:
        return self._storage.has_edge(from_id, to_id)

    def predecessors(self, node_id: int) -> List[int]:
        """Ids of the nodes with an edge into `node_id` (its prerequisites)."""
        with self._storage.lock:
            if node_id not in self._storage.graph:
                return []
            return list(self._storage.graph.predecessors(node_id))

    def successors(self, node_id: int) -> List[int]:
        """Ids of the nodes `node_id` has an edge to (its postrequisites)."""
        with self._storage.lock:
            if node_id not in self._storage.graph:
                return []
            return list(self._storage.graph.successors(node_id))

    def node_info(self, node_id: int) -> Optional[NodeInfo]:
        """
        Get a node with its prerequisites and postrequisites.

        Returns:
            NodeInfo, or None if the node does not exist
        """
        with self._storage.lock:
            node = self._storage.get_node(node_id)
            if node is None:
                return None

            return NodeInfo(
                id=node.id,
                name=node.name,
                label=node.label,
                x=node.x,
                y=node.y,
                prerequisites=self._refs(self.predecessors(node_id)),
                postrequisites=self._refs(self.successors(node_id)),
            )

    def _refs(self, node_ids: List[int]) -> List[NodeRef]:
        return [
            NodeRef(id=node_id, label=self._storage.nodes[node_id].label)
            for node_id in node_ids
        ]
