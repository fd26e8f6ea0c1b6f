"""
Graph store backed by NetworkX.
Handles all CRUD operations on the graph.

This module is part of the core layer. It owns the canonical set of nodes
and directed edges and enforces the structural invariants:
- Node ids are unique
- At most one edge per ordered (from, to) pair
- No dangling edges (deleting a node removes every incident edge)

Concurrency Safety:
- Uses threading.RLock around every CRUD call
- Analysis passes (paths, snapshots, matrices) hold the same lock for their
  whole duration, so no mutation can interleave with a traversal

Change tracking:
- Mutations set a change flag that callers poll via is_changed and reset
  via acknowledge_changes()
- Listeners registered with add_listener() receive a GraphEvent after each
  mutating call
"""

import logging
import threading
from typing import List, Dict, Optional, Any, Callable, Iterable
from datetime import datetime

import networkx as nx

from .models import (
    Node, Edge, GraphStats, GraphEvent, EventType, EntityKind
)

logger = logging.getLogger(__name__)

DEFAULT_NODE_NAME = "Node {id}"


class GraphStorage:
    """
    Manages the in-memory graph.

    Nodes and edges are kept in insertion-ordered dicts (the canonical
    enumeration order used by every query) and mirrored in a networkx
    DiGraph used as an adjacency index. The DiGraph keeps per-node
    successor/predecessor buckets in insertion order, so iterating it gives
    the same order as filtering the edge dict.

    Thread-safety:
    - All public methods that touch state are protected by _lock
      (threading.RLock), exposed as the `lock` property for analysis passes
    """

    def __init__(self, default_node_name: str = DEFAULT_NODE_NAME):
        """
        Initialize an empty GraphStorage.

        Args:
            default_node_name: Name template for nodes created without a
                               name; "{id}" is replaced by the node id.
        """
        # RLock allows analysis passes to call accessors while holding it
        self._lock = threading.RLock()

        self.graph = nx.DiGraph()
        self.nodes: Dict[int, Node] = {}  # node_id -> Node
        self.edges: Dict[int, Edge] = {}  # edge_id -> Edge
        self.default_node_name = default_node_name

        self._next_edge_id = 1
        self._changed = False
        self._listeners: List[Callable[[GraphEvent], None]] = []

    @property
    def lock(self) -> threading.RLock:
        """The store lock. Hold it to get a mutation-free view."""
        return self._lock

    # ==================== Change Tracking ====================

    @property
    def is_changed(self) -> bool:
        """True if the graph was mutated since the last acknowledge."""
        return self._changed

    def acknowledge_changes(self) -> bool:
        """
        Reset the change flag.

        Returns:
            The flag value before the reset.
        """
        with self._lock:
            was_changed = self._changed
            self._changed = False
            return was_changed

    def add_listener(self, listener: Callable[[GraphEvent], None]) -> None:
        """Register a callback that receives every mutation event."""
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[GraphEvent], None]) -> bool:
        with self._lock:
            if listener not in self._listeners:
                return False
            self._listeners.remove(listener)
            return True

    def _emit_event(
        self,
        event_type: EventType,
        entity_kind: EntityKind,
        entity_id: Optional[int] = None,
        before: Optional[Dict[str, Any]] = None,
        after: Optional[Dict[str, Any]] = None,
        mark_changed: bool = True,
    ) -> None:
        """
        Record a mutation and notify listeners.

        Args:
            event_type: Type of mutation
            entity_kind: Node, edge or whole graph
            entity_id: ID of the entity (None for graph-level events)
            before: Entity state before mutation (for updates/deletes)
            after: Entity state after mutation (for creates/updates)
            mark_changed: Whether the mutation sets the change flag
        """
        if mark_changed:
            self._changed = True

        event = GraphEvent(
            event_type=event_type,
            entity_kind=entity_kind,
            entity_id=entity_id,
            before=before,
            after=after,
        )

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Error in graph listener: {e}")

    # ==================== Accessors ====================

    def has_node(self, node_id: int) -> bool:
        return node_id in self.nodes

    def get_node(self, node_id: int) -> Optional[Node]:
        """Get a specific node"""
        return self.nodes.get(node_id)

    def get_node_name(self, node_id: int) -> Optional[str]:
        """Get the free-text name of a node, without the id prefix."""
        node = self.nodes.get(node_id)
        return node.name if node else None

    def get_all_nodes(self) -> List[Node]:
        """Get all nodes in insertion order"""
        with self._lock:
            return list(self.nodes.values())

    def get_edge(self, edge_id: int) -> Optional[Edge]:
        """Get a specific edge by ID"""
        return self.edges.get(edge_id)

    def get_all_edges(self) -> List[Edge]:
        """Get all edges in insertion order"""
        with self._lock:
            return list(self.edges.values())

    def edges_where(self, predicate: Callable[[Edge], bool]) -> List[Edge]:
        """Get all edges matching a predicate, in insertion order."""
        with self._lock:
            return [edge for edge in self.edges.values() if predicate(edge)]

    def get_edge_between(self, from_id: int, to_id: int) -> Optional[Edge]:
        """Get the edge from `from_id` to `to_id`, if any."""
        matches = self.edges_where(
            lambda edge: edge.source == from_id and edge.target == to_id
        )
        return matches[0] if matches else None

    def has_edge(self, from_id: int, to_id: int) -> bool:
        return self.get_edge_between(from_id, to_id) is not None

    def get_edges_for_node(self, node_id: int) -> List[Edge]:
        """Get all edges connected to a specific node"""
        return self.edges_where(
            lambda edge: edge.source == node_id or edge.target == node_id
        )

    def next_node_id(self) -> int:
        """Next free node id: max existing id + 1, or 1 for an empty graph."""
        with self._lock:
            return max(self.nodes) + 1 if self.nodes else 1

    # ==================== Node Mutations ====================

    def add_node(
        self,
        node_id: Optional[int],
        name: str,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> bool:
        """
        Add a node.

        Args:
            node_id: ID of the node, or None to assign the next free id
            name: Free-text name (the label becomes "<id> - <name>")
            x, y: Position; both default to 0 unless both are given

        Returns:
            True if the node was added, False if the id is already used

        Raises:
            pydantic.ValidationError: if node_id is not an integer
        """
        with self._lock:
            if node_id is None:
                node_id = self.next_node_id()

            if x is None or y is None:
                x, y = 0.0, 0.0

            # Validate first: the duplicate check must use the coerced id ("1" -> 1)
            node = Node(id=node_id, name=name, x=x, y=y)
            if node.id in self.nodes:
                logger.warning(f"Node with ID {node.id} already exists")
                return False

            self.nodes[node.id] = node
            self.graph.add_node(node.id, data=node)

            self._emit_event(
                event_type=EventType.NODE_CREATE,
                entity_kind=EntityKind.NODE,
                entity_id=node.id,
                after=node.to_dict(),
            )
            return True

    def add_node_at_position(
        self,
        x: float,
        y: float,
        name: Optional[str] = None,
    ) -> Optional[int]:
        """
        Add a node with the next free id at the given position.

        Returns:
            The new node id, or None if the node could not be added
        """
        with self._lock:
            node_id = self.next_node_id()
            if name is None:
                name = self.default_node_name.format(id=node_id)
            if not self.add_node(node_id, name, x, y):
                return None
            return node_id

    def rename_node(self, node_id: int, name: str) -> bool:
        """
        Change the name of a node, keeping its position.

        Returns:
            True if renamed, False if the node does not exist
        """
        with self._lock:
            node = self.nodes.get(node_id)
            if node is None:
                logger.warning(f"Cannot rename node {node_id}: not found")
                return False

            before_state = node.to_dict()
            node.name = name

            self._emit_event(
                event_type=EventType.NODE_UPDATE,
                entity_kind=EntityKind.NODE,
                entity_id=node_id,
                before=before_state,
                after=node.to_dict(),
            )
            return True

    def move_node(self, node_id: int, x: float, y: float) -> bool:
        """
        Set the position of a node.

        Position changes are layout, not graph structure: they do not set
        the change flag.
        """
        with self._lock:
            node = self.nodes.get(node_id)
            if node is None:
                return False

            before_state = node.to_dict()
            node.x = x
            node.y = y

            self._emit_event(
                event_type=EventType.NODE_MOVE,
                entity_kind=EntityKind.NODE,
                entity_id=node_id,
                before=before_state,
                after=node.to_dict(),
                mark_changed=False,
            )
            return True

    def delete_node(self, node_id: int) -> bool:
        """
        Delete a node and every edge where it is the source or target.

        Returns:
            True if deleted, False if the node does not exist
        """
        with self._lock:
            node = self.nodes.get(node_id)
            if node is None:
                logger.warning(f"Cannot delete node {node_id}: not found")
                return False

            edges_to_remove = self.get_edges_for_node(node_id)
            for edge in edges_to_remove:
                del self.edges[edge.id]

            # Removing the node from the index drops its incident edges too
            self.graph.remove_node(node_id)
            del self.nodes[node_id]

            # Edge events first, so listeners never see an edge without its node
            for edge in edges_to_remove:
                self._emit_event(
                    event_type=EventType.EDGE_DELETE,
                    entity_kind=EntityKind.EDGE,
                    entity_id=edge.id,
                    before=edge.to_dict(),
                )

            self._emit_event(
                event_type=EventType.NODE_DELETE,
                entity_kind=EntityKind.NODE,
                entity_id=node_id,
                before=node.to_dict(),
            )

            logger.info(f"Deleted node {node_id} and {len(edges_to_remove)} edges")
            return True

    # ==================== Edge Mutations ====================

    def add_edge(self, from_id: int, to_id: int, label: str = "") -> bool:
        """
        Add a directed edge between two existing nodes.

        Self-loops (from_id == to_id) are allowed.

        Returns:
            True if added, False if an endpoint is missing or the edge
            (from_id, to_id) already exists
        """
        with self._lock:
            if from_id not in self.nodes or to_id not in self.nodes:
                logger.warning(f"Cannot add edge {from_id}->{to_id}: node not found")
                return False

            if self.has_edge(from_id, to_id):
                logger.warning(f"Edge {from_id}->{to_id} already exists")
                return False

            edge = Edge(
                id=self._next_edge_id,
                source=from_id,
                target=to_id,
                label=label,
            )
            self._insert_edge(edge)

            self._emit_event(
                event_type=EventType.EDGE_CREATE,
                entity_kind=EntityKind.EDGE,
                entity_id=edge.id,
                after=edge.to_dict(),
            )
            return True

    def _insert_edge(self, edge: Edge) -> None:
        self.edges[edge.id] = edge
        self.graph.add_edge(edge.source, edge.target, id=edge.id, data=edge)
        self._next_edge_id = max(self._next_edge_id, edge.id + 1)

    def rename_edge(self, from_id: int, to_id: int, label: str) -> bool:
        """
        Change the label (and so the weight) of the edge (from_id, to_id).

        Returns:
            True if updated, False if there is no such edge
        """
        with self._lock:
            edge = self.get_edge_between(from_id, to_id)
            if edge is None:
                logger.warning(f"Cannot rename edge {from_id}->{to_id}: not found")
                return False

            before_state = edge.to_dict()
            edge.label = label

            self._emit_event(
                event_type=EventType.EDGE_UPDATE,
                entity_kind=EntityKind.EDGE,
                entity_id=edge.id,
                before=before_state,
                after=edge.to_dict(),
            )
            return True

    def delete_edge(self, from_id: int, to_id: int) -> bool:
        """
        Delete the edge (from_id, to_id).

        Returns:
            True if deleted, False if there is no such edge
        """
        with self._lock:
            edge = self.get_edge_between(from_id, to_id)
            if edge is None:
                return False
            return self.delete_edge_by_id(edge.id)

    def delete_edge_by_id(self, edge_id: int) -> bool:
        """
        Delete a single edge by its ID.

        Returns:
            True if edge was deleted, False if not found
        """
        with self._lock:
            edge = self.edges.get(edge_id)
            if edge is None:
                logger.warning(f"Cannot delete edge {edge_id}: not found")
                return False

            self.graph.remove_edge(edge.source, edge.target)
            del self.edges[edge_id]

            self._emit_event(
                event_type=EventType.EDGE_DELETE,
                entity_kind=EntityKind.EDGE,
                entity_id=edge_id,
                before=edge.to_dict(),
            )
            return True

    # ==================== Bulk Operations ====================

    def clear(self) -> None:
        """Remove all nodes and edges."""
        with self._lock:
            self._clear()
            self._emit_event(
                event_type=EventType.GRAPH_CLEAR,
                entity_kind=EntityKind.GRAPH,
            )

    def _clear(self) -> None:
        self.nodes.clear()
        self.edges.clear()
        self.graph.clear()
        self._next_edge_id = 1

    def replace_all(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        """
        Replace the whole graph with the given nodes and edges.

        Everything is validated before the current graph is cleared, so a
        rejected replacement leaves the store untouched.

        Raises:
            ValueError: if the records break a store invariant
        """
        nodes = list(nodes)
        edges = list(edges)

        with self._lock:
            self._validate_records(nodes, edges)

            self._clear()
            for node in nodes:
                self.nodes[node.id] = node
                self.graph.add_node(node.id, data=node)
            for edge in edges:
                self._insert_edge(edge)

            self._emit_event(
                event_type=EventType.GRAPH_IMPORT,
                entity_kind=EntityKind.GRAPH,
                after={'nodes': len(self.nodes), 'edges': len(self.edges)},
            )
            logger.info(f"Loaded {len(self.nodes)} nodes and {len(self.edges)} edges")

    @staticmethod
    def _validate_records(nodes: List[Node], edges: List[Edge]) -> None:
        node_ids = set()
        for node in nodes:
            if node.id in node_ids:
                raise ValueError(f"Duplicate node ID {node.id}")
            node_ids.add(node.id)

        edge_ids = set()
        pairs = set()
        for edge in edges:
            if edge.id in edge_ids:
                raise ValueError(f"Duplicate edge ID {edge.id}")
            if edge.source not in node_ids:
                raise ValueError(f"Edge {edge.id} source node {edge.source} does not exist")
            if edge.target not in node_ids:
                raise ValueError(f"Edge {edge.id} target node {edge.target} does not exist")
            if (edge.source, edge.target) in pairs:
                raise ValueError(f"Duplicate edge {edge.source}->{edge.target}")
            edge_ids.add(edge.id)
            pairs.add((edge.source, edge.target))

    def update_positions(self, positions: Iterable[Dict[str, Any]]) -> int:
        """
        Set x/y for each listed node id that exists; unknown ids are skipped.

        Like move_node, this does not set the change flag.

        Returns:
            Number of nodes updated
        """
        with self._lock:
            updated = 0
            for position in positions:
                node = self.nodes.get(position['id'])
                if node is None:
                    continue
                node.x = position['x']
                node.y = position['y']
                updated += 1

            self._emit_event(
                event_type=EventType.POSITIONS_IMPORT,
                entity_kind=EntityKind.GRAPH,
                after={'updated': updated},
                mark_changed=False,
            )
            return updated

    # ==================== Statistics ====================

    def get_stats(self) -> GraphStats:
        """Get statistics for the graph"""
        with self._lock:
            return GraphStats(
                total_nodes=len(self.nodes),
                total_edges=len(self.edges),
                is_acyclic=nx.is_directed_acyclic_graph(self.graph),
                has_unsaved_changes=self._changed,
                last_updated=datetime.utcnow(),
            )
