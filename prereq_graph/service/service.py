"""
GraphService - Business logic layer for graph operations.

This module provides a unified service interface for graph operations,
independent of the transport protocol (REST, MCP, etc.).

Key design principles:
- The core stays free of I/O; this layer decides where snapshots live
- Consistent response format across all methods (JSON-ready dicts)
- Failures are reported as {"success": False, "error_type", "error"},
  never raised
- Thread-safe operations through the core store lock
- Editor defaults and highlight colours are loaded from config_loader
"""

import logging
from typing import List, Optional, Dict, Any

from pydantic import TypeAdapter, ValidationError

from prereq_graph.core import (
    GraphStorage, GraphQueries, PathAnalyzer, PresentationOverlay, SnapshotCodec,
    adjacency_matrix, incidence_matrix,
)
from prereq_graph import config_loader
from prereq_graph.config_loader import EditorConfig, HighlightConfig

from .persistence import SnapshotFile
from .serializers import (
    serialize_node, serialize_nodes,
    serialize_edge, serialize_edges,
    serialize_node_info, serialize_path, serialize_longest_path,
    serialize_highlight, serialize_graph_stats,
)

# Initialize logger
logger = logging.getLogger(__name__)

# Error types reported in failed responses
NOT_FOUND = "not_found"
CONFLICT = "conflict"
MALFORMED_INPUT = "malformed_input"

# Coerces "1" to 1 the same way the Node model does
_NODE_ID = TypeAdapter(int)


def _error(error_type: str, message: str) -> Dict[str, Any]:
    return {"success": False, "error_type": error_type, "error": message}


class GraphService:
    """
    Central service class for all graph operations.

    Wraps the core components and provides a clean API for:
    - Node and edge CRUD
    - Prerequisite/postrequisite queries
    - Shortest, longest and exhaustive path analysis
    - Path highlighting
    - Snapshot export/import and optional file persistence
    """

    def __init__(
        self,
        storage: Optional[GraphStorage] = None,
        snapshot_file: Optional[SnapshotFile] = None,
        autosave: bool = False,
        editor_config: Optional[EditorConfig] = None,
        highlight_config: Optional[HighlightConfig] = None,
    ):
        """
        Initialize GraphService.

        Args:
            storage: A GraphStorage instance (a new empty one if None)
            snapshot_file: Where save()/load() keep the snapshot
            autosave: Save after every mutation that sets the change flag
            editor_config: Editor defaults (from config file if None)
            highlight_config: Highlight colours (from config file if None)
        """
        self._editor = editor_config or config_loader.get_editor_config()
        highlight = highlight_config or config_loader.get_highlight_config()

        self._storage = storage or GraphStorage(default_node_name=self._editor.default_node_name)
        self._snapshot_file = snapshot_file
        self._autosave = autosave

        self._queries = GraphQueries(self._storage)
        self._analyzer = PathAnalyzer(self._storage)
        self._overlay = PresentationOverlay(
            self._storage,
            analyzer=self._analyzer,
            shortest_colors=(highlight.shortest_path.edge, highlight.shortest_path.node),
            longest_colors=(highlight.longest_path.edge, highlight.longest_path.node),
            border_color=highlight.border,
            edge_width=highlight.edge_width,
        )
        self._codec = SnapshotCodec(self._storage, self._overlay)

    @property
    def storage(self) -> GraphStorage:
        """Access the underlying storage (for advanced use cases)."""
        return self._storage

    @property
    def overlay(self) -> PresentationOverlay:
        return self._overlay

    # ==================== Persistence ====================

    def load(self) -> bool:
        """
        Load the graph from the snapshot file, if there is one.

        Returns:
            True if a snapshot was loaded
        """
        if self._snapshot_file is None:
            return False

        text = self._snapshot_file.read()
        if text is None:
            return False

        if not self._codec.import_snapshot(text):
            logger.error(f"Could not load graph from {self._snapshot_file.path}")
            return False

        # A freshly loaded graph matches what is on disk
        self._storage.acknowledge_changes()
        return True

    def save(self) -> Dict[str, Any]:
        """Write the current graph to the snapshot file."""
        if self._snapshot_file is None:
            return _error(NOT_FOUND, "No graph file configured")

        with self._storage.lock:
            self._snapshot_file.write(self._codec.export())
            self._storage.acknowledge_changes()

        return {"success": True, "path": str(self._snapshot_file.path)}

    def _after_mutation(self) -> None:
        if self._autosave and self._snapshot_file is not None and self._storage.is_changed:
            try:
                self.save()
            except OSError as e:
                logger.error(f"Autosave to {self._snapshot_file.path} failed: {e}")

    def acknowledge_changes(self) -> Dict[str, Any]:
        """Reset the change flag and report whether it was set."""
        return {"success": True, "was_changed": self._storage.acknowledge_changes()}

    # ==================== Read Operations ====================

    def get_graph(self) -> Dict[str, Any]:
        """Get all nodes and edges."""
        with self._storage.lock:
            nodes = self._storage.get_all_nodes()
            edges = self._storage.get_all_edges()

        return {
            "nodes": serialize_nodes(nodes),
            "edges": serialize_edges(edges),
            "total_nodes": len(nodes),
            "total_edges": len(edges),
        }

    def get_node_details(self, node_id: int) -> Dict[str, Any]:
        """
        Get a node with its prerequisites and postrequisites.

        Args:
            node_id: ID of the node

        Returns:
            Dict with node info or error
        """
        info = self._queries.node_info(node_id)
        if info is None:
            return _error(NOT_FOUND, f"Node {node_id} not found")

        return {"success": True, "node": serialize_node_info(info)}

    def get_prerequisites(self, node_id: int) -> Dict[str, Any]:
        """Ids of the nodes with an edge into node_id (empty if none or unknown)."""
        return {
            "node_id": node_id,
            "prerequisites": self._queries.predecessors(node_id),
        }

    def get_postrequisites(self, node_id: int) -> Dict[str, Any]:
        """Ids of the nodes node_id has an edge to (empty if none or unknown)."""
        return {
            "node_id": node_id,
            "postrequisites": self._queries.successors(node_id),
        }

    def get_graph_stats(self) -> Dict[str, Any]:
        """Get statistics for the graph."""
        return serialize_graph_stats(self._storage.get_stats())

    def get_presentation(self) -> Dict[str, Any]:
        """Get the presentation configuration."""
        return config_loader.get_presentation()

    # ==================== Node Operations ====================

    def add_node(
        self,
        name: Optional[str] = None,
        node_id: Optional[int] = None,
        x: Optional[float] = None,
        y: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Add a node.

        Args:
            name: Free-text name (default name template if None)
            node_id: Node ID (next free id if None)
            x, y: Position (0, 0 if not both given)

        Returns:
            Dict with the new node, or a conflict error
        """
        logger.info(f"ADD_NODE: id={node_id} name={name!r}")

        with self._storage.lock:
            if node_id is None:
                node_id = self._storage.next_node_id()
            try:
                node_id = _NODE_ID.validate_python(node_id)
            except ValidationError:
                return _error(MALFORMED_INPUT, f"Invalid node ID {node_id!r}")
            if name is None:
                name = self._editor.default_node_name.format(id=node_id)

            if not self._storage.add_node(node_id, name, x, y):
                return _error(CONFLICT, f"Node with ID {node_id} already exists")
            node = self._storage.get_node(node_id)

        self._after_mutation()
        return {"success": True, "node": serialize_node(node)}

    def rename_node(self, node_id: int, name: str) -> Dict[str, Any]:
        """Change the name of a node."""
        logger.info(f"RENAME_NODE: id={node_id} name={name!r}")

        if not self._storage.rename_node(node_id, name):
            return _error(NOT_FOUND, f"Node {node_id} not found")

        self._after_mutation()
        return {"success": True, "node": serialize_node(self._storage.get_node(node_id))}

    def move_node(self, node_id: int, x: float, y: float) -> Dict[str, Any]:
        """Set the position of a node."""
        if not self._storage.move_node(node_id, x, y):
            return _error(NOT_FOUND, f"Node {node_id} not found")

        return {"success": True, "node": serialize_node(self._storage.get_node(node_id))}

    def delete_node(self, node_id: int) -> Dict[str, Any]:
        """
        Delete a node and all edges connected to it.

        Returns:
            Dict with the deleted node ID and the IDs of removed edges
        """
        logger.info(f"DELETE_NODE: id={node_id}")

        with self._storage.lock:
            affected_edge_ids = [edge.id for edge in self._storage.get_edges_for_node(node_id)]
            if not self._storage.delete_node(node_id):
                return _error(NOT_FOUND, f"Node {node_id} not found")

        self._after_mutation()
        return {
            "success": True,
            "deleted_node_id": node_id,
            "affected_edge_ids": affected_edge_ids,
        }

    # ==================== Edge Operations ====================

    def add_edge(self, from_id: int, to_id: int, label: Optional[str] = None) -> Dict[str, Any]:
        """
        Add a directed edge.

        Args:
            from_id: Source node ID (the prerequisite)
            to_id: Target node ID
            label: Weight label (editor default if None)

        Returns:
            Dict with the new edge, or an error when a node is missing
            (not_found) or the edge already exists (conflict)
        """
        if label is None:
            label = self._editor.default_edge_label
        logger.info(f"ADD_EDGE: {from_id}->{to_id} label={label!r}")

        with self._storage.lock:
            for node_id in (from_id, to_id):
                if not self._storage.has_node(node_id):
                    return _error(NOT_FOUND, f"Node {node_id} not found")
            if not self._storage.add_edge(from_id, to_id, label):
                return _error(CONFLICT, f"Edge {from_id}->{to_id} already exists")
            edge = self._storage.get_edge_between(from_id, to_id)

        self._after_mutation()
        return {"success": True, "edge": serialize_edge(edge)}

    def rename_edge(self, from_id: int, to_id: int, label: str) -> Dict[str, Any]:
        """Change the label of the edge from_id -> to_id."""
        logger.info(f"RENAME_EDGE: {from_id}->{to_id} label={label!r}")

        if not self._storage.rename_edge(from_id, to_id, label):
            return _error(NOT_FOUND, f"Edge {from_id}->{to_id} not found")

        self._after_mutation()
        return {"success": True, "edge": serialize_edge(self._storage.get_edge_between(from_id, to_id))}

    def delete_edge(self, from_id: int, to_id: int) -> Dict[str, Any]:
        """Delete the edge from_id -> to_id."""
        logger.info(f"DELETE_EDGE: {from_id}->{to_id}")

        if not self._storage.delete_edge(from_id, to_id):
            return _error(NOT_FOUND, f"Edge {from_id}->{to_id} not found")

        self._after_mutation()
        return {"success": True}

    def delete_edge_by_id(self, edge_id: int) -> Dict[str, Any]:
        """Delete an edge by its ID."""
        logger.info(f"DELETE_EDGE: id={edge_id}")

        if not self._storage.delete_edge_by_id(edge_id):
            return _error(NOT_FOUND, f"Edge {edge_id} not found")

        self._after_mutation()
        return {"success": True, "deleted_edge_id": edge_id}

    # ==================== Path Analysis ====================

    def find_shortest_path(self, start: int, end: int) -> Dict[str, Any]:
        """
        Find the cheapest path from start to end.

        Returns:
            Dict with found/path/distance. found is False (path and
            distance None) when end cannot be reached from start.
        """
        logger.info(f"SHORTEST_PATH: {start}->{end}")

        for node_id in (start, end):
            if not self._storage.has_node(node_id):
                return _error(NOT_FOUND, f"Node {node_id} not found")

        result = self._analyzer.find_shortest_path(start, end)
        if result is None:
            return {"success": True, "found": False, "path": None, "distance": None}

        return {"success": True, "found": True, **serialize_path(result)}

    def find_all_paths(self, start: int, end: int) -> Dict[str, Any]:
        """List every simple path from start to end with its distance."""
        logger.info(f"ALL_PATHS: {start}->{end}")

        for node_id in (start, end):
            if not self._storage.has_node(node_id):
                return _error(NOT_FOUND, f"Node {node_id} not found")

        with self._storage.lock:
            paths = self._analyzer.find_all_paths(start, end)
            results = [
                {"path": path, "distance": self._analyzer.calculate_path_distance(path)}
                for path in paths
            ]

        return {"success": True, "paths": results, "total": len(results)}

    def calculate_path_distance(self, path: List[int]) -> Dict[str, Any]:
        """Total weight of the edges along a path."""
        return {
            "success": True,
            "path": path,
            "distance": self._analyzer.calculate_path_distance(path),
        }

    def find_longest_path(self) -> Dict[str, Any]:
        """
        Find the heaviest simple path in the whole graph.

        Returns:
            Dict with found/path/distance/start/end; distance is -1 when
            there is no path at all.
        """
        logger.info("LONGEST_PATH")
        result = self._analyzer.find_longest_path()
        return {"success": True, "found": result.found, **serialize_longest_path(result)}

    # ==================== Highlighting ====================

    def highlight_paths(self, start: int, end: int) -> Dict[str, Any]:
        """
        Colour the shortest path start->end and the global longest path.

        Returns:
            Dict with both path results and the resulting styled snapshot
        """
        logger.info(f"HIGHLIGHT: {start}->{end}")

        with self._storage.lock:
            result = self._overlay.highlight_paths(start, end)
            snapshot = self._codec.export()

        return {"success": True, **serialize_highlight(result), "graph": snapshot}

    def reset_highlights(self) -> Dict[str, Any]:
        """Clear all path highlighting."""
        self._overlay.reset_colors()
        return {"success": True}

    # ==================== Matrices ====================

    def get_adjacency_matrix(self) -> Dict[str, Any]:
        return adjacency_matrix(self._storage).model_dump()

    def get_incidence_matrix(self) -> Dict[str, Any]:
        return incidence_matrix(self._storage).model_dump()

    # ==================== Snapshots ====================

    def export_graph(self) -> Dict[str, Any]:
        """Export the entire graph (all nodes and edges)."""
        return self._codec.export()

    def import_graph(self, payload: Any) -> Dict[str, Any]:
        """
        Replace the graph with a snapshot.

        Args:
            payload: Snapshot as JSON text or decoded dict

        Returns:
            Dict with the new counts, or a malformed_input error (the graph
            is left unchanged)
        """
        logger.info("IMPORT_GRAPH")

        if not self._codec.import_snapshot(payload):
            return _error(MALFORMED_INPUT, "Snapshot could not be parsed or is not a valid graph")

        self._after_mutation()
        return {
            "success": True,
            "total_nodes": len(self._storage.nodes),
            "total_edges": len(self._storage.edges),
        }

    def export_positions(self) -> List[Dict[str, Any]]:
        """Export id, position and label of every node."""
        return self._codec.export_positions()

    def import_positions(self, payload: Any) -> Dict[str, Any]:
        """Update node positions; ids not in the graph are skipped."""
        if not self._codec.import_positions(payload):
            return _error(MALFORMED_INPUT, "Positions could not be parsed")

        return {"success": True}
