"""
prereq_graph.core - Graph data model and path-analysis engine

This package provides the graph store, queries, path analysis and snapshot
codec without any dependencies on HTTP, MCP, or files on disk.

Main components:
- GraphStorage: Canonical nodes and edges, CRUD, change tracking
- GraphQueries: Prerequisites, postrequisites, node details
- PathAnalyzer: Shortest path, all simple paths, longest path
- SnapshotCodec: Export/import of the graph and of node positions
- PresentationOverlay: Path highlighting styles kept apart from the graph
- Weight codec: parse_weight / format_weight

Usage:
    from prereq_graph.core import GraphStorage, PathAnalyzer

    storage = GraphStorage()
    storage.add_node(1, "Calculus I")
    storage.add_node(2, "Calculus II")
    storage.add_edge(1, 2, "C4")

    result = PathAnalyzer(storage).find_shortest_path(1, 2)
"""

# Core storage
from .storage import GraphStorage

# Weight codec
from .weights import parse_weight, format_weight, WEIGHT_PREFIX, DEFAULT_WEIGHT

# Queries and analysis
from .queries import GraphQueries
from .paths import PathAnalyzer
from .matrices import adjacency_matrix, incidence_matrix

# Presentation and snapshots
from .overlay import PresentationOverlay
from .snapshot import SnapshotCodec, name_from_label

# Data models
from .models import (
    # Domain records
    Node,
    Edge,

    # Presentation styles
    NodeStyle,
    EdgeStyle,

    # Result models
    NodeRef,
    NodeInfo,
    PathResult,
    LongestPathResult,
    HighlightResult,
    AdjacencyMatrix,
    IncidenceMatrix,
    GraphStats,

    # Events
    EventType,
    EntityKind,
    GraphEvent,
)

__all__ = [
    "GraphStorage",
    "parse_weight",
    "format_weight",
    "WEIGHT_PREFIX",
    "DEFAULT_WEIGHT",
    "GraphQueries",
    "PathAnalyzer",
    "adjacency_matrix",
    "incidence_matrix",
    "PresentationOverlay",
    "SnapshotCodec",
    "name_from_label",
    "Node",
    "Edge",
    "NodeStyle",
    "EdgeStyle",
    "NodeRef",
    "NodeInfo",
    "PathResult",
    "LongestPathResult",
    "HighlightResult",
    "AdjacencyMatrix",
    "IncidenceMatrix",
    "GraphStats",
    "EventType",
    "EntityKind",
    "GraphEvent",
]

__version__ = "1.0.0"
