"""
JSON serialization utilities for the service layer.

Provides consistent serialization of graph objects for API responses.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from prereq_graph.core import (
    Node, Edge, NodeInfo, PathResult, LongestPathResult, HighlightResult, GraphStats
)


def json_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for objects not serializable by default.

    Handles:
    - datetime objects -> ISO format strings
    """
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def serialize_to_json(data: Any) -> Any:
    """
    Serialize data to JSON-compatible format.

    Uses custom serializer for datetime objects.
    Returns a JSON-safe dict/list structure.
    """
    return json.loads(json.dumps(data, default=json_serializer))


def serialize_node(node: Node) -> Dict[str, Any]:
    """Serialize a Node to a dictionary, including its free-text name."""
    data = node.to_dict()
    data['name'] = node.name
    return data


def serialize_edge(edge: Edge) -> Dict[str, Any]:
    """Serialize an Edge to a dictionary."""
    return edge.to_dict()


def serialize_nodes(nodes: List[Node]) -> List[Dict[str, Any]]:
    """Serialize a list of Nodes to dictionaries."""
    return [serialize_node(node) for node in nodes]


def serialize_edges(edges: List[Edge]) -> List[Dict[str, Any]]:
    """Serialize a list of Edges to dictionaries."""
    return [serialize_edge(edge) for edge in edges]


def serialize_node_info(info: NodeInfo) -> Dict[str, Any]:
    """Serialize NodeInfo to a dictionary."""
    return info.model_dump()


def serialize_path(result: Optional[PathResult]) -> Optional[Dict[str, Any]]:
    """Serialize a shortest path result; None stays None."""
    return result.model_dump() if result is not None else None


def serialize_longest_path(result: LongestPathResult) -> Dict[str, Any]:
    """Serialize a longest path result."""
    return result.model_dump()


def serialize_highlight(result: HighlightResult) -> Dict[str, Any]:
    """Serialize a HighlightResult to a dictionary."""
    return {
        "shortest_path": serialize_path(result.shortest_path),
        "longest_path": serialize_longest_path(result.longest_path),
    }


def serialize_graph_stats(stats: GraphStats) -> Dict[str, Any]:
    """Serialize GraphStats to a dictionary."""
    return serialize_to_json(stats.model_dump())
