"""
Data models for the prerequisite graph.

This module is part of the core layer. It contains the domain records
(nodes and edges), the presentation styles that ride alongside them in a
separate overlay, the result types returned by queries and path analysis,
and the mutation events emitted by the store.
"""

from enum import Enum
from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, Field, validator


# ==================== Domain Records ====================

class Node(BaseModel):
    """A vertex in the graph (e.g. a course)."""
    id: int
    name: str = ""
    x: float = 0.0
    y: float = 0.0

    @validator('name', pre=True)
    def validate_name(cls, v):
        """Normalize missing names to an empty string."""
        if v is None:
            return ""
        return str(v)

    @property
    def label(self) -> str:
        """Composite display label, "<id> - <name>"."""
        return f"{self.id} - {self.name}"

    def to_dict(self) -> dict:
        """Convert to the snapshot node shape (without styles)."""
        return {
            'id': self.id,
            'label': self.label,
            'x': self.x,
            'y': self.y,
        }


class Edge(BaseModel):
    """A directed, weight-bearing connection between two nodes."""
    id: int
    source: int = Field(..., alias="from")
    target: int = Field(..., alias="to")
    label: str = ""
    arrows: str = "to"

    class Config:
        populate_by_name = True

    @validator('label', pre=True)
    def validate_label(cls, v):
        """Labels may arrive as numbers or be missing in older snapshots."""
        if v is None:
            return ""
        return str(v)

    def to_dict(self) -> dict:
        """Convert to the snapshot edge shape (without styles)."""
        return {
            'id': self.id,
            'from': self.source,
            'to': self.target,
            'label': self.label,
            'arrows': self.arrows,
        }


# ==================== Presentation Styles ====================

class NodeStyle(BaseModel):
    """Rendering hint for a node, kept outside the Node record."""
    background: Optional[str] = None
    border: Optional[str] = None
    highlight: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class EdgeStyle(BaseModel):
    """Rendering hint for an edge, kept outside the Edge record."""
    color: Optional[str] = None
    highlight: Optional[str] = None
    width: Optional[float] = None

    def color_dict(self) -> dict:
        """The part of the style that goes under "color" in a snapshot."""
        return self.model_dump(include={'color', 'highlight'}, exclude_none=True)


# ==================== Result Models ====================

class NodeRef(BaseModel):
    """Short reference to a node, used in listings."""
    id: int
    label: str


class NodeInfo(BaseModel):
    """Details of a node with its prerequisites and postrequisites"""
    id: int
    name: str
    label: str
    x: float
    y: float
    prerequisites: List[NodeRef] = Field(default_factory=list)
    postrequisites: List[NodeRef] = Field(default_factory=list)


class PathResult(BaseModel):
    """Result of a shortest path search"""
    path: List[int]
    distance: int


class LongestPathResult(BaseModel):
    """
    Result of the global longest path search.

    When no path exists between any pair of nodes, path/start/end are None
    and distance is -1.
    """
    path: Optional[List[int]] = None
    distance: int = -1
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.path is not None


class HighlightResult(BaseModel):
    """Paths that were coloured by a highlight pass"""
    shortest_path: Optional[PathResult] = None
    longest_path: LongestPathResult = Field(default_factory=LongestPathResult)


class AdjacencyMatrix(BaseModel):
    """Adjacency matrix as data: cells hold the edge label, or "0" if absent."""
    node_ids: List[int]
    labels: List[str]
    cells: List[List[str]]


class IncidenceMatrix(BaseModel):
    """Incidence matrix as data: one row per node, one column per edge."""
    node_ids: List[int]
    node_labels: List[str]
    edge_ids: List[int]
    edge_headers: List[str]
    cells: List[List[str]]


class GraphStats(BaseModel):
    """Statistics for the graph"""
    total_nodes: int
    total_edges: int
    is_acyclic: bool
    has_unsaved_changes: bool
    last_updated: datetime

    class Config:
        json_encoders = {
            datetime: lambda v: v.isoformat()
        }


# ==================== Mutation Events ====================

class EventType(str, Enum):
    """Kinds of graph mutation."""
    NODE_CREATE = "node.create"
    NODE_UPDATE = "node.update"
    NODE_MOVE = "node.move"
    NODE_DELETE = "node.delete"
    EDGE_CREATE = "edge.create"
    EDGE_UPDATE = "edge.update"
    EDGE_DELETE = "edge.delete"
    GRAPH_CLEAR = "graph.clear"
    GRAPH_IMPORT = "graph.import"
    POSITIONS_IMPORT = "positions.import"


class EntityKind(str, Enum):
    NODE = "node"
    EDGE = "edge"
    GRAPH = "graph"


class GraphEvent(BaseModel):
    """Notification delivered to store listeners after a mutating call."""
    event_type: EventType
    entity_kind: EntityKind
    entity_id: Optional[int] = None
    before: Optional[Dict[str, Any]] = None
    after: Optional[Dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
