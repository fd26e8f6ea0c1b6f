"""
Snapshot codec: export and import the whole graph, or node positions only.

Graph snapshot:
    {"nodes": [{"id", "label", "x", "y", "color"?}, ...],
     "edges": [{"id", "from", "to", "label", "arrows"?, "color"?, "width"?}, ...]}

Position snapshot:
    [{"id", "x", "y", "label"}, ...]

Imports parse and validate the whole payload before touching the store, so
a malformed payload leaves the graph unchanged. Where the payload is kept
(file, clipboard, HTTP body) is up to the caller.
"""

import json
import logging
from typing import List, Dict, Optional, Any, Union

from pydantic import BaseModel, Field, ValidationError, validator

from .models import Node, Edge, NodeStyle, EdgeStyle
from .overlay import PresentationOverlay
from .storage import GraphStorage

logger = logging.getLogger(__name__)

LABEL_SEPARATOR = " - "

Payload = Union[str, bytes, bytearray, Dict[str, Any], List[Any]]


# ==================== Snapshot Records ====================

class NodeRecord(BaseModel):
    """A node as it appears in a graph snapshot"""
    id: int
    label: Optional[str] = None
    x: float = 0.0
    y: float = 0.0
    color: Optional[Union[Dict[str, Any], str]] = None

    @validator('x', 'y', pre=True)
    def default_position(cls, v):
        return 0.0 if v is None else v


class EdgeRecord(BaseModel):
    """An edge as it appears in a graph snapshot"""
    id: Optional[Union[int, str]] = None
    source: int = Field(..., alias="from")
    target: int = Field(..., alias="to")
    label: Optional[Union[str, int, float]] = None
    arrows: Optional[str] = "to"
    color: Optional[Union[Dict[str, Any], str]] = None
    width: Optional[float] = None

    class Config:
        populate_by_name = True


class GraphSnapshot(BaseModel):
    """A full graph snapshot"""
    nodes: List[NodeRecord] = Field(default_factory=list)
    edges: List[EdgeRecord] = Field(default_factory=list)


class PositionRecord(BaseModel):
    """A node position as it appears in a position snapshot"""
    id: int
    x: float
    y: float
    label: Optional[str] = None


def name_from_label(node_id: int, label: Optional[str]) -> str:
    """
    Recover the free-text name from a composite "<id> - <name>" label.

    Labels without the separator are taken as the name itself.
    """
    if not label:
        return ""
    prefix = f"{node_id}{LABEL_SEPARATOR}"
    if label.startswith(prefix):
        return label[len(prefix):]
    if LABEL_SEPARATOR in label:
        return label.split(LABEL_SEPARATOR, 1)[1]
    return label


def _edge_record_id(record: EdgeRecord) -> Optional[int]:
    if isinstance(record.id, int):
        return record.id
    if isinstance(record.id, str) and record.id.isdigit():
        return int(record.id)
    return None


def _decode(payload: Payload) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode('utf-8')
    if isinstance(payload, str):
        return json.loads(payload)
    return payload


class SnapshotCodec:
    """Serializes a GraphStorage (and its overlay styles) to and from snapshots."""

    def __init__(self, storage: GraphStorage, overlay: Optional[PresentationOverlay] = None):
        self._storage = storage
        self._overlay = overlay

    # ==================== Export ====================

    def export(self) -> Dict[str, Any]:
        """Capture all nodes and edges, with styles where the overlay has them."""
        with self._storage.lock:
            nodes = []
            for node in self._storage.nodes.values():
                data = node.to_dict()
                style = self._overlay.node_style(node.id) if self._overlay else None
                if style is not None:
                    data['color'] = style.to_dict()
                nodes.append(data)

            edges = []
            for edge in self._storage.edges.values():
                data = edge.to_dict()
                style = self._overlay.edge_style(edge.id) if self._overlay else None
                if style is not None:
                    data['color'] = style.color_dict()
                    if style.width is not None:
                        data['width'] = style.width
                edges.append(data)

            return {'nodes': nodes, 'edges': edges}

    def export_json(self) -> str:
        return json.dumps(self.export())

    def export_positions(self) -> List[Dict[str, Any]]:
        """Capture only id, position and label of every node."""
        with self._storage.lock:
            return [
                {'id': node.id, 'x': node.x, 'y': node.y, 'label': node.label}
                for node in self._storage.nodes.values()
            ]

    def export_positions_json(self) -> str:
        return json.dumps(self.export_positions())

    # ==================== Import ====================

    def import_snapshot(self, payload: Payload) -> bool:
        """
        Replace the graph with the contents of a snapshot.

        Args:
            payload: JSON text/bytes, or an already decoded dict

        Returns:
            True on success. False if the payload cannot be parsed, has the
            wrong shape, or breaks a graph invariant; the graph is then left
            exactly as it was.
        """
        try:
            snapshot = GraphSnapshot.model_validate(_decode(payload))
            nodes, edges = self._build_records(snapshot)
            with self._storage.lock:
                self._storage.replace_all(nodes, edges)
                self._restore_styles(snapshot, edges)
        except (ValueError, TypeError, ValidationError) as e:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.warning(f"Error loading graph snapshot: {e}")
            return False

        return True

    def _build_records(self, snapshot: GraphSnapshot):
        nodes = [
            Node(
                id=record.id,
                name=name_from_label(record.id, record.label),
                x=record.x,
                y=record.y,
            )
            for record in snapshot.nodes
        ]

        # Non-integer ids (e.g. UUIDs written by other editors) get fresh ids
        known_ids = [i for i in (_edge_record_id(r) for r in snapshot.edges) if i is not None]
        next_id = max(known_ids) + 1 if known_ids else 1

        edges = []
        for record in snapshot.edges:
            edge_id = _edge_record_id(record)
            if edge_id is None:
                edge_id = next_id
                next_id += 1
            edges.append(Edge(
                id=edge_id,
                source=record.source,
                target=record.target,
                label=record.label,
                arrows=record.arrows or "to",
            ))

        return nodes, edges

    def _restore_styles(self, snapshot: GraphSnapshot, edges: List[Edge]) -> None:
        if self._overlay is None:
            return

        for record in snapshot.nodes:
            if isinstance(record.color, dict):
                style = NodeStyle(
                    background=_str_or_none(record.color.get('background')),
                    border=_str_or_none(record.color.get('border')),
                    highlight=_str_or_none(record.color.get('highlight')),
                )
                if style.to_dict():
                    self._overlay.set_node_style(record.id, style)

        for record, edge in zip(snapshot.edges, edges):
            if isinstance(record.color, dict):
                color = _str_or_none(record.color.get('color'))
                highlight = _str_or_none(record.color.get('highlight'))
            else:
                color = record.color
                highlight = None

            if color is None and highlight is None and record.width is None:
                continue
            self._overlay.set_edge_style(
                edge.id,
                EdgeStyle(color=color, highlight=highlight, width=record.width),
            )

    def import_positions(self, payload: Payload) -> bool:
        """
        Update node positions from a position snapshot.

        Ids that are not in the graph are skipped.

        Returns:
            False if the payload is malformed (nothing is updated), else True
        """
        try:
            data = _decode(payload)
            if not isinstance(data, list):
                raise ValueError("Position snapshot must be a list")
            positions = [PositionRecord.model_validate(item) for item in data]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning(f"Error loading positions: {e}")
            return False

        updated = self._storage.update_positions(
            {'id': p.id, 'x': p.x, 'y': p.y} for p in positions
        )
        logger.info(f"Updated positions of {updated} of {len(positions)} nodes")
        return True


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None
