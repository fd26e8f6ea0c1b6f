"""
REST API router for graph operations.

Provides FastAPI routes that expose GraphService methods via HTTP endpoints.
This module handles HTTP-specific concerns like request/response formatting,
error handling, and route definitions.

Usage:
    from fastapi import FastAPI
    from prereq_graph.service import GraphService, create_rest_router

    app = FastAPI()
    service = GraphService()
    router = create_rest_router(service)
    app.include_router(router, prefix="/api")
"""

from typing import List, Optional, Dict, Any
from fastapi import APIRouter, HTTPException, Query, Body
from pydantic import BaseModel, Field

from .service import GraphService, NOT_FOUND, CONFLICT, MALFORMED_INPUT

ERROR_STATUS = {
    NOT_FOUND: 404,
    CONFLICT: 409,
    MALFORMED_INPUT: 400,
}


# ==================== Request/Response Models ====================

class AddNodeRequest(BaseModel):
    """Request model for adding a node."""
    id: Optional[int] = Field(None, description="Node ID (next free ID if omitted)")
    name: Optional[str] = Field(None, description="Free-text name (default name if omitted)")
    x: Optional[float] = Field(None, description="X position")
    y: Optional[float] = Field(None, description="Y position")


class RenameNodeRequest(BaseModel):
    """Request model for renaming a node."""
    name: str = Field(..., description="New free-text name")


class MoveNodeRequest(BaseModel):
    """Request model for moving a node."""
    x: float = Field(..., description="X position")
    y: float = Field(..., description="Y position")


class AddEdgeRequest(BaseModel):
    """Request model for adding a single edge."""
    from_id: int = Field(..., description="Source node ID (the prerequisite)")
    to_id: int = Field(..., description="Target node ID")
    label: Optional[str] = Field(None, description="Weight label, e.g. 'C3' (editor default if omitted)")


class RenameEdgeRequest(BaseModel):
    """Request model for changing an edge label."""
    label: str = Field(..., description="New weight label")


class PathDistanceRequest(BaseModel):
    """Request model for computing the distance of a path."""
    path: List[int] = Field(..., description="Node IDs along the path")


class HighlightRequest(BaseModel):
    """Request model for highlighting paths."""
    start: int = Field(..., description="Start node of the shortest path")
    end: int = Field(..., description="End node of the shortest path")


def _check(result: Dict[str, Any]) -> Dict[str, Any]:
    """Raise the HTTP error matching a failed service result."""
    if not result.get("success", True):
        status_code = ERROR_STATUS.get(result.get("error_type"), 400)
        raise HTTPException(status_code=status_code, detail=result.get("error"))
    return result


# ==================== Router Factory ====================

def create_rest_router(service: GraphService, prefix: str = "") -> APIRouter:
    """
    Create a FastAPI router with all graph operation endpoints.

    Args:
        service: GraphService instance to use for operations
        prefix: Optional URL prefix for all routes

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix=prefix, tags=["graph"])

    # ==================== Read Endpoints ====================

    @router.get("/graph")
    async def get_graph() -> Dict[str, Any]:
        """Get all nodes and edges."""
        return service.get_graph()

    @router.get("/stats")
    async def get_stats() -> Dict[str, Any]:
        """Get graph statistics."""
        return service.get_graph_stats()

    @router.get("/presentation")
    async def get_presentation() -> Dict[str, Any]:
        """Get presentation configuration."""
        return service.get_presentation()

    # ==================== Node Endpoints ====================

    @router.post("/nodes")
    async def add_node(request: AddNodeRequest) -> Dict[str, Any]:
        """Add a node."""
        return _check(service.add_node(
            name=request.name,
            node_id=request.id,
            x=request.x,
            y=request.y,
        ))

    @router.get("/nodes/{node_id}")
    async def get_node_details(node_id: int) -> Dict[str, Any]:
        """Get a node with its prerequisites and postrequisites."""
        return _check(service.get_node_details(node_id))

    @router.patch("/nodes/{node_id}")
    async def rename_node(node_id: int, request: RenameNodeRequest) -> Dict[str, Any]:
        """Rename a node."""
        return _check(service.rename_node(node_id, request.name))

    @router.put("/nodes/{node_id}/position")
    async def move_node(node_id: int, request: MoveNodeRequest) -> Dict[str, Any]:
        """Move a node."""
        return _check(service.move_node(node_id, request.x, request.y))

    @router.delete("/nodes/{node_id}")
    async def delete_node(node_id: int) -> Dict[str, Any]:
        """Delete a node and its edges."""
        return _check(service.delete_node(node_id))

    @router.get("/nodes/{node_id}/prerequisites")
    async def get_prerequisites(node_id: int) -> Dict[str, Any]:
        return service.get_prerequisites(node_id)

    @router.get("/nodes/{node_id}/postrequisites")
    async def get_postrequisites(node_id: int) -> Dict[str, Any]:
        return service.get_postrequisites(node_id)

    # ==================== Edge Endpoints ====================

    @router.post("/edges")
    async def add_edge(request: AddEdgeRequest) -> Dict[str, Any]:
        """Add a directed edge between existing nodes."""
        return _check(service.add_edge(request.from_id, request.to_id, request.label))

    @router.patch("/edges/{from_id}/{to_id}")
    async def rename_edge(from_id: int, to_id: int, request: RenameEdgeRequest) -> Dict[str, Any]:
        """Change the label of an edge."""
        return _check(service.rename_edge(from_id, to_id, request.label))

    @router.delete("/edges/by-id/{edge_id}")
    async def delete_edge_by_id(edge_id: int) -> Dict[str, Any]:
        """Delete an edge by ID."""
        return _check(service.delete_edge_by_id(edge_id))

    @router.delete("/edges/{from_id}/{to_id}")
    async def delete_edge(from_id: int, to_id: int) -> Dict[str, Any]:
        """Delete the edge between two nodes."""
        return _check(service.delete_edge(from_id, to_id))

    # ==================== Path Endpoints ====================

    @router.get("/paths/shortest")
    async def find_shortest_path(
        start: int = Query(..., description="Start node ID"),
        end: int = Query(..., description="End node ID"),
    ) -> Dict[str, Any]:
        """Find the shortest path between two nodes."""
        return _check(service.find_shortest_path(start, end))

    @router.get("/paths/all")
    async def find_all_paths(
        start: int = Query(..., description="Start node ID"),
        end: int = Query(..., description="End node ID"),
    ) -> Dict[str, Any]:
        """List every simple path between two nodes."""
        return _check(service.find_all_paths(start, end))

    @router.get("/paths/longest")
    async def find_longest_path() -> Dict[str, Any]:
        """Find the longest simple path in the graph."""
        return service.find_longest_path()

    @router.post("/paths/distance")
    async def calculate_path_distance(request: PathDistanceRequest) -> Dict[str, Any]:
        """Total weight along a path."""
        return service.calculate_path_distance(request.path)

    @router.post("/highlight")
    async def highlight_paths(request: HighlightRequest) -> Dict[str, Any]:
        """Highlight the shortest path and the longest path."""
        return service.highlight_paths(request.start, request.end)

    @router.delete("/highlight")
    async def reset_highlights() -> Dict[str, Any]:
        """Clear path highlighting."""
        return service.reset_highlights()

    # ==================== Matrix Endpoints ====================

    @router.get("/matrices/adjacency")
    async def get_adjacency_matrix() -> Dict[str, Any]:
        return service.get_adjacency_matrix()

    @router.get("/matrices/incidence")
    async def get_incidence_matrix() -> Dict[str, Any]:
        return service.get_incidence_matrix()

    # ==================== Snapshot Endpoints ====================

    @router.get("/export")
    async def export_graph() -> Dict[str, Any]:
        """Export the entire graph."""
        return service.export_graph()

    @router.post("/import")
    async def import_graph(payload: Any = Body(...)) -> Dict[str, Any]:
        """Replace the graph with a snapshot."""
        return _check(service.import_graph(payload))

    @router.get("/positions")
    async def export_positions() -> List[Dict[str, Any]]:
        """Export node positions."""
        return service.export_positions()

    @router.post("/positions")
    async def import_positions(payload: Any = Body(...)) -> Dict[str, Any]:
        """Update node positions."""
        return _check(service.import_positions(payload))

    @router.post("/save")
    async def save_graph() -> Dict[str, Any]:
        """Write the graph to the configured graph file."""
        return _check(service.save())

    @router.post("/changes/acknowledge")
    async def acknowledge_changes() -> Dict[str, Any]:
        """Reset the unsaved-changes flag."""
        return service.acknowledge_changes()

    return router
