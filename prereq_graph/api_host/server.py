"""
App Host Server - Unified FastAPI application exposing GraphService.

This module provides create_app() which builds a FastAPI application that:
- Exposes GraphService via REST API endpoints
- Registers MCP tools via FastMCP
- Loads the graph file on startup and saves it on request (or on every
  change when autosave is on)

Usage:
    from prereq_graph.api_host import create_app

    # Default configuration
    app = create_app()

    # Custom configuration
    from prereq_graph.api_host.config import AppConfig
    config = AppConfig(graph_file="courses.json", autosave=True)
    app = create_app(config)
"""

import logging
from typing import Optional, Dict, Any

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from starlette.requests import Request
from mcp.server.fastmcp import FastMCP

from prereq_graph.service import (
    GraphService, SnapshotFile, create_rest_router, register_mcp_tools, serialize_to_json
)

from .config import AppConfig

logger = logging.getLogger(__name__)

MCP_INSTRUCTIONS = """
You are assisting users with a prerequisite graph: nodes are courses or tasks,
and an edge A -> B means A is a prerequisite of B. Edge labels such as "C3"
carry the weight (cost) of the edge.

- Use 'get_graph' or 'get_node_details' before changing anything.
- Use 'find_shortest_path' for the cheapest route between two nodes and
  'find_longest_path' for the heaviest chain in the whole graph.
- 'highlight_paths' colours both paths for the visual editor.
"""


def create_app(
    config: Optional[AppConfig] = None,
    graph_service: Optional[GraphService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Optional configuration object. If None, uses defaults from environment.
        graph_service: Optional pre-configured GraphService instance.
                      If None, creates one based on config and loads the graph file.

    Returns:
        Configured FastAPI application with REST API and MCP tools.
    """
    # Use default config if not provided
    if config is None:
        config = AppConfig.from_env()

    # Create FastAPI app
    app = FastAPI(
        title="Prerequisite Graph",
        description="REST API and MCP server for weighted prerequisite graphs",
        version="1.0.0",
    )

    # Add CORS middleware so the browser editor can talk to the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize GraphService if not provided
    if graph_service is None:
        graph_path = config.get_graph_path()
        snapshot_file = SnapshotFile(str(graph_path)) if graph_path is not None else None
        graph_service = GraphService(snapshot_file=snapshot_file, autosave=config.autosave)
        if graph_service.load():
            logger.info(f"Loaded graph from {graph_path}")

    storage = graph_service.storage

    # Store service on app state for access in routes
    app.state.graph_service = graph_service
    app.state.config = config

    # Create and mount REST API router
    rest_router = create_rest_router(graph_service)
    app.include_router(rest_router, prefix=config.api_prefix)

    # Initialize FastMCP and register tools
    tools_map: Dict[str, Any] = {}
    if config.mcp_enabled:
        mcp = FastMCP(config.mcp_name, instructions=MCP_INSTRUCTIONS)
        tools_map = register_mcp_tools(mcp, graph_service)
        app.state.mcp = mcp

        # Use sse_app to provide standard /sse and /messages endpoints
        app.mount("/mcp", mcp.sse_app())

    app.state.tools_map = tools_map

    # Add execute_tool endpoint for direct tool execution
    @app.post("/execute_tool")
    async def execute_tool_endpoint(request: Request) -> JSONResponse:
        """Execute a graph tool directly by name."""
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Request body must be JSON"}, status_code=400)

        if not isinstance(body, dict) or not body.get("tool_name"):
            return JSONResponse({"error": "No tool_name provided"}, status_code=400)

        tool_name = body["tool_name"]
        arguments = body.get("arguments") or {}

        if tool_name not in tools_map:
            return JSONResponse({"error": f"Tool {tool_name} not found"}, status_code=404)

        func = tools_map[tool_name]
        try:
            result = func(**arguments)
        except (TypeError, ValidationError) as e:
            return JSONResponse({"error": f"Invalid arguments for {tool_name}: {e}"}, status_code=400)
        except Exception as e:
            logger.exception(f"Tool {tool_name} failed")
            return JSONResponse({"error": str(e)}, status_code=500)

        return JSONResponse(serialize_to_json(result))

    # Add export_graph endpoint (convenience route)
    @app.get("/export_graph")
    async def export_graph_endpoint() -> JSONResponse:
        """Export the entire graph (all nodes and edges)."""
        return JSONResponse(graph_service.export_graph())

    # Add health check endpoint
    @app.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "graph_nodes": len(storage.nodes),
            "graph_edges": len(storage.edges),
            "unsaved_changes": storage.is_changed,
        }

    # API info endpoint
    @app.get("/info")
    async def info() -> Dict[str, Any]:
        """API information endpoint."""
        return {
            "name": "Prerequisite Graph",
            "version": "1.0.0",
            "endpoints": {
                "api": config.api_prefix,
                "mcp": "/mcp" if config.mcp_enabled else None,
                "health": "/health",
            },
            "tools": sorted(tools_map),
        }

    return app


def get_app() -> FastAPI:
    """
    Factory function for uvicorn.

    Usage:
        uvicorn prereq_graph.api_host.server:get_app --factory
    """
    return create_app()
