"""
prereq_graph.service - Transport-independent service layer

Wraps the core engine in GraphService and exposes it over REST (FastAPI)
and MCP.
"""

from .service import GraphService, NOT_FOUND, CONFLICT, MALFORMED_INPUT
from .persistence import SnapshotFile
from .rest_api import create_rest_router
from .mcp_tools import register_mcp_tools
from .serializers import json_serializer, serialize_to_json

__all__ = [
    "GraphService",
    "NOT_FOUND",
    "CONFLICT",
    "MALFORMED_INPUT",
    "SnapshotFile",
    "create_rest_router",
    "register_mcp_tools",
    "json_serializer",
    "serialize_to_json",
]
