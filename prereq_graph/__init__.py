"""
prereq_graph - Weighted prerequisite graph with path analysis.

Subpackages:
- core: graph store, queries, path analysis, snapshots (no I/O)
- service: GraphService, REST router, MCP tools, snapshot file persistence
- api_host: FastAPI application factory and server configuration
"""

__version__ = "1.0.0"
