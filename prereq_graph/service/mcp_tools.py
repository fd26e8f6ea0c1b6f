"""
MCP (Model Context Protocol) tools registration for graph operations.

This module registers GraphService methods as MCP tools that can be
called by LLMs through the MCP protocol.

Usage:
    from mcp.server.fastmcp import FastMCP
    from prereq_graph.service import GraphService, register_mcp_tools

    mcp = FastMCP("prereq-graph")
    service = GraphService()
    tools_map = register_mcp_tools(mcp, service)
"""

from typing import List, Optional, Dict, Any, Callable

from pydantic import validate_call

from .service import GraphService


def register_mcp_tools(mcp, service: GraphService) -> Dict[str, Callable]:
    """
    Register GraphService methods as MCP tools.

    Args:
        mcp: FastMCP instance to register tools with
        service: GraphService instance to use for operations

    Returns:
        Dict mapping tool names to argument-validating wrappers of the tool
        functions (for /execute_tool)
    """
    tools_map = {}

    def register_tool(func: Callable) -> Callable:
        """Register a function as both MCP tool and in tools_map."""
        mcp.tool()(func)
        tools_map[func.__name__] = validate_call(func)
        return func

    # ==================== Read Tools ====================

    @register_tool
    def get_graph() -> Dict[str, Any]:
        """
        Get every node and edge in the prerequisite graph

        Returns:
            Dict with nodes, edges and their counts
        """
        return service.get_graph()

    @register_tool
    def get_node_details(node_id: int) -> Dict[str, Any]:
        """
        Get a node together with its prerequisites and postrequisites

        Args:
            node_id: ID of the node

        Returns:
            Dict with node data or error
        """
        return service.get_node_details(node_id)

    @register_tool
    def get_prerequisites(node_id: int) -> Dict[str, Any]:
        """
        List the nodes that must come before the given node

        Args:
            node_id: ID of the node

        Returns:
            Dict with the prerequisite node IDs (empty for unknown nodes)
        """
        return service.get_prerequisites(node_id)

    @register_tool
    def get_postrequisites(node_id: int) -> Dict[str, Any]:
        """
        List the nodes that the given node is a prerequisite of

        Args:
            node_id: ID of the node

        Returns:
            Dict with the postrequisite node IDs (empty for unknown nodes)
        """
        return service.get_postrequisites(node_id)

    @register_tool
    def get_graph_stats() -> Dict[str, Any]:
        """
        Get statistics for the graph

        Returns:
            Node and edge counts, whether the graph is acyclic and
            whether it has unsaved changes
        """
        return service.get_graph_stats()

    @register_tool
    def get_presentation() -> Dict[str, Any]:
        """
        Get the presentation settings (title, introduction, highlight colours)
        """
        return service.get_presentation()

    # ==================== Modification Tools ====================

    @register_tool
    def add_node(
        name: Optional[str] = None,
        node_id: Optional[int] = None,
        x: Optional[float] = None,
        y: Optional[float] = None
    ) -> Dict[str, Any]:
        """
        Add a node (e.g. a course) to the graph

        Args:
            name: Free-text name (a default name is used if omitted)
            node_id: Node ID (the next free ID if omitted)
            x: Optional X position
            y: Optional Y position

        Returns:
            Dict with the created node, or a conflict error if the ID is taken
        """
        return service.add_node(name=name, node_id=node_id, x=x, y=y)

    @register_tool
    def rename_node(node_id: int, name: str) -> Dict[str, Any]:
        """
        Change the name of a node

        Args:
            node_id: ID of the node
            name: New name
        """
        return service.rename_node(node_id, name)

    @register_tool
    def delete_node(node_id: int) -> Dict[str, Any]:
        """
        Delete a node and every edge connected to it

        Args:
            node_id: ID of the node

        Returns:
            Dict with the deleted node ID and the IDs of removed edges
        """
        return service.delete_node(node_id)

    @register_tool
    def add_edge(from_id: int, to_id: int, label: Optional[str] = None) -> Dict[str, Any]:
        """
        Add a prerequisite edge from one node to another

        Args:
            from_id: The prerequisite node
            to_id: The node that requires it
            label: Weight label such as "C3" (the editor default if omitted)

        Returns:
            Dict with the created edge, or an error if a node is missing or
            the edge already exists
        """
        return service.add_edge(from_id, to_id, label)

    @register_tool
    def rename_edge(from_id: int, to_id: int, label: str) -> Dict[str, Any]:
        """
        Change the weight label of an edge

        Args:
            from_id: Source node ID
            to_id: Target node ID
            label: New weight label
        """
        return service.rename_edge(from_id, to_id, label)

    @register_tool
    def delete_edge(from_id: int, to_id: int) -> Dict[str, Any]:
        """
        Delete the edge between two nodes

        Args:
            from_id: Source node ID
            to_id: Target node ID
        """
        return service.delete_edge(from_id, to_id)

    # ==================== Path Tools ====================

    @register_tool
    def find_shortest_path(start: int, end: int) -> Dict[str, Any]:
        """
        Find the path with the lowest total weight between two nodes

        Args:
            start: Start node ID
            end: End node ID

        Returns:
            Dict with found, path and distance (found is False if end
            cannot be reached)
        """
        return service.find_shortest_path(start, end)

    @register_tool
    def find_all_paths(start: int, end: int) -> Dict[str, Any]:
        """
        List every simple path between two nodes with its distance

        Args:
            start: Start node ID
            end: End node ID
        """
        return service.find_all_paths(start, end)

    @register_tool
    def find_longest_path() -> Dict[str, Any]:
        """
        Find the simple path with the highest total weight in the whole graph

        Returns:
            Dict with found, path, distance, start and end
        """
        return service.find_longest_path()

    @register_tool
    def calculate_path_distance(path: List[int]) -> Dict[str, Any]:
        """
        Sum the edge weights along a path

        Args:
            path: Node IDs in order
        """
        return service.calculate_path_distance(path)

    @register_tool
    def highlight_paths(start: int, end: int) -> Dict[str, Any]:
        """
        Colour the shortest path between two nodes and the longest path of the graph

        Args:
            start: Start node of the shortest path
            end: End node of the shortest path
        """
        return service.highlight_paths(start, end)

    # ==================== Export Tools ====================

    @register_tool
    def export_graph() -> Dict[str, Any]:
        """
        Export the graph as a snapshot with nodes and edges
        """
        return service.export_graph()

    @register_tool
    def get_adjacency_matrix() -> Dict[str, Any]:
        """
        Get the adjacency matrix (edge labels, "0" where there is no edge)
        """
        return service.get_adjacency_matrix()

    return tools_map
