"""
Adjacency and incidence matrices of the graph, as plain data.

Rows and columns follow node (and edge) insertion order. Rendering the
tables is left to the caller.
"""

from .models import AdjacencyMatrix, IncidenceMatrix
from .storage import GraphStorage

NO_EDGE = "0"


def adjacency_matrix(storage: GraphStorage) -> AdjacencyMatrix:
    """
    Build the adjacency matrix.

    cells[i][j] is the label of the edge from node i to node j, or "0".
    """
    with storage.lock:
        nodes = list(storage.nodes.values())
        cells = []
        for from_node in nodes:
            row = []
            for to_node in nodes:
                data = storage.graph.get_edge_data(from_node.id, to_node.id)
                row.append(data['data'].label if data else NO_EDGE)
            cells.append(row)

        return AdjacencyMatrix(
            node_ids=[node.id for node in nodes],
            labels=[node.label for node in nodes],
            cells=cells,
        )


def incidence_matrix(storage: GraphStorage) -> IncidenceMatrix:
    """
    Build the incidence matrix.

    cells[i][k] is "1, <label>" if node i is the source of edge k,
    "-1, <label>" if it is the target, and "0" otherwise. A self-loop is
    reported as a source.
    """
    with storage.lock:
        nodes = list(storage.nodes.values())
        edges = list(storage.edges.values())

        cells = []
        for node in nodes:
            row = []
            for edge in edges:
                if edge.source == node.id:
                    row.append(f"1, {edge.label}")
                elif edge.target == node.id:
                    row.append(f"-1, {edge.label}")
                else:
                    row.append(NO_EDGE)
            cells.append(row)

        return IncidenceMatrix(
            node_ids=[node.id for node in nodes],
            node_labels=[node.label for node in nodes],
            edge_ids=[edge.id for edge in edges],
            edge_headers=[f"{edge.source}→{edge.target}" for edge in edges],
            cells=cells,
        )
