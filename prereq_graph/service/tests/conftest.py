"""
Pytest fixtures for service tests.

Provides shared test fixtures for:
- GraphService instances (in memory and file backed)
- Pre-populated graph data
- FastAPI test clients
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from prereq_graph.config_loader import EditorConfig, HighlightConfig
from prereq_graph.service import GraphService, SnapshotFile, create_rest_router


@pytest.fixture
def service():
    """GraphService with default editor and highlight settings"""
    return GraphService(
        editor_config=EditorConfig(),
        highlight_config=HighlightConfig(),
    )


@pytest.fixture
def populated_service(service):
    """
    Course graph:
        1 Calculus I -> 2 Calculus II (C1)
        2 Calculus II -> 3 Analysis (C2)
        1 Calculus I -> 3 Analysis (C5)
        3 Analysis -> 4 Topology (C1)
    """
    service.add_node(name="Calculus I", node_id=1, x=0, y=0)
    service.add_node(name="Calculus II", node_id=2, x=100, y=0)
    service.add_node(name="Analysis", node_id=3, x=200, y=0)
    service.add_node(name="Topology", node_id=4, x=300, y=0)
    service.add_edge(1, 2, "C1")
    service.add_edge(2, 3, "C2")
    service.add_edge(1, 3, "C5")
    service.add_edge(3, 4, "C1")
    service.acknowledge_changes()
    return service


@pytest.fixture
def graph_file(tmp_path):
    return SnapshotFile(str(tmp_path / "graph.json"))


@pytest.fixture
def file_service(graph_file):
    """GraphService persisting to a temporary file"""
    return GraphService(
        snapshot_file=graph_file,
        editor_config=EditorConfig(),
        highlight_config=HighlightConfig(),
    )


@pytest.fixture
def client(populated_service):
    """FastAPI test client with the REST router mounted under /api"""
    app = FastAPI()
    app.include_router(create_rest_router(populated_service), prefix="/api")
    return TestClient(app)
