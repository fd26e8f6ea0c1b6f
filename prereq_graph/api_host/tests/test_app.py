"""
Tests for the App Host FastAPI application
"""

import json

import pytest
from fastapi.testclient import TestClient

from prereq_graph.api_host import create_app, AppConfig
from prereq_graph.config_loader import EditorConfig
from prereq_graph.service import GraphService


@pytest.fixture
def graph_service():
    service = GraphService(editor_config=EditorConfig())
    service.add_node(name="A", node_id=1)
    service.add_node(name="B", node_id=2)
    service.add_edge(1, 2, "C2")
    return service


@pytest.fixture
def client(graph_service):
    config = AppConfig(graph_file="", mcp_enabled=True)
    return TestClient(create_app(config, graph_service=graph_service))


class TestAppConfig:

    def test_defaults_from_environment(self, monkeypatch):
        monkeypatch.setenv("GRAPH_FILE", "courses.json")
        monkeypatch.setenv("AUTOSAVE", "true")
        monkeypatch.setenv("PORT", "9001")
        monkeypatch.setenv("MCP_ENABLED", "false")

        config = AppConfig.from_env()

        assert config.graph_file == "courses.json"
        assert config.autosave is True
        assert config.port == 9001
        assert config.mcp_enabled is False

    def test_relative_graph_path_resolves_against_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert AppConfig(graph_file="g.json").get_graph_path() == tmp_path / "g.json"

    def test_empty_graph_file_disables_persistence(self):
        assert AppConfig(graph_file="").get_graph_path() is None


class TestEndpoints:

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["graph_nodes"] == 2
        assert data["graph_edges"] == 1

    def test_info_lists_tools(self, client):
        data = client.get("/info").json()
        assert data["endpoints"]["mcp"] == "/mcp"
        assert "find_shortest_path" in data["tools"]

    def test_rest_router_is_mounted(self, client):
        data = client.get("/api/paths/shortest", params={"start": 1, "end": 2}).json()
        assert data["distance"] == 2

    def test_export_graph(self, client):
        data = client.get("/export_graph").json()
        assert [n["label"] for n in data["nodes"]] == ["1 - A", "2 - B"]


class TestExecuteTool:

    def test_execute_tool(self, client):
        response = client.post("/execute_tool", json={
            "tool_name": "find_longest_path",
            "arguments": {},
        })
        assert response.status_code == 200
        assert response.json()["path"] == [1, 2]

    def test_missing_tool_name(self, client):
        assert client.post("/execute_tool", json={}).status_code == 400

    def test_unknown_tool(self, client):
        response = client.post("/execute_tool", json={"tool_name": "nope"})
        assert response.status_code == 404

    def test_bad_arguments(self, client):
        response = client.post("/execute_tool", json={
            "tool_name": "find_shortest_path",
            "arguments": {"begin": 1},
        })
        assert response.status_code == 400

    def test_add_node_with_string_id_of_existing_node(self, client):
        """Test that "1" conflicts with node 1 instead of replacing it"""
        response = client.post("/execute_tool", json={
            "tool_name": "add_node",
            "arguments": {"node_id": "1", "name": "Other"},
        })
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["error_type"] == "conflict"

        data = client.get("/export_graph").json()
        assert [n["label"] for n in data["nodes"]] == ["1 - A", "2 - B"]

    def test_add_node_with_string_id(self, client):
        response = client.post("/execute_tool", json={
            "tool_name": "add_node",
            "arguments": {"node_id": "5", "name": "E"},
        })
        assert response.status_code == 200
        assert response.json()["node"]["id"] == 5

    def test_argument_types_are_validated(self, client):
        response = client.post("/execute_tool", json={
            "tool_name": "rename_node",
            "arguments": {"node_id": 1, "name": None},
        })
        assert response.status_code == 400
        assert "rename_node" in response.json()["error"]

        data = client.get("/export_graph").json()
        assert data["nodes"][0]["label"] == "1 - A"

    def test_non_integer_id_is_rejected(self, client):
        response = client.post("/execute_tool", json={
            "tool_name": "delete_node",
            "arguments": {"node_id": "abc"},
        })
        assert response.status_code == 400
        assert client.get("/health").json()["graph_nodes"] == 2

    def test_stats_tool_serializes_datetimes(self, client):
        response = client.post("/execute_tool", json={"tool_name": "get_graph_stats"})
        assert isinstance(response.json()["last_updated"], str)


class TestMcpDisabled:

    def test_no_tools_without_mcp(self, graph_service):
        app = create_app(AppConfig(graph_file="", mcp_enabled=False), graph_service=graph_service)
        client = TestClient(app)

        assert client.post("/execute_tool", json={"tool_name": "get_graph"}).status_code == 404
        assert client.get("/info").json()["endpoints"]["mcp"] is None


class TestGraphFileLoading:

    def test_loads_graph_file_on_startup(self, tmp_path):
        graph_path = tmp_path / "graph.json"
        graph_path.write_text(json.dumps({
            "nodes": [{"id": 1, "label": "1 - A", "x": 0, "y": 0}],
            "edges": [],
        }), encoding="utf-8")

        app = create_app(AppConfig(graph_file=str(graph_path), mcp_enabled=False))
        client = TestClient(app)

        data = client.get("/health").json()
        assert data["graph_nodes"] == 1
        assert data["unsaved_changes"] is False

    def test_save_endpoint_writes_graph_file(self, tmp_path):
        graph_path = tmp_path / "graph.json"
        client = TestClient(create_app(AppConfig(graph_file=str(graph_path), mcp_enabled=False)))

        client.post("/api/nodes", json={"name": "New"})
        assert client.post("/api/save").status_code == 200

        assert json.loads(graph_path.read_text(encoding="utf-8"))["nodes"][0]["id"] == 1
