"""
Tests for the configuration loader
"""

import json

import pytest
from pydantic import ValidationError

from prereq_graph import config_loader
from prereq_graph.config_loader import EditorConfig


@pytest.fixture(autouse=True)
def fresh_loader():
    config_loader.reset_loader()
    yield
    config_loader.reset_loader()


class TestLoading:

    def test_loads_bundled_config(self):
        editor = config_loader.get_editor_config()
        assert editor.default_edge_label == "3"
        assert config_loader.get_highlight_config().shortest_path.edge == "#00aa00"

    def test_bundled_config_is_inside_package(self, tmp_path, monkeypatch):
        """Without env var or local config/ folder the packaged file is used"""
        monkeypatch.delenv("GRAPH_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)

        path = config_loader.get_config_path()

        assert path == str(config_loader.PACKAGED_CONFIG_PATH)
        assert config_loader.PACKAGED_CONFIG_PATH.exists()
        assert config_loader.get_highlight_config().longest_path.edge == "#aa0000"

    def test_working_directory_config_overrides_bundled(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GRAPH_CONFIG", raising=False)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "graph_config.json").write_text(
            json.dumps({"editor": {"default_edge_label": "C2"}}), encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        assert config_loader.get_editor_config().default_edge_label == "C2"

    def test_env_var_overrides_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({
            "editor": {"default_node_name": "Course {id}", "default_edge_label": "C1"},
            "presentation": {"title": "Study Plan"},
        }), encoding="utf-8")
        monkeypatch.setenv("GRAPH_CONFIG", str(path))

        assert config_loader.get_config_path() == str(path)
        assert config_loader.get_editor_config().default_node_name == "Course {id}"
        assert config_loader.get_presentation()["title"] == "Study Plan"
        # Sections missing from the file keep their defaults
        assert config_loader.get_highlight_config().border == "#000000"

    def test_missing_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRAPH_CONFIG", str(tmp_path / "absent.json"))
        assert config_loader.get_editor_config() == EditorConfig()

    def test_invalid_json_uses_defaults(self, tmp_path, monkeypatch):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        monkeypatch.setenv("GRAPH_CONFIG", str(path))
        assert config_loader.get_highlight_config().edge_width == 3

    def test_reload_picks_up_changes(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"editor": {"default_edge_label": "C1"}}), encoding="utf-8")
        monkeypatch.setenv("GRAPH_CONFIG", str(path))
        assert config_loader.get_editor_config().default_edge_label == "C1"

        path.write_text(json.dumps({"editor": {"default_edge_label": "C9"}}), encoding="utf-8")
        config_loader.reload_config()

        assert config_loader.get_editor_config().default_edge_label == "C9"


class TestEditorConfig:

    def test_rejects_unknown_placeholder(self):
        with pytest.raises(ValidationError):
            EditorConfig(default_node_name="Node {name}")

    def test_presentation_includes_highlight_colors(self):
        presentation = config_loader.get_presentation()
        assert presentation["highlight"]["longest_path"]["node"] == "#ffaaaa"
