"""
Configuration loader for the prerequisite graph.

This module loads and validates the configuration from a JSON file.
The configuration defines:
- Editor defaults (name of new nodes, label of new edges)
- Highlight colours for the shortest and longest path
- Presentation settings (title, introduction text)

The config file path can be set via GRAPH_CONFIG environment variable.
Otherwise config/graph_config.json in the working directory is used if it
exists, then the file bundled with the package.
"""

import os
import json
import logging
from typing import Dict, Optional, Any
from pathlib import Path
from pydantic import BaseModel, Field, validator

logger = logging.getLogger(__name__)

# Config path relative to the working directory or the package
DEFAULT_CONFIG_PATH = "config/graph_config.json"
PACKAGED_CONFIG_PATH = Path(__file__).parent / DEFAULT_CONFIG_PATH


class EditorConfig(BaseModel):
    """Defaults used when the editor creates nodes and edges."""
    default_node_name: str = "Node {id}"
    default_edge_label: str = "3"

    @validator('default_node_name')
    def validate_default_node_name(cls, v):
        """The template may only use the {id} placeholder."""
        try:
            v.format(id=1)
        except (KeyError, IndexError, ValueError):
            raise ValueError(f"Invalid node name template: {v!r}")
        return v


class PathColors(BaseModel):
    """Colours for one highlighted path."""
    edge: str
    node: str


class HighlightConfig(BaseModel):
    """Colours used by path highlighting."""
    shortest_path: PathColors = Field(
        default_factory=lambda: PathColors(edge="#00aa00", node="#aaffaa")
    )
    longest_path: PathColors = Field(
        default_factory=lambda: PathColors(edge="#aa0000", node="#ffaaaa")
    )
    border: str = "#000000"
    edge_width: float = 3


class PresentationConfig(BaseModel):
    """Presentation configuration for the UI."""
    title: str = "Prerequisite Graph"
    introduction: str = "Build a prerequisite graph and analyze its paths."
    default_language: str = "en"


class GraphFileConfig(BaseModel):
    """Root configuration model for the config file."""
    editor: EditorConfig = Field(default_factory=EditorConfig)
    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    presentation: PresentationConfig = Field(default_factory=PresentationConfig)


class ConfigLoader:
    """
    Singleton configuration loader.

    Loads the configuration once and provides access to editor, highlight
    and presentation settings.
    """
    _instance: Optional['ConfigLoader'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = None
            cls._instance._config_path = None
        return cls._instance

    def __init__(self):
        if self._config is None:
            self._load_config()

    @classmethod
    def reset_instance(cls):
        """Reset the singleton instance (for testing)."""
        cls._instance = None

    def _get_config_path(self) -> str:
        """Get the configuration file path."""
        # Check environment variable first
        env_path = os.getenv("GRAPH_CONFIG")
        if env_path:
            return env_path

        # A config/ folder in the working directory overrides the bundled file
        cwd_config = Path.cwd() / DEFAULT_CONFIG_PATH
        if cwd_config.exists():
            return str(cwd_config)

        # Bundled with the package (installed as package data)
        return str(PACKAGED_CONFIG_PATH)

    def _load_config(self) -> None:
        """Load and validate the configuration file."""
        self._config_path = self._get_config_path()

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                raw_config = json.load(f)

            self._config = GraphFileConfig(**raw_config)
            logger.info(f"Loaded configuration from: {self._config_path}")

        except FileNotFoundError:
            logger.warning(f"Config file not found at {self._config_path}, using defaults")
            self._config = GraphFileConfig()

        except json.JSONDecodeError as e:
            logger.warning(f"Invalid JSON in config file: {e}, using defaults")
            self._config = GraphFileConfig()

        except Exception as e:
            logger.warning(f"Error loading config: {e}, using defaults")
            self._config = GraphFileConfig()

    def reload(self) -> None:
        """Reload the configuration from disk."""
        self._config = None
        self._load_config()

    @property
    def config(self) -> GraphFileConfig:
        """Get the full configuration."""
        return self._config

    @property
    def config_path(self) -> str:
        """Get the path to the loaded config file."""
        return self._config_path


# Module-level singleton instance
_loader: Optional[ConfigLoader] = None


def _get_loader() -> ConfigLoader:
    """Get or create the ConfigLoader singleton."""
    global _loader
    if _loader is None:
        _loader = ConfigLoader()
    return _loader


def get_editor_config() -> EditorConfig:
    """Get the editor defaults."""
    return _get_loader().config.editor


def get_highlight_config() -> HighlightConfig:
    """Get the path highlight colours."""
    return _get_loader().config.highlight


def get_presentation() -> Dict[str, Any]:
    """
    Get the presentation configuration.

    Returns a dict with:
    - title: Application title
    - introduction: Welcome text
    - default_language: Default language code
    - highlight: Colours of the shortest and longest path
    """
    loader = _get_loader()
    pres = loader.config.presentation

    return {
        "title": pres.title,
        "introduction": pres.introduction,
        "default_language": pres.default_language,
        "highlight": loader.config.highlight.model_dump(),
    }


def get_config_path() -> str:
    """Get the path to the loaded configuration file."""
    loader = _get_loader()
    return loader.config_path


def reload_config() -> None:
    """Reload the configuration from disk."""
    loader = _get_loader()
    loader.reload()


def reset_loader() -> None:
    """Reset the loader (for testing purposes)."""
    global _loader
    _loader = None
    ConfigLoader.reset_instance()
