"""
Configuration for the App Host server.

Provides sensible defaults that can be overridden via environment variables
or by passing a custom AppConfig to create_app().
"""

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class AppConfig:
    """Configuration for the app host server."""

    # Graph file configuration (empty string disables persistence)
    graph_file: str = field(default_factory=lambda: os.getenv("GRAPH_FILE", "graph.json"))
    autosave: bool = field(default_factory=lambda: _env_flag("AUTOSAVE"))

    # Server configuration
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    # API configuration
    api_prefix: str = field(default_factory=lambda: os.getenv("API_PREFIX", "/api"))

    # MCP configuration
    mcp_name: str = field(default_factory=lambda: os.getenv("MCP_NAME", "prereq-graph"))
    mcp_enabled: bool = field(default_factory=lambda: _env_flag("MCP_ENABLED", "true"))

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()

    def get_graph_path(self) -> Optional[Path]:
        """Get resolved path to graph file, or None when persistence is off."""
        if not self.graph_file:
            return None
        graph_path = Path(self.graph_file)
        if not graph_path.is_absolute():
            # Resolve relative to the working directory
            graph_path = Path.cwd() / self.graph_file
        return graph_path
