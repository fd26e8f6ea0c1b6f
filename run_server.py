#!/usr/bin/env python3
"""
Run the Prerequisite Graph server.

This script starts the unified server that exposes GraphService
over both REST API and MCP protocol.

Usage:
    python run_server.py
    python run_server.py --port 8080
    python run_server.py --graph-file courses.json --autosave

Environment variables (also read from a .env file):
    GRAPH_FILE: Path to graph JSON file (default: graph.json)
    AUTOSAVE: Save after every change (default: false)
    HOST: Server host (default: 0.0.0.0)
    PORT: Server port (default: 8000)
    API_PREFIX: REST API prefix (default: /api)
    LOG_LEVEL: Logging level (default: INFO)
"""

import argparse
import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from prereq_graph.api_host import create_app, AppConfig  # noqa: E402


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run the Prerequisite Graph server"
    )
    parser.add_argument(
        "--host",
        default=os.getenv("HOST", "0.0.0.0"),
        help="Host to bind to (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("PORT", "8000")),
        help="Port to bind to (default: 8000)"
    )
    parser.add_argument(
        "--graph-file",
        default=os.getenv("GRAPH_FILE", "graph.json"),
        help="Path to graph JSON file (default: graph.json)"
    )
    parser.add_argument(
        "--autosave",
        action="store_true",
        default=os.getenv("AUTOSAVE", "false").lower() in ("1", "true", "yes"),
        help="Save the graph file after every change"
    )
    return parser.parse_args()


def main():
    """Main entry point."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args = parse_args()

    # Create configuration from arguments
    config = AppConfig(
        graph_file=args.graph_file,
        autosave=args.autosave,
        host=args.host,
        port=args.port,
    )

    # Print startup information
    print("=" * 60)
    print("Prerequisite Graph Server")
    print("=" * 60)
    print(f"Graph file: {config.get_graph_path()}")
    print(f"Autosave: {config.autosave}")
    print(f"Host: {config.host}")
    print(f"Port: {config.port}")
    print(f"API prefix: {config.api_prefix}")
    print("=" * 60)
    print()
    print("Endpoints:")
    print(f"  REST API:  http://{config.host}:{config.port}{config.api_prefix}")
    if config.mcp_enabled:
        print(f"  MCP:       http://{config.host}:{config.port}/mcp")
    print(f"  Health:    http://{config.host}:{config.port}/health")
    print("=" * 60)
    print()

    # Create app
    app = create_app(config)

    # Run with uvicorn
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
    )


if __name__ == "__main__":
    main()
