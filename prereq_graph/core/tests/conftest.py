"""
Pytest fixtures for core tests.

Provides shared graph layouts:
- An empty store
- A three-node chain with a more expensive shortcut
- A four-node DAG with two routes to the sink
"""

import pytest

from prereq_graph.core import GraphStorage


@pytest.fixture
def storage():
    """Create an empty GraphStorage"""
    return GraphStorage()


@pytest.fixture
def chain_storage(storage):
    """1->2 (C1), 2->3 (C2), 1->3 (C5)"""
    storage.add_node(1, "Calculus I")
    storage.add_node(2, "Calculus II")
    storage.add_node(3, "Analysis")
    storage.add_edge(1, 2, "C1")
    storage.add_edge(2, 3, "C2")
    storage.add_edge(1, 3, "C5")
    return storage


@pytest.fixture
def dag_storage(storage):
    """1->2, 2->3, 1->3, 3->4, all weight 1"""
    for node_id in (1, 2, 3, 4):
        storage.add_node(node_id, f"Course {node_id}", x=node_id * 100.0, y=50.0)
    storage.add_edge(1, 2, "C1")
    storage.add_edge(2, 3, "C1")
    storage.add_edge(1, 3, "C1")
    storage.add_edge(3, 4, "C1")
    return storage


@pytest.fixture
def recorded_events(storage):
    """List that collects every event emitted by the storage fixture"""
    events = []
    storage.add_listener(events.append)
    return events
