"""
Unit tests for core storage
"""

import pytest
from pydantic import ValidationError

from prereq_graph.core import GraphStorage, Node, Edge, EventType, EntityKind


class TestGraphStorageInit:
    """Tests for GraphStorage initialization"""

    def test_creates_empty_graph_on_init(self, storage):
        """Test that a new storage starts with empty graph"""
        assert len(storage.nodes) == 0
        assert len(storage.edges) == 0
        assert storage.graph.number_of_nodes() == 0

    def test_starts_unchanged(self, storage):
        assert storage.is_changed is False

    def test_next_node_id_of_empty_graph(self, storage):
        assert storage.next_node_id() == 1


class TestNodeCRUD:
    """Tests for node operations"""

    def test_add_node(self, storage):
        assert storage.add_node(1, "Calculus I", x=10, y=20) is True

        node = storage.get_node(1)
        assert node.name == "Calculus I"
        assert node.label == "1 - Calculus I"
        assert (node.x, node.y) == (10, 20)
        assert 1 in storage.graph

    def test_add_node_with_used_id_fails(self, storage):
        """Test that a second add with the same id leaves the store unchanged"""
        storage.add_node(1, "First")
        assert storage.add_node(1, "Second") is False

        assert len(storage.nodes) == 1
        assert storage.get_node_name(1) == "First"

    def test_add_node_with_used_id_as_string_fails(self, storage):
        """Test that "1" is treated as the id 1 already in the store"""
        storage.add_node(1, "Calculus I")
        assert storage.add_node("1", "Other") is False

        assert len(storage.nodes) == 1
        assert storage.graph.number_of_nodes() == 1
        assert storage.get_node_name(1) == "Calculus I"

    def test_string_id_is_stored_as_int(self, storage):
        assert storage.add_node("7", "Seven") is True

        assert list(storage.nodes) == [7]
        assert storage.get_node(7).label == "7 - Seven"

    def test_add_node_with_non_integer_id_raises(self, storage):
        with pytest.raises(ValidationError):
            storage.add_node("abc", "Broken")
        assert len(storage.nodes) == 0

    def test_add_node_without_id_uses_next_free_id(self, storage):
        storage.add_node(4, "Four")
        assert storage.add_node(None, "Five") is True
        assert storage.get_node_name(5) == "Five"

    def test_position_defaults_to_origin_unless_both_given(self, storage):
        storage.add_node(1, "A", x=5)
        node = storage.get_node(1)
        assert (node.x, node.y) == (0, 0)

    def test_add_node_at_position(self, storage):
        storage.add_node(3, "Three")
        node_id = storage.add_node_at_position(40, 60)

        assert node_id == 4
        node = storage.get_node(4)
        assert node.name == "Node 4"
        assert (node.x, node.y) == (40, 60)

    def test_add_node_at_position_with_custom_template(self):
        storage = GraphStorage(default_node_name="Course {id}")
        node_id = storage.add_node_at_position(0, 0)
        assert storage.get_node_name(node_id) == "Course 1"

    def test_rename_node_keeps_position(self, storage):
        storage.add_node(1, "Old", x=3, y=4)
        assert storage.rename_node(1, "New") is True

        node = storage.get_node(1)
        assert node.label == "1 - New"
        assert (node.x, node.y) == (3, 4)

    def test_rename_missing_node(self, storage):
        assert storage.rename_node(9, "Nothing") is False

    def test_move_node(self, storage):
        storage.add_node(1, "A")
        assert storage.move_node(1, 7, 8) is True
        assert (storage.get_node(1).x, storage.get_node(1).y) == (7, 8)
        assert storage.move_node(2, 0, 0) is False

    def test_ids_stay_unique(self, storage):
        for node_id in (1, 2, 1, 3, 2, None, None):
            storage.add_node(node_id, "n")

        ids = [node.id for node in storage.get_all_nodes()]
        assert len(ids) == len(set(ids))
        assert ids == [1, 2, 3, 4, 5]


class TestEdgeCRUD:
    """Tests for edge operations"""

    def test_add_edge(self, storage):
        storage.add_node(1, "A")
        storage.add_node(2, "B")
        assert storage.add_edge(1, 2, "C3") is True

        edge = storage.get_edge_between(1, 2)
        assert edge.label == "C3"
        assert edge.arrows == "to"
        assert storage.graph.has_edge(1, 2)
        assert not storage.has_edge(2, 1)

    def test_duplicate_edge_fails(self, storage):
        """Test that an ordered pair can hold at most one edge"""
        storage.add_node(1, "A")
        storage.add_node(2, "B")

        assert storage.add_edge(1, 2, "C1") is True
        assert storage.add_edge(1, 2, "C9") is False

        assert len(storage.edges_where(lambda e: e.source == 1 and e.target == 2)) == 1
        assert storage.get_edge_between(1, 2).label == "C1"

    def test_reverse_edge_is_a_different_pair(self, storage):
        storage.add_node(1, "A")
        storage.add_node(2, "B")
        storage.add_edge(1, 2)
        assert storage.add_edge(2, 1) is True

    def test_edge_to_missing_node_fails(self, storage):
        storage.add_node(1, "A")
        assert storage.add_edge(1, 2) is False
        assert storage.add_edge(2, 1) is False
        assert len(storage.edges) == 0

    def test_self_loop_is_allowed(self, storage):
        storage.add_node(1, "A")
        assert storage.add_edge(1, 1, "C2") is True
        assert storage.has_edge(1, 1)

    def test_edge_ids_increase(self, chain_storage):
        assert [edge.id for edge in chain_storage.get_all_edges()] == [1, 2, 3]

    def test_rename_edge(self, chain_storage):
        assert chain_storage.rename_edge(1, 3, "C2") is True
        assert chain_storage.get_edge_between(1, 3).label == "C2"
        assert chain_storage.rename_edge(3, 1, "C2") is False

    def test_delete_edge(self, chain_storage):
        assert chain_storage.delete_edge(1, 3) is True
        assert not chain_storage.has_edge(1, 3)
        assert not chain_storage.graph.has_edge(1, 3)
        assert chain_storage.delete_edge(1, 3) is False

    def test_delete_edge_by_id(self, chain_storage):
        assert chain_storage.delete_edge_by_id(2) is True
        assert chain_storage.get_edge(2) is None
        assert not chain_storage.has_edge(2, 3)
        assert chain_storage.delete_edge_by_id(2) is False

    def test_get_edges_for_node(self, chain_storage):
        edges = chain_storage.get_edges_for_node(2)
        assert [(e.source, e.target) for e in edges] == [(1, 2), (2, 3)]


class TestCascadeDelete:
    """Tests for node deletion removing incident edges"""

    def test_delete_node_removes_incident_edges(self, chain_storage):
        assert chain_storage.delete_node(2) is True

        assert chain_storage.get_node(2) is None
        assert all(
            edge.source != 2 and edge.target != 2
            for edge in chain_storage.get_all_edges()
        )
        assert [(e.source, e.target) for e in chain_storage.get_all_edges()] == [(1, 3)]
        assert 2 not in chain_storage.graph

    def test_delete_missing_node(self, storage):
        assert storage.delete_node(1) is False

    def test_delete_node_with_self_loop(self, storage):
        storage.add_node(1, "A")
        storage.add_edge(1, 1)
        assert storage.delete_node(1) is True
        assert len(storage.edges) == 0


class TestChangeTracking:
    """Tests for the change flag and listeners"""

    def test_mutation_sets_flag(self, storage):
        storage.add_node(1, "A")
        assert storage.is_changed is True

    def test_acknowledge_returns_previous_value(self, storage):
        storage.add_node(1, "A")
        assert storage.acknowledge_changes() is True
        assert storage.is_changed is False
        assert storage.acknowledge_changes() is False

    def test_failed_mutation_does_not_set_flag(self, storage):
        storage.add_node(1, "A")
        storage.acknowledge_changes()

        storage.add_node(1, "again")
        storage.add_edge(1, 2)
        storage.delete_node(5)

        assert storage.is_changed is False

    def test_move_does_not_set_flag(self, storage):
        storage.add_node(1, "A")
        storage.acknowledge_changes()

        storage.move_node(1, 10, 10)
        storage.update_positions([{'id': 1, 'x': 1, 'y': 2}])

        assert storage.is_changed is False

    def test_listener_receives_events(self, storage, recorded_events):
        storage.add_node(1, "A")
        storage.add_node(2, "B")
        storage.add_edge(1, 2, "C1")
        storage.rename_node(1, "AA")

        assert [e.event_type for e in recorded_events] == [
            EventType.NODE_CREATE,
            EventType.NODE_CREATE,
            EventType.EDGE_CREATE,
            EventType.NODE_UPDATE,
        ]
        assert recorded_events[-1].before['label'] == "1 - A"
        assert recorded_events[-1].after['label'] == "1 - AA"

    def test_cascade_emits_edge_events_before_node_event(self, storage, recorded_events):
        storage.add_node(1, "A")
        storage.add_node(2, "B")
        storage.add_edge(1, 2)
        recorded_events.clear()

        storage.delete_node(2)

        assert [(e.event_type, e.entity_kind) for e in recorded_events] == [
            (EventType.EDGE_DELETE, EntityKind.EDGE),
            (EventType.NODE_DELETE, EntityKind.NODE),
        ]

    def test_failing_listener_does_not_break_mutation(self, storage):
        def broken(event):
            raise RuntimeError("boom")

        storage.add_listener(broken)
        assert storage.add_node(1, "A") is True
        assert storage.has_node(1)

    def test_remove_listener(self, storage, recorded_events):
        assert storage.remove_listener(recorded_events.append) is True
        storage.add_node(1, "A")
        assert recorded_events == []
        assert storage.remove_listener(recorded_events.append) is False


class TestBulkOperations:
    """Tests for clear, replace_all and update_positions"""

    def test_clear(self, chain_storage):
        chain_storage.clear()
        assert len(chain_storage.nodes) == 0
        assert len(chain_storage.edges) == 0
        assert chain_storage.graph.number_of_edges() == 0

    def test_replace_all(self, chain_storage):
        nodes = [Node(id=10, name="X"), Node(id=11, name="Y")]
        edges = [Edge(id=5, source=10, target=11, label="C2")]

        chain_storage.replace_all(nodes, edges)

        assert list(chain_storage.nodes) == [10, 11]
        assert chain_storage.get_edge_between(10, 11).id == 5
        # New edges continue after the highest imported id
        chain_storage.add_edge(11, 10)
        assert chain_storage.get_edge_between(11, 10).id == 6

    @pytest.mark.parametrize("nodes,edges", [
        ([Node(id=1), Node(id=1)], []),
        ([Node(id=1)], [Edge(id=1, source=1, target=2)]),
        ([Node(id=1), Node(id=2)], [Edge(id=1, source=1, target=2), Edge(id=1, source=2, target=1)]),
        ([Node(id=1), Node(id=2)], [Edge(id=1, source=1, target=2), Edge(id=2, source=1, target=2)]),
    ])
    def test_replace_all_rejects_invalid_records(self, chain_storage, nodes, edges):
        """Test that an invalid replacement leaves the store untouched"""
        with pytest.raises(ValueError):
            chain_storage.replace_all(nodes, edges)

        assert list(chain_storage.nodes) == [1, 2, 3]
        assert len(chain_storage.edges) == 3

    def test_update_positions_skips_unknown_ids(self, chain_storage):
        updated = chain_storage.update_positions([
            {'id': 1, 'x': 11, 'y': 12},
            {'id': 99, 'x': 0, 'y': 0},
        ])
        assert updated == 1
        assert (chain_storage.get_node(1).x, chain_storage.get_node(1).y) == (11, 12)


class TestStats:
    """Tests for get_stats"""

    def test_stats(self, chain_storage):
        stats = chain_storage.get_stats()
        assert stats.total_nodes == 3
        assert stats.total_edges == 3
        assert stats.is_acyclic is True
        assert stats.has_unsaved_changes is True

    def test_cycle_detected(self, chain_storage):
        chain_storage.add_edge(3, 1)
        assert chain_storage.get_stats().is_acyclic is False
