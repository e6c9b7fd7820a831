"""Tests for validation.py - the four DAG checks and their fixed reporting order."""

from __future__ import annotations

from pipeline_core import GraphModel, ViolationKind, has_cycle, validate, validation_summary
from pipeline_core.validation import (
    MSG_CYCLE,
    MSG_SELF_LOOP,
    MSG_TOO_FEW_NODES,
    find_self_loops,
)

from conftest import make_edges, make_nodes


class TestValidPipelines:
    def test_chain_is_valid(self):
        nodes = make_nodes("A", "B", "C")
        edges = make_edges(("A", "B"), ("B", "C"))
        result = validate(nodes, edges)
        assert result.is_valid
        assert result.errors == []

    def test_sample_pipeline_is_valid(self, sample_pipeline):
        nodes, edges = sample_pipeline
        result = validate(nodes, edges)
        assert result.is_valid
        assert result.to_dict() == {"isValid": True, "errors": []}

    def test_diamond_is_not_a_cycle(self):
        """Two paths reaching the same node must not be mistaken for a cycle."""
        nodes = make_nodes("A", "B", "C", "D")
        edges = make_edges(("A", "B"), ("A", "C"), ("B", "D"), ("C", "D"))
        assert validate(nodes, edges).is_valid

    def test_long_chain_does_not_exhaust_stack(self):
        ids = [f"n{i}" for i in range(5000)]
        nodes = make_nodes(*ids)
        edges = make_edges(*zip(ids, ids[1:]))
        assert validate(nodes, edges).is_valid


class TestViolations:
    def test_single_node(self):
        result = validate(make_nodes("A"), [])
        assert not result.is_valid
        assert result.errors == [
            "Pipeline must have at least 2 nodes",
            "1 node(s) are not connected",
        ]

    def test_empty_pipeline_reports_size_only(self):
        result = validate([], [])
        assert result.errors == [MSG_TOO_FEW_NODES]

    def test_three_node_cycle(self):
        nodes = make_nodes("A", "B", "C")
        edges = make_edges(("A", "B"), ("B", "C"), ("C", "A"))
        result = validate(nodes, edges)
        assert result.errors == ["Pipeline contains cycles (not a valid DAG)"]

    def test_self_loop_reported_twice_with_isolated_node(self):
        nodes = make_nodes("A", "B")
        edges = make_edges(("A", "A"))
        result = validate(nodes, edges)
        assert result.errors == [
            "1 node(s) are not connected",
            "Pipeline contains cycles (not a valid DAG)",
            "Self-connections are not allowed",
        ]
        assert [i.kind for i in result.issues] == [
            ViolationKind.CONNECTIVITY,
            ViolationKind.STRUCTURAL,
            ViolationKind.STRUCTURAL,
        ]

    def test_disconnected_count(self):
        nodes = make_nodes("A", "B", "C", "D")
        edges = make_edges(("A", "B"))
        assert validate(nodes, edges).errors == ["2 node(s) are not connected"]

    def test_cycle_in_second_component(self):
        nodes = make_nodes("A", "B", "C", "D")
        edges = make_edges(("A", "B"), ("C", "D"), ("D", "C"))
        assert validate(nodes, edges).errors == [MSG_CYCLE]

    def test_all_checks_together(self):
        result = validate(make_nodes("A"), make_edges(("A", "A")))
        assert result.errors == [MSG_TOO_FEW_NODES, MSG_CYCLE, MSG_SELF_LOOP]


class TestMalformedInput:
    def test_dangling_edge_does_not_crash(self):
        nodes = make_nodes("A", "B")
        edges = make_edges(("A", "B"), ("B", "ghost"))
        assert validate(nodes, edges).is_valid

    def test_cycle_through_missing_node_is_ignored(self):
        """Edges to unknown nodes are dropped from the adjacency used for cycles."""
        nodes = make_nodes("A", "B")
        edges = make_edges(("A", "B"), ("A", "ghost"), ("ghost", "A"))
        assert validate(nodes, edges).is_valid

    def test_inputs_not_mutated(self):
        nodes = make_nodes("A", "B")
        edges = make_edges(("A", "B"))
        before = ([n.model_dump() for n in nodes], [e.model_dump() for e in edges])
        validate(nodes, edges)
        assert before == ([n.model_dump() for n in nodes], [e.model_dump() for e in edges])


class TestHelpers:
    def test_has_cycle(self):
        graph = GraphModel.build(make_nodes("A", "B"), make_edges(("A", "B"), ("B", "A")))
        assert has_cycle(graph)
        assert not has_cycle(GraphModel.build(make_nodes("A", "B"), make_edges(("A", "B"))))

    def test_find_self_loops(self):
        edges = make_edges(("A", "B"), ("B", "B"))
        assert [e.id for e in find_self_loops(edges)] == ["e1"]

    def test_summary_counts(self):
        result = validate(make_nodes("A", "B"), make_edges(("A", "A")))
        assert validation_summary(result) == {
            "total": 3,
            "cardinality": 0,
            "connectivity": 1,
            "structural": 2,
            "valid": False,
        }

    def test_result_serialises_with_alias(self):
        result = validate(make_nodes("A", "B"), make_edges(("A", "B")))
        assert result.model_dump(by_alias=True)["isValid"] is True
