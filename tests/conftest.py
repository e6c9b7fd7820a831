"""Shared builders for pipeline tests."""

from __future__ import annotations

import pytest

from pipeline_core import Edge, Node, Position


def make_nodes(*ids: str) -> list[Node]:
    """Build nodes labelled after their ids, all at the origin."""
    return [Node(id=nid, label=nid, position=Position(x=0, y=0)) for nid in ids]


def make_edges(*pairs: tuple[str, str]) -> list[Edge]:
    """Build edges e0, e1, ... from (source, target) pairs."""
    return [Edge(id=f"e{i}", source=src, target=tgt) for i, (src, tgt) in enumerate(pairs)]


@pytest.fixture
def sample_pipeline() -> tuple[list[Node], list[Edge]]:
    """The five-step DataSource -> ... -> Output pipeline from the editor's example."""
    nodes = make_nodes("DataSource", "Transform", "Filter", "Aggregate", "Output")
    edges = make_edges(
        ("DataSource", "Transform"),
        ("DataSource", "Filter"),
        ("Transform", "Aggregate"),
        ("Filter", "Aggregate"),
        ("Aggregate", "Output"),
    )
    return nodes, edges
