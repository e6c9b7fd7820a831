"""
Pipeline validation - Check that a diagram forms a valid DAG.

Provides validation that is called by the editor after every structural
change. Problems are reported as data; nothing here raises.
"""

import logging
from typing import Sequence, TYPE_CHECKING

from .graph import GraphModel
from .models import ValidationIssue, ValidationResult, ViolationKind

if TYPE_CHECKING:
    from .models import Node, Edge

logger = logging.getLogger(__name__)

MIN_NODES = 2

MSG_TOO_FEW_NODES = "Pipeline must have at least 2 nodes"
MSG_NOT_CONNECTED = "{count} node(s) are not connected"
MSG_CYCLE = "Pipeline contains cycles (not a valid DAG)"
MSG_SELF_LOOP = "Self-connections are not allowed"

# DFS node states
_UNVISITED = 0
_ON_STACK = 1
_DONE = 2


def validate(nodes: Sequence["Node"], edges: Sequence["Edge"]) -> ValidationResult:
    """
    Validate a pipeline graph and return every violation found.

    Checks, always all run and reported in this order:
    - Fewer than 2 nodes - CARDINALITY
    - Nodes not used by any edge - CONNECTIVITY
    - Directed cycles - STRUCTURAL
    - Self-referencing edges - STRUCTURAL

    A self-loop is also a cycle, so it is reported by both of the last two.

    Args:
        nodes: Nodes of the pipeline
        edges: Directed edges of the pipeline

    Returns:
        ValidationResult with is_valid and the ordered issues
    """
    issues: list[ValidationIssue] = []

    if len(nodes) < MIN_NODES:
        issues.append(ValidationIssue(
            kind=ViolationKind.CARDINALITY,
            message=MSG_TOO_FEW_NODES
        ))

    # Find connected nodes
    connected_nodes: set[str] = set()
    for edge in edges:
        connected_nodes.add(edge.source)
        connected_nodes.add(edge.target)

    disconnected = sum(1 for node in nodes if node.id not in connected_nodes)
    if disconnected > 0:
        issues.append(ValidationIssue(
            kind=ViolationKind.CONNECTIVITY,
            message=MSG_NOT_CONNECTED.format(count=disconnected)
        ))

    if has_cycle(GraphModel.build(nodes, edges)):
        issues.append(ValidationIssue(
            kind=ViolationKind.STRUCTURAL,
            message=MSG_CYCLE
        ))

    if find_self_loops(edges):
        issues.append(ValidationIssue(
            kind=ViolationKind.STRUCTURAL,
            message=MSG_SELF_LOOP
        ))

    result = ValidationResult(is_valid=not issues, issues=issues)
    logger.debug(
        "Validated pipeline with %d nodes, %d edges: %s",
        len(nodes), len(edges), result.errors or "valid"
    )
    return result


def has_cycle(graph: GraphModel) -> bool:
    """
    Detect a directed cycle with an iterative three-state DFS.

    Every unvisited node is used as a start so disconnected components are
    covered. Reaching a node that is still on the stack means a back edge.
    """
    state: dict[str, int] = {nid: _UNVISITED for nid in graph.node_ids}

    for start in graph.node_ids:
        if state[start] != _UNVISITED:
            continue

        state[start] = _ON_STACK
        # Each frame is (node, index of the next successor to explore)
        stack: list[tuple[str, int]] = [(start, 0)]

        while stack:
            node_id, next_idx = stack[-1]
            neighbors = graph.successors[node_id]

            if next_idx >= len(neighbors):
                state[node_id] = _DONE
                stack.pop()
                continue

            stack[-1] = (node_id, next_idx + 1)
            neighbor = neighbors[next_idx]

            if state[neighbor] == _ON_STACK:
                return True
            if state[neighbor] == _UNVISITED:
                state[neighbor] = _ON_STACK
                stack.append((neighbor, 0))

    return False


def find_self_loops(edges: Sequence["Edge"]) -> list["Edge"]:
    """Return the edges whose source and target are the same node."""
    return [edge for edge in edges if edge.source == edge.target]


def validation_summary(result: ValidationResult) -> dict:
    """
    Create a summary of validation issues.

    Args:
        result: Outcome of validate()

    Returns:
        Dictionary with counts by violation kind
    """
    return {
        "total": len(result.issues),
        "cardinality": len([i for i in result.issues if i.kind == ViolationKind.CARDINALITY]),
        "connectivity": len([i for i in result.issues if i.kind == ViolationKind.CONNECTIVITY]),
        "structural": len([i for i in result.issues if i.kind == ViolationKind.STRUCTURAL]),
        "valid": result.is_valid
    }
