"""
Layered layout for pipeline diagrams.

Auto-arrange runs three deterministic passes:
- Rank assignment: longest path from the sources (Kahn-style traversal)
- Ordering: barycenter sweeps inside each rank to reduce edge crossings
- Coordinates: (rank, order) mapped to pixel positions

Layout never modifies its inputs and never raises for any graph shape. On
cyclic input it still terminates and positions every node, but the ranks are
not guaranteed to follow every edge.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence, TYPE_CHECKING

from .config import default_layout_config
from .graph import GraphModel
from .models import DEFAULT_ORDERING_PASSES, LayoutConfig, LayoutDirection, Position

if TYPE_CHECKING:
    from .models import Node, Edge

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Intermediate and final products of one layout run."""
    ranks: dict[str, int] = field(default_factory=dict)
    ordering: list[list[str]] = field(default_factory=list)
    positions: dict[str, Position] = field(default_factory=dict)

    @property
    def rank_count(self) -> int:
        return len(self.ordering)


# --- Rank assignment ---

def assign_ranks(graph: GraphModel) -> dict[str, int]:
    """
    Assign each node the length of the longest path reaching it from a source.

    Nodes with no incoming edges (including isolated nodes) get rank 0. Each
    node is visited exactly once; an edge into an already visited node is a
    back edge and is not relaxed, so cycles cannot loop forever. When the
    queue drains while nodes remain (they sit on or behind a cycle), the first
    remaining node in input order is forced in as a new start.

    Args:
        graph: Adjacency view of the pipeline

    Returns:
        Mapping of node id -> rank
    """
    ranks: dict[str, int] = {nid: 0 for nid in graph.node_ids}
    remaining: dict[str, int] = {
        nid: sum(1 for p in graph.predecessors[nid] if p != nid)
        for nid in graph.node_ids
    }
    visited: set[str] = set()
    queue = deque(nid for nid in graph.node_ids if remaining[nid] == 0)

    def drain() -> None:
        while queue:
            node_id = queue.popleft()
            if node_id in visited:
                continue
            visited.add(node_id)
            for child in graph.successors[node_id]:
                if child == node_id or child in visited:
                    continue
                ranks[child] = max(ranks[child], ranks[node_id] + 1)
                remaining[child] -= 1
                if remaining[child] == 0:
                    queue.append(child)

    drain()
    for node_id in graph.node_ids:
        if node_id not in visited:
            logger.debug("Breaking cycle at node %s", node_id)
            queue.append(node_id)
            drain()

    return ranks


# --- Crossing reduction ---

def group_by_rank(graph: GraphModel, ranks: dict[str, int]) -> list[list[str]]:
    """Group node ids by rank, keeping input order inside each rank."""
    rank_count = (max(ranks.values()) + 1) if ranks else 0
    ordering: list[list[str]] = [[] for _ in range(rank_count)]
    for node_id in graph.node_ids:
        ordering[ranks[node_id]].append(node_id)
    return ordering


def order_ranks(
    graph: GraphModel,
    ranks: dict[str, int],
    passes: int = DEFAULT_ORDERING_PASSES
) -> list[list[str]]:
    """
    Order the nodes of each rank to reduce edge crossings.

    Even passes sweep top-down using predecessors in the rank above; odd
    passes sweep bottom-up using successors in the rank below. A node's key
    is the mean order index of those neighbours, or its current index when it
    has none. Ties fall back to the current index, so the result only depends
    on the input order.

    Args:
        graph: Adjacency view of the pipeline
        ranks: Output of assign_ranks()
        passes: Number of sweeps to run

    Returns:
        One list of node ids per rank, in display order
    """
    ordering = group_by_rank(graph, ranks)
    rank_count = len(ordering)

    for pass_idx in range(passes):
        if pass_idx % 2 == 0:
            for rank in range(1, rank_count):
                ordering[rank] = _sort_by_barycenter(
                    ordering[rank], ordering[rank - 1], graph.predecessors
                )
        else:
            for rank in range(rank_count - 2, -1, -1):
                ordering[rank] = _sort_by_barycenter(
                    ordering[rank], ordering[rank + 1], graph.successors
                )

    return ordering


def _sort_by_barycenter(
    layer: list[str],
    adjacent: list[str],
    neighbors: dict[str, tuple[str, ...]]
) -> list[str]:
    """Stable re-sort of one rank against the fixed order of an adjacent rank."""
    adjacent_pos = {nid: i for i, nid in enumerate(adjacent)}

    keys: dict[str, tuple[float, int]] = {}
    for idx, node_id in enumerate(layer):
        positions = [adjacent_pos[nb] for nb in neighbors[node_id] if nb in adjacent_pos]
        barycenter = sum(positions) / len(positions) if positions else float(idx)
        keys[node_id] = (barycenter, idx)

    return sorted(layer, key=lambda nid: keys[nid])


def count_crossings(graph: GraphModel, ordering: list[list[str]]) -> int:
    """Count crossings between edges joining consecutive ranks."""
    total = 0
    for rank in range(len(ordering) - 1):
        lower = {nid: i for i, nid in enumerate(ordering[rank + 1])}
        segments: list[tuple[int, int]] = []
        for upper_pos, node_id in enumerate(ordering[rank]):
            for child in graph.successors[node_id]:
                if child in lower:
                    segments.append((upper_pos, lower[child]))

        for i in range(len(segments)):
            for j in range(i + 1, len(segments)):
                (a1, b1), (a2, b2) = segments[i], segments[j]
                if (a1 - a2) * (b1 - b2) < 0:
                    total += 1
    return total


# --- Coordinate assignment ---

def assign_coordinates(
    ordering: list[list[str]],
    config: LayoutConfig
) -> dict[str, Position]:
    """
    Convert (rank, order) pairs into top-left pixel positions.

    Top-to-bottom layouts put ranks on the y axis and siblings on the x axis;
    left-to-right layouts swap the two. Ranks start at the margin unless
    center_ranks is set, in which case each rank is centred on the widest one.

    Args:
        ordering: Output of order_ranks()
        config: Box size, separation and margin settings

    Returns:
        Mapping of node id -> Position
    """
    horizontal = config.direction == LayoutDirection.LEFT_RIGHT

    if horizontal:
        rank_step = config.node_width + config.rank_separation
        sibling_size = config.node_height
    else:
        rank_step = config.node_height + config.rank_separation
        sibling_size = config.node_width
    sibling_step = sibling_size + config.node_separation

    def extent(count: int) -> float:
        return count * sibling_size + max(count - 1, 0) * config.node_separation

    widest = max((extent(len(layer)) for layer in ordering), default=0)

    positions: dict[str, Position] = {}
    for rank, layer in enumerate(ordering):
        offset = (widest - extent(len(layer))) / 2 if config.center_ranks else 0
        for order, node_id in enumerate(layer):
            along = rank * rank_step
            across = offset + order * sibling_step
            if horizontal:
                positions[node_id] = Position(x=config.margin_x + along, y=config.margin_y + across)
            else:
                positions[node_id] = Position(x=config.margin_x + across, y=config.margin_y + along)

    return positions


# --- Engine ---

def compute_layout(
    nodes: Sequence["Node"],
    edges: Sequence["Edge"],
    config: LayoutConfig | None = None
) -> LayoutResult:
    """Run all three passes and return ranks, ordering and positions."""
    if config is None:
        config = default_layout_config()
    if not nodes:
        return LayoutResult()

    graph = GraphModel.build(nodes, edges)
    ranks = assign_ranks(graph)
    ordering = order_ranks(graph, ranks, passes=config.ordering_passes)
    positions = assign_coordinates(ordering, config)

    # count_crossings is quadratic in the edge count
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Laid out %d nodes in %d ranks (%d crossings)",
            len(graph), len(ordering), count_crossings(graph, ordering)
        )
    return LayoutResult(ranks=ranks, ordering=ordering, positions=positions)


def layout(
    nodes: Sequence["Node"],
    edges: Sequence["Edge"],
    config: LayoutConfig | None = None
) -> list["Node"]:
    """
    Auto-arrange a pipeline with a layered top-to-bottom layout.

    Args:
        nodes: Nodes to arrange
        edges: Directed edges between them
        config: Layout options (defaults when None)

    Returns:
        New list of nodes, in input order, with only their positions changed
    """
    result = compute_layout(nodes, edges, config)
    return [
        node.model_copy(update={"position": result.positions[node.id]})
        for node in nodes
    ]
