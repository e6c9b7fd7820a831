"""
Graph model - Read-only adjacency view over pipeline nodes and edges.

Validation and layout both walk the same directed adjacency. Building it here
keeps the rules for malformed input in one place:
- Node order is the input order (first occurrence wins for duplicate ids)
- Neighbour order is the edge input order
- Edges with an endpoint that is not a known node are dropped
"""

from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Node, Edge


@dataclass(frozen=True)
class GraphModel:
    """Immutable directed graph keyed by node id."""
    node_ids: tuple[str, ...]
    index: dict[str, int]
    successors: dict[str, tuple[str, ...]]
    predecessors: dict[str, tuple[str, ...]]

    @classmethod
    def build(cls, nodes: Iterable["Node"], edges: Iterable["Edge"]) -> "GraphModel":
        """
        Build the adjacency view for one call.

        Args:
            nodes: Nodes in editor order
            edges: Directed edges (source -> target)

        Returns:
            A GraphModel; inputs are not modified
        """
        index: dict[str, int] = {}
        for node in nodes:
            if node.id not in index:
                index[node.id] = len(index)
        node_ids = tuple(index)

        succ: dict[str, list[str]] = {nid: [] for nid in node_ids}
        pred: dict[str, list[str]] = {nid: [] for nid in node_ids}
        for edge in edges:
            if edge.source not in index or edge.target not in index:
                continue
            succ[edge.source].append(edge.target)
            pred[edge.target].append(edge.source)

        return cls(
            node_ids=node_ids,
            index=index,
            successors={nid: tuple(succ[nid]) for nid in node_ids},
            predecessors={nid: tuple(pred[nid]) for nid in node_ids},
        )

    def __len__(self) -> int:
        return len(self.node_ids)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.index

    def in_degree(self, node_id: str) -> int:
        return len(self.predecessors.get(node_id, ()))

    def out_degree(self, node_id: str) -> int:
        return len(self.successors.get(node_id, ()))

    def sources(self) -> list[str]:
        """Nodes with no incoming edges, in input order."""
        return [nid for nid in self.node_ids if not self.predecessors[nid]]

    def has_self_loop(self, node_id: str) -> bool:
        return node_id in self.successors.get(node_id, ())

    def edge_pairs(self) -> list[tuple[str, str]]:
        """All kept (source, target) pairs, grouped by source in input order."""
        return [(src, tgt) for src in self.node_ids for tgt in self.successors[src]]
