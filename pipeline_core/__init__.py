"""
Pipeline DAG Core - Models, validation, layout and geometry for pipeline diagrams.

This module provides the functionality shared by the HTTP API and the CLI,
ensuring a single source of truth for all graph logic. Every operation is a
pure function of its arguments.
"""

from .models import (
    # Enums
    ViolationKind,
    LayoutDirection,
    # Core models
    Position,
    Node,
    Edge,
    PipelineData,
    ValidationIssue,
    ValidationResult,
    LayoutConfig,
    # Request models (for API)
    LayoutRequest,
    ConnectionPointRequest,
    EdgePathRequest,
)

from .graph import GraphModel
from .validation import validate, has_cycle, find_self_loops, validation_summary
from .layering import (
    LayoutResult,
    assign_ranks,
    order_ranks,
    count_crossings,
    assign_coordinates,
    compute_layout,
    layout,
)
from .geometry import connection_point, edge_path, distance

__all__ = [
    # Enums
    "ViolationKind",
    "LayoutDirection",
    # Models
    "Position",
    "Node",
    "Edge",
    "PipelineData",
    "ValidationIssue",
    "ValidationResult",
    "LayoutConfig",
    # Request models
    "LayoutRequest",
    "ConnectionPointRequest",
    "EdgePathRequest",
    # Graph
    "GraphModel",
    # Validation
    "validate",
    "has_cycle",
    "find_self_loops",
    "validation_summary",
    # Layout
    "LayoutResult",
    "assign_ranks",
    "order_ranks",
    "count_crossings",
    "assign_coordinates",
    "compute_layout",
    "layout",
    # Geometry
    "connection_point",
    "edge_path",
    "distance",
]
