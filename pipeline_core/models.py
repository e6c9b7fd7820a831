"""
Core data models for pipeline diagrams.

These models define the canonical schema exchanged with the editor:
- Nodes with an id, display label, canvas position and selection flag
- Edges connecting nodes (using source/target naming convention)
- PipelineData, the import/export document holding both lists

Field Naming Convention:
- Edges use `source` and `target` (industry standard from D3, Cytoscape, etc.)
- Validation results serialize `is_valid` as `isValid` to match the editor
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
import uuid


# Default layout parameters
DEFAULT_NODE_WIDTH = 160
DEFAULT_NODE_HEIGHT = 80
DEFAULT_NODE_SEPARATION = 80
DEFAULT_RANK_SEPARATION = 120
DEFAULT_MARGIN_X = 20
DEFAULT_MARGIN_Y = 20
DEFAULT_ORDERING_PASSES = 4


class ViolationKind(str, Enum):
    """Categories of structural problems reported by the validator."""
    CARDINALITY = "cardinality"    # Too few nodes
    CONNECTIVITY = "connectivity"  # Nodes not referenced by any edge
    STRUCTURAL = "structural"      # Cycles and self-loops


class LayoutDirection(str, Enum):
    """Dominant flow direction of a layered layout."""
    TOP_BOTTOM = "TB"
    LEFT_RIGHT = "LR"


def generate_node_id() -> str:
    """Generate a unique node ID."""
    return f"node-{uuid.uuid4().hex[:8]}"


def generate_edge_id() -> str:
    """Generate a unique edge ID."""
    return f"edge-{uuid.uuid4().hex[:8]}"


class Position(BaseModel):
    """A point on the canvas, in pixels."""
    x: float = 0
    y: float = 0


class Node(BaseModel):
    """A pipeline step on the canvas."""
    id: str = Field(default_factory=generate_node_id)
    label: str = "New Node"
    position: Position = Field(default_factory=Position)
    selected: bool = False


class Edge(BaseModel):
    """A directed dependency between two nodes."""
    id: str = Field(default_factory=generate_edge_id)
    source: str  # Source node ID
    target: str  # Target node ID
    selected: bool = False

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target


class PipelineData(BaseModel):
    """
    The complete pipeline document.
    This is what the editor exports to and imports from JSON.
    """
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict with proper field names."""
        return {
            "nodes": [n.model_dump() for n in self.nodes],
            "edges": [e.model_dump() for e in self.edges],
        }

    @classmethod
    def from_json_dict(cls, data: dict) -> "PipelineData":
        """Create a PipelineData from a JSON dict, validating its shape."""
        return cls.model_validate(data)


class ValidationIssue(BaseModel):
    """A single violation found by the validator."""
    kind: ViolationKind
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating a pipeline graph."""
    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(alias="isValid")
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        """Violation messages in check order."""
        return [issue.message for issue in self.issues]

    def to_dict(self) -> dict:
        """Convert to the editor's `{isValid, errors}` shape."""
        return {"isValid": self.is_valid, "errors": self.errors}


class LayoutConfig(BaseModel):
    """Options recognised by the layered layout engine."""
    node_width: float = Field(default=DEFAULT_NODE_WIDTH, ge=0)
    node_height: float = Field(default=DEFAULT_NODE_HEIGHT, ge=0)
    node_separation: float = Field(default=DEFAULT_NODE_SEPARATION, ge=0)  # Between siblings in a rank
    rank_separation: float = Field(default=DEFAULT_RANK_SEPARATION, ge=0)  # Between consecutive ranks
    margin_x: float = Field(default=DEFAULT_MARGIN_X, ge=0)
    margin_y: float = Field(default=DEFAULT_MARGIN_Y, ge=0)
    direction: LayoutDirection = LayoutDirection.TOP_BOTTOM
    center_ranks: bool = False
    ordering_passes: int = Field(default=DEFAULT_ORDERING_PASSES, ge=0)


# --- API Request/Response Models ---

class LayoutRequest(PipelineData):
    """Request to auto-arrange a pipeline."""
    config: LayoutConfig | None = None


class ConnectionPointRequest(BaseModel):
    """Request for the anchor point of a node's input or output port."""
    position: Position
    side: str  # "input" or "output"
    width: float = 180
    height: float = 100


class EdgePathRequest(BaseModel):
    """Request for the curve between two anchor points."""
    source: Position
    target: Position
