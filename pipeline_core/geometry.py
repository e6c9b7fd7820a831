"""
Geometry helpers used by the editor when drawing edges.
"""

import math

from .models import Position

DEFAULT_BOX_WIDTH = 180
DEFAULT_BOX_HEIGHT = 100

# Fraction of the dominant-axis delta used to offset curve control points
CURVE_FACTOR = 0.3


def distance(a: Position, b: Position) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b.x - a.x, b.y - a.y)


def connection_point(
    position: Position,
    side: str,
    width: float = DEFAULT_BOX_WIDTH,
    height: float = DEFAULT_BOX_HEIGHT
) -> Position:
    """
    Anchor point of a node's port.

    Args:
        position: Top-left corner of the node box
        side: "input" (left edge) or "output" (right edge)
        width: Node box width
        height: Node box height

    Returns:
        Midpoint of the requested vertical edge of the box
    """
    center_y = position.y + height / 2
    if side == "input":
        return Position(x=position.x, y=center_y)
    if side == "output":
        return Position(x=position.x + width, y=center_y)
    raise ValueError(f"Unknown connection side: {side}")


def edge_path(source: Position, target: Position) -> str:
    """
    SVG path for a smooth cubic curve between two points.

    Control points move along the dominant axis only, by 30% of the delta on
    that axis; they stay level with their endpoint on the other axis.
    """
    dx = target.x - source.x
    dy = target.y - source.y

    if abs(dx) > abs(dy):
        # Horizontal-dominant curve
        c1 = (source.x + dx * CURVE_FACTOR, source.y)
        c2 = (target.x - dx * CURVE_FACTOR, target.y)
    else:
        # Vertical-dominant curve
        c1 = (source.x, source.y + dy * CURVE_FACTOR)
        c2 = (target.x, target.y - dy * CURVE_FACTOR)

    return (
        f"M {_fmt(source.x)} {_fmt(source.y)} "
        f"C {_fmt(c1[0])} {_fmt(c1[1])}, {_fmt(c2[0])} {_fmt(c2[1])}, "
        f"{_fmt(target.x)} {_fmt(target.y)}"
    )


def _fmt(value: float) -> str:
    """Format a coordinate without a trailing '.0' for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")
