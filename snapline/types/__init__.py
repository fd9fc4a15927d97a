"""Type definitions for snapline.

This package contains all type definitions organized into focused modules:
- geometry: Core geometry types (Point, Rect, TRBL, Shape, Connection)
- paths: Canonical path segments and intersection records
- gestures: Per-interaction snapping state
"""

from snapline.types.geometry import (
    TRBL,
    Connection,
    Point,
    Rect,
    Shape,
    clamp_value,
)
from snapline.types.gestures import (
    AXES,
    Axis,
    AxisConstraints,
    GestureContext,
    GestureState,
    Modifiers,
    ResizeConstraints,
    SnapEvent,
    SnapState,
)
from snapline.types.paths import (
    CanonicalPath,
    CanonicalSegment,
    Cubic,
    CubicTo,
    Intersection,
    MoveTo,
    PathSpec,
)

__all__ = [
    # Geometry
    "Connection",
    "Point",
    "Rect",
    "Shape",
    "TRBL",
    "clamp_value",
    # Paths
    "CanonicalPath",
    "CanonicalSegment",
    "Cubic",
    "CubicTo",
    "Intersection",
    "MoveTo",
    "PathSpec",
    # Gestures
    "AXES",
    "Axis",
    "AxisConstraints",
    "GestureContext",
    "GestureState",
    "Modifiers",
    "ResizeConstraints",
    "SnapEvent",
    "SnapState",
]
