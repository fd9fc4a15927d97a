"""Per-interaction state used by grid snapping.

A gesture is one continuous interaction (a drag, a resize, a create). The
host owns one GestureContext per gesture and drops it when the gesture ends.
Snap constraints and offsets are derived once per axis and cached on the
context's GestureState for the rest of the gesture.
"""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

from snapline.types.geometry import TRBL, Shape

Axis = Literal["x", "y"]
AXES: tuple[Axis, Axis] = ("x", "y")


class AxisConstraints(BaseModel):
    """Lower and upper bound for one axis; None means unbounded."""

    min: float | None = None
    max: float | None = None


class ResizeConstraints(BaseModel):
    """Minimum and maximum bounds a resized shape must respect."""

    min: TRBL | None = None
    max: TRBL | None = None


class Modifiers(BaseModel):
    """Modifier keys held on the originating input event."""

    ctrl: bool = False
    meta: bool = False
    alt: bool = False
    shift: bool = False

    @property
    def is_cmd(self) -> bool:
        # AltGr is reported as ctrl + alt
        if self.alt:
            return False
        return self.ctrl or self.meta


@dataclass
class GestureState:
    """Snapping values cached for the lifetime of one gesture."""

    constraints: dict[str, AxisConstraints] = field(default_factory=dict)
    offset: dict[str, float] = field(default_factory=dict)


@dataclass
class GestureContext:
    """Caller-owned state of a single interaction."""

    create_constraints: TRBL | None = None
    resize_constraints: ResizeConstraints | None = None
    direction: str | None = None
    snap_location: str | None = None
    grid_snapping: GestureState | None = None


@dataclass
class SnapState:
    """Which axes were already snapped while processing one event."""

    x: bool = False
    y: bool = False


@dataclass
class SnapEvent:
    """An interaction event carrying the position being snapped."""

    x: float
    y: float
    dx: float = 0.0
    dy: float = 0.0
    context: GestureContext = field(default_factory=GestureContext)
    shape: Shape | None = None
    modifiers: Modifiers | None = None
    snapped: SnapState | None = None
