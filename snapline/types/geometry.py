"""Core geometry types."""

from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """A 2D point."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Rect(BaseModel):
    """An axis-aligned box.

    Width and height may be negative when derived from deltas; consumers
    normalize with min/max instead of rejecting them.
    """

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height


class TRBL(BaseModel):
    """A box described by its top, right, bottom and left edges."""

    model_config = ConfigDict(frozen=True)

    top: float
    right: float
    bottom: float
    left: float


class Shape(BaseModel):
    """Geometry and identity of a diagram shape."""

    id: str
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


class Connection(BaseModel):
    """A connection routed through waypoints."""

    id: str
    waypoints: list[Point] = []


def clamp_value(value: float, low: float, high: float) -> float:
    """Clamp a value to a range [low, high]."""
    return max(low, min(high, value))
