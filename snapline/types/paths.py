"""Canonical path segments and intersection records."""

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict

# A raw path string ("M0,0L10,10") or pre-tokenized [command, *args] entries
PathSpec = str | Sequence[Sequence[str | float]]

# Flat cubic control polygon: x0, y0, c1x, c1y, c2x, c2y, x3, y3
Cubic = tuple[float, float, float, float, float, float, float, float]


class MoveTo(BaseModel):
    """Start a new subpath at an absolute position."""

    model_config = ConfigDict(frozen=True)

    command: Literal["M"] = "M"
    x: float
    y: float

    def as_command(self) -> list[str | float]:
        return ["M", self.x, self.y]


class CubicTo(BaseModel):
    """Absolute cubic bezier from the current point."""

    model_config = ConfigDict(frozen=True)

    command: Literal["C"] = "C"
    c1x: float
    c1y: float
    c2x: float
    c2y: float
    x: float
    y: float

    def as_command(self) -> list[str | float]:
        return ["C", self.c1x, self.c1y, self.c2x, self.c2y, self.x, self.y]


CanonicalSegment = MoveTo | CubicTo
CanonicalPath = list[CanonicalSegment]


class Intersection(BaseModel):
    """A point where two paths cross.

    t1/t2 locate the point on the owning cubic of each path; segment1 and
    segment2 index into each path's canonical segment list.
    """

    x: float
    y: float
    t1: float
    t2: float
    segment1: int = 0
    segment2: int = 0
