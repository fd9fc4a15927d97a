"""Grid snapping for connecting, creating, moving and resizing shapes,
moving bendpoints and moving connection segments.

The host routes every event named in SNAP_EVENTS to GridSnapping.handle_event.
Each event carries a GestureContext that lives as long as the interaction;
snap offsets and constraints are derived from it once per axis and reused
for the remaining events of that gesture.
"""

import logging
import math
import numbers
from collections.abc import Callable, Sequence
from typing import Any, Protocol

from pydantic import BaseModel

from snapline.config import settings
from snapline.grid import quantize, round_half_up
from snapline.types import (
    AXES,
    TRBL,
    AxisConstraints,
    GestureState,
    Point,
    Rect,
    ResizeConstraints,
    Shape,
    SnapEvent,
    SnapState,
)

logger = logging.getLogger(__name__)

# Interaction events that get snapped
SNAP_EVENTS = (
    "create.move",
    "create.end",
    "bendpoint.move.move",
    "bendpoint.move.end",
    "connect.move",
    "connect.end",
    "connectionSegment.move.move",
    "connectionSegment.move.end",
    "resize.move",
    "resize.end",
    "shape.move.move",
    "shape.move.end",
)

ActiveListener = Callable[[bool], None]


class ElementRegistry(Protocol):
    """Lookup of elements already placed in the diagram."""

    def get(self, element_id: str) -> Any | None: ...


class SnapOptions(BaseModel):
    """Offset and bounds applied while snapping one value."""

    offset: float = 0.0
    min: float | None = None
    max: float | None = None


class GridSnappingConfig(BaseModel):
    active: bool | None = None


# =============================================================================
# Snap state helpers
# =============================================================================


def _check_axis(axis: Any) -> None:
    if axis not in AXES:
        raise ValueError(f"axis must be in [x, y], got {axis!r}")


def is_snapped(event: SnapEvent, axis: str | None = None) -> bool:
    """Whether the event was snapped on axis (or on both axes if None)."""
    if axis is not None:
        _check_axis(axis)
    snapped = event.snapped
    if not snapped:
        return False
    if axis is None:
        return snapped.x and snapped.y
    return getattr(snapped, axis)


def set_snapped(event: SnapEvent, axis: str, value: float | bool) -> float:
    """Mark the event as snapped on axis, moving it to value.

    Passing False clears the snapped flag without moving the event.

    Returns:
        The axis value before snapping
    """
    _check_axis(axis)

    if value is not False and (isinstance(value, bool) or not isinstance(value, numbers.Real)):
        raise TypeError(f"value must be a number or False, got {value!r}")

    previous = getattr(event, axis)

    if event.snapped is None:
        event.snapped = SnapState()

    if value is False:
        setattr(event.snapped, axis, False)
    else:
        setattr(event.snapped, axis, True)
        delta = value - previous
        setattr(event, axis, previous + delta)
        delta_field = f"d{axis}"
        setattr(event, delta_field, getattr(event, delta_field) + delta)

    return previous


def snap_to(value: float, values: Sequence[float], tolerance: float = 10) -> float | None:
    """First reference value within tolerance of value, if any."""
    for candidate in values:
        if abs(candidate - value) <= tolerance:
            return candidate
    return None


def top_left(bounds: Rect) -> Point:
    return Point(x=bounds.x, y=bounds.y)


def bottom_right(bounds: Rect) -> Point:
    return Point(x=bounds.x + bounds.width, y=bounds.y + bounds.height)


def mid(bounds: Rect | None, default: Point | None = None) -> Point | None:
    if bounds is None or math.isnan(bounds.x) or math.isnan(bounds.y):
        return default
    return Point(
        x=round_half_up(bounds.x + bounds.width / 2),
        y=round_half_up(bounds.y + bounds.height / 2),
    )


# =============================================================================
# Constraint and offset derivation
# =============================================================================


def _is_north(direction: str | None) -> bool:
    return direction is not None and "n" in direction


def _is_west(direction: str | None) -> bool:
    return direction is not None and "w" in direction


def derive_constraints(
    axis: str,
    direction: str | None = None,
    create_constraints: TRBL | None = None,
    resize_constraints: ResizeConstraints | None = None,
) -> AxisConstraints:
    """Bounds a snapped value must stay within on axis.

    Creation pulls the allowed area directly. Resizing bounds the dragged
    edge so the shape neither shrinks below its min bounds nor grows past
    its max bounds; which edge is dragged follows from the compass direction.
    """
    _check_axis(axis)
    constraints = AxisConstraints()
    horizontal = axis == "x"

    if create_constraints is not None:
        if horizontal:
            constraints.min = create_constraints.left
            constraints.max = create_constraints.right
        else:
            constraints.min = create_constraints.top
            constraints.max = create_constraints.bottom

    resize = resize_constraints or ResizeConstraints()

    if resize.min is not None:
        if horizontal:
            if _is_west(direction):
                constraints.max = resize.min.left
            else:
                constraints.min = resize.min.right
        elif _is_north(direction):
            constraints.max = resize.min.top
        else:
            constraints.min = resize.min.bottom

    if resize.max is not None:
        if horizontal:
            if _is_west(direction):
                constraints.min = resize.max.left
            else:
                constraints.max = resize.max.right
        elif _is_north(direction):
            constraints.min = resize.max.top
        else:
            constraints.max = resize.max.bottom

    return constraints


def derive_offset(
    axis: str,
    shape: Shape | None,
    snap_location: str | None = None,
    is_placed: bool = True,
) -> float:
    """Offset that puts the shape's snap anchor on the grid.

    A shape not yet placed in the diagram (a creation preview) snaps its
    center; a snap location naming a side shifts the anchor to that side.
    """
    _check_axis(axis)
    offset = 0.0

    if shape is None:
        return offset

    horizontal = axis == "x"
    half_extent = (shape.width if horizontal else shape.height) / 2

    if not is_placed:
        offset += getattr(shape, axis) + half_extent

    if not snap_location:
        return offset

    if horizontal:
        if "left" in snap_location:
            offset -= half_extent
        elif "right" in snap_location:
            offset += half_extent
    elif "top" in snap_location:
        offset -= half_extent
    elif "bottom" in snap_location:
        offset += half_extent

    return offset


def _gesture_state(event: SnapEvent) -> GestureState:
    context = event.context
    if context.grid_snapping is None:
        context.grid_snapping = GestureState()
    return context.grid_snapping


def get_snap_constraints(event: SnapEvent, axis: str) -> AxisConstraints:
    """Snap constraints for axis, derived once per gesture."""
    state = _gesture_state(event)
    cached = state.constraints.get(axis)
    if cached is not None:
        return cached

    context = event.context
    constraints = derive_constraints(
        axis,
        direction=context.direction,
        create_constraints=context.create_constraints,
        resize_constraints=context.resize_constraints,
    )
    state.constraints[axis] = constraints
    return constraints


def get_snap_offset(
    event: SnapEvent, axis: str, element_registry: ElementRegistry | None = None
) -> float:
    """Snap offset for axis, derived once per gesture."""
    state = _gesture_state(event)
    cached = state.offset.get(axis)
    if cached is not None:
        return cached

    shape = event.shape
    is_placed = True
    if shape is not None and element_registry is not None:
        is_placed = element_registry.get(shape.id) is not None

    offset = derive_offset(
        axis, shape, snap_location=event.context.snap_location, is_placed=is_placed
    )
    state.offset[axis] = offset
    return offset


# =============================================================================
# Grid snapping
# =============================================================================


class GridSnapping:
    """Snaps interaction events to the grid.

    Example:
        snapping = GridSnapping(element_registry)
        snapping.on_active_changed(lambda active: overlay.toggle(active))
        for event in drag_events:
            snapping.handle_event(event)
    """

    def __init__(
        self,
        element_registry: ElementRegistry | None = None,
        config: GridSnappingConfig | None = None,
        spacing: float | None = None,
    ) -> None:
        self._element_registry = element_registry
        self._spacing = spacing or settings.grid_spacing
        self._listeners: list[ActiveListener] = []

        if config is not None and config.active is not None:
            self.active = config.active
        else:
            self.active = settings.grid_snapping_active

    def get_grid_spacing(self) -> float:
        """Spacing of grid dots, exposed for extensions."""
        return self._spacing

    def snap_value(self, value: float, options: SnapOptions | None = None) -> float:
        """Snap value with optional offset, min and max.

        Bounds are applied in offset space and quantized inwards, so the
        result stays on the grid once the offset is removed again.
        """
        options = options or SnapOptions()
        offset = options.offset or 0.0

        value = quantize(value + offset, self._spacing)

        if options.min is not None:
            value = max(value, quantize(options.min + offset, self._spacing, "ceil"))

        if options.max is not None:
            value = min(value, quantize(options.max + offset, self._spacing, "floor"))

        return value - offset

    def snap_event(self, event: SnapEvent, axis: str, options: SnapOptions | None = None) -> None:
        """Snap the event on axis and mark it as snapped."""
        _check_axis(axis)
        snapped_value = self.snap_value(getattr(event, axis), options)
        set_snapped(event, axis, snapped_value)

    def handle_event(self, event: SnapEvent) -> None:
        """Snap both axes of an interaction event not yet snapped elsewhere."""
        if not self.active:
            return

        if event.modifiers is not None and event.modifiers.is_cmd:
            return

        for axis in AXES:
            offset = get_snap_offset(event, axis, self._element_registry)
            constraints = get_snap_constraints(event, axis)
            options = SnapOptions(offset=offset, min=constraints.min, max=constraints.max)

            if not is_snapped(event, axis):
                self.snap_event(event, axis, options)

    def is_active(self) -> bool:
        return self.active

    def set_active(self, active: bool) -> None:
        self.active = active
        logger.debug(f"Grid snapping {'enabled' if active else 'disabled'}")

        for listener in list(self._listeners):
            listener(active)

    def toggle_active(self) -> None:
        self.set_active(not self.active)

    def on_active_changed(self, listener: ActiveListener) -> Callable[[], None]:
        """Register a listener called synchronously on every set_active.

        Returns:
            A callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
