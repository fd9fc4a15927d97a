"""Layout helpers for shapes, connections and crop points."""

import math
from collections.abc import Sequence

from snapline.config import settings
from snapline.grid import round_half_up
from snapline.intersections import find_path_intersections
from snapline.types import TRBL, Connection, Intersection, PathSpec, Point, Rect

ALIGNED_THRESHOLD = 2


def point_distance(a: Point | None, b: Point | None) -> float:
    """Distance between two points, or -1 if either is missing."""
    if a is None or b is None:
        return -1
    return math.hypot(a.x - b.x, a.y - b.y)


def points_on_line(p: Point | None, q: Point | None, r: Point | None, accuracy: float = 5) -> bool:
    """Check whether r lies on the line through p and q, within accuracy."""
    if p is None or q is None or r is None:
        return False

    dist = point_distance(p, q)
    if not dist:
        return False

    val = (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)
    return abs(val / dist) <= accuracy


def _aligned_on_axis(axis: str, points: Sequence[Point]) -> bool:
    reference = getattr(points[0], axis)
    return all(abs(reference - getattr(point, axis)) <= ALIGNED_THRESHOLD for point in points)


def points_aligned(*points: Point | Sequence[Point]) -> str | bool:
    """Check whether points share an x ('v') or a y ('h') coordinate.

    Returns 'v', 'h' or False.
    """
    flat: list[Point] = []
    for item in points:
        if isinstance(item, Point):
            flat.append(item)
        else:
            flat.extend(item)

    if not flat:
        return False

    for axis, orientation in (("x", "v"), ("y", "h")):
        if _aligned_on_axis(axis, flat):
            return orientation
    return False


def point_in_rect(p: Point, rect: Rect, tolerance: float = 0) -> bool:
    """Check whether p lies strictly inside rect grown by tolerance."""
    return (
        p.x > rect.x - tolerance
        and p.y > rect.y - tolerance
        and p.x < rect.x + rect.width + tolerance
        and p.y < rect.y + rect.height + tolerance
    )


def get_mid_point(p: Point, q: Point) -> Point:
    """Rounded point halfway between p and q."""
    return Point(
        x=round_half_up(p.x + (q.x - p.x) / 2.0),
        y=round_half_up(p.y + (q.y - p.y) / 2.0),
    )


def round_point(point: Point) -> Point:
    return Point(x=round_half_up(point.x), y=round_half_up(point.y))


def round_bounds(bounds: Rect) -> Rect:
    return Rect(
        x=round_half_up(bounds.x),
        y=round_half_up(bounds.y),
        width=round_half_up(bounds.width),
        height=round_half_up(bounds.height),
    )


def as_trbl(bounds: Rect | Point) -> TRBL:
    """Convert bounds (or a point) to a top/right/bottom/left descriptor."""
    width = getattr(bounds, "width", 0) or 0
    height = getattr(bounds, "height", 0) or 0
    return TRBL(
        top=bounds.y,
        right=bounds.x + width,
        bottom=bounds.y + height,
        left=bounds.x,
    )


def as_bounds(trbl: TRBL) -> Rect:
    return Rect(
        x=trbl.left,
        y=trbl.top,
        width=trbl.right - trbl.left,
        height=trbl.bottom - trbl.top,
    )


def get_bounds_mid(bounds: Rect | Point) -> Point:
    width = getattr(bounds, "width", 0) or 0
    height = getattr(bounds, "height", 0) or 0
    return round_point(Point(x=bounds.x + width / 2, y=bounds.y + height / 2))


def get_connection_mid(connection: Connection) -> Point:
    """Point halfway along a connection's waypoint route."""
    waypoints = connection.waypoints
    if not waypoints:
        raise ValueError(f"Connection {connection.id} has no waypoints")
    if len(waypoints) == 1:
        return waypoints[0]

    lengths = [point_distance(a, b) for a, b in zip(waypoints, waypoints[1:])]
    mid_length = sum(lengths) / 2

    start_length = 0.0
    for (start, end), length in zip(zip(waypoints, waypoints[1:]), lengths, strict=True):
        end_length = start_length + length
        if end_length >= mid_length and length:
            progress = (mid_length - start_length) / length
            return Point(
                x=start.x + (end.x - start.x) * progress,
                y=start.y + (end.y - start.y) * progress,
            )
        start_length = end_length

    # Zero-length route
    return waypoints[0]


def get_mid(element: Connection | Rect | Point) -> Point:
    """Mid of a connection route or of a box."""
    if isinstance(element, Connection):
        return get_connection_mid(element)
    return get_bounds_mid(element)


def get_orientation(rect: Rect, reference: Rect, padding: float | Point = 0) -> str:
    """Orientation of rect relative to reference.

    One of 'top', 'top-left', 'left', ..., 'bottom-right' or 'intersect'.
    A padding (number or per-axis point) widens what counts as intersecting.
    """
    if not isinstance(padding, Point):
        padding = Point(x=padding, y=padding)

    rect_trbl = as_trbl(rect)
    reference_trbl = as_trbl(reference)

    top = rect_trbl.bottom + padding.y <= reference_trbl.top
    right = rect_trbl.left - padding.x >= reference_trbl.right
    bottom = rect_trbl.top - padding.y >= reference_trbl.bottom
    left = rect_trbl.right + padding.x <= reference_trbl.left

    vertical = "top" if top else ("bottom" if bottom else None)
    horizontal = "left" if left else ("right" if right else None)

    if horizontal and vertical:
        return f"{vertical}-{horizontal}"
    return horizontal or vertical or "intersect"


def _crop_sort_key(intersection: Intersection) -> str:
    # line segment ASC + position on segment DESC; callers take the first
    # entry to crop the start and the last entry to crop the end
    distance = 100 - (math.floor(intersection.t2 * 100) or 1)
    return f"{intersection.segment2}#{distance:02d}"


def get_element_line_intersection(
    element_path: PathSpec, line_path: PathSpec, crop_start: bool
) -> Point | None:
    """Pick the point where a connection line meets an element outline.

    Args:
        element_path: Outline of the element
        line_path: Route of the connection
        crop_start: Whether the connection start (or its end) is cropped

    Returns:
        The rounded crop point, or None when the line misses the outline
    """
    intersections = find_path_intersections(element_path, line_path)

    if len(intersections) == 1:
        return round_point(Point(x=intersections[0].x, y=intersections[0].y))

    if len(intersections) == 2:
        first, second = intersections
        if point_distance(
            Point(x=first.x, y=first.y), Point(x=second.x, y=second.y)
        ) < settings.crop_merge_distance:
            return round_point(Point(x=first.x, y=first.y))

    if len(intersections) > 1:
        ordered = sorted(intersections, key=_crop_sort_key)
        chosen = ordered[0] if crop_start else ordered[-1]
        return round_point(Point(x=chosen.x, y=chosen.y))

    return None


def get_intersections(a: PathSpec, b: PathSpec) -> list[Intersection]:
    return find_path_intersections(a, b)


def filter_redundant_waypoints(waypoints: Sequence[Point]) -> list[Point]:
    """Drop waypoints that overlap their successor or sit on a straight run."""
    remaining = list(waypoints)
    idx = 0

    while idx < len(remaining):
        point = remaining[idx]
        previous = remaining[idx - 1] if idx > 0 else None
        following = remaining[idx + 1] if idx + 1 < len(remaining) else None

        if point_distance(point, following) == 0 or points_on_line(previous, following, point):
            remaining.pop(idx)
        else:
            idx += 1

    return remaining
