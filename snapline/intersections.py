"""Intersections between bezier curves and whole paths.

Each curve is approximated by a polyline whose resolution follows the
curve length; polyline segments are intersected pairwise and hits are
mapped back to curve parameters.
"""

from collections.abc import Callable
from typing import Literal, overload

from snapline.config import settings
from snapline.curves import (
    arc_length,
    bboxes_intersect,
    bounding_box,
    fix_error,
    is_straight,
    point_at,
)
from snapline.path_parsing import PathNormalizer, default_normalizer
from snapline.types import CanonicalPath, Cubic, CubicTo, Intersection, MoveTo, PathSpec, Point

LineSolver = Callable[[float, float, float, float, float, float, float, float], Point | None]


def _tidy(value: float) -> float:
    return round(value, 2)


def intersect_lines(
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    x3: float,
    y3: float,
    x4: float,
    y4: float,
) -> Point | None:
    """Intersect segment (x1,y1)-(x2,y2) with segment (x3,y3)-(x4,y4).

    Returns None for disjoint, parallel or collinear segments.
    """
    if (
        max(x1, x2) < min(x3, x4)
        or min(x1, x2) > max(x3, x4)
        or max(y1, y2) < min(y3, y4)
        or min(y1, y2) > max(y3, y4)
    ):
        return None

    nx = (x1 * y2 - y1 * x2) * (x3 - x4) - (x1 - x2) * (x3 * y4 - y3 * x4)
    ny = (x1 * y2 - y1 * x2) * (y3 - y4) - (y1 - y2) * (x3 * y4 - y3 * x4)
    denominator = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)

    if not denominator:
        return None

    px = fix_error(nx / denominator)
    py = fix_error(ny / denominator)
    px2 = _tidy(px)
    py2 = _tidy(py)

    # The solved point must lie on both segments, to two decimals
    if (
        px2 < _tidy(min(x1, x2))
        or px2 > _tidy(max(x1, x2))
        or px2 < _tidy(min(x3, x4))
        or px2 > _tidy(max(x3, x4))
        or py2 < _tidy(min(y1, y2))
        or py2 > _tidy(max(y1, y2))
        or py2 < _tidy(min(y3, y4))
        or py2 > _tidy(max(y3, y4))
    ):
        return None

    return Point(x=px, y=py)


def _polyline(cubic: Cubic, step: float) -> list[tuple[float, float, float]]:
    """Sample a curve as (x, y, t) vertices; straight curves need one span."""
    if is_straight(cubic):
        count = 1
    else:
        # Truncated, not rounded
        count = int(arc_length(cubic) / step) or 1

    dots = []
    for i in range(count + 1):
        t = i / count
        point = point_at(cubic, t)
        dots.append((point.x, point.y, t))
    return dots


def _local_t(
    hit: Point, start: tuple[float, float, float], end: tuple[float, float, float]
) -> float:
    # Interpolate along x unless the span is nearly vertical
    if abs(end[0] - start[0]) < 0.01:
        along, lo, hi = hit.y, start[1], end[1]
    else:
        along, lo, hi = hit.x, start[0], end[0]

    if hi == lo:
        return start[2]
    return start[2] + abs((along - lo) / (hi - lo)) * (end[2] - start[2])


@overload
def find_bezier_intersections(
    bez1: Cubic,
    bez2: Cubic,
    count_only: Literal[False] = ...,
    *,
    line_solver: LineSolver = ...,
    step: float | None = ...,
) -> list[Intersection]: ...


@overload
def find_bezier_intersections(
    bez1: Cubic,
    bez2: Cubic,
    count_only: Literal[True],
    *,
    line_solver: LineSolver = ...,
    step: float | None = ...,
) -> int: ...


def find_bezier_intersections(
    bez1: Cubic,
    bez2: Cubic,
    count_only: bool = False,
    *,
    line_solver: LineSolver = intersect_lines,
    step: float | None = None,
) -> list[Intersection] | int:
    """Find (or count) intersections between two cubic beziers.

    Args:
        bez1: First curve control polygon
        bez2: Second curve control polygon
        count_only: Return the number of hits instead of the hits
        line_solver: Segment intersection routine (injectable for testing)
        step: Curve length per polyline segment (defaults to settings)

    Returns:
        Intersections with t1/t2 set (segment indices left at 0), or their count
    """
    if not bboxes_intersect(bounding_box(bez1), bounding_box(bez2)):
        return 0 if count_only else []

    step = step or settings.polyline_step
    dots1 = _polyline(bez1, step)
    dots2 = _polyline(bez2, step)

    seen: set[str] = set()
    found: list[Intersection] = []
    count = 0

    for di, di1 in zip(dots1, dots1[1:]):
        for dj, dj1 in zip(dots2, dots2[1:]):
            hit = line_solver(di[0], di[1], di1[0], di1[1], dj[0], dj[1], dj1[0], dj1[1])
            if hit is None:
                continue

            # Neighbouring polyline spans report shared vertices twice
            key = f"{hit.x:.9f}#{hit.y:.9f}"
            if key in seen:
                continue
            seen.add(key)

            t1 = _local_t(hit, di, di1)
            t2 = _local_t(hit, dj, dj1)

            if 0 <= t1 <= 1 and 0 <= t2 <= 1:
                count += 1
                if not count_only:
                    found.append(Intersection(x=hit.x, y=hit.y, t1=t1, t2=t2))

    return count if count_only else found


def _cubics(path: CanonicalPath) -> list[tuple[int, Cubic]]:
    """Pair each drawing segment index with its full control polygon."""
    cubics: list[tuple[int, Cubic]] = []
    x = y = 0.0
    start_x = start_y = 0.0

    for index, segment in enumerate(path):
        if isinstance(segment, MoveTo):
            x = start_x = segment.x
            y = start_y = segment.y
        elif isinstance(segment, CubicTo):
            cubic = (x, y, segment.c1x, segment.c1y, segment.c2x, segment.c2y, segment.x, segment.y)
            cubics.append((index, cubic))
            x, y = segment.x, segment.y
        else:
            # Anything else closes back to the subpath start
            cubics.append((index, (x, y, x, y, start_x, start_y, start_x, start_y)))
            x, y = start_x, start_y

    return cubics


@overload
def find_path_intersections(
    path1: PathSpec,
    path2: PathSpec,
    count_only: Literal[False] = ...,
    *,
    normalizer: PathNormalizer | None = ...,
    line_solver: LineSolver = ...,
) -> list[Intersection]: ...


@overload
def find_path_intersections(
    path1: PathSpec,
    path2: PathSpec,
    count_only: Literal[True],
    *,
    normalizer: PathNormalizer | None = ...,
    line_solver: LineSolver = ...,
) -> int: ...


def find_path_intersections(
    path1: PathSpec,
    path2: PathSpec,
    count_only: bool = False,
    *,
    normalizer: PathNormalizer | None = None,
    line_solver: LineSolver = intersect_lines,
) -> list[Intersection] | int:
    """Find or count the intersections between two paths.

    Paths may be path strings or lists of path components such as
    [["M", 0, 10], ["L", 20, 0]].

    Each intersection carries its coordinates (x, y), the indices of the
    intersecting segments in each canonical path (segment1, segment2) and
    the relative location on those segments (t1, t2). Results are ordered
    by segment of path1, then segment of path2.

    Example:
        find_path_intersections("M0,0L100,100", [["M", 0, 100], ["L", 100, 0]])
        # [Intersection(x=50, y=50, t1=0.5, t2=0.5, segment1=1, segment2=1)]
    """
    normalizer = normalizer or default_normalizer
    cubics1 = _cubics(normalizer.normalize(path1))
    cubics2 = _cubics(normalizer.normalize(path2))

    total = 0
    results: list[Intersection] = []

    for index1, bez1 in cubics1:
        for index2, bez2 in cubics2:
            if count_only:
                total += find_bezier_intersections(bez1, bez2, True, line_solver=line_solver)
                continue

            for hit in find_bezier_intersections(bez1, bez2, line_solver=line_solver):
                results.append(hit.model_copy(update={"segment1": index1, "segment2": index2}))

    return total if count_only else results


intersect_paths = find_path_intersections
