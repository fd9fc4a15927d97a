"""Pure numeric routines for cubic bezier curves.

Curves are passed as flat 8-tuples (x0, y0, c1x, c1y, c2x, c2y, x3, y3).
No side effects or I/O.
"""

import math

from snapline.types import Cubic, Point, Rect, clamp_value

# Gauss-Legendre abscissae and weights (n=12) for arc length quadrature
_T_VALUES = (
    -0.1252, 0.1252, -0.3678, 0.3678, -0.5873, 0.5873,
    -0.7699, 0.7699, -0.9041, 0.9041, -0.9816, 0.9816,
)  # fmt: skip
_C_VALUES = (
    0.2491, 0.2491, 0.2335, 0.2335, 0.2032, 0.2032,
    0.1601, 0.1601, 0.1069, 0.1069, 0.0472, 0.0472,
)  # fmt: skip

# No single bezier may approximate more than 120 degrees of arc
_MAX_ARC_SPAN = math.pi * 120 / 180


def fix_error(number: float) -> float:
    """Round away floating point noise below 1e-11."""
    return round(number * 100000000000) / 100000000000


def point_at(cubic: Cubic, t: float) -> Point:
    """Evaluate a cubic bezier at parameter t."""
    p1x, p1y, c1x, c1y, c2x, c2y, p2x, p2y = cubic
    t1 = 1 - t
    t13 = t1**3
    t12 = t1**2
    t2 = t * t
    t3 = t2 * t
    x = t13 * p1x + t12 * 3 * t * c1x + t1 * 3 * t2 * c2x + t3 * p2x
    y = t13 * p1y + t12 * 3 * t * c1y + t1 * 3 * t2 * c2y + t3 * p2y
    return Point(x=fix_error(x), y=fix_error(y))


def _derivative(t: float, p1: float, p2: float, p3: float, p4: float) -> float:
    t1 = -3 * p1 + 9 * p2 - 9 * p3 + 3 * p4
    t2 = t * t1 + 6 * p1 - 12 * p2 + 6 * p3
    return t * t2 - 3 * p1 + 3 * p2


def arc_length(cubic: Cubic, z: float = 1.0) -> float:
    """Length of the curve from t=0 to t=z, z clamped to [0, 1]."""
    x1, y1, x2, y2, x3, y3, x4, y4 = cubic
    z = clamp_value(z, 0.0, 1.0)
    z2 = z / 2
    total = 0.0
    for t_value, c_value in zip(_T_VALUES, _C_VALUES, strict=True):
        ct = z2 * t_value + z2
        xbase = _derivative(ct, x1, x2, x3, x4)
        ybase = _derivative(ct, y1, y2, y3, y4)
        total += c_value * math.sqrt(xbase * xbase + ybase * ybase)
    return z2 * total


def bounding_box(cubic: Cubic) -> Rect:
    """Tight bounding box of a cubic bezier.

    Extremes are found at the roots of the derivative on each axis. A near
    zero leading coefficient degrades to the linear root; a flat derivative
    contributes no interior extremes.
    """
    x0, y0, x1, y1, x2, y2, x3, y3 = cubic
    tvalues: list[float] = []

    for p0, p1, p2, p3 in ((x0, x1, x2, x3), (y0, y1, y2, y3)):
        b = 6 * p0 - 12 * p1 + 6 * p2
        a = -3 * p0 + 9 * p1 - 9 * p2 + 3 * p3
        c = 3 * p1 - 3 * p0

        if abs(a) < 1e-12:
            if abs(b) < 1e-12:
                continue
            t = -c / b
            if 0 < t < 1:
                tvalues.append(t)
            continue

        b2ac = b * b - 4 * c * a
        if b2ac < 0:
            continue
        sqrtb2ac = math.sqrt(b2ac)

        for t in ((-b + sqrtb2ac) / (2 * a), (-b - sqrtb2ac) / (2 * a)):
            if 0 < t < 1:
                tvalues.append(t)

    xs = [x0, x3]
    ys = [y0, y3]
    for t in tvalues:
        mt = 1 - t
        xs.append(mt * mt * mt * x0 + 3 * mt * mt * t * x1 + 3 * mt * t * t * x2 + t * t * t * x3)
        ys.append(mt * mt * mt * y0 + 3 * mt * mt * t * y1 + 3 * mt * t * t * y2 + t * t * t * y3)

    min_x, min_y = min(xs), min(ys)
    return Rect(x=min_x, y=min_y, width=max(xs) - min_x, height=max(ys) - min_y)


def is_straight(cubic: Cubic) -> bool:
    """True if both control points sit on their adjacent endpoints."""
    x0, y0, c1x, c1y, c2x, c2y, x3, y3 = cubic
    return x0 == c1x and y0 == c1y and c2x == x3 and c2y == y3


def point_in_bbox(bbox: Rect, x: float, y: float) -> bool:
    """Check whether (x, y) lies inside or on the border of bbox."""
    min_x, max_x = sorted((bbox.x, bbox.x2))
    min_y, max_y = sorted((bbox.y, bbox.y2))
    return min_x <= x <= max_x and min_y <= y <= max_y


def bboxes_intersect(bbox1: Rect, bbox2: Rect) -> bool:
    """Check whether two boxes touch or overlap."""
    if (
        point_in_bbox(bbox2, bbox1.x, bbox1.y)
        or point_in_bbox(bbox2, bbox1.x2, bbox1.y)
        or point_in_bbox(bbox2, bbox1.x, bbox1.y2)
        or point_in_bbox(bbox2, bbox1.x2, bbox1.y2)
        or point_in_bbox(bbox1, bbox2.x, bbox2.y)
        or point_in_bbox(bbox1, bbox2.x2, bbox2.y)
        or point_in_bbox(bbox1, bbox2.x, bbox2.y2)
        or point_in_bbox(bbox1, bbox2.x2, bbox2.y2)
    ):
        return True

    # Crossing boxes have no corner inside each other
    overlap_x = bbox2.x < bbox1.x < bbox2.x2 or bbox1.x < bbox2.x < bbox1.x2
    overlap_y = bbox2.y < bbox1.y < bbox2.y2 or bbox1.y < bbox2.y < bbox1.y2
    return overlap_x and overlap_y


def line_to_curve(x1: float, y1: float, x2: float, y2: float) -> tuple[float, ...]:
    """Express a straight line as cubic control points (c1, c2, end)."""
    return (x1, y1, x2, y2, x2, y2)


def quadratic_to_curve(
    x1: float, y1: float, ax: float, ay: float, x2: float, y2: float
) -> tuple[float, ...]:
    """Raise a quadratic bezier to cubic control points (c1, c2, end)."""
    _13 = 1 / 3
    _23 = 2 / 3
    return (
        _13 * x1 + _23 * ax,
        _13 * y1 + _23 * ay,
        _13 * x2 + _23 * ax,
        _13 * y2 + _23 * ay,
        x2,
        y2,
    )


def _rotate(x: float, y: float, rad: float) -> tuple[float, float]:
    return (
        x * math.cos(rad) - y * math.sin(rad),
        x * math.sin(rad) + y * math.cos(rad),
    )


def _unit_asin(value: float) -> float:
    return math.asin(clamp_value(round(value, 9), -1.0, 1.0))


def arc_to_curve(
    x1: float,
    y1: float,
    rx: float,
    ry: float,
    angle: float,
    large_arc_flag: float,
    sweep_flag: float,
    x2: float,
    y2: float,
    recursive: tuple[float, float, float, float] | None = None,
) -> list[float]:
    """Approximate an elliptical arc with cubic beziers.

    Follows the endpoint-to-center conversion of the SVG implementation notes.
    Returns a flat list of control points, six values (c1, c2, end) per
    cubic. Arcs spanning more than 120 degrees are split recursively.

    A zero radius or coincident endpoints degrade to a straight line.
    """
    rad = math.radians(angle or 0)
    large_arc = bool(large_arc_flag)
    sweep = bool(sweep_flag)

    if recursive is None:
        if not rx or not ry or (x1 == x2 and y1 == y2):
            return list(line_to_curve(x1, y1, x2, y2))

        rx, ry = abs(rx), abs(ry)
        x1, y1 = _rotate(x1, y1, -rad)
        x2, y2 = _rotate(x2, y2, -rad)

        x = (x1 - x2) / 2
        y = (y1 - y2) / 2

        # Radii too small to reach the endpoint are scaled up
        h = (x * x) / (rx * rx) + (y * y) / (ry * ry)
        if h > 1:
            h = math.sqrt(h)
            rx = h * rx
            ry = h * ry

        rx2 = rx * rx
        ry2 = ry * ry
        sign = -1 if large_arc == sweep else 1
        k = sign * math.sqrt(
            abs((rx2 * ry2 - rx2 * y * y - ry2 * x * x) / (rx2 * y * y + ry2 * x * x))
        )
        cx = k * rx * y / ry + (x1 + x2) / 2
        cy = k * -ry * x / rx + (y1 + y2) / 2
        f1 = _unit_asin((y1 - cy) / ry)
        f2 = _unit_asin((y2 - cy) / ry)

        f1 = math.pi - f1 if x1 < cx else f1
        f2 = math.pi - f2 if x2 < cx else f2
        if f1 < 0:
            f1 = math.pi * 2 + f1
        if f2 < 0:
            f2 = math.pi * 2 + f2

        if sweep and f1 > f2:
            f1 = f1 - math.pi * 2
        if not sweep and f2 > f1:
            f2 = f2 - math.pi * 2
    else:
        f1, f2, cx, cy = recursive

    rest: list[float] = []
    if abs(f2 - f1) > _MAX_ARC_SPAN:
        f2_old, x2_old, y2_old = f2, x2, y2
        f2 = f1 + _MAX_ARC_SPAN * (1 if sweep and f2 > f1 else -1)
        x2 = cx + rx * math.cos(f2)
        y2 = cy + ry * math.sin(f2)
        rest = arc_to_curve(
            x2, y2, rx, ry, angle, 0, sweep_flag, x2_old, y2_old, (f2, f2_old, cx, cy)
        )

    df = f2 - f1
    c1 = math.cos(f1)
    s1 = math.sin(f1)
    c2 = math.cos(f2)
    s2 = math.sin(f2)
    t = math.tan(df / 4)
    hx = 4 / 3 * rx * t
    hy = 4 / 3 * ry * t

    # First handle is mirrored through the start point
    m2 = (2 * x1 - (x1 + hx * s1), 2 * y1 - (y1 - hy * c1))
    m3 = (x2 + hx * s2, y2 - hy * c2)
    points = [*m2, *m3, x2, y2, *rest]

    if recursive is not None:
        return points

    result: list[float] = []
    for i in range(0, len(points), 2):
        result.extend(_rotate(points[i], points[i + 1], rad))
    return result
