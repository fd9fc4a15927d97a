"""Tests for bezier and path intersections."""

import pytest

from snapline.intersections import (
    find_bezier_intersections,
    find_path_intersections,
    intersect_lines,
    intersect_paths,
)
from snapline.path_parsing import PathCache, PathNormalizer


class CountingSolver:
    """Line solver wrapper that records how often it was called."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, *args: float):
        self.calls += 1
        return intersect_lines(*args)


class TestIntersectLines:
    def test_crossing(self) -> None:
        point = intersect_lines(0, 0, 100, 100, 0, 100, 100, 0)
        assert point is not None
        assert (point.x, point.y) == (50, 50)

    def test_parallel(self) -> None:
        assert intersect_lines(0, 0, 100, 0, 0, 10, 100, 10) is None

    def test_collinear(self) -> None:
        assert intersect_lines(0, 0, 10, 0, 5, 0, 20, 0) is None

    def test_disjoint(self) -> None:
        assert intersect_lines(0, 0, 10, 10, 20, 0, 30, 10) is None

    def test_touching_endpoint(self) -> None:
        point = intersect_lines(0, 0, 100, 0, 100, 0, 100, 100)
        assert point is not None
        assert (point.x, point.y) == (100, 0)

    def test_lines_missing_each_other(self) -> None:
        """Bounding boxes overlap but the segments do not cross."""
        assert intersect_lines(0, 0, 10, 10, 6, 4, 10, 0) is None


class TestFindBezierIntersections:
    def test_disjoint_curves_skip_solver(self) -> None:
        """Curves with disjoint bounding boxes never reach the line solver."""
        solver = CountingSolver()
        bez1 = (0, 0, 0, 0, 10, 10, 10, 10)
        bez2 = (100, 100, 100, 100, 110, 110, 110, 110)
        assert find_bezier_intersections(bez1, bez2, line_solver=solver) == []
        assert solver.calls == 0

    def test_count_only(self) -> None:
        bez1 = (0, 0, 0, 0, 100, 100, 100, 100)
        bez2 = (0, 100, 0, 100, 100, 0, 100, 0)
        assert find_bezier_intersections(bez1, bez2, True) == 1

    def test_curve_and_line(self) -> None:
        arch = (0, 0, 0, 100, 100, 100, 100, 0)
        line = (40, -10, 40, -10, 40, 100, 40, 100)
        hits = find_bezier_intersections(arch, line)

        assert len(hits) == 1
        assert hits[0].x == pytest.approx(40, abs=0.01)
        assert hits[0].y == pytest.approx(73.65, abs=0.5)
        assert hits[0].t1 == pytest.approx(0.433, abs=0.02)
        assert hits[0].t2 == pytest.approx(0.76, abs=0.01)

    def test_curve_crossing_twice(self) -> None:
        arch = (0, 0, 0, 100, 100, 100, 100, 0)
        line = (-10, 30, -10, 30, 110, 30, 110, 30)
        hits = find_bezier_intersections(arch, line)

        assert len(hits) == 2
        assert all(hit.y == pytest.approx(30, abs=0.01) for hit in hits)


class TestFindPathIntersections:
    """Tests for find_path_intersections()."""

    def test_crossing_lines(self) -> None:
        hits = find_path_intersections("M0,0L100,100", [["M", 0, 100], ["L", 100, 0]])

        assert len(hits) == 1
        hit = hits[0]
        assert (hit.x, hit.y) == (50, 50)
        assert hit.t1 == pytest.approx(0.5)
        assert hit.t2 == pytest.approx(0.5)
        assert (hit.segment1, hit.segment2) == (1, 1)

    def test_symmetric(self) -> None:
        """Swapping the paths swaps t and segment values."""
        path1 = "M0,0L100,0L100,100"
        path2 = "M50,-10L50,10M90,50L110,50"
        forward = find_path_intersections(path1, path2)
        backward = find_path_intersections(path2, path1)

        assert len(forward) == len(backward) == 2
        forward_keys = {(h.x, h.y, h.t1, h.t2, h.segment1, h.segment2) for h in forward}
        backward_keys = {(h.x, h.y, h.t2, h.t1, h.segment2, h.segment1) for h in backward}
        assert forward_keys == backward_keys

    def test_symmetric_curves(self) -> None:
        arch = "M0,0 C0,100 100,100 100,0"
        wave = "M0,60 C30,-20 70,140 100,40"
        forward = sorted(find_path_intersections(arch, wave), key=lambda h: h.x)
        backward = sorted(find_path_intersections(wave, arch), key=lambda h: h.x)

        assert len(forward) >= 2
        assert len(forward) == len(backward)
        for hit, swapped in zip(forward, backward):
            assert (swapped.x, swapped.y) == pytest.approx((hit.x, hit.y), abs=1e-6)
            assert swapped.t1 == pytest.approx(hit.t2, abs=1e-6)
            assert swapped.t2 == pytest.approx(hit.t1, abs=1e-6)
            assert (swapped.segment1, swapped.segment2) == (hit.segment2, hit.segment1)

    def test_segment_indices_count_moves(self) -> None:
        hits = find_path_intersections("M0,0L100,0L100,100", "M50,-10L50,10M90,50L110,50")

        assert [(h.x, h.y, h.segment1, h.segment2) for h in hits] == [
            (50, 0, 1, 1),
            (100, 50, 2, 3),
        ]

    def test_count_only(self) -> None:
        assert find_path_intersections("M0,0L100,100", "M0,100L100,0", True) == 1

    def test_move_only_path(self) -> None:
        assert find_path_intersections("M10,10", "M0,0L100,100") == []
        assert find_path_intersections("M10,10", "M0,0L100,100", True) == 0

    def test_empty_path(self) -> None:
        assert find_path_intersections("", "M0,0L100,100") == []

    def test_closed_path(self) -> None:
        square = "M0,0L100,0L100,100L0,100Z"
        hits = find_path_intersections(square, "M-50,50L150,50")
        assert sorted((h.x, h.y) for h in hits) == [(0, 50), (100, 50)]

    def test_custom_normalizer_and_solver(self) -> None:
        cache = PathCache(capacity=10)
        solver = CountingSolver()
        hits = find_path_intersections(
            "M0,0L100,100",
            "M0,100L100,0",
            normalizer=PathNormalizer(cache=cache),
            line_solver=solver,
        )

        assert len(hits) == 1
        assert solver.calls == 1
        assert len(cache) == 6

    def test_alias(self) -> None:
        assert intersect_paths is find_path_intersections
