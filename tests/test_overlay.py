"""Tests for grid overlay state."""

import pytest

from snapline.overlay import GRID_HEIGHT, GRID_WIDTH, GridOverlay
from snapline.snapping import GridSnapping, GridSnappingConfig
from snapline.types import Point, Rect


@pytest.fixture
def snapping() -> GridSnapping:
    return GridSnapping(config=GridSnappingConfig(active=False), spacing=10)


class TestGridOverlay:
    def test_hidden_initially(self, snapping: GridSnapping) -> None:
        assert not GridOverlay(snapping).is_visible()

    def test_follows_snapping_toggle(self, snapping: GridSnapping) -> None:
        overlay = GridOverlay(snapping, Rect(x=0, y=0, width=1000, height=600))

        snapping.set_active(True)
        assert overlay.is_visible()
        assert overlay.origin == Point(x=-GRID_WIDTH / 2 + 500, y=-GRID_HEIGHT / 2 + 300)

        snapping.toggle_active()
        assert not overlay.is_visible()

    def test_toggle(self, snapping: GridSnapping) -> None:
        overlay = GridOverlay(snapping)
        overlay.toggle()
        assert overlay.is_visible()
        overlay.toggle()
        assert not overlay.is_visible()
        overlay.toggle(False)
        assert not overlay.is_visible()

    def test_origin_moves_in_grid_steps(self, snapping: GridSnapping) -> None:
        overlay = GridOverlay(snapping)
        origin = overlay.center_around_viewbox(Rect(x=13, y=0, width=10, height=10))
        assert origin == Point(x=-49980, y=-49990)
        assert overlay.viewbox == Rect(x=13, y=0, width=10, height=10)

    def test_detach(self, snapping: GridSnapping) -> None:
        overlay = GridOverlay(snapping)
        overlay.detach()
        snapping.set_active(True)
        assert not overlay.is_visible()
