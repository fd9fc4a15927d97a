"""Grid overlay visibility and placement.

Tracks whether the dotted grid is shown and where its backing pattern
rectangle sits so it stays centered around the visible viewbox. Drawing
the pattern is left to the host renderer.
"""

from snapline.grid import quantize
from snapline.layout import get_mid
from snapline.snapping import GridSnapping
from snapline.types import Point, Rect

GRID_WIDTH = 100000
GRID_HEIGHT = 100000


class GridOverlay:
    """Grid pattern state following a GridSnapping toggle."""

    def __init__(self, snapping: GridSnapping, viewbox: Rect | None = None) -> None:
        self._spacing = snapping.get_grid_spacing()
        self._visible = False
        self.viewbox = viewbox or Rect(x=0, y=0, width=0, height=0)
        self.origin = Point(x=-(GRID_WIDTH / 2), y=-(GRID_HEIGHT / 2))
        self._unsubscribe = snapping.on_active_changed(self._on_active_changed)

    def _on_active_changed(self, active: bool) -> None:
        self.toggle(active)
        self.center_around_viewbox()

    def is_visible(self) -> bool:
        return self._visible

    def toggle(self, visible: bool | None = None) -> None:
        """Toggle grid visibility, or force it to visible."""
        if visible is None:
            visible = not self._visible
        self._visible = visible

    def center_around_viewbox(self, viewbox: Rect | None = None) -> Point:
        """Move the pattern rectangle so the grid covers viewbox.

        The pattern moves in whole grid steps so dots never shift.
        """
        if viewbox is not None:
            self.viewbox = viewbox

        center = get_mid(self.viewbox)
        self.origin = Point(
            x=-(GRID_WIDTH / 2) + quantize(center.x, self._spacing),
            y=-(GRID_HEIGHT / 2) + quantize(center.y, self._spacing),
        )
        return self.origin

    def detach(self) -> None:
        """Stop following the snapping toggle."""
        self._unsubscribe()
