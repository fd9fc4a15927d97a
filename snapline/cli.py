"""CLI for snapline - path geometry and grid snapping from the shell.

Usage:
    snapline normalize "M0,0L100,100"
    snapline intersect "M0,0L100,100" "M0,100L100,0"
    snapline crop "M0,0h100v100h-100z" "M50,50L200,50" --end
    snapline snap 17 --offset 5 --min 0 --max 100
    snapline quantize 17 --mode ceil
    snapline --verbose --log-file logs/snapline.log snap 17
"""

import json
import logging

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from snapline.config import settings
from snapline.grid import SPACING, quantize
from snapline.intersections import find_path_intersections
from snapline.layout import get_element_line_intersection
from snapline.logging_config import configure_from_settings
from snapline.path_parsing import normalize_path, path_to_string
from snapline.snapping import GridSnapping, SnapOptions
from snapline.types import PathSpec

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="snapline",
    help="Path geometry and grid snapping utilities",
    add_completion=False,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
    log_file: str | None = typer.Option(
        None, "--log-file", help="Also write logs to this file (default: SNAPLINE_LOG_FILE)"
    ),
) -> None:
    """Path geometry and grid snapping utilities."""
    configure_from_settings(verbose=verbose, log_file=log_file)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def _read_path(raw: str) -> PathSpec:
    """Accept a path string or a JSON array of [command, *args] segments."""
    if not raw.lstrip().startswith("["):
        return raw

    try:
        segments = json.loads(raw)
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid JSON path segments: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    if not isinstance(segments, list) or not all(isinstance(s, list) for s in segments):
        console.print("[red]JSON path must be a list of [command, *args] segments[/red]")
        raise typer.Exit(1)

    logger.debug(f"Read {len(segments)} JSON path segments")
    return segments


# =============================================================================
# Path Commands
# =============================================================================


@app.command("normalize")
def normalize(
    path: str = typer.Argument(..., help="Path string or JSON segment array"),
) -> None:
    """Print the canonical MoveTo/CubicTo form of a path.

    Examples:
        snapline normalize "M10,10h20"
        snapline normalize '[["M", 0, 0], ["L", 100, 100]]'
    """
    canonical = normalize_path(_read_path(path))
    console.print(path_to_string(canonical), soft_wrap=True)


@app.command("intersect")
def intersect(
    path1: str = typer.Argument(..., help="First path"),
    path2: str = typer.Argument(..., help="Second path"),
    count: bool = typer.Option(False, "--count", "-c", help="Only print the number of hits"),
) -> None:
    """List the points where two paths cross."""
    spec1 = _read_path(path1)
    spec2 = _read_path(path2)

    if count:
        console.print(str(find_path_intersections(spec1, spec2, True)))
        return

    intersections = find_path_intersections(spec1, spec2)
    if not intersections:
        console.print("[yellow]No intersections found[/yellow]")
        return

    table = Table(title="Intersections", box=box.ROUNDED)
    table.add_column("x", style="cyan", justify="right")
    table.add_column("y", style="cyan", justify="right")
    table.add_column("t1", style="green", justify="right")
    table.add_column("t2", style="green", justify="right")
    table.add_column("Segment 1", style="yellow", justify="right")
    table.add_column("Segment 2", style="yellow", justify="right")

    for hit in intersections:
        table.add_row(
            f"{hit.x:g}",
            f"{hit.y:g}",
            f"{hit.t1:.4f}",
            f"{hit.t2:.4f}",
            str(hit.segment1),
            str(hit.segment2),
        )

    console.print(table)


@app.command("crop")
def crop(
    element_path: str = typer.Argument(..., help="Outline of the element"),
    line_path: str = typer.Argument(..., help="Connection route"),
    end: bool = typer.Option(False, "--end", help="Crop the end of the route instead of its start"),
) -> None:
    """Print where a connection route meets an element outline."""
    point = get_element_line_intersection(
        _read_path(element_path), _read_path(line_path), crop_start=not end
    )

    if point is None:
        console.print("[red]Route does not meet the element outline[/red]")
        raise typer.Exit(1)

    console.print(f"{_format_number(point.x)},{_format_number(point.y)}")


# =============================================================================
# Grid Commands
# =============================================================================


@app.command("snap")
def snap(
    value: float = typer.Argument(..., help="Value to snap"),
    offset: float = typer.Option(0.0, "--offset", help="Offset applied before snapping"),
    min_value: float | None = typer.Option(None, "--min", help="Lower bound"),
    max_value: float | None = typer.Option(None, "--max", help="Upper bound"),
    spacing: int = typer.Option(
        settings.grid_spacing, "--spacing", min=1, help="Grid spacing"
    ),
) -> None:
    """Snap a value to the grid, honoring offset and bounds."""
    snapping = GridSnapping(spacing=spacing)
    options = SnapOptions(offset=offset, min=min_value, max=max_value)
    console.print(_format_number(snapping.snap_value(value, options)))


@app.command("quantize")
def quantize_command(
    value: float = typer.Argument(..., help="Value to quantize"),
    quantum: float = typer.Option(SPACING, "--quantum", "-q", help="Step to snap to"),
    mode: str = typer.Option("round", "--mode", "-m", help="round, ceil or floor"),
) -> None:
    """Snap a value to a multiple of quantum."""
    try:
        result = quantize(value, quantum, mode)  # type: ignore[arg-type]
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e

    console.print(_format_number(result))


if __name__ == "__main__":
    app()
