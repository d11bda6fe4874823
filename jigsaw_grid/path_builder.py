"""Compose per-side edge profiles into one closed piece outline."""

import math
from typing import List

from .edge_profile import generate_edge_profile
from .errors import InconsistentNeighborReference
from .models import (
    SIDES,
    BezierCurve,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    NeighborsData,
    PathCommand,
    PiecePath,
    Point,
    StudConfig,
)


def side_corners(width: float, height: float) -> List[Point]:
    """Starting corner of each side in traversal order (top, right, bottom, left)."""
    return [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]


def build_piece_path(
    width: float,
    height: float,
    neighbors: NeighborsData,
    stud: StudConfig,
) -> PiecePath:
    """Generate the complete closed outline of a puzzle piece.

    The four sides are drawn top -> right -> bottom -> left as a single
    subpath: one move to the top-left corner, no further moves, and an
    explicit close at the end. The result depends only on the arguments.

    Args:
        width: Piece width.
        height: Piece height.
        neighbors: Four-sided neighbor view of the piece.
        stud: Stud shape configuration.

    Returns:
        The piece outline in local coordinates.

    Raises:
        InconsistentNeighborReference: If a side's segment does not end on
            the corner where the next side starts.
    """
    corners = side_corners(width, height)
    commands: List[PathCommand] = [MoveTo(corners[0])]

    for i, side in enumerate(SIDES):
        segment = generate_edge_profile(side, width, height, neighbors.get(side), stud)
        next_corner = corners[(i + 1) % 4]
        end = segment[-1].point
        if not (math.isclose(end[0], next_corner[0], abs_tol=1e-9) and math.isclose(end[1], next_corner[1], abs_tol=1e-9)):
            raise InconsistentNeighborReference(f"{side} edge ends at {end}, expected corner {next_corner}")
        commands.extend(segment)

    commands.append(ClosePath())
    return PiecePath(commands=commands)


def path_to_curves(path: PiecePath) -> List[BezierCurve]:
    """Convert an outline into cubic Bezier curves.

    Straight segments become degenerate curves with control points on the
    line, so consumers that only understand cubics can still draw borders.
    """
    curves: List[BezierCurve] = []
    pen = path.start_point

    for command in path.commands:
        if isinstance(command, MoveTo):
            pen = command.point
        elif isinstance(command, LineTo):
            start, end = pen, command.point
            p1 = (start[0] + (end[0] - start[0]) / 3, start[1] + (end[1] - start[1]) / 3)
            p2 = (start[0] + 2 * (end[0] - start[0]) / 3, start[1] + 2 * (end[1] - start[1]) / 3)
            curves.append(BezierCurve(start, p1, p2, end))
            pen = end
        elif isinstance(command, CubicTo):
            curves.append(BezierCurve(pen, command.control1, command.control2, command.point))
            pen = command.point

    return curves
