"""Edge profiles for the four sides of a puzzle piece.

Every profile is authored once in a canonical "top" frame where the edge runs
from (0, 0) to (across, 0) and outward is negative y. A fixed rotation table
then maps the canonical points onto the requested side of a width x height
piece.
"""

from typing import Callable, Dict, List, Optional

from .models import CubicTo, LineTo, Neighbor, PathCommand, Point, Side, StudConfig

# Canonical frame -> piece frame, for a piece of size (w, h)
ROTATIONS: Dict[Side, Callable[[Point, float, float], Point]] = {
    "top": lambda p, w, h: (p[0], p[1]),  # identity
    "right": lambda p, w, h: (w - p[1], p[0]),  # 90 degrees clockwise
    "bottom": lambda p, w, h: (w - p[0], h - p[1]),  # 180 degrees
    "left": lambda p, w, h: (p[1], h - p[0]),  # 270 degrees clockwise
}


def rotate_point(side: Side, point: Point, width: float, height: float) -> Point:
    """Map a canonical-frame point onto a side of a piece."""
    return ROTATIONS[side](point, width, height)


def across_length(side: Side, width: float, height: float) -> float:
    """Length of a side: piece width for top/bottom, height for left/right."""
    return width if side in ("top", "bottom") else height


def canonical_profile(
    across: float,
    neighbor: Optional[Neighbor],
    stud: StudConfig,
    width: float,
    height: float,
) -> List[PathCommand]:
    """Generate one edge in the canonical frame.

    The pen is assumed to be at (0, 0); the returned commands end exactly at
    (across, 0).

    A border edge (no neighbor) is a single straight line, optionally
    preceded by a diagonal jog of ``corner_jog * depth`` out of the corner and
    back. An interlocking edge runs straight to the stud, draws the stud as
    two cubic curves meeting at the crown, then runs straight to the far end.
    The stud is a rounded trapezoid:

    - each leg leaves the base straight out of the edge, its first control
      point at height ``rise1 * dy`` above the base corner;
    - the second control point sits at height ``rise2 * dy`` on the
      shoulder, pulled from the leg line toward the crown by ``blend`` of
      the half stud width, which rounds the shoulder;
    - the two curves meet at the crown ``(mid, dy)``.

    The stud is mirror-symmetric about the middle of the edge, so the piece
    on the other side, which walks the edge in reverse with the opposite
    polarity, traces exactly the same curve.

    Args:
        across: Length of the edge.
        neighbor: Descriptor for this side, None on the grid border.
        stud: Stud shape configuration.
        width: Piece width (stud size scales with the smaller dimension).
        height: Piece height.

    Returns:
        Line and cubic commands in canonical coordinates.
    """
    depth = stud.depth(width, height)
    commands: List[PathCommand] = []

    if neighbor is None:
        jog = stud.corner_jog * depth
        if jog > 0:
            commands.append(LineTo((-jog, -jog)))
            commands.append(LineTo((0.0, 0.0)))
        commands.append(LineTo((across, 0.0)))
        return commands

    # Outward is negative y; indents recede into the piece
    dy = -depth if neighbor.is_tab else depth
    mid = across / 2
    half = stud.stud_width(width, height) / 2
    # Shoulder offset from the middle: half at blend 0, 0 at blend 1
    shoulder = half * (1 - stud.blend)

    base_left = (mid - half, 0.0)
    base_right = (mid + half, 0.0)
    crown = (mid, dy)

    commands.append(LineTo(base_left))
    # Curve 1: base left up the leg and over the shoulder to the crown
    commands.append(
        CubicTo(
            (base_left[0], stud.rise1 * dy),
            (mid - shoulder, stud.rise2 * dy),
            crown,
        )
    )
    # Curve 2: mirror image of curve 1, crown down to base right
    commands.append(
        CubicTo(
            (mid + shoulder, stud.rise2 * dy),
            (base_right[0], stud.rise1 * dy),
            base_right,
        )
    )
    commands.append(LineTo((across, 0.0)))
    return commands


def _rotate_command(command: PathCommand, side: Side, width: float, height: float) -> PathCommand:
    if isinstance(command, CubicTo):
        return CubicTo(
            rotate_point(side, command.control1, width, height),
            rotate_point(side, command.control2, width, height),
            rotate_point(side, command.point, width, height),
        )
    if isinstance(command, LineTo):
        return LineTo(rotate_point(side, command.point, width, height))
    raise TypeError(f"Edge profiles only contain line and curve commands, got {command!r}")


def generate_edge_profile(
    side: Side,
    width: float,
    height: float,
    neighbor: Optional[Neighbor],
    stud: StudConfig,
) -> List[PathCommand]:
    """Generate the path segment for one side of a piece.

    The segment starts at the side's first corner in clockwise order
    (top: top-left, right: top-right, bottom: bottom-right, left:
    bottom-left) and ends at the next one.

    Args:
        side: Which side of the piece to draw.
        width: Piece width.
        height: Piece height.
        neighbor: Descriptor for this side, None on the grid border.
        stud: Stud shape configuration.

    Returns:
        Line and cubic commands in piece-local coordinates.
    """
    across = across_length(side, width, height)
    profile = canonical_profile(across, neighbor, stud, width, height)
    return [_rotate_command(command, side, width, height) for command in profile]
