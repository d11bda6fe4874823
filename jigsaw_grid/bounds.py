"""Bounding rectangles and image-sampling transforms for pieces."""

from typing import Tuple

from .grid import GridModel
from .models import NeighborsData, PieceBounds, StudConfig

# 2x3 affine matrix ((a, b, tx), (c, d, ty))
AffineTransform = Tuple[Tuple[float, float, float], Tuple[float, float, float]]


def calculate_piece_bounds(
    width: float,
    height: float,
    neighbors: NeighborsData,
    stud: StudConfig,
) -> PieceBounds:
    """Calculate the smallest local rectangle containing a piece outline.

    A side is extended by the stud depth only where that side is a tab.
    Indents and border edges stay within the nominal cell.

    Args:
        width: Piece width.
        height: Piece height.
        neighbors: Four-sided neighbor view of the piece.
        stud: Stud shape configuration.

    Returns:
        PieceBounds with origin at the piece's nominal top-left corner.
    """
    depth = stud.depth(width, height)
    return PieceBounds(
        min_x=-depth if neighbors.is_tab("left") else 0.0,
        max_x=width + (depth if neighbors.is_tab("right") else 0.0),
        min_y=-depth if neighbors.is_tab("top") else 0.0,
        max_y=height + (depth if neighbors.is_tab("bottom") else 0.0),
    )


def image_transform(grid: GridModel, row: int, col: int, bounds: PieceBounds) -> AffineTransform:
    """Affine transform that samples a piece's texture from the full image.

    The transform maps the piece's drawable region, normalized to the unit
    square, into normalized source image coordinates. Scale covers the
    bounds, and the translation moves the sample window to the piece's grid
    position shifted by min_x/min_y, keeping the texture registered with
    the composite image when tabs extend past the nominal cell.
    """
    origin_x, origin_y = grid.origin(row, col)
    return (
        (bounds.width / grid.image_width, 0.0, (origin_x + bounds.min_x) / grid.image_width),
        (0.0, bounds.height / grid.image_height, (origin_y + bounds.min_y) / grid.image_height),
    )
