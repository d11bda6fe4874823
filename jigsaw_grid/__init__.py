"""Jigsaw grid - interlocking puzzle piece geometry.

This package assigns tabs and indents to every shared edge of an image grid
and derives, per piece, a closed Bezier outline, its bounding rectangle and
the transform that keeps the piece's texture registered with the source image.
"""

from .bounds import AffineTransform, calculate_piece_bounds, image_transform
from .edge_profile import ROTATIONS, across_length, canonical_profile, generate_edge_profile, rotate_point
from .errors import (
    InconsistentNeighborReference,
    InvalidFillBleed,
    InvalidGridDimensions,
    InvalidImageDimensions,
    InvalidStudConfig,
    JigsawGridError,
    RandomSourceError,
)
from .generator import (
    PieceOutput,
    Puzzle,
    PuzzleGenerator,
    build_piece,
    build_pieces,
    check_fill_bleed,
    generate_puzzle,
)
from .grid import GridModel, calculate_grid_dimensions
from .models import (
    SIDES,
    BezierCurve,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    Neighbor,
    NeighborsData,
    PathCommand,
    PieceBounds,
    PiecePath,
    StudConfig,
)
from .neighbors import (
    CoinSource,
    Edge,
    EdgeGrid,
    NeighborTable,
    SeededCoin,
    assign_neighbors,
    generate_edge_grid,
    is_tab_for_side,
    make_coin,
    verify_neighbor_table,
)
from .path_builder import build_piece_path, path_to_curves

__all__ = [
    # Models
    "SIDES",
    "BezierCurve",
    "StudConfig",
    "Neighbor",
    "NeighborsData",
    "PieceBounds",
    "PathCommand",
    "MoveTo",
    "LineTo",
    "CubicTo",
    "ClosePath",
    "PiecePath",
    # Errors
    "JigsawGridError",
    "InvalidGridDimensions",
    "InvalidImageDimensions",
    "InvalidStudConfig",
    "InvalidFillBleed",
    "InconsistentNeighborReference",
    "RandomSourceError",
    # Grid
    "GridModel",
    "calculate_grid_dimensions",
    # Neighbor assignment
    "CoinSource",
    "SeededCoin",
    "make_coin",
    "Edge",
    "EdgeGrid",
    "NeighborTable",
    "generate_edge_grid",
    "is_tab_for_side",
    "assign_neighbors",
    "verify_neighbor_table",
    # Edge profiles
    "ROTATIONS",
    "rotate_point",
    "across_length",
    "canonical_profile",
    "generate_edge_profile",
    # Paths and bounds
    "build_piece_path",
    "path_to_curves",
    "calculate_piece_bounds",
    "image_transform",
    "AffineTransform",
    # Generation
    "PieceOutput",
    "Puzzle",
    "PuzzleGenerator",
    "build_piece",
    "build_pieces",
    "check_fill_bleed",
    "generate_puzzle",
]
