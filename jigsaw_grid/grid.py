"""Grid geometry: dimensions, piece size and piece identities."""

import math
import numbers
from dataclasses import dataclass
from typing import Iterator, Tuple

from .errors import InvalidGridDimensions, InvalidImageDimensions


def _is_count(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_length(value: object) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(float(value))


@dataclass(frozen=True)
class GridModel:
    """Maps between grid cells and image coordinates.

    Image coordinates are absolute positions in the source image with the
    origin at the top-left corner and y growing downward.
    """

    rows: int
    cols: int
    image_width: float
    image_height: float

    def __post_init__(self) -> None:
        """Validate dimensions before anything is generated."""
        if not _is_count(self.rows) or not _is_count(self.cols) or self.rows <= 0 or self.cols <= 0:
            raise InvalidGridDimensions(f"Grid must have positive rows and columns, got {self.rows}x{self.cols}")
        if (
            not _is_length(self.image_width)
            or not _is_length(self.image_height)
            or self.image_width <= 0
            or self.image_height <= 0
        ):
            raise InvalidImageDimensions(
                f"Image dimensions must be positive, got {self.image_width}x{self.image_height}"
            )

    @property
    def piece_width(self) -> float:
        """Width of each piece cell."""
        return self.image_width / self.cols

    @property
    def piece_height(self) -> float:
        """Height of each piece cell."""
        return self.image_height / self.rows

    @property
    def piece_count(self) -> int:
        return self.rows * self.cols

    def contains(self, row: int, col: int) -> bool:
        """Whether (row, col) is a cell of this grid."""
        return 0 <= row < self.rows and 0 <= col < self.cols

    def piece_id(self, row: int, col: int) -> str:
        """Stable identity of the piece at (row, col)."""
        return f"piece_r{row}_c{col}"

    def origin(self, row: int, col: int) -> Tuple[float, float]:
        """Nominal top-left corner of a piece in image coordinates."""
        return (col * self.piece_width, row * self.piece_height)

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Iterate over all cells in row-major order."""
        for r in range(self.rows):
            for c in range(self.cols):
                yield r, c


def calculate_grid_dimensions(
    image_width: float,
    image_height: float,
    target_pieces: int,
) -> Tuple[int, int]:
    """Calculate grid dimensions that give roughly square pieces.

    Args:
        image_width: Width of the source image.
        image_height: Height of the source image.
        target_pieces: Target number of pieces.

    Returns:
        Tuple of (rows, cols) where rows * cols is close to target_pieces
        and pieces are roughly square.
    """
    if not _is_length(image_width) or not _is_length(image_height) or image_width <= 0 or image_height <= 0:
        raise InvalidImageDimensions(f"Image dimensions must be positive, got {image_width}x{image_height}")
    if not _is_count(target_pieces) or target_pieces <= 0:
        raise InvalidGridDimensions(f"Target piece count must be a positive integer, got {target_pieces}")

    aspect_ratio = image_width / image_height

    # Square pieces need rows/cols = image_height/image_width, with rows * cols = target_pieces
    cols_float = math.sqrt(target_pieces * aspect_ratio)
    rows_float = math.sqrt(target_pieces / aspect_ratio)

    # Try nearby integer combinations and pick the best one
    candidates = []
    for rows in {max(1, int(rows_float)), max(1, int(rows_float) + 1)}:
        for cols in {max(1, int(cols_float)), max(1, int(cols_float) + 1)}:
            piece_ar = (image_width / cols) / (image_height / rows)
            squareness = min(piece_ar, 1 / piece_ar)  # 1.0 = perfect square

            # Score: balance squareness with closeness to target
            count_diff = abs(rows * cols - target_pieces) / target_pieces
            score = squareness - count_diff * 0.5
            candidates.append((score, rows, cols))

    _, best_rows, best_cols = max(candidates)
    return (best_rows, best_cols)
