"""Two-phase puzzle generation.

Phase 1 assigns tabs and indents to every interior edge and verifies the
resulting neighbor table. Phase 2 derives each piece's outline, bounds and
image transform from that table. Phase 2 never starts before phase 1 has
covered the whole grid; after that, pieces are independent and can be built
in parallel.
"""

import logging
import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional

from .bounds import AffineTransform, calculate_piece_bounds, image_transform
from .config import get_settings
from .errors import InvalidFillBleed
from .grid import GridModel
from .models import NeighborsData, PieceBounds, PiecePath, StudConfig
from .neighbors import CoinSource, NeighborTable, assign_neighbors, make_coin, verify_neighbor_table
from .path_builder import build_piece_path
from .schemas import BoundsRecord, NeighborsRecord, PieceRecord, PuzzleRecord

logger = logging.getLogger(__name__)


def check_fill_bleed(fill_bleed: float) -> float:
    """Validate the drawable-region margin.

    Raises:
        InvalidFillBleed: If the margin is negative or not a finite number.
    """
    if isinstance(fill_bleed, bool) or not isinstance(fill_bleed, numbers.Real) or not math.isfinite(fill_bleed):
        raise InvalidFillBleed(f"fill_bleed must be a finite number, got {fill_bleed!r}")
    if fill_bleed < 0:
        raise InvalidFillBleed(f"fill_bleed must be >= 0, got {fill_bleed}")
    return float(fill_bleed)


@dataclass(frozen=True)
class PieceOutput:
    """Derived geometry of one piece.

    Attributes:
        row: Row index (0-indexed from top).
        col: Column index (0-indexed from left).
        piece_id: Stable identity of the piece.
        neighbors: Four-sided neighbor view.
        path: Closed outline in local coordinates.
        bounds: Smallest local rectangle containing the outline.
        frame: Drawable region, bounds grown by the fill bleed.
        transform: Image-sampling transform for the drawable region.
    """

    row: int
    col: int
    piece_id: str
    neighbors: NeighborsData
    path: PiecePath
    bounds: PieceBounds
    frame: PieceBounds
    transform: AffineTransform

    def to_record(self, grid: GridModel) -> PieceRecord:
        """Convert to the serializable record handed to renderers."""
        x, y = grid.origin(self.row, self.col)
        return PieceRecord(
            id=self.piece_id,
            row=self.row,
            col=self.col,
            neighbors=NeighborsRecord.model_validate(self.neighbors.to_dict()),
            path=self.path.to_svg(),
            bounds=BoundsRecord.model_validate(self.bounds.to_dict()),
            frame=BoundsRecord.model_validate(self.frame.to_dict()),
            transform=self.transform,
            x=x,
            y=y,
        )


def build_piece(
    table: NeighborTable,
    row: int,
    col: int,
    stud: StudConfig,
    fill_bleed: float = 0.0,
) -> PieceOutput:
    """Derive the geometry of a single piece from a complete neighbor table."""
    grid = table.grid
    neighbors = table.get(row, col)
    width, height = grid.piece_width, grid.piece_height

    path = build_piece_path(width, height, neighbors, stud)
    bounds = calculate_piece_bounds(width, height, neighbors, stud)
    frame = bounds.expand(fill_bleed) if fill_bleed else bounds

    logger.debug("Built %s with %d curves", grid.piece_id(row, col), path.curve_count())
    return PieceOutput(
        row=row,
        col=col,
        piece_id=grid.piece_id(row, col),
        neighbors=neighbors,
        path=path,
        bounds=bounds,
        frame=frame,
        transform=image_transform(grid, row, col, frame),
    )


def build_pieces(
    table: NeighborTable,
    stud: StudConfig,
    fill_bleed: float = 0.0,
    workers: int = 1,
) -> List[PieceOutput]:
    """Derive every piece of a grid, in row-major order.

    Args:
        table: Complete, verified neighbor table.
        stud: Stud shape configuration.
        fill_bleed: Margin added around each piece's bounds for its drawable region.
        workers: Number of threads; 1 builds pieces sequentially.

    Returns:
        One PieceOutput per cell, ordered row by row.
    """
    fill_bleed = check_fill_bleed(fill_bleed)
    cells = list(table.grid.cells())
    if workers <= 1 or len(cells) == 1:
        return [build_piece(table, r, c, stud, fill_bleed) for r, c in cells]

    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(lambda cell: build_piece(table, cell[0], cell[1], stud, fill_bleed), cells))


@dataclass
class Puzzle:
    """A generated puzzle: its neighbor table and the pieces derived from it."""

    grid: GridModel
    neighbors: NeighborTable
    stud: StudConfig
    pieces: List[PieceOutput] = field(default_factory=list)
    seed: Optional[int] = None
    fill_bleed: float = 0.0

    def piece(self, row: int, col: int) -> PieceOutput:
        """Get the piece at (row, col)."""
        if not self.grid.contains(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside the {self.grid.rows}x{self.grid.cols} grid")
        return self.pieces[row * self.grid.cols + col]

    def rebuild(
        self,
        stud: Optional[StudConfig] = None,
        fill_bleed: Optional[float] = None,
        workers: int = 1,
    ) -> "Puzzle":
        """Recompute piece geometry from the stored neighbor table.

        The tab assignment is kept as is; only derived values change.
        """
        stud = stud or self.stud
        fill_bleed = check_fill_bleed(self.fill_bleed if fill_bleed is None else fill_bleed)
        return Puzzle(
            grid=self.grid,
            neighbors=self.neighbors,
            stud=stud,
            pieces=build_pieces(self.neighbors, stud, fill_bleed, workers),
            seed=self.seed,
            fill_bleed=fill_bleed,
        )

    def to_record(self) -> PuzzleRecord:
        """Convert to a serializable record."""
        return PuzzleRecord(
            rows=self.grid.rows,
            cols=self.grid.cols,
            image_width=self.grid.image_width,
            image_height=self.grid.image_height,
            piece_width=self.grid.piece_width,
            piece_height=self.grid.piece_height,
            seed=self.seed,
            stud=self.stud.to_dict(),
            pieces=[piece.to_record(self.grid) for piece in self.pieces],
        )


class PuzzleGenerator:
    """Generates interlocking jigsaw pieces for a rectangular image."""

    def __init__(
        self,
        rows: int,
        cols: int,
        image_width: float,
        image_height: float,
        stud: Optional[StudConfig] = None,
        seed: Optional[int] = None,
        coin: Optional[CoinSource] = None,
        workers: Optional[int] = None,
        fill_bleed: Optional[float] = None,
    ):
        """Initialize the generator.

        Dimensions are validated here, before anything is generated.

        Args:
            rows: Number of rows in the puzzle grid.
            cols: Number of columns in the puzzle grid.
            image_width: Width of the source image.
            image_height: Height of the source image.
            stud: Stud shape (defaults from settings).
            seed: Random seed for reproducible tab assignment.
            coin: Explicit random source; takes precedence over seed.
            workers: Threads for per-piece geometry (defaults from settings).
            fill_bleed: Margin around each piece's drawable region (defaults from settings).
        """
        settings = get_settings()
        self.grid = GridModel(rows=rows, cols=cols, image_width=image_width, image_height=image_height)
        self.stud = stud or settings.stud_config()
        self.seed = seed
        self.coin = coin
        self.workers = settings.WORKERS if workers is None else workers
        self.fill_bleed = check_fill_bleed(settings.FILL_BLEED if fill_bleed is None else fill_bleed)
        if self.coin is None:
            # Fail on a bad seed now rather than halfway through generation
            make_coin(seed)

    def assign(self) -> NeighborTable:
        """Phase 1: decide every interior edge and verify the whole table."""
        coin = self.coin if self.coin is not None else make_coin(self.seed)
        table = assign_neighbors(self.grid, coin)
        verify_neighbor_table(table)
        interior, border = table.count_edges()
        logger.debug("Assigned %d interior and %d border edges", interior, border)
        return table

    def generate(self) -> Puzzle:
        """Generate the complete puzzle.

        Returns:
            The puzzle with its neighbor table and every piece's geometry.

        Raises:
            JigsawGridError: On any failure; no partial puzzle is returned.
        """
        table = self.assign()
        pieces = build_pieces(table, self.stud, self.fill_bleed, self.workers)
        logger.info(
            "Generated %dx%d puzzle (%d pieces, %.1fx%.1f each, seed=%s)",
            self.grid.rows,
            self.grid.cols,
            len(pieces),
            self.grid.piece_width,
            self.grid.piece_height,
            self.seed,
        )
        return Puzzle(
            grid=self.grid,
            neighbors=table,
            stud=self.stud,
            pieces=pieces,
            seed=self.seed if self.coin is None else None,
            fill_bleed=self.fill_bleed,
        )


def generate_puzzle(
    rows: int,
    cols: int,
    image_width: float,
    image_height: float,
    seed: Optional[int] = None,
    stud: Optional[StudConfig] = None,
    **kwargs,
) -> Puzzle:
    """Generate a puzzle in one call. See PuzzleGenerator for arguments."""
    return PuzzleGenerator(rows, cols, image_width, image_height, stud=stud, seed=seed, **kwargs).generate()
