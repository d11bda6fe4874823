"""Tab/indent assignment for every shared edge of a puzzle grid.

Each interior edge is decided once and shared between the two pieces it
separates. Cells then look their four sides up in the edge grid, so the
per-cell pass does not depend on traversal order.
"""

import logging
import numbers
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Literal, Optional, Protocol, Tuple

from .errors import InconsistentNeighborReference, RandomSourceError
from .grid import GridModel
from .models import SIDES, Neighbor, NeighborsData, Side

logger = logging.getLogger(__name__)

# Cell offset (row, col) of the neighbor across each side
SIDE_OFFSETS: Dict[Side, Tuple[int, int]] = {
    "top": (-1, 0),
    "right": (0, 1),
    "bottom": (1, 0),
    "left": (0, -1),
}

OPPOSITE_SIDE: Dict[Side, Side] = {
    "top": "bottom",
    "right": "left",
    "bottom": "top",
    "left": "right",
}


class CoinSource(Protocol):
    """Random boolean source consumed once per interior edge."""

    def flip(self) -> bool:
        """Return the next random boolean."""
        ...


class SeededCoin:
    """Fair coin backed by a private ``random.Random`` instance."""

    def __init__(self, seed: Optional[int] = None):
        """Initialize the coin.

        Args:
            seed: Seed for reproducible sequences. None draws from OS entropy.
        """
        self.seed = seed
        self._rng = random.Random(seed)

    def flip(self) -> bool:
        return self._rng.random() < 0.5


def make_coin(seed: Optional[int] = None) -> SeededCoin:
    """Create a seeded coin, rejecting seeds that cannot be reproduced.

    Raises:
        RandomSourceError: If the seed is not an integer or None.
    """
    if seed is not None and (not isinstance(seed, numbers.Integral) or isinstance(seed, bool)):
        raise RandomSourceError(f"Seed must be an integer or None, got {seed!r}")
    return SeededCoin(None if seed is None else int(seed))


def _draw(coin: CoinSource) -> bool:
    """Flip the coin once, surfacing any failure of the source."""
    try:
        value = coin.flip()
    except Exception as exc:
        raise RandomSourceError(f"Random source failed: {exc}") from exc
    if not isinstance(value, bool):
        raise RandomSourceError(f"Random source returned {value!r}, expected a bool")
    return value


@dataclass(frozen=True)
class Edge:
    """A single interior edge and its tab decision.

    Attributes:
        orientation: "horizontal" for edges between vertically adjacent
            pieces, "vertical" for edges between horizontally adjacent ones.
        row: Row of the piece below (horizontal) or to the right (vertical).
        col: Column of that piece.
        is_tab: Tab state seen from that piece's top/left side. The piece on
            the other side sees the opposite.
    """

    orientation: Literal["horizontal", "vertical"]
    row: int
    col: int
    is_tab: bool


@dataclass
class EdgeGrid:
    """Grid of shared edges for a puzzle.

    The grid stores edges in two 2D arrays:
    - horizontal_edges: (rows+1) x cols - edges between vertically adjacent pieces
    - vertical_edges: rows x (cols+1) - edges between horizontally adjacent pieces

    Border entries (top row, bottom row, left col, right col) are None.
    """

    rows: int
    cols: int
    horizontal_edges: List[List[Optional[Edge]]]  # [row][col] - (rows+1) x cols
    vertical_edges: List[List[Optional[Edge]]]  # [row][col] - rows x (cols+1)

    def interior_edges(self) -> Iterator[Edge]:
        """Iterate over interior edges in the order they were decided."""
        for edge_row in self.horizontal_edges + self.vertical_edges:
            for edge in edge_row:
                if edge is not None:
                    yield edge

    def edge_for_side(self, row: int, col: int, side: Side) -> Optional[Edge]:
        """Look up the edge on one side of a piece (None on the border)."""
        if side == "top":
            return self.horizontal_edges[row][col]
        if side == "bottom":
            return self.horizontal_edges[row + 1][col]
        if side == "left":
            return self.vertical_edges[row][col]
        return self.vertical_edges[row][col + 1]


def is_tab_for_side(edge: Edge, side: Side) -> bool:
    """Get the tab state of an edge from a piece's perspective.

    An edge is shared between two adjacent pieces, but they see opposite states:
    - For "top" and "left" sides: the stored state applies directly
    - For "bottom" and "right" sides: the state is inverted
    """
    if side in ("top", "left"):
        return edge.is_tab
    return not edge.is_tab


def generate_edge_grid(grid: GridModel, coin: CoinSource) -> EdgeGrid:
    """Decide every interior edge of a puzzle grid.

    Args:
        grid: The grid to cover.
        coin: Random source, flipped exactly once per interior edge.

    Returns:
        An EdgeGrid containing all horizontal and vertical edges.
    """
    rows, cols = grid.rows, grid.cols

    # horizontal_edges[r][c] is the edge at the top of piece (r, c)
    # r=0 is the top border, r=rows is the bottom border
    horizontal_edges: List[List[Optional[Edge]]] = []
    for r in range(rows + 1):
        row_edges: List[Optional[Edge]] = []
        for c in range(cols):
            if r == 0 or r == rows:
                row_edges.append(None)
            else:
                row_edges.append(Edge("horizontal", r, c, _draw(coin)))
        horizontal_edges.append(row_edges)

    # vertical_edges[r][c] is the edge at the left of piece (r, c)
    # c=0 is the left border, c=cols is the right border
    vertical_edges: List[List[Optional[Edge]]] = []
    for r in range(rows):
        row_edges = []
        for c in range(cols + 1):
            if c == 0 or c == cols:
                row_edges.append(None)
            else:
                row_edges.append(Edge("vertical", r, c, _draw(coin)))
        vertical_edges.append(row_edges)

    edge_grid = EdgeGrid(rows=rows, cols=cols, horizontal_edges=horizontal_edges, vertical_edges=vertical_edges)
    logger.debug("Decided %d interior edges for a %dx%d grid", sum(1 for _ in edge_grid.interior_edges()), rows, cols)
    return edge_grid


def neighbors_for_cell(grid: GridModel, edge_grid: EdgeGrid, row: int, col: int) -> NeighborsData:
    """Build the four-sided neighbor view of one piece from the edge grid."""
    sides: Dict[str, Neighbor] = {}
    for side in SIDES:
        edge = edge_grid.edge_for_side(row, col, side)
        if edge is None:
            continue
        d_row, d_col = SIDE_OFFSETS[side]
        sides[side] = Neighbor(
            neighbor_id=grid.piece_id(row + d_row, col + d_col),
            is_tab=is_tab_for_side(edge, side),
        )
    return NeighborsData(**sides)


@dataclass(frozen=True)
class NeighborTable:
    """Neighbor views of every piece of a grid, indexed [row][col].

    The table is the durable identity of a puzzle's solution: paths and
    bounds can be rebuilt from it at any time.
    """

    grid: GridModel
    cells: Tuple[Tuple[NeighborsData, ...], ...]

    def get(self, row: int, col: int) -> NeighborsData:
        """Neighbor view of the piece at (row, col)."""
        if not self.grid.contains(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside the {self.grid.rows}x{self.grid.cols} grid")
        return self.cells[row][col]

    def __iter__(self) -> Iterator[Tuple[int, int, NeighborsData]]:
        for r, c in self.grid.cells():
            yield r, c, self.cells[r][c]

    def count_edges(self) -> Tuple[int, int]:
        """Count (interior, border) edges.

        Every interior edge is seen by two pieces; every border side by one.
        """
        described = sum(len(list(data.items())) for _, _, data in self)
        border = 4 * self.grid.piece_count - described
        return described // 2, border

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        """Serialize as {piece_id: {side: {neighborId, isTab}}}."""
        return {self.grid.piece_id(r, c): data.to_dict() for r, c, data in self}

    @classmethod
    def from_dict(cls, grid: GridModel, data: Dict[str, Dict[str, Dict[str, Any]]]) -> "NeighborTable":
        """Restore a table saved with to_dict and check it against the grid."""
        cells = tuple(
            tuple(NeighborsData.from_dict(data.get(grid.piece_id(r, c), {})) for c in range(grid.cols))
            for r in range(grid.rows)
        )
        table = cls(grid=grid, cells=cells)
        verify_neighbor_table(table)
        return table


def assign_neighbors(grid: GridModel, coin: CoinSource) -> NeighborTable:
    """Assign tabs and indents to a whole grid.

    Args:
        grid: The grid to cover.
        coin: Random source, flipped exactly once per interior edge.

    Returns:
        The neighbor table for every cell.
    """
    edge_grid = generate_edge_grid(grid, coin)
    cells = tuple(
        tuple(neighbors_for_cell(grid, edge_grid, r, c) for c in range(grid.cols)) for r in range(grid.rows)
    )
    return NeighborTable(grid=grid, cells=cells)


def verify_neighbor_table(table: NeighborTable) -> None:
    """Check every descriptor of a table against the interlocking invariants.

    Raises:
        InconsistentNeighborReference: If a descriptor sits on a border side,
            names the wrong piece, or disagrees with its counterpart.
    """
    grid = table.grid
    if len(table.cells) != grid.rows or any(len(row) != grid.cols for row in table.cells):
        raise InconsistentNeighborReference(f"Neighbor table does not cover the {grid.rows}x{grid.cols} grid")

    for r, c, data in table:
        for side in SIDES:
            neighbor = data.get(side)
            d_row, d_col = SIDE_OFFSETS[side]
            n_row, n_col = r + d_row, c + d_col

            if not grid.contains(n_row, n_col):
                if neighbor is not None:
                    raise InconsistentNeighborReference(
                        f"{grid.piece_id(r, c)} has a {side} neighbor {neighbor.neighbor_id!r} outside the grid"
                    )
                continue

            if neighbor is None:
                raise InconsistentNeighborReference(f"{grid.piece_id(r, c)} is missing its {side} neighbor")
            if neighbor.neighbor_id != grid.piece_id(n_row, n_col):
                raise InconsistentNeighborReference(
                    f"{grid.piece_id(r, c)} {side} neighbor is {neighbor.neighbor_id!r}, "
                    f"expected {grid.piece_id(n_row, n_col)!r}"
                )

            counterpart = table.cells[n_row][n_col].get(OPPOSITE_SIDE[side])
            if counterpart is None or counterpart.is_tab == neighbor.is_tab:
                raise InconsistentNeighborReference(
                    f"Edge between {grid.piece_id(r, c)} and {neighbor.neighbor_id} is not complementary"
                )
