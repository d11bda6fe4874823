"""Data models for interlocking puzzle grids."""

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

import numpy as np

from .errors import InvalidStudConfig

Point = Tuple[float, float]
Side = Literal["top", "right", "bottom", "left"]

# Traversal order of a piece outline (clockwise in image coordinates)
SIDES: Tuple[Side, ...] = ("top", "right", "bottom", "left")


@dataclass
class BezierCurve:
    """A cubic Bezier curve defined by 4 control points."""

    p0: Point  # Start point
    p1: Point  # Control point 1
    p2: Point  # Control point 2
    p3: Point  # End point

    def evaluate(self, t: float) -> Point:
        """Evaluate the curve at parameter t (0 to 1)."""
        t2 = t * t
        t3 = t2 * t
        mt = 1 - t
        mt2 = mt * mt
        mt3 = mt2 * mt

        x = mt3 * self.p0[0] + 3 * mt2 * t * self.p1[0] + 3 * mt * t2 * self.p2[0] + t3 * self.p3[0]
        y = mt3 * self.p0[1] + 3 * mt2 * t * self.p1[1] + 3 * mt * t2 * self.p2[1] + t3 * self.p3[1]
        return (x, y)

    def get_points(self, num_points: int = 50) -> np.ndarray:
        """Generate points along the curve."""
        t_values = np.linspace(0, 1, num_points)
        points = [self.evaluate(t) for t in t_values]
        return np.array(points)


@dataclass(frozen=True)
class StudConfig:
    """Shape of the tab/indent feature shared by every interlocking edge.

    All values are dimensionless. Depth and stud width scale with the smaller
    piece dimension so non-square pieces keep proportional studs.
    """

    # Width of the stud base (relative to the smaller piece dimension)
    width_factor: float = 1 / 3

    # How far a tab protrudes (relative to the smaller piece dimension)
    depth_factor: float = 1 / 6

    # Control heights of the stud legs (relative to depth)
    rise1: float = 0.5
    rise2: float = 0.7

    # Rounds the shoulders where the legs turn into the crown
    blend: float = 0.2

    # Length of the diagonal jog drawn at the start of a border edge
    # (relative to depth, 0 disables it)
    corner_jog: float = 0.0

    def __post_init__(self) -> None:
        """Reject factors that cannot produce a valid outline."""
        for name in ("width_factor", "depth_factor"):
            value = getattr(self, name)
            if not value > 0:
                raise InvalidStudConfig(f"{name} must be positive, got {value}")
        if self.width_factor >= 1.0:
            raise InvalidStudConfig(f"width_factor must be below 1, got {self.width_factor}")
        for name in ("rise1", "rise2", "blend"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidStudConfig(f"{name} must be within [0, 1], got {value}")
        if not self.corner_jog >= 0:
            raise InvalidStudConfig(f"corner_jog must not be negative, got {self.corner_jog}")

    def depth(self, width: float, height: float) -> float:
        """Protrusion depth for a piece of the given size."""
        return min(width, height) * self.depth_factor

    def stud_width(self, width: float, height: float) -> float:
        """Base width of the stud for a piece of the given size."""
        return min(width, height) * self.width_factor

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudConfig":
        """Create from dictionary."""
        return cls(**data)


@dataclass(frozen=True)
class Neighbor:
    """One side's view of a shared edge.

    Attributes:
        neighbor_id: Identity of the piece across the edge.
        is_tab: True if this piece's side sticks out, False if it is indented.
    """

    neighbor_id: str
    is_tab: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camel-cased mapping handed to renderers."""
        return {"neighborId": self.neighbor_id, "isTab": self.is_tab}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Neighbor":
        """Create from dictionary."""
        return cls(neighbor_id=data["neighborId"], is_tab=bool(data["isTab"]))


@dataclass(frozen=True)
class NeighborsData:
    """Four-sided neighbor view of a single piece.

    A missing side means the piece sits on the grid border there and that
    side is drawn as a straight edge.
    """

    top: Optional[Neighbor] = None
    right: Optional[Neighbor] = None
    bottom: Optional[Neighbor] = None
    left: Optional[Neighbor] = None

    def get(self, side: Side) -> Optional[Neighbor]:
        """Return the neighbor descriptor on a side, if any."""
        return getattr(self, side)

    def is_tab(self, side: Side) -> bool:
        """Whether this piece protrudes on a side (never true on a border)."""
        neighbor = self.get(side)
        return neighbor is not None and neighbor.is_tab

    def items(self) -> Iterator[Tuple[Side, Neighbor]]:
        """Iterate over the sides that have a neighbor, in traversal order."""
        for side in SIDES:
            neighbor = self.get(side)
            if neighbor is not None:
                yield side, neighbor

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Convert to dictionary, leaving out border sides."""
        return {side: neighbor.to_dict() for side, neighbor in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, Any]]) -> "NeighborsData":
        """Create from dictionary."""
        return cls(**{side: Neighbor.from_dict(data[side]) for side in SIDES if data.get(side)})


@dataclass(frozen=True)
class PieceBounds:
    """Local bounding rectangle of a piece, origin at its nominal top-left corner."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        """Horizontal extent including protrusions."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Vertical extent including protrusions."""
        return self.max_y - self.min_y

    def expand(self, margin: float) -> "PieceBounds":
        """Grow the rectangle by a margin on every side."""
        return PieceBounds(
            min_x=self.min_x - margin,
            max_x=self.max_x + margin,
            min_y=self.min_y - margin,
            max_y=self.max_y + margin,
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to the camel-cased mapping handed to renderers."""
        return {"minX": self.min_x, "maxX": self.max_x, "minY": self.min_y, "maxY": self.max_y}


@dataclass(frozen=True)
class MoveTo:
    """Start a new subpath."""

    point: Point


@dataclass(frozen=True)
class LineTo:
    """Straight segment from the pen position."""

    point: Point


@dataclass(frozen=True)
class CubicTo:
    """Cubic Bezier segment from the pen position."""

    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True)
class ClosePath:
    """Close the current subpath."""


PathCommand = Union[MoveTo, LineTo, CubicTo, ClosePath]


def _format_number(value: float) -> str:
    """Format a coordinate compactly without losing precision."""
    text = repr(round(float(value), 9))
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


@dataclass
class PiecePath:
    """Closed outline of a piece as an ordered list of path commands."""

    commands: List[PathCommand] = field(default_factory=list)

    @property
    def start_point(self) -> Point:
        """Point of the initial move command."""
        first = self.commands[0]
        if not isinstance(first, MoveTo):
            raise ValueError("Path does not start with a move command")
        return first.point

    @property
    def end_point(self) -> Point:
        """Pen position before the path is closed."""
        for command in reversed(self.commands):
            if not isinstance(command, ClosePath):
                return command.point
        raise ValueError("Path has no drawing commands")

    def is_closed(self, tolerance: float = 1e-9) -> bool:
        """Whether the path returns to its start point and is explicitly closed."""
        if not self.commands or not isinstance(self.commands[-1], ClosePath):
            return False
        start, end = self.start_point, self.end_point
        return math.isclose(start[0], end[0], abs_tol=tolerance) and math.isclose(start[1], end[1], abs_tol=tolerance)

    def curve_count(self) -> int:
        """Number of cubic segments in the outline."""
        return sum(1 for command in self.commands if isinstance(command, CubicTo))

    def to_svg(self) -> str:
        """Render as SVG path data, e.g. ``M 0 0 L 100 0 ... Z``."""
        parts: List[str] = []
        for command in self.commands:
            if isinstance(command, MoveTo):
                parts.append(f"M {_format_number(command.point[0])} {_format_number(command.point[1])}")
            elif isinstance(command, LineTo):
                parts.append(f"L {_format_number(command.point[0])} {_format_number(command.point[1])}")
            elif isinstance(command, CubicTo):
                coords = (*command.control1, *command.control2, *command.point)
                parts.append("C " + " ".join(_format_number(v) for v in coords))
            else:
                parts.append("Z")
        return " ".join(parts)

    def sample_points(self, points_per_curve: int = 20) -> List[Point]:
        """Flatten the outline into a closed polygon.

        Args:
            points_per_curve: Number of points to sample from each cubic segment.

        Returns:
            List of (x, y) points whose last point repeats the first.

        Raises:
            ValueError: If points_per_curve is below 2.
        """
        if points_per_curve < 2:
            raise ValueError(f"points_per_curve must be at least 2, got {points_per_curve}")
        polygon: List[Point] = []
        pen: Optional[Point] = None

        for command in self.commands:
            if isinstance(command, MoveTo):
                pen = command.point
                polygon.append(pen)
            elif isinstance(command, LineTo):
                pen = command.point
                polygon.append(pen)
            elif isinstance(command, CubicTo):
                if pen is None:
                    raise ValueError("Curve segment before the first move command")
                curve = BezierCurve(pen, command.control1, command.control2, command.point)
                points = curve.get_points(points_per_curve)
                # Skip the first point, it duplicates the pen position
                polygon.extend((float(p[0]), float(p[1])) for p in points[1:])
                pen = command.point

        # Close the polygon
        if polygon and polygon[-1] != polygon[0]:
            polygon.append(polygon[0])

        return polygon
