"""Tests for composing closed piece outlines."""

import itertools
from typing import Optional

import pytest

from jigsaw_grid import (
    SIDES,
    ClosePath,
    CubicTo,
    LineTo,
    MoveTo,
    Neighbor,
    NeighborsData,
    StudConfig,
    build_piece_path,
    calculate_piece_bounds,
    generate_edge_profile,
    generate_puzzle,
    path_to_curves,
)

STUD = StudConfig()
SIDE_STATES = [None, True, False]


def make_neighbors(
    top: Optional[bool] = None,
    right: Optional[bool] = None,
    bottom: Optional[bool] = None,
    left: Optional[bool] = None,
) -> NeighborsData:
    """Build a neighbor view from tab flags (None means border)."""
    flags = {"top": top, "right": right, "bottom": bottom, "left": left}
    return NeighborsData(
        **{side: Neighbor(f"piece_{side}", flag) for side, flag in flags.items() if flag is not None}
    )


ALL_COMBINATIONS = list(itertools.product(SIDE_STATES, repeat=4))


class TestPiecePath:
    """Tests for closure and structure of piece outlines."""

    @pytest.mark.parametrize("flags", ALL_COMBINATIONS)
    def test_path_is_closed(self, flags: tuple) -> None:
        """Every outline ends where it started and is explicitly closed."""
        path = build_piece_path(100.0, 70.0, make_neighbors(*flags), STUD)
        assert path.start_point == (0.0, 0.0)
        assert path.end_point == (0.0, 0.0)
        assert path.is_closed()

    @pytest.mark.parametrize("flags", ALL_COMBINATIONS)
    def test_single_subpath(self, flags: tuple) -> None:
        """One move at the start, one close at the end, nothing else in between."""
        path = build_piece_path(100.0, 70.0, make_neighbors(*flags), STUD)
        assert isinstance(path.commands[0], MoveTo)
        assert isinstance(path.commands[-1], ClosePath)
        middle = path.commands[1:-1]
        assert all(isinstance(command, (LineTo, CubicTo)) for command in middle)

    @pytest.mark.parametrize("flags", ALL_COMBINATIONS)
    def test_curve_count_matches_neighbors(self, flags: tuple) -> None:
        """Each interlocking side contributes two curves, borders none."""
        path = build_piece_path(100.0, 70.0, make_neighbors(*flags), STUD)
        assert path.curve_count() == 2 * sum(flag is not None for flag in flags)

    def test_junctions_are_exact(self) -> None:
        """Each side's segment ends exactly where the next side starts."""
        width, height = 90.0, 110.0
        neighbors = make_neighbors(True, False, True, False)
        corners = [(width, 0.0), (width, height), (0.0, height), (0.0, 0.0)]
        for side, corner in zip(SIDES, corners):
            segment = generate_edge_profile(side, width, height, neighbors.get(side), STUD)
            assert segment[-1].point == corner  # type: ignore[union-attr]

    def test_construction_is_deterministic(self) -> None:
        """Identical inputs give byte-identical path output."""
        neighbors = make_neighbors(False, True, None, True)
        first = build_piece_path(123.4, 56.7, neighbors, STUD)
        second = build_piece_path(123.4, 56.7, neighbors, STUD)
        assert first.commands == second.commands
        assert first.to_svg() == second.to_svg()

    def test_border_only_piece_svg(self) -> None:
        """A lone piece is a plain rectangle."""
        path = build_piece_path(100.0, 50.0, NeighborsData(), STUD)
        assert path.to_svg() == "M 0 0 L 100 0 L 100 50 L 0 50 L 0 0 Z"

    def test_svg_contains_curves_for_studs(self) -> None:
        """Interlocking sides are emitted as cubic commands."""
        svg = build_piece_path(100.0, 100.0, make_neighbors(right=True), STUD).to_svg()
        assert svg.count("C ") == 2
        assert svg.startswith("M 0 0 L 100 0")
        assert svg.endswith("Z")


class TestScenarios:
    """Concrete grids from the interlocking requirements."""

    def test_2x2_borders_are_straight(self) -> None:
        """In a 2x2 grid of 100x100 pieces, border segments have no curves."""
        puzzle = generate_puzzle(2, 2, 200, 200, seed=3, stud=StudConfig(depth_factor=1 / 6, width_factor=1 / 3))
        border_segments = 0
        for piece in puzzle.pieces:
            for side in SIDES:
                neighbor = piece.neighbors.get(side)
                segment = generate_edge_profile(side, 100.0, 100.0, neighbor, puzzle.stud)
                if neighbor is None:
                    border_segments += 1
                    assert all(isinstance(command, LineTo) for command in segment)
                else:
                    assert sum(isinstance(command, CubicTo) for command in segment) == 2
        assert border_segments == 8
        assert puzzle.neighbors.count_edges() == (4, 8)


class TestSampling:
    """Tests for flattening outlines into polygons."""

    @pytest.mark.parametrize("flags", [(True, True, True, True), (False, False, False, False), (None, True, False, None)])
    def test_sampled_polygon_is_closed_and_within_bounds(self, flags: tuple) -> None:
        """Sampled points close the loop and stay inside the computed bounds."""
        neighbors = make_neighbors(*flags)
        path = build_piece_path(100.0, 80.0, neighbors, STUD)
        bounds = calculate_piece_bounds(100.0, 80.0, neighbors, STUD)
        polygon = path.sample_points(points_per_curve=30)

        assert polygon[0] == polygon[-1]
        for x, y in polygon:
            assert bounds.min_x - 1e-9 <= x <= bounds.max_x + 1e-9
            assert bounds.min_y - 1e-9 <= y <= bounds.max_y + 1e-9

    def test_tab_reaches_bounds(self) -> None:
        """The sampled tab touches the extended bound (the crown is an end point)."""
        neighbors = make_neighbors(right=True)
        polygon = build_piece_path(90.0, 90.0, neighbors, STUD).sample_points()
        assert max(x for x, _ in polygon) == pytest.approx(105.0)

    def test_two_points_per_curve_keeps_the_crown(self) -> None:
        """The coarsest allowed sampling still reaches the tab's crown."""
        polygon = build_piece_path(90.0, 90.0, make_neighbors(right=True), STUD).sample_points(points_per_curve=2)
        assert max(x for x, _ in polygon) == pytest.approx(105.0)

    @pytest.mark.parametrize("points_per_curve", [1, 0, -3])
    def test_too_few_points_per_curve_rejected(self, points_per_curve: int) -> None:
        """Sampling below two points per curve would flatten every stud to its chord."""
        path = build_piece_path(90.0, 90.0, make_neighbors(right=True), STUD)
        with pytest.raises(ValueError, match="points_per_curve"):
            path.sample_points(points_per_curve=points_per_curve)

    def test_path_to_curves_is_connected(self) -> None:
        """Converted curves chain end to start and close the loop."""
        path = build_piece_path(100.0, 80.0, make_neighbors(True, None, False, True), STUD)
        curves = path_to_curves(path)
        drawing = [command for command in path.commands if isinstance(command, (LineTo, CubicTo))]
        assert len(curves) == len(drawing)
        for current, following in zip(curves, curves[1:]):
            assert current.p3 == following.p0
        assert curves[-1].p3 == curves[0].p0
