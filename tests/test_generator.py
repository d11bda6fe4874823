"""Tests for two-phase puzzle generation."""

import json
from typing import Any, List

import pytest

import jigsaw_grid.generator as generator_module
from jigsaw_grid import (
    GridModel,
    InconsistentNeighborReference,
    InvalidFillBleed,
    InvalidGridDimensions,
    InvalidImageDimensions,
    Neighbor,
    NeighborsData,
    NeighborTable,
    PuzzleGenerator,
    RandomSourceError,
    StudConfig,
    assign_neighbors,
    generate_puzzle,
)
from jigsaw_grid.schemas import PuzzleRecord


class ExhaustedCoin:
    """Random source that fails on the first flip."""

    def flip(self) -> bool:
        raise RuntimeError("entropy pool exhausted")


class TestValidation:
    """Invalid input is rejected before anything is generated."""

    @pytest.mark.parametrize("rows,cols", [(0, 3), (3, 0), (-1, 2), (2, -5), (1.5, 2), (True, 2)])
    def test_invalid_grid_dimensions(self, rows: Any, cols: Any) -> None:
        with pytest.raises(InvalidGridDimensions):
            PuzzleGenerator(rows, cols, 100, 100)

    @pytest.mark.parametrize("width,height", [(0, 100), (100, 0), (-10, 100), (100, float("nan"))])
    def test_invalid_image_dimensions(self, width: float, height: float) -> None:
        with pytest.raises(InvalidImageDimensions):
            PuzzleGenerator(2, 2, width, height)

    def test_invalid_seed(self) -> None:
        """An unseedable value fails at construction rather than defaulting."""
        with pytest.raises(RandomSourceError):
            PuzzleGenerator(2, 2, 100, 100, seed="not-a-seed")  # type: ignore[arg-type]

    @pytest.mark.parametrize("fill_bleed", [-60.0, -0.5, float("nan"), float("inf")])
    def test_invalid_fill_bleed(self, fill_bleed: float) -> None:
        """A negative or non-finite margin would give a frame with negative size."""
        with pytest.raises(InvalidFillBleed, match="fill_bleed"):
            PuzzleGenerator(1, 1, 100, 100, fill_bleed=fill_bleed)

    def test_rebuild_rejects_negative_fill_bleed(self) -> None:
        puzzle = generate_puzzle(1, 1, 100, 100, seed=0)
        with pytest.raises(InvalidFillBleed):
            puzzle.rebuild(fill_bleed=-60.0)

    def test_zero_fill_bleed_accepted(self) -> None:
        piece = generate_puzzle(1, 1, 100, 100, seed=0, fill_bleed=0).piece(0, 0)
        assert piece.frame == piece.bounds
        (sx, _, _), (_, sy, _) = piece.transform
        assert (sx, sy) == (1.0, 1.0)

    def test_failing_random_source_aborts_generation(self) -> None:
        with pytest.raises(RandomSourceError, match="entropy pool exhausted"):
            PuzzleGenerator(2, 2, 100, 100, coin=ExhaustedCoin()).generate()


class TestGeneration:
    """Tests for the generated puzzle."""

    def test_pieces_in_row_major_order(self) -> None:
        puzzle = generate_puzzle(3, 4, 400, 300, seed=1)
        assert len(puzzle.pieces) == 12
        assert [(p.row, p.col) for p in puzzle.pieces] == [(r, c) for r in range(3) for c in range(4)]
        assert puzzle.piece(2, 3).piece_id == "piece_r2_c3"
        with pytest.raises(IndexError):
            puzzle.piece(3, 0)

    def test_piece_size_from_image(self) -> None:
        puzzle = generate_puzzle(2, 4, 1000, 500, seed=1)
        assert puzzle.grid.piece_width == 250.0
        assert puzzle.grid.piece_height == 250.0

    def test_every_path_is_closed(self) -> None:
        puzzle = generate_puzzle(4, 4, 400, 400, seed=11)
        assert all(piece.path.is_closed() for piece in puzzle.pieces)

    def test_same_seed_same_puzzle(self) -> None:
        first = generate_puzzle(3, 3, 300, 300, seed=5)
        second = generate_puzzle(3, 3, 300, 300, seed=5)
        assert first.neighbors == second.neighbors
        assert [p.path.to_svg() for p in first.pieces] == [p.path.to_svg() for p in second.pieces]

    def test_generator_is_reusable(self) -> None:
        """A seeded generator produces the same puzzle each time it runs."""
        generator = PuzzleGenerator(3, 3, 300, 300, seed=5)
        assert generator.generate().neighbors == generator.generate().neighbors

    def test_parallel_matches_sequential(self) -> None:
        """Per-piece work can run on threads without changing the result."""
        sequential = generate_puzzle(5, 5, 500, 500, seed=8, workers=1)
        parallel = generate_puzzle(5, 5, 500, 500, seed=8, workers=4)
        assert [p.piece_id for p in parallel.pieces] == [p.piece_id for p in sequential.pieces]
        assert [p.path.to_svg() for p in parallel.pieces] == [p.path.to_svg() for p in sequential.pieces]
        assert [p.bounds for p in parallel.pieces] == [p.bounds for p in sequential.pieces]

    def test_fill_bleed_grows_frame_only(self) -> None:
        puzzle = generate_puzzle(2, 2, 200, 200, seed=2, fill_bleed=1.5)
        piece = puzzle.piece(0, 0)
        assert piece.frame == piece.bounds.expand(1.5)
        (sx, _, _), (_, sy, _) = piece.transform
        assert sx == pytest.approx(piece.frame.width / 200)
        assert sy == pytest.approx(piece.frame.height / 200)

    def test_rebuild_keeps_assignment(self) -> None:
        """Derived geometry can be recomputed without re-randomizing."""
        puzzle = generate_puzzle(3, 3, 300, 300, seed=4)
        rebuilt = puzzle.rebuild(stud=StudConfig(depth_factor=0.25))
        assert rebuilt.neighbors is puzzle.neighbors
        assert [p.neighbors for p in rebuilt.pieces] == [p.neighbors for p in puzzle.pieces]
        center = rebuilt.piece(1, 1)
        assert center.bounds.width >= puzzle.piece(1, 1).bounds.width
        assert puzzle.rebuild().pieces == puzzle.pieces


class TestPhaseBarrier:
    """Phase 2 never runs on an inconsistent neighbor table."""

    def test_inconsistent_table_aborts_before_geometry(self, monkeypatch: pytest.MonkeyPatch) -> None:
        built: List[Any] = []

        def corrupt_assign(grid: GridModel, coin: Any) -> NeighborTable:
            table = assign_neighbors(grid, coin)
            cells = [list(row) for row in table.cells]
            right = cells[0][0].right
            assert right is not None
            cells[0][0] = NeighborsData(right=Neighbor(right.neighbor_id, not right.is_tab), bottom=cells[0][0].bottom)
            return NeighborTable(grid=grid, cells=tuple(tuple(row) for row in cells))

        def record_build(*args: Any, **kwargs: Any) -> List[Any]:
            built.append(args)
            return []

        monkeypatch.setattr(generator_module, "assign_neighbors", corrupt_assign)
        monkeypatch.setattr(generator_module, "build_pieces", record_build)

        with pytest.raises(InconsistentNeighborReference):
            PuzzleGenerator(2, 2, 200, 200, seed=1).generate()
        assert built == []


class TestRecords:
    """Tests for the serializable hand-off records."""

    def test_piece_record(self) -> None:
        puzzle = generate_puzzle(2, 3, 300, 200, seed=9)
        record = puzzle.piece(1, 2).to_record(puzzle.grid)
        data = record.model_dump(by_alias=True, exclude_none=True)

        assert data["id"] == "piece_r1_c2"
        assert (data["x"], data["y"]) == (200.0, 100.0)
        assert set(data["neighbors"]) == {"top", "left"}
        assert set(data["neighbors"]["top"]) == {"neighborId", "isTab"}
        assert data["neighbors"]["left"]["neighborId"] == "piece_r1_c1"
        assert set(data["bounds"]) == {"minX", "maxX", "minY", "maxY"}
        assert data["path"].startswith("M 0 0")

    def test_puzzle_record_json_round_trip(self) -> None:
        puzzle = generate_puzzle(2, 2, 200, 200, seed=9)
        payload = puzzle.to_record().model_dump_json(by_alias=True, exclude_none=True)
        restored = PuzzleRecord.model_validate_json(payload)

        assert restored.rows == 2 and restored.cols == 2
        assert restored.seed == 9
        assert len(restored.pieces) == 4
        assert restored.pieces[0].neighbors.right is not None
        assert json.loads(payload)["stud"]["depth_factor"] == pytest.approx(1 / 6)

    def test_neighbors_restore_from_record(self) -> None:
        """Persisted neighbor data is enough to rebuild identical geometry."""
        puzzle = generate_puzzle(3, 2, 200, 300, seed=13)
        saved = json.loads(json.dumps(puzzle.neighbors.to_dict()))
        table = NeighborTable.from_dict(puzzle.grid, saved)
        assert table == puzzle.neighbors
