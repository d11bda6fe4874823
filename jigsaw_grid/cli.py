#!/usr/bin/env python
r"""Generate an interlocking jigsaw grid and print it.

Example usage:
  # 3x4 grid over an 800x600 image, full JSON record
  python -m jigsaw_grid.cli --rows 3 --cols 4 --width 800 --height 600 --seed 42

  # Let the grid size follow a target piece count
  python -m jigsaw_grid.cli --pieces 100 --width 1920 --height 1080 --format neighbors

  # One line of SVG path data per piece, with a larger stud
  python -m jigsaw_grid.cli --rows 2 --cols 2 --width 200 --height 200 \
    --depth-factor 0.2 --format paths
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import get_settings
from .errors import JigsawGridError
from .generator import PuzzleGenerator
from .grid import calculate_grid_dimensions
from .models import StudConfig

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(description="Generate interlocking jigsaw piece outlines for an image grid")
    parser.add_argument("--rows", type=int, help="Number of rows in the puzzle grid")
    parser.add_argument("--cols", type=int, help="Number of columns in the puzzle grid")
    parser.add_argument(
        "--pieces",
        type=int,
        help="Approximate number of pieces; picks rows and columns for square pieces",
    )
    parser.add_argument("--width", type=float, required=True, help="Source image width")
    parser.add_argument("--height", type=float, required=True, help="Source image height")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible tab assignment")
    parser.add_argument("--workers", type=int, default=None, help="Threads for per-piece geometry")
    parser.add_argument("--fill-bleed", type=float, default=None, help="Margin around each piece's drawable region")
    parser.add_argument(
        "--format",
        choices=["json", "neighbors", "paths", "polygons"],
        default="json",
        help=(
            "json: full puzzle record, neighbors: neighbor table only, paths: SVG path data per piece, "
            "polygons: sampled outline points per piece in image coordinates"
        ),
    )
    parser.add_argument(
        "--points-per-curve",
        type=int,
        default=None,
        help="Samples per curve for the polygons format (defaults to JIGSAW_POINTS_PER_CURVE)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (defaults to JIGSAW_LOG_LEVEL)",
    )

    stud_group = parser.add_argument_group("Stud shape options")
    stud_group.add_argument("--width-factor", type=float, help="Stud width relative to the smaller piece side")
    stud_group.add_argument("--depth-factor", type=float, help="Tab depth relative to the smaller piece side")
    stud_group.add_argument("--rise1", type=float, help="Leg control height (fraction of depth)")
    stud_group.add_argument("--rise2", type=float, help="Shoulder control height (fraction of depth)")
    stud_group.add_argument(
        "--blend",
        type=float,
        help="Pulls the shoulder control toward the crown (fraction of half the stud width)",
    )
    stud_group.add_argument("--corner-jog", type=float, help="Border corner jog length (fraction of depth)")
    return parser


def _stud_from_args(args: argparse.Namespace, defaults: StudConfig) -> StudConfig:
    overrides = {
        name: getattr(args, name)
        for name in ("width_factor", "depth_factor", "rise1", "rise2", "blend", "corner_jog")
        if getattr(args, name) is not None
    }
    return StudConfig.from_dict({**defaults.to_dict(), **overrides})


def main(argv: Optional[List[str]] = None) -> int:
    """Process command-line arguments and print the generated puzzle."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.points_per_curve is not None and args.points_per_curve < 2:
        parser.error(f"--points-per-curve must be at least 2, got {args.points_per_curve}")

    settings = get_settings()
    logging.basicConfig(
        level=(args.log_level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.pieces is not None:
            rows, cols = calculate_grid_dimensions(args.width, args.height, args.pieces)
            logger.info("Using a %dx%d grid for %d target pieces", rows, cols, args.pieces)
        elif args.rows is not None and args.cols is not None:
            rows, cols = args.rows, args.cols
        else:
            parser.error("either --rows and --cols or --pieces is required")

        generator = PuzzleGenerator(
            rows,
            cols,
            args.width,
            args.height,
            stud=_stud_from_args(args, settings.stud_config()),
            seed=args.seed,
            workers=args.workers,
            fill_bleed=args.fill_bleed,
        )
        puzzle = generator.generate()
    except JigsawGridError as exc:
        logger.error("Generation failed: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.format == "neighbors":
        print(json.dumps(puzzle.neighbors.to_dict(), indent=2))
    elif args.format == "paths":
        for piece in puzzle.pieces:
            print(f"{piece.piece_id}\t{piece.path.to_svg()}")
    elif args.format == "polygons":
        points_per_curve = settings.POINTS_PER_CURVE if args.points_per_curve is None else args.points_per_curve
        polygons = {}
        for piece in puzzle.pieces:
            x, y = puzzle.grid.origin(piece.row, piece.col)
            polygons[piece.piece_id] = [
                [round(px + x, 3), round(py + y, 3)] for px, py in piece.path.sample_points(points_per_curve)
            ]
        print(json.dumps(polygons))
    else:
        print(puzzle.to_record().model_dump_json(by_alias=True, exclude_none=True, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
