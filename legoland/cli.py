"""Command line entry point: turn a PLY model into a brick model file."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Sequence

from legoland.brick import brickify_voxel_image, export_brick_model
from legoland.model import PlyFormatError, read_ply

_BANNER = (
    "======================================\n"
    "=            LegoLand 1.0            =\n"
    "======================================"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="legoland",
        description="Convert an ASCII PLY model into a brick model (.dat) file.",
    )
    parser.add_argument("source_model", help="ASCII PLY model to read")
    parser.add_argument("destination_model", help="brick model file to write")
    parser.add_argument(
        "model_height",
        nargs="?",
        type=float,
        default=500.0,
        help="height the model is scaled to (default: 500)",
    )
    parser.add_argument(
        "model_thickness",
        nargs="?",
        type=int,
        default=0,
        help="wall thickness in voxels; 0 picks one from the model size, 1 leaves it alone",
    )
    parser.add_argument(
        "bricks_per_step",
        nargs="?",
        type=int,
        default=0,
        help="bricks per build step; 0 starts a step with every layer",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the conversion and return the process exit status."""
    start = time.process_time()
    print(_BANNER)
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")

    if args.bricks_per_step < 0:
        print("Error: bricks per step must not be negative", file=sys.stderr)
        return 1
    if args.model_thickness < 0:
        print("Error: model thickness must not be negative", file=sys.stderr)
        return 1

    try:
        model = read_ply(args.source_model, args.model_height)
    except FileNotFoundError:
        print("Error! No file found", file=sys.stderr)
        return 1
    except PlyFormatError as error:
        print(f"Error! Incorrect format: {error}", file=sys.stderr)
        return 1

    try:
        model.supersample()
        model.normalize()
    except ValueError as error:
        print(f"Error! {error}", file=sys.stderr)
        return 1

    image = model.voxelize()
    image.thicken(args.model_thickness)
    bricks = brickify_voxel_image(image)
    export_brick_model(bricks, args.destination_model, args.bricks_per_step)

    elapsed = time.process_time() - start
    print(f"Time taken: {elapsed} seconds")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())