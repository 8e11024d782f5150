"""
Command-Line Interface for roomkit

Usage:
    roomkit mesh room4.png --collider room4_collider.png -o room4.obj
    roomkit mesh room4.png --stats
    roomkit check level.png --player 12 0 17
    roomkit check level.png --seed 10 14 --cap 300

"""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import List, Optional

from .blueprint import BLUEPRINT_RADIUS, ROOM_CELL_CAP, select_active_blueprint, validate_room
from .colliders import COLLIDER_HEIGHT
from .generator import RoomBuilder
from .grid import snap_cell
from .ingestion import ALPHA_THRESHOLD
from .level import load_level
from .room_mesh import ROOM_SIZE

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BAD_ROOM = 2
EXIT_NO_BLUEPRINT = 3


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="roomkit",
        description="roomkit - Compile room images and check blueprint rooms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  roomkit mesh room4.png -o room4.obj
      Compile the room mesh and write it as OBJ

  roomkit mesh room4.png --collider room4_collider.png --colliders-json boxes.json
      Also merge the collider image and write the boxes as JSON

  roomkit check level.png --player 12 0 17
      Validate the blueprint next to the player

Exit codes:
  0  success / valid room
  1  error
  2  room is not valid
  3  no blueprint in reach
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output with statistics"
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 1.0.0"
    )

    # Lets -v follow the subcommand too; SUPPRESS keeps a top-level -v intact
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Verbose output with statistics"
    )

    subparsers = parser.add_subparsers(dest="command")

    # mesh
    mesh = subparsers.add_parser("mesh", parents=[common], help="Compile a room image")
    mesh.add_argument(
        "input",
        help="Room image file (PNG recommended)"
    )
    mesh.add_argument(
        "--collider",
        help="Colored collider image"
    )
    mesh.add_argument(
        "-o", "--output",
        help="Output OBJ path (default: input with .obj)"
    )
    mesh.add_argument(
        "--colliders-json",
        help="Write the collider boxes to this JSON file"
    )
    mesh.add_argument(
        "--room-size",
        type=float,
        default=ROOM_SIZE,
        help=f"Room size in world units (default: {ROOM_SIZE})"
    )
    mesh.add_argument(
        "--collider-height",
        type=float,
        default=COLLIDER_HEIGHT,
        help=f"Collider box height (default: {COLLIDER_HEIGHT})"
    )
    mesh.add_argument(
        "--alpha-threshold",
        type=int,
        default=ALPHA_THRESHOLD,
        help=f"Alpha threshold for solidity (0-255, default: {ALPHA_THRESHOLD})"
    )
    mesh.add_argument(
        "--welded",
        action="store_true",
        help="Export the welded mesh instead of the flat-shaded one"
    )
    mesh.add_argument(
        "--no-uvs",
        action="store_true",
        help="Don't write texture coordinates"
    )
    mesh.add_argument(
        "--stats",
        action="store_true",
        help="Print mesh statistics"
    )

    # check
    check = subparsers.add_parser("check", parents=[common], help="Validate a blueprint room in a level")
    check.add_argument(
        "level",
        help="Level image file (RGB legend)"
    )
    where = check.add_mutually_exclusive_group(required=True)
    where.add_argument(
        "--seed",
        type=float,
        nargs=2,
        metavar=("X", "Z"),
        help="Validate from this position"
    )
    where.add_argument(
        "--player",
        type=float,
        nargs=3,
        metavar=("X", "Y", "Z"),
        help="Validate the blueprint in reach of this player position"
    )
    check.add_argument(
        "--radius",
        type=float,
        default=BLUEPRINT_RADIUS,
        help=f"Blueprint reach (default: {BLUEPRINT_RADIUS})"
    )
    check.add_argument(
        "--cap",
        type=int,
        default=ROOM_CELL_CAP,
        help=f"Largest valid room in cells (default: {ROOM_CELL_CAP})"
    )
    check.add_argument(
        "--disable-wall",
        type=int,
        nargs=2,
        action="append",
        default=[],
        metavar=("X", "Z"),
        help="Treat the wall at this cell as picked up (repeatable)"
    )

    return parser


def process_mesh(args) -> int:
    """Compile a room image."""
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return EXIT_ERROR

    output_path = Path(args.output) if args.output else input_path.with_suffix(".obj")
    start_time = time.time()

    builder = RoomBuilder(
        world_scale=args.room_size,
        collider_height=args.collider_height,
        alpha_threshold=args.alpha_threshold
    )
    builder.load_room_image(input_path)
    builder.compile_mesh(flat=not args.welded)

    if args.stats or args.verbose:
        stats = builder.get_mesh_stats()
        print("\nMesh Statistics:")
        print(f"  Image size: {stats['image_size']}")
        print(f"  Solid cells: {stats['solid_cells']}")
        print(f"  Triangles: {stats['triangles']}")
        print(f"  Soup vertices: {stats['soup_vertices']}")
        print(f"  Welded vertices: {stats['welded_vertices']}")
        print(f"  Vertex reduction: {stats['vertex_reduction_percent']:.1f}%")

    # Every input is loaded before anything is written
    if args.collider:
        builder.load_collider_image(args.collider)
        builder.merge_colliders()
        print(f"Colliders: {builder.collider_count}")
    elif args.colliders_json:
        print("Warning: --colliders-json needs --collider", file=sys.stderr)

    builder.export_obj(output_path, include_uvs=not args.no_uvs)
    print(f"Exported: {output_path}")

    if args.collider and args.colliders_json:
        builder.export_colliders(args.colliders_json)
        print(f"Exported: {args.colliders_json}")

    elapsed = time.time() - start_time
    if args.verbose:
        print(f"\nCompleted in {elapsed:.2f}s")
    return EXIT_OK


def process_check(args) -> int:
    """Validate a blueprint room."""
    layout = load_level(args.level)

    if args.seed is not None:
        seed = snap_cell(args.seed[0], args.seed[1])
    else:
        active = select_active_blueprint(
            args.player, layout.blueprint_positions(), radius=args.radius
        )
        if active is None:
            print("No blueprint in reach")
            return EXIT_NO_BLUEPRINT
        seed = active.location

    snapshot = layout.snapshot(disabled_walls=[tuple(c) for c in args.disable_wall])
    verdict = validate_room(seed, snapshot, cap=args.cap)

    if verdict.good:
        print(f"GOOD room at {seed}: {len(verdict.reachable_from)} cells")
    else:
        print(f"BAD room at {seed}: {verdict.reason}")
        if verdict.path:
            print("  Path: " + " ".join(f"({x},{z})" for x, z in verdict.path))

    if args.verbose:
        print(f"  Door found: {verdict.has_door}")
        print(f"  Visited cells: {len(verdict.reachable_from)}")
        if verdict.failure_cell is not None:
            print(f"  Failure cell: {verdict.failure_cell}")

    return EXIT_OK if verdict.good else EXIT_BAD_ROOM


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    if args.command is None:
        parser.print_help()
        return EXIT_ERROR

    try:
        if args.command == "mesh":
            return process_mesh(args)
        return process_check(args)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
