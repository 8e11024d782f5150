#!/usr/bin/env python3
"""
roomkit Demo Script

This script demonstrates the full pipeline by:
1. Creating a synthetic room image and collider image (no assets needed)
2. Compiling the room mesh and merging colliders
3. Validating a few blueprint rooms in a synthetic level
4. Printing statistics

Run with: python examples/demo.py
"""

import sys
from pathlib import Path
import numpy as np
import time

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from roomkit import RoomBuilder, decode_level, validate_room
from roomkit.level import COLOR_BLUEPRINT, COLOR_DOOR, COLOR_FLOOR, COLOR_WALL, COLOR_WATER


def create_room_image(size: int = 16) -> np.ndarray:
    """
    Create a room outline: solid border walls with a gap for the entrance.

    Returns:
        RGBA array of shape (size, size, 4)
    """
    rgba = np.zeros((size, size, 4), dtype=np.uint8)
    rgba[:, :, :3] = [180, 160, 140]

    rgba[0, :, 3] = 255
    rgba[-1, :, 3] = 255
    rgba[:, 0, 3] = 255
    rgba[:, -1, 3] = 255
    # Entrance
    rgba[-1, size // 2 - 1:size // 2 + 1, 3] = 0

    return rgba


def create_collider_image(size: int = 16) -> np.ndarray:
    """
    Color each wall run differently so each gets its own box.

    Returns:
        RGBA array of shape (size, size, 4)
    """
    rgba = np.zeros((size, size, 4), dtype=np.uint8)
    rgba[0, :] = [255, 0, 0, 255]
    rgba[1:, 0] = [0, 255, 0, 255]
    rgba[1:, -1] = [0, 0, 255, 255]
    rgba[-1, 1:size // 2 - 1] = [255, 255, 0, 255]
    rgba[-1, size // 2 + 1:-1] = [255, 0, 255, 255]
    return rgba


def create_level(door: bool = True, water_leak: bool = False) -> np.ndarray:
    """
    Create a 12x12 level with a walled 6x6 room and a blueprint inside.

    Returns:
        RGB array of shape (12, 12, 3)
    """
    rgb = np.zeros((12, 12, 3), dtype=np.uint8)
    rgb[:, :] = COLOR_FLOOR
    rgb[:, 10:] = COLOR_WATER

    for i in range(2, 9):
        rgb[2, i] = rgb[8, i] = rgb[i, 2] = rgb[i, 8] = COLOR_WALL

    if door:
        rgb[2, 5] = COLOR_DOOR
    if water_leak:
        # Open the east wall and flood the corridor up to the lake
        rgb[5, 8] = COLOR_FLOOR
        rgb[5, 9] = COLOR_WATER

    rgb[5, 5] = COLOR_BLUEPRINT
    return rgb


def demo_room():
    print("\n=== Room Mesh & Colliders ===")
    start = time.time()

    builder = RoomBuilder()
    builder.load_room_array(create_room_image())
    builder.load_collider_array(create_collider_image())
    builder.compile_mesh().merge_colliders()

    stats = builder.get_mesh_stats()
    print(f"  Image size: {stats['image_size']}")
    print(f"  Triangles: {stats['triangles']}")
    print(f"  Welded vertices: {stats['welded_vertices']} "
          f"({stats['vertex_reduction_percent']:.1f}% fewer than the quad soup)")
    print(f"  Flat-shaded vertices: {builder.vertex_count}")
    print(f"  Collider boxes: {builder.collider_count}")
    for box in builder.colliders:
        print(f"    color={box.color} center={tuple(round(c, 3) for c in box.center)} "
              f"size={tuple(round(s, 3) for s in box.size)}")
    print(f"  Time: {time.time() - start:.3f}s (includes JIT compilation)")


def demo_blueprints():
    print("\n=== Blueprint Validation ===")
    cases = [
        ("walled room with door", create_level()),
        ("walled room, no door", create_level(door=False)),
        ("room leaking into the lake", create_level(water_leak=True)),
    ]

    for name, rgb in cases:
        layout = decode_level(rgb)
        seed = layout.blueprints[0]
        verdict = validate_room(seed, layout.snapshot())
        status = "GOOD" if verdict.good else "BAD"
        print(f"  {name}: {status} ({verdict.reason}, {len(verdict.reachable_from)} cells)")
        if verdict.path:
            print(f"    path: {verdict.path}")


def main():
    print("roomkit Demo")
    demo_room()
    demo_blueprints()


if __name__ == "__main__":
    main()
