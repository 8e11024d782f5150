"""
roomkit
=======

Grid and raster core for a top-down room building game.

This package provides:
- A raster-to-mesh compiler turning a room image's alpha mask into welded,
  flat-shaded room geometry with inset UVs
- A collider merger emitting one box per same-color region of a collider image
- A blueprint validator deciding whether the area around a blueprint is a
  valid room (has a door, no water leak, not too big)

Example Usage:
    from roomkit import RoomBuilder, validate_room, load_level

    builder = RoomBuilder()
    builder.load_room_image("room4.png")
    builder.load_collider_image("room4_collider.png")
    builder.compile_mesh().merge_colliders()
    builder.export_obj("room4.obj")

    layout = load_level("level.png")
    verdict = validate_room(layout.blueprints[0], layout.snapshot())
"""

__version__ = "1.0.0"
__author__ = "roomkit Team"

from .generator import RoomBuilder
from .ingestion import ImageLoader, ColorMask, RoomAssetError
from .room_mesh import RoomMesh, RoomMeshCompiler, compile_room_mesh, flat_shade
from .colliders import ColliderBox, ColliderMerger, merge_colliders
from .blueprint import (
    CellKind,
    WorldSnapshot,
    RoomVerdict,
    ActiveBlueprint,
    build_classification_grid,
    validate_room,
    select_active_blueprint,
)
from .level import LevelLayout, decode_level, load_level

__all__ = [
    "RoomBuilder",
    "ImageLoader",
    "ColorMask",
    "RoomAssetError",
    "RoomMesh",
    "RoomMeshCompiler",
    "compile_room_mesh",
    "flat_shade",
    "ColliderBox",
    "ColliderMerger",
    "merge_colliders",
    "CellKind",
    "WorldSnapshot",
    "RoomVerdict",
    "ActiveBlueprint",
    "build_classification_grid",
    "validate_room",
    "select_active_blueprint",
    "LevelLayout",
    "decode_level",
    "load_level",
]
