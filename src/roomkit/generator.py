"""
Main RoomBuilder Class

This is the primary interface for turning room images into game-ready
geometry. It orchestrates:
1. Image loading and alpha thresholding
2. Room mesh compilation (welded, then flat shaded)
3. Collider region merging
4. Export to OBJ / JSON

Example Usage:
    builder = RoomBuilder()
    builder.load_room_image("room4.png")
    builder.load_collider_image("room4_collider.png")
    builder.compile_mesh()
    builder.merge_colliders()
    builder.export_obj("room4.obj")
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np

from .colliders import COLLIDER_HEIGHT, ColliderBox, ColliderMerger
from .exporters import ColliderExporter, OBJExporter
from .ingestion import ALPHA_THRESHOLD, ImageLoader
from .room_mesh import ROOM_SIZE, RoomMesh, RoomMeshCompiler, flat_shade, mesh_stats

logger = logging.getLogger(__name__)


class RoomBuilder:
    """
    High-level interface for room geometry.

    Attributes:
        mesh: The compiled room mesh
        colliders: The merged collider boxes
    """

    def __init__(
        self,
        world_scale: float = ROOM_SIZE,
        collider_height: float = COLLIDER_HEIGHT,
        alpha_threshold: int = ALPHA_THRESHOLD
    ):
        """
        Initialize the RoomBuilder.

        Args:
            world_scale: Size of the whole room in world units along X and Z
            collider_height: Height of the collider boxes
            alpha_threshold: Pixels with alpha >= threshold are solid
        """
        self.world_scale = world_scale
        self.collider_height = collider_height
        self.alpha_threshold = alpha_threshold

        self._room_loader: Optional[ImageLoader] = None
        self._collider_loader: Optional[ImageLoader] = None
        self._welded: Optional[RoomMesh] = None
        self._mesh: Optional[RoomMesh] = None
        self._colliders: Optional[List[ColliderBox]] = None

    def load_room_image(self, image_path: Union[str, Path]) -> "RoomBuilder":
        """
        Load the room image that drives the mesh.

        Args:
            image_path: Path to the room image (PNG recommended)

        Returns:
            self for method chaining
        """
        self._room_loader = ImageLoader(self.alpha_threshold).load(image_path)
        self._welded = self._mesh = None
        return self

    def load_room_array(self, rgba_array: np.ndarray) -> "RoomBuilder":
        """Load room image data from an (H, W, 4) array."""
        self._room_loader = ImageLoader(self.alpha_threshold).load_from_array(rgba_array)
        self._welded = self._mesh = None
        return self

    def load_collider_image(self, image_path: Union[str, Path]) -> "RoomBuilder":
        """
        Load the colored collider image.

        Args:
            image_path: Path to the collider image

        Returns:
            self for method chaining
        """
        self._collider_loader = ImageLoader(self.alpha_threshold).load(image_path)
        self._colliders = None
        return self

    def load_collider_array(self, rgba_array: np.ndarray) -> "RoomBuilder":
        """Load collider image data from an (H, W, 4) array."""
        self._collider_loader = ImageLoader(self.alpha_threshold).load_from_array(rgba_array)
        self._colliders = None
        return self

    def compile_mesh(self, flat: bool = True) -> "RoomBuilder":
        """
        Compile the room mesh.

        Args:
            flat: If True, keep the flat-shaded variant as the mesh

        Returns:
            self for method chaining
        """
        if self._room_loader is None:
            raise RuntimeError("No room image loaded. Call load_room_image() first.")

        compiler = RoomMeshCompiler(world_scale=self.world_scale)
        self._welded = compiler.compile(self._room_loader.solidity_mask)
        self._mesh = self._welded
        if flat:
            self._mesh = flat_shade(self._welded)

        logger.info(
            "Room mesh: %d vertices, %d triangles",
            self._mesh.vertex_count, self._mesh.triangle_count
        )
        return self

    def merge_colliders(self) -> "RoomBuilder":
        """
        Merge the collider image into boxes.

        Pixel coordinates are normalized by the room image's size when one
        is loaded, so both images line up in world space.

        Returns:
            self for method chaining
        """
        if self._collider_loader is None:
            raise RuntimeError("No collider image loaded. Call load_collider_image() first.")

        uv_size = self._room_loader.size if self._room_loader is not None else None
        merger = ColliderMerger(
            world_scale=self.world_scale,
            collider_height=self.collider_height,
            uv_size=uv_size
        )
        self._colliders = merger.merge(self._collider_loader.color_mask)

        logger.info("Room colliders: %d boxes", len(self._colliders))
        return self

    def export_obj(self, output_path: Union[str, Path], include_uvs: bool = True):
        """
        Export the room mesh to Wavefront OBJ.

        Args:
            output_path: Output file path
            include_uvs: Write texture coordinates
        """
        if self._mesh is None:
            self.compile_mesh()

        OBJExporter(include_uvs=include_uvs).export(self._mesh, output_path)
        logger.info("Exported mesh to %s", output_path)

    def export_colliders(self, output_path: Union[str, Path]):
        """Export the collider boxes to JSON."""
        if self._colliders is None:
            self.merge_colliders()

        ColliderExporter().export(self._colliders, output_path)
        logger.info("Exported colliders to %s", output_path)

    @property
    def mesh(self) -> Optional[RoomMesh]:
        """Get the current room mesh."""
        return self._mesh

    @property
    def welded_mesh(self) -> Optional[RoomMesh]:
        """Get the welded mesh the current mesh was derived from."""
        return self._welded

    @property
    def colliders(self) -> Optional[List[ColliderBox]]:
        """Get the merged collider boxes."""
        return self._colliders

    @property
    def vertex_count(self) -> int:
        """Get the number of mesh vertices."""
        if self._mesh is None:
            return 0
        return self._mesh.vertex_count

    @property
    def triangle_count(self) -> int:
        """Get the number of mesh triangles."""
        if self._mesh is None:
            return 0
        return self._mesh.triangle_count

    @property
    def collider_count(self) -> int:
        """Get the number of collider boxes."""
        if self._colliders is None:
            return 0
        return len(self._colliders)

    def get_mesh_stats(self) -> dict:
        """
        Get welding statistics for the current room.

        Returns:
            Dictionary with mesh statistics
        """
        if self._welded is None:
            return {"error": "No mesh compiled"}

        stats = mesh_stats(self._welded, self._room_loader.solidity_mask.shape)
        stats["solid_cells"] = self._room_loader.count_solid()
        stats["image_size"] = self._room_loader.size
        return stats

    def preview(self) -> dict:
        """
        Get a preview of the current state.

        Returns:
            Dictionary with current state information
        """
        info = {
            "room_loaded": self._room_loader is not None,
            "colliders_loaded": self._collider_loader is not None,
            "meshed": self._mesh is not None,
            "merged": self._colliders is not None,
        }

        if self._room_loader:
            info["room_size"] = self._room_loader.size
        if self._collider_loader:
            info["collider_size"] = self._collider_loader.size
        if self._mesh:
            info["vertex_count"] = self._mesh.vertex_count
            info["triangle_count"] = self._mesh.triangle_count
        if self._colliders is not None:
            info["collider_count"] = len(self._colliders)

        return info
