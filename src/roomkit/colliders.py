"""
Collider Region Merger

Groups solid pixels of a collider mask into same-color 4-connected regions
and emits one axis-aligned box per region. The box is the region's bounding
rectangle, so concave (e.g. L-shaped) regions produce a box that also covers
the cells they are missing. Color the mask accordingly when that matters.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .grid import NEIGHBOR_OFFSETS, to_uv
from .ingestion import ColorMask
from .room_mesh import ROOM_SIZE

logger = logging.getLogger(__name__)

COLLIDER_HEIGHT = 1.2


@dataclass(frozen=True)
class ColliderBox:
    """
    Static box collider in world units.

    Attributes:
        center: (x, y, z) box center
        size: (x, y, z) full extents
        color: RGB of the region that produced the box
        cell_min: inclusive (x, z) pixel bound
        cell_max: inclusive (x, z) pixel bound
    """

    center: Tuple[float, float, float]
    size: Tuple[float, float, float]
    color: Tuple[int, int, int]
    cell_min: Tuple[int, int]
    cell_max: Tuple[int, int]

    @property
    def half_extents(self) -> Tuple[float, float, float]:
        return (self.size[0] / 2, self.size[1] / 2, self.size[2] / 2)

    @property
    def lower(self) -> Tuple[float, float, float]:
        return tuple(c - h for c, h in zip(self.center, self.half_extents))

    @property
    def upper(self) -> Tuple[float, float, float]:
        return tuple(c + h for c, h in zip(self.center, self.half_extents))

    def covers_cell(self, cell: Tuple[int, int]) -> bool:
        """True if the pixel lies inside this box's pixel bounds."""
        return (self.cell_min[0] <= cell[0] <= self.cell_max[0]
                and self.cell_min[1] <= cell[1] <= self.cell_max[1])


def flood_region(mask: ColorMask, seed: Tuple[int, int], visited: np.ndarray):
    """
    Collect the same-color 4-connected region around a seed pixel.

    Uses an explicit stack. Cells are marked visited when pushed, and a
    neighbor is admitted only if it is solid and its RGB matches the seed's.

    Args:
        mask: Solid+color mask
        seed: (x, z) solid pixel, already marked visited
        visited: (H, W) bool array, updated in place

    Returns:
        List of (x, z) pixels in the region
    """
    height, width = mask.solid.shape
    seed_color = mask.rgb[seed[1], seed[0]]
    region = []
    stack = [seed]

    while stack:
        x, z = stack.pop()
        region.append((x, z))
        for dx, dz in NEIGHBOR_OFFSETS:
            nx, nz = x + dx, z + dz
            if nx < 0 or nz < 0 or nx >= width or nz >= height:
                continue
            if not mask.solid[nz, nx] or visited[nz, nx]:
                continue
            if not np.array_equal(mask.rgb[nz, nx], seed_color):
                continue
            visited[nz, nx] = True
            stack.append((nx, nz))

    return region


class ColliderMerger:
    """
    Builds a compound static collider out of a colored collider mask.
    """

    def __init__(
        self,
        world_scale: float = ROOM_SIZE,
        collider_height: float = COLLIDER_HEIGHT,
        uv_size: Optional[Tuple[int, int]] = None
    ):
        """
        Initialize the merger.

        Args:
            world_scale: Size of the whole room in world units along X and Z
            collider_height: Height (Y extent) of every box
            uv_size: (width, height) used to normalize pixel coordinates.
                Defaults to the collider mask's own size; pass the render
                image's size when the collider image has another resolution.
        """
        self.world_scale = world_scale
        self.collider_height = collider_height
        self.uv_size = uv_size

    def _box(
        self,
        bound_min: Tuple[int, int],
        bound_max: Tuple[int, int],
        color: Tuple[int, int, int],
        width: int,
        height: int
    ) -> ColliderBox:
        lower_u = to_uv(bound_min, width, height)
        upper_u = to_uv((bound_max[0] + 1, bound_max[1] + 1), width, height)
        lower = ((lower_u[0] - 0.5) * self.world_scale, (lower_u[1] - 0.5) * self.world_scale)
        upper = ((upper_u[0] - 0.5) * self.world_scale, (upper_u[1] - 0.5) * self.world_scale)

        return ColliderBox(
            center=(
                (lower[0] + upper[0]) / 2,
                self.collider_height / 2,
                (lower[1] + upper[1]) / 2,
            ),
            size=(upper[0] - lower[0], self.collider_height, upper[1] - lower[1]),
            color=color,
            cell_min=bound_min,
            cell_max=bound_max,
        )

    def merge(self, mask: ColorMask) -> List[ColliderBox]:
        """
        Emit one bounding box per same-color 4-connected region.

        Args:
            mask: Solid+color mask

        Returns:
            Boxes in the order their regions were first reached (x-major scan)
        """
        if mask.solid.ndim != 2 or mask.rgb.shape[:2] != mask.solid.shape:
            raise ValueError("Color mask solid (H, W) and rgb (H, W, 3) must agree")

        height, width = mask.solid.shape
        uv_width, uv_height = self.uv_size or (width, height)
        visited = np.zeros((height, width), dtype=bool)
        boxes: List[ColliderBox] = []

        for x in range(width):
            for z in range(height):
                if not mask.solid[z, x] or visited[z, x]:
                    continue

                visited[z, x] = True
                region = flood_region(mask, (x, z), visited)

                xs = [c[0] for c in region]
                zs = [c[1] for c in region]
                color = tuple(int(c) for c in mask.rgb[z, x])
                boxes.append(self._box(
                    (min(xs), min(zs)), (max(xs), max(zs)), color, uv_width, uv_height
                ))

        logger.debug("Merged %dx%d collider mask into %d boxes", width, height, len(boxes))
        return boxes


def merge_colliders(
    mask: ColorMask,
    world_scale: float = ROOM_SIZE,
    collider_height: float = COLLIDER_HEIGHT,
    uv_size: Optional[Tuple[int, int]] = None
) -> List[ColliderBox]:
    """Merge a collider mask; see ColliderMerger.merge."""
    return ColliderMerger(world_scale, collider_height, uv_size).merge(mask)
