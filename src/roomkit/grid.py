"""
Grid Primitives

Integer cell and vertex keys shared by the mesh compiler, the collider
merger and the room validator.

Coordinate convention:
- A cell is an (x, z) pair of ints. Image column = x, image row = z.
- A vertex key is an (x, level, z) triple of ints.
- World positions are (x, y, z) with Y up; only XZ maps onto the grid.
"""

import math
from typing import Iterator, Sequence, Tuple

Cell = Tuple[int, int]
VertexKey = Tuple[int, int, int]

# Fixed neighbor order: +x, +z, -x, -z
NEIGHBOR_OFFSETS: Tuple[Cell, ...] = ((1, 0), (0, 1), (-1, 0), (0, -1))


def neighbors4(cell: Cell) -> Iterator[Cell]:
    """Yield the four axis-aligned neighbors of a cell in fixed order."""
    x, z = cell
    for dx, dz in NEIGHBOR_OFFSETS:
        yield (x + dx, z + dz)


def snap_scalar(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, value))


def snap_cell(x: float, z: float) -> Cell:
    """Snap a continuous XZ coordinate to its nearest cell."""
    return (snap_scalar(x), snap_scalar(z))


def snap_position(position: Sequence[float]) -> Cell:
    """
    Snap a world position to a cell.

    Args:
        position: (x, y, z) world position, or an (x, z) pair

    Returns:
        The nearest (x, z) cell
    """
    if len(position) == 3:
        return snap_cell(position[0], position[2])
    if len(position) == 2:
        return snap_cell(position[0], position[1])
    raise ValueError(f"Expected a 2D or 3D position, got {len(position)} components")


def xz_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Distance between two world positions projected onto the XZ plane."""
    return math.hypot(a[0] - b[0], a[2] - b[2])


def to_uv(cell: Cell, width: int, height: int) -> Tuple[float, float]:
    """Map a pixel corner to normalized texture space."""
    return (cell[0] / width, cell[1] / height)
