"""
Level Legend Decoding

A level is authored as an RGB image where each pixel is one grid cell and
its color says what stands there. Decoding yields the cell collections the
room validator needs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .blueprint import WorldSnapshot
from .grid import Cell
from .ingestion import RoomAssetError

logger = logging.getLogger(__name__)

LevelColor = Tuple[int, int, int]

COLOR_PLAYER: LevelColor = (255, 0, 0)
COLOR_FLOOR: LevelColor = (255, 255, 255)
COLOR_WATER: LevelColor = (128, 128, 255)
COLOR_WALL: LevelColor = (128, 128, 128)
COLOR_FENCE: LevelColor = (255, 64, 0)
COLOR_BRIDGE: LevelColor = (128, 64, 0)
COLOR_DOOR: LevelColor = (255, 128, 0)
COLOR_BLUEPRINT: LevelColor = (0, 0, 255)
COLOR_BRICK_WALL: LevelColor = (255, 60, 0)

# Height at which billboard markers (doors, blueprints) stand
MARKER_HEIGHT = 0.45


@dataclass
class LevelLayout:
    """Cells of a decoded level, in x-major scan order."""

    width: int = 0
    height: int = 0
    walls: List[Cell] = field(default_factory=list)
    waters: List[Cell] = field(default_factory=list)
    doors: List[Cell] = field(default_factory=list)
    blueprints: List[Cell] = field(default_factory=list)
    player_spawn: Optional[Cell] = None

    def snapshot(self, disabled_walls: Iterable[Cell] = ()) -> WorldSnapshot:
        """
        Build a validator snapshot.

        Args:
            disabled_walls: Wall cells currently picked up by the player

        Returns:
            WorldSnapshot with every wall, water and door cell
        """
        disabled = set(disabled_walls)
        return WorldSnapshot(
            walls=tuple((cell, cell not in disabled) for cell in self.walls),
            waters=tuple(self.waters),
            doors=tuple(self.doors),
        )

    def blueprint_positions(self) -> List[Tuple[float, float, float]]:
        """World positions of the blueprint markers."""
        return [(float(x), MARKER_HEIGHT, float(z)) for x, z in self.blueprints]

    def counts(self) -> Dict[str, int]:
        return {
            "walls": len(self.walls),
            "waters": len(self.waters),
            "doors": len(self.doors),
            "blueprints": len(self.blueprints),
        }


def decode_level(rgb: np.ndarray) -> LevelLayout:
    """
    Decode an RGB level image.

    Args:
        rgb: Array of shape (H, W, 3) or (H, W, 4); alpha is ignored

    Returns:
        LevelLayout; pixel (x, z) maps to cell (x, z)
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] not in (3, 4):
        raise ValueError("Level array must have shape (H, W, 3) or (H, W, 4)")

    height, width = rgb.shape[:2]
    layout = LevelLayout(width=width, height=height)

    for x in range(width):
        for z in range(height):
            pixel = tuple(int(c) for c in rgb[z, x, :3])
            cell = (x, z)

            if pixel == COLOR_PLAYER:
                layout.player_spawn = cell
            elif pixel == COLOR_DOOR:
                layout.doors.append(cell)
            elif pixel == COLOR_BLUEPRINT:
                layout.blueprints.append(cell)
            elif pixel in (COLOR_WALL, COLOR_BRICK_WALL):
                layout.walls.append(cell)
            elif pixel == COLOR_WATER:
                layout.waters.append(cell)

    logger.debug("Decoded %dx%d level: %s", width, height, layout.counts())
    return layout


def load_level(image_path: Union[str, Path]) -> LevelLayout:
    """Load and decode a level image from disk."""
    image_path = Path(image_path)
    if not image_path.exists():
        raise FileNotFoundError(f"Level not found: {image_path}")

    try:
        with Image.open(image_path) as img:
            rgb = np.array(img.convert("RGB"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise RoomAssetError(f"Cannot decode level {image_path}: {e}") from e

    logger.info("Loaded level %s (%dx%d)", image_path, rgb.shape[1], rgb.shape[0])
    return decode_level(rgb)
