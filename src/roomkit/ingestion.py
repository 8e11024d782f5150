"""
Image Ingestion Module

This module handles:
- Loading room and level rasters as RGBA with Pillow
- Alpha thresholding into a binary solidity mask (alpha >= threshold)
- Building the solid+color mask used by the collider merger

Load failures are fatal: there is no fallback geometry for a missing or
undecodable image.
"""

import logging
from pathlib import Path
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALPHA_THRESHOLD = 128


class RoomAssetError(RuntimeError):
    """Raised when an image exists but cannot be decoded."""


class ColorMask(NamedTuple):
    """Solidity plus RGB color per pixel, indexed [z, x]."""
    solid: np.ndarray   # (H, W) bool
    rgb: np.ndarray     # (H, W, 3) uint8

    @property
    def width(self) -> int:
        return self.solid.shape[1]

    @property
    def height(self) -> int:
        return self.solid.shape[0]


def _freeze(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def solidity_from_rgba(rgba: np.ndarray, alpha_threshold: int = ALPHA_THRESHOLD) -> np.ndarray:
    """
    Threshold the alpha channel of an RGBA array.

    Args:
        rgba: Array of shape (H, W, 4)
        alpha_threshold: Pixels with alpha >= threshold are solid

    Returns:
        Read-only (H, W) bool array
    """
    rgba = np.asarray(rgba)
    if rgba.ndim != 3 or rgba.shape[2] != 4:
        raise ValueError("Color array must have shape (H, W, 4)")
    return _freeze(rgba[:, :, 3] >= alpha_threshold)


def color_mask_from_rgba(rgba: np.ndarray, alpha_threshold: int = ALPHA_THRESHOLD) -> ColorMask:
    """Build a ColorMask from an RGBA array of shape (H, W, 4)."""
    solid = solidity_from_rgba(rgba, alpha_threshold)
    rgb = _freeze(np.ascontiguousarray(np.asarray(rgba)[:, :, :3], dtype=np.uint8))
    return ColorMask(solid=solid, rgb=rgb)


class ImageLoader:
    """
    Raster loader for room and collider images.

    Key features:
    - Any Pillow-readable format, normalized to RGBA
    - Binary alpha thresholding
    - Read-only arrays once loaded
    """

    def __init__(self, alpha_threshold: int = ALPHA_THRESHOLD):
        """
        Initialize the image loader.

        Args:
            alpha_threshold: Pixels with alpha >= threshold become solid (0-255)
        """
        self.alpha_threshold = alpha_threshold
        self._color_image: Optional[np.ndarray] = None
        self._solidity_mask: Optional[np.ndarray] = None

    def load(self, image_path: Union[str, Path]) -> "ImageLoader":
        """
        Load an image from disk.

        Args:
            image_path: Path to the image (PNG recommended)

        Returns:
            self for method chaining
        """
        image_path = Path(image_path)
        if not image_path.exists():
            raise FileNotFoundError(f"Image not found: {image_path}")

        try:
            with Image.open(image_path) as img:
                if img.mode != "RGBA":
                    img = img.convert("RGBA")
                rgba = np.array(img, dtype=np.uint8)
        except (UnidentifiedImageError, OSError) as e:
            raise RoomAssetError(f"Cannot decode image {image_path}: {e}") from e

        logger.info("Loaded %s (%dx%d)", image_path, rgba.shape[1], rgba.shape[0])
        return self.load_from_array(rgba)

    def load_from_array(self, rgba_array: np.ndarray) -> "ImageLoader":
        """
        Load from a numpy array instead of a file.

        Args:
            rgba_array: RGBA image array of shape (H, W, 4)

        Returns:
            self for method chaining
        """
        rgba_array = np.asarray(rgba_array)
        if rgba_array.ndim != 3 or rgba_array.shape[2] != 4:
            raise ValueError("Color array must have shape (H, W, 4)")

        self._color_image = _freeze(rgba_array.astype(np.uint8))
        self._solidity_mask = solidity_from_rgba(self._color_image, self.alpha_threshold)
        return self

    @property
    def color_image(self) -> np.ndarray:
        """Get the RGBA color image array."""
        if self._color_image is None:
            raise RuntimeError("No image loaded")
        return self._color_image

    @property
    def solidity_mask(self) -> np.ndarray:
        """Get the binary solidity mask (True = solid)."""
        if self._solidity_mask is None:
            raise RuntimeError("No image loaded")
        return self._solidity_mask

    @property
    def color_mask(self) -> ColorMask:
        """Get the solid+color mask for collider merging."""
        return ColorMask(
            solid=self.solidity_mask,
            rgb=_freeze(np.ascontiguousarray(self.color_image[:, :, :3])),
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Get image size as (width, height)."""
        image = self.color_image
        return (image.shape[1], image.shape[0])

    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    def count_solid(self) -> int:
        """Number of solid pixels."""
        return int(np.count_nonzero(self.solidity_mask))
