"""
Patch Grid Partitioning
=======================

Splits an image's pixel rectangle into a deterministic, non-overlapping grid of
rectangular patches. Each patch is one attribution unit (one Shapley "player").

The sweep is row-major (y outer, x inner) with a fixed step. Patches on the right
and bottom borders are clipped to the image extent instead of overflowing it, so
the grid always tiles ``[0, width) x [0, height)`` exactly once.

The index of a patch in the returned list is its identity for the whole run: masks
and attribution values are aligned to it.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from patch_shap.errors import DimensionMismatch, InvalidConfiguration

__all__ = ["Patch", "build_patch_grid", "grid_shape", "patch_values_to_map"]


@dataclass(frozen=True)
class Patch:
    """Immutable rectangle in pixel coordinates.

    :param int x: Left column (inclusive).
    :param int y: Top row (inclusive).
    :param int width: Number of columns, at least 1.
    :param int height: Number of rows, at least 1.
    """
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def slices(self) -> Tuple[slice, slice]:
        """Row and column slices selecting this patch from an ``(H, W, ...)`` array."""
        return slice(self.y, self.y + self.height), slice(self.x, self.x + self.width)

    def contains(self, px: int, py: int) -> bool:
        return self.x <= px < self.x + self.width and self.y <= py < self.y + self.height


def _check_positive(name: str, value) -> int:
    # bool is an int subclass but never a valid size
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")
    return int(value)


def build_patch_grid(width: int, height: int, patch_size: int) -> List[Patch]:
    """Partition a ``width x height`` image into square patches of side ``patch_size``.

    Border patches are ``min(patch_size, remaining)`` wide/high. If ``patch_size``
    exceeds both dimensions, a single patch covers the image.

    :param int width: Image width in pixels.
    :param int height: Image height in pixels.
    :param int patch_size: Patch side length in pixels.
    :return List[Patch]: Patches in row-major order.
    :raises InvalidConfiguration: If any argument is not a positive integer.
    """
    width = _check_positive("width", width)
    height = _check_positive("height", height)
    patch_size = _check_positive("patch_size", patch_size)

    patches = []
    for y in range(0, height, patch_size):
        for x in range(0, width, patch_size):
            patches.append(Patch(x, y, min(patch_size, width - x), min(patch_size, height - y)))
    return patches


def grid_shape(width: int, height: int, patch_size: int) -> Tuple[int, int]:
    """Number of patch columns and rows produced by :func:`build_patch_grid`.

    :return Tuple[int, int]: ``(cols, rows)``.
    """
    width = _check_positive("width", width)
    height = _check_positive("height", height)
    patch_size = _check_positive("patch_size", patch_size)
    return -(-width // patch_size), -(-height // patch_size)


def patch_values_to_map(patches: Sequence[Patch], values: Sequence[float],
                        width: int, height: int) -> np.ndarray:
    """Spread one value per patch over the pixels it covers.

    :param Sequence[Patch] patches: Patch sequence that produced ``values``.
    :param Sequence[float] values: One value per patch, same order.
    :param int width: Image width.
    :param int height: Image height.
    :return np.ndarray: ``(height, width)`` float64 map.
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 1 or len(values) != len(patches):
        raise DimensionMismatch(
            f"got {values.shape} values for {len(patches)} patches"
        )
    heatmap = np.zeros((height, width), dtype=np.float64)
    for patch, value in zip(patches, values):
        if patch.x + patch.width > width or patch.y + patch.height > height:
            raise DimensionMismatch(f"{patch} lies outside a {width}x{height} image")
        heatmap[patch.slices] = value
    return heatmap
