"""
Patch Perturbation
==================

Builds the perturbed image for one sampling trial: every patch whose mask entry is
``False`` is overwritten with a constant fill colour, every other pixel is left
untouched.

Images are ``numpy.ndarray`` or ``torch.Tensor`` buffers laid out as ``(H, W)``,
``(H, W, C)`` (OpenCV, the default) or ``(C, H, W)`` (PyTorch, ``channels_first=True``).
The input is copied once per call and never modified, so the same base image can be
perturbed repeatedly or from several threads.
"""

from typing import Optional, Sequence, Tuple, Union

import numpy as np
import torch

from patch_shap.algorithms.patch_grid import Patch
from patch_shap.errors import DimensionMismatch, InvalidConfiguration

__all__ = ["ImagePerturber", "image_size", "FillValue"]

FillValue = Union[int, float, Sequence[Union[int, float]]]
Image = Union[np.ndarray, torch.Tensor]


def image_size(image: Image, channels_first: bool = False) -> Tuple[int, int]:
    """Return ``(width, height)`` of an image buffer.

    :param image: Array or tensor of rank 2 or 3.
    :param bool channels_first: Whether a rank-3 image is ``(C, H, W)``.
    :return Tuple[int, int]: Width and height in pixels.
    """
    shape = tuple(image.shape)
    if len(shape) == 2:
        return shape[1], shape[0]
    if len(shape) == 3:
        return (shape[2], shape[1]) if channels_first else (shape[1], shape[0])
    raise DimensionMismatch(f"expected an image of rank 2 or 3, got shape {shape}")


def _num_channels(image: Image, channels_first: bool) -> int:
    if image.ndim == 2:
        return 1
    return image.shape[0] if channels_first else image.shape[-1]


def _dtype_limits(image: Image) -> Optional[Tuple[float, float, bool]]:
    """``(lowest, highest, integral)`` values the image's dtype can hold, None if unchecked."""
    if isinstance(image, torch.Tensor):
        dtype = image.dtype
        if dtype == torch.bool:
            return 0, 1, True
        if dtype.is_floating_point:
            info = torch.finfo(dtype)
            return info.min, info.max, False
        if dtype.is_complex:
            return None
        info = torch.iinfo(dtype)
        return info.min, info.max, True
    dtype = np.asarray(image).dtype
    if dtype == np.bool_:
        return 0, 1, True
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return info.min, info.max, True
    if np.issubdtype(dtype, np.floating):
        info = np.finfo(dtype)
        return float(info.min), float(info.max), False
    return None


class ImagePerturber:
    """Fill excluded patches with a constant colour.

    :param mask_color: Scalar applied to every channel, or one value per channel.
        Defaults to ``0`` (black).
    :param bool channels_first: Treat rank-3 images as ``(C, H, W)``.
    """

    def __init__(self, mask_color: FillValue = 0, channels_first: bool = False):
        if np.ndim(mask_color) > 1:
            raise InvalidConfiguration(f"mask_color must be a scalar or 1-D, got {mask_color!r}")
        if np.ndim(mask_color) == 1 and len(mask_color) == 0:
            raise InvalidConfiguration("mask_color must not be empty")
        self.mask_color = mask_color
        self.channels_first = channels_first

    def _fill_for(self, image: Image):
        channels = _num_channels(image, self.channels_first)
        limits = _dtype_limits(image)
        if limits is not None:
            lowest, highest, integral = limits
            values = np.asarray(self.mask_color, dtype=np.float64).reshape(-1)
            if np.any(values < lowest) or np.any(values > highest):
                raise InvalidConfiguration(
                    f"mask_color {self.mask_color!r} does not fit the image dtype {image.dtype} "
                    f"(range {lowest}..{highest})"
                )
            if integral and not np.all(np.mod(values, 1) == 0):
                raise InvalidConfiguration(
                    f"mask_color {self.mask_color!r} is not integral but the image dtype is {image.dtype}"
                )
        if np.ndim(self.mask_color) == 0:
            return self.mask_color
        if len(self.mask_color) != channels:
            raise InvalidConfiguration(
                f"mask_color has {len(self.mask_color)} values but the image has {channels} channels"
            )
        if image.ndim == 2:
            return self.mask_color[0]
        if isinstance(image, torch.Tensor):
            fill = torch.as_tensor(self.mask_color, dtype=image.dtype, device=image.device)
        else:
            fill = np.asarray(self.mask_color, dtype=image.dtype)
        return fill[:, None, None] if self.channels_first else fill

    def check(self, image: Image) -> None:
        """Validate the fill colour against ``image`` (channel count, dtype range).

        :raises InvalidConfiguration: If the fill cannot be written into ``image``.
        """
        image_size(image, self.channels_first)
        self._fill_for(image)

    def apply(self, image: Image, patches: Sequence[Patch], mask: Sequence[bool]) -> Image:
        """Return a copy of ``image`` with every patch where ``mask`` is False filled.

        :param image: Base image, left unchanged.
        :param Sequence[Patch] patches: Patch grid of the image.
        :param Sequence[bool] mask: One entry per patch, ``True`` keeps the patch.
        :return: Perturbed image of the same type, dtype, shape and device.
        :raises DimensionMismatch: On a mask/patch length mismatch or an out-of-range patch.
        """
        if len(mask) != len(patches):
            raise DimensionMismatch(f"mask has {len(mask)} entries for {len(patches)} patches")
        width, height = image_size(image, self.channels_first)
        fill = self._fill_for(image)

        out = image.clone() if isinstance(image, torch.Tensor) else np.array(image, copy=True)
        for patch, keep in zip(patches, mask):
            if keep:
                continue
            if patch.x < 0 or patch.y < 0 or patch.x + patch.width > width or patch.y + patch.height > height:
                raise DimensionMismatch(f"{patch} lies outside a {width}x{height} image")
            rows, cols = patch.slices
            if self.channels_first and out.ndim == 3:
                out[:, rows, cols] = fill
            else:
                out[rows, cols] = fill
        return out

    def __call__(self, image: Image, patches: Sequence[Patch], mask: Sequence[bool]) -> Image:
        return self.apply(image, patches, mask)
