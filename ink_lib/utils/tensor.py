"""Raster to model-input tensor encoding.

Converts a C x C raster into the [1, M, M, 1] float tensor the inference
engine expects. The steps mirror the preprocessing the model was trained
with, so their order matters:

    1. Bicubic resize C x C -> M x M (nearest-neighbour loses thin ink).
    2. Clamp channels to [0, 255], then weighted luma sum.
    3. Divide by 255.
    4. Invert, so white paper -> 0.0 and black ink -> 1.0.
    5. Reshape to [1, M, M, 1] (batch, height, width, channel).

Example usage::

    from ink_lib.utils.tensor import encode_raster

    tensor = encode_raster(image, input_size=64)
    tensor.shape       # (1, 64, 64, 1)
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
from PIL import Image

from ..config import INPUT_SIZE, LUMA_WEIGHTS
from ..errors import InvalidInputError

MAX_CHANNEL_VALUE = 255.0

RasterLike = Union[Image.Image, np.ndarray]


def _to_float_rgb(raster: RasterLike) -> np.ndarray:
    """HxWx3 float64 copy of a Pillow image or array raster."""
    if isinstance(raster, Image.Image):
        if raster.width == 0 or raster.height == 0:
            raise InvalidInputError(f"Raster has zero size: {raster.size}")
        if raster.mode not in ('RGB', 'L'):
            raster = raster.convert('RGB')
        arr = np.asarray(raster, dtype=np.float64)
    elif isinstance(raster, np.ndarray):
        arr = raster.astype(np.float64)
    else:
        raise InvalidInputError(f"Unsupported raster type: {type(raster).__name__}")

    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[:, :, 0]
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    elif arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise InvalidInputError(f"Raster must be HxW, HxWx1, HxWx3 or HxWx4, got {arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise InvalidInputError(f"Raster has zero size: {arr.shape[:2]}")
    return arr[:, :, :3]


def resize_bicubic(channels: np.ndarray, size: int) -> np.ndarray:
    """Bicubic resize of an HxWxC float array to size x size x C.

    Each channel is resampled as a Pillow 32-bit float image so values
    are not quantized before the clamp.
    """
    planes = []
    for c in range(channels.shape[2]):
        plane = Image.fromarray(np.ascontiguousarray(channels[:, :, c], dtype=np.float32))
        plane = plane.resize((size, size), Image.Resampling.BICUBIC)
        planes.append(np.asarray(plane, dtype=np.float64))
    return np.stack(planes, axis=2)


def luminance(rgb: np.ndarray, weights: Sequence[float] = LUMA_WEIGHTS) -> np.ndarray:
    """Weighted luma of an HxWx3 array after clamping to [0, 255]."""
    clamped = np.clip(rgb, 0.0, MAX_CHANNEL_VALUE)
    return clamped @ np.asarray(weights, dtype=np.float64)


def encode_raster(raster: RasterLike, input_size: int = INPUT_SIZE,
                  luma_weights: Sequence[float] = LUMA_WEIGHTS) -> np.ndarray:
    """Encode a raster as an inverted-intensity model input tensor.

    Args:
        raster: Pillow image (RGB, RGBA, L, ...) or HxW[xC] array with
            0-255 channel values. Alpha is ignored.
        input_size: Model input side length M.
        luma_weights: (R, G, B) weights summing to 1.0.

    Returns:
        float32 array of shape (1, M, M, 1) with values in [0, 1].

    Raises:
        InvalidInputError: For zero-size or malformed rasters.
    """
    if input_size <= 0:
        raise InvalidInputError(f"input_size must be positive, got {input_size}")
    rgb = _to_float_rgb(raster)
    resized = resize_bicubic(rgb, input_size)
    gray = luminance(resized, luma_weights) / MAX_CHANNEL_VALUE
    inverted = 1.0 - gray
    # Float rounding can leave values a hair outside the unit interval
    inverted = np.clip(inverted, 0.0, 1.0)
    return inverted.astype(np.float32).reshape(1, input_size, input_size, 1)
