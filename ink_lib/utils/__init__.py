"""Pipeline utilities for ink normalization.

This module provides the pure functions between a session snapshot and
the model input tensor.

Geometry (geometry.py):
    compute_bounds: Padded, clamped ink bounding box.
    target_size: Auto-scale policy.
    fit_scale: Scale factor for a box.
    fit_transform: Center-and-scale transform.

Rendering (rendering.py):
    RenderPolicy: Protocol for stroke drawing.
    RoundCapRenderPolicy: Default round-capped pen.
    rasterize: Render a snapshot under a transform.
    capture: Full bounds -> fit -> render step.

Tensor encoding (tensor.py):
    encode_raster: Raster -> [1, M, M, 1] inverted luma tensor.
    luminance: Clamped weighted luma.
"""

from .geometry import compute_bounds, fit_scale, fit_transform, target_size
from .rendering import RenderPolicy, RoundCapRenderPolicy, capture, rasterize
from .tensor import encode_raster, luminance

__all__ = [
    # Geometry
    'compute_bounds', 'target_size', 'fit_scale', 'fit_transform',
    # Rendering
    'RenderPolicy', 'RoundCapRenderPolicy', 'rasterize', 'capture',
    # Tensor
    'encode_raster', 'luminance',
]
