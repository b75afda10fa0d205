"""Bounding box and fit-transform calculations.

This module turns raw ink coordinates into the transform that centers and
size-normalizes the ink on the recognition canvas. None of these functions
raise on degenerate input: an empty session yields no box, and a
zero-size box yields a pure translation.

The module provides the following functions:
    compute_bounds: Padded, clamped bounding box of all ink.
    target_size: Auto-scale policy for the larger box side.
    fit_scale: Scale factor for a box under the auto-scale policy.
    fit_transform: Composed translate -> scale -> translate transform.

Example usage::

    from ink_lib.utils.geometry import compute_bounds, fit_transform

    bbox = compute_bounds(session.snapshot(), padding=6.0, extent=300)
    if bbox is not None:
        transform = fit_transform(bbox, canvas_size=300)
        centered = transform.apply(bbox.center)   # Point(150, 150)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..config import CANVAS_SIZE, MAX_SIZE, MIN_SIZE
from ..domain.geometry import AffineTransform, BBox, Point
from ..domain.session import SessionSnapshot

logger = logging.getLogger(__name__)


def compute_bounds(source: SessionSnapshot | Iterable[Point], padding: float = 0.0,
                   extent: Optional[float] = CANVAS_SIZE) -> Optional[BBox]:
    """Bounding box of all ink with padding, clamped to the surface.

    Covers finalized strokes and the active stroke. The padding (normally
    half the render stroke width) keeps the round caps of edge strokes
    inside the box.

    Args:
        source: A session snapshot or any iterable of points.
        padding: Margin added on each side.
        extent: Capture surface size; edges are clamped into [0, extent].
            None disables clamping.

    Returns:
        The padded box, or None when there are no points.
    """
    points = source.points() if isinstance(source, SessionSnapshot) else source
    bbox = BBox.from_points(points)
    if bbox is None:
        return None
    bbox = bbox.expanded(padding)
    if extent is not None:
        bbox = bbox.clamped(0.0, float(extent))
    return bbox


def target_size(raw_size: float, min_size: float = MIN_SIZE,
                max_size: float = MAX_SIZE) -> float:
    """Clamp the larger box side into [min_size, max_size].

    Sizes already inside the range are returned unchanged, so only very
    small or very large ink is rescaled.
    """
    if raw_size < min_size:
        return min_size
    if raw_size > max_size:
        return max_size
    return raw_size


def fit_scale(bbox: BBox, min_size: float = MIN_SIZE, max_size: float = MAX_SIZE) -> float:
    """Uniform scale factor for bbox; 1.0 for a zero-size box."""
    raw_size = bbox.size
    if raw_size <= 0:
        return 1.0
    return target_size(raw_size, min_size, max_size) / raw_size


def fit_transform(bbox: BBox, canvas_size: float = CANVAS_SIZE,
                  min_size: float = MIN_SIZE, max_size: float = MAX_SIZE) -> AffineTransform:
    """Transform that centers bbox on the canvas at its target size.

    Built as translate(-box center), then scale, then translate(canvas
    center), i.e. ``p' = s * (p - c_box) + c_canvas``. The box center
    always lands on the canvas center whatever the scale.

    Args:
        bbox: Ink bounding box. Callers check for None first.
        canvas_size: Side length of the square canvas.
        min_size: Lower auto-scale threshold.
        max_size: Upper auto-scale threshold.
    """
    scale = fit_scale(bbox, min_size, max_size)
    center = bbox.center
    half = canvas_size / 2
    logger.debug("Fit transform: box %.1fx%.1f at (%.1f, %.1f), scale %.3f",
                 bbox.width, bbox.height, center.x, center.y, scale)
    return (AffineTransform.translation(-center.x, -center.y)
            .then(AffineTransform.scaling(scale))
            .then(AffineTransform.translation(half, half)))
