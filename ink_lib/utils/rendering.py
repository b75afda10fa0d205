"""Stroke rasterization for recognition.

This module renders a session snapshot onto a fixed-size Pillow image,
the raster that the tensor encoder consumes. It is separate from any
on-screen drawing: the recognition pen is deliberately thicker than the
interactive one so the ink survives downsampling to the model input size.

The module provides the following:
    RenderPolicy: Protocol for pluggable stroke drawing.
    RoundCapRenderPolicy: Default policy, round caps and joins.
    rasterize: Render a snapshot under a transform.
    capture: Bounds -> fit -> rasterize, or None when there is no ink.

Known limitation:
    Strokes with a single point (a tap without movement) render nothing,
    so a lone dot is not seen by the model.

Example usage::

    from ink_lib.utils.rendering import capture

    image = capture(session.snapshot())
    if image is None:
        print("nothing to recognize")
    else:
        image.save('capture.png')
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence, Tuple

from PIL import Image, ImageDraw

from ..config import DEFAULT_CONFIG, RecognizerConfig
from ..domain.geometry import AffineTransform
from ..domain.session import SessionSnapshot
from .geometry import compute_bounds, fit_transform

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class RenderPolicy(Protocol):
    """Protocol for drawing one transformed stroke.

    Implementations receive canvas-space coordinates for a stroke with at
    least two points and draw it onto ``draw``.

    Example implementation::

        class HairlinePolicy:
            def draw_stroke(self, draw, points):
                draw.line(points, fill=(0, 0, 0), width=1)
    """

    def draw_stroke(self, draw: ImageDraw.ImageDraw,
                    points: Sequence[Tuple[float, float]]) -> None:
        ...


class RoundCapRenderPolicy:
    """Connected segments with round joins and round end caps.

    Attributes:
        width: Pen width in pixels.
        color: RGB ink colour.
    """

    def __init__(self, width: float = DEFAULT_CONFIG.stroke_width,
                 color: Color = DEFAULT_CONFIG.foreground_color):
        self.width = width
        self.color = tuple(color)

    @classmethod
    def from_config(cls, config: RecognizerConfig) -> RoundCapRenderPolicy:
        return cls(width=config.stroke_width, color=config.foreground_color)

    def draw_stroke(self, draw: ImageDraw.ImageDraw,
                    points: Sequence[Tuple[float, float]]) -> None:
        pen = max(1, int(round(self.width)))
        draw.line(list(points), fill=self.color, width=pen, joint='curve')
        # Pillow lines have butt ends; add the caps
        r = self.width / 2
        for x, y in (points[0], points[-1]):
            draw.ellipse([x - r, y - r, x + r, y + r], fill=self.color)


def rasterize(snapshot: SessionSnapshot, transform: AffineTransform,
              config: RecognizerConfig = DEFAULT_CONFIG,
              policy: Optional[RenderPolicy] = None,
              include_active: bool = True) -> Image.Image:
    """Render strokes onto a fresh C x C RGB image.

    Args:
        snapshot: Strokes to draw.
        transform: Surface -> canvas transform applied to every point.
        config: Supplies canvas size and background colour.
        policy: Stroke drawing strategy; defaults to round caps at the
            configured width.
        include_active: Also draw the in-progress stroke. Used for
            captures requested mid-stroke.

    Returns:
        RGB image of size (canvas_size, canvas_size).
    """
    if policy is None:
        policy = RoundCapRenderPolicy.from_config(config)
    size = config.canvas_size
    image = Image.new('RGB', (size, size), tuple(config.background_color))
    draw = ImageDraw.Draw(image)

    strokes = snapshot.all_strokes() if include_active else iter(snapshot.strokes)
    drawn = 0
    for stroke in strokes:
        if len(stroke) < 2:
            continue
        pts = transform.apply_array([p.to_tuple() for p in stroke])
        policy.draw_stroke(draw, [(float(x), float(y)) for x, y in pts])
        drawn += 1

    logger.debug("Rasterized %d strokes at %dx%d", drawn, size, size)
    return image


def capture(snapshot: SessionSnapshot, config: RecognizerConfig = DEFAULT_CONFIG,
            policy: Optional[RenderPolicy] = None) -> Optional[Image.Image]:
    """Capture the snapshot as a normalized raster.

    Computes the padded bounds, fits them to the canvas and renders the
    finalized strokes plus any active stroke.

    Returns:
        The raster, or None when the snapshot has no ink. An empty
        capture is an ordinary state, not an error.
    """
    bbox = compute_bounds(snapshot, padding=config.padding, extent=config.canvas_size)
    if bbox is None:
        logger.debug("Capture requested with no ink")
        return None
    transform = fit_transform(bbox, config.canvas_size, config.min_size, config.max_size)
    return rasterize(snapshot, transform, config, policy)
