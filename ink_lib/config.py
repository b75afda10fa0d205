"""Shared configuration for the recognition pipeline.

This module centralizes the tunable constants used by:
    - utils.geometry (bounding box padding, auto-scale thresholds)
    - utils.rendering (canvas size, stroke width, colours)
    - utils.tensor (model input size, luma weights)
    - recognition.labels / recognition.ranking (alphabet range, top-K)

The module-level constants are the defaults. RecognizerConfig bundles them
into one immutable object that can be overridden from a dict or a JSON file,
so a deployment can retune the pipeline without code changes.

Example:
    >>> config = RecognizerConfig.from_dict({'top_k': 3})
    >>> config.canvas_size
    300
    >>> config.padding
    6.0
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

# Square capture canvas (surface space and raster space share this size)
CANVAS_SIZE = 300

# Square model input (ETL-style 64x64 single channel)
INPUT_SIZE = 64

# Recognition raster pen width, thicker than the on-screen pen
STROKE_WIDTH = 12.0

# Auto-scale thresholds for the larger bounding box side
MIN_SIZE = 80.0
MAX_SIZE = 220.0

# Number of ranked guesses returned
TOP_K = 5

# Hiragana block, inclusive
ALPHABET_RANGE = (0x3040, 0x309F)

# ITU-R BT.601 luma coefficients (R, G, B)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

BACKGROUND_COLOR = (255, 255, 255)
FOREGROUND_COLOR = (0, 0, 0)


@dataclass(frozen=True)
class RecognizerConfig:
    """Tunable parameters for capture, encoding and ranking.

    Attributes:
        canvas_size: Side length C of the capture surface and raster.
        input_size: Side length M of the model input tensor.
        stroke_width: Pen width used when rasterizing for recognition.
        padding: Margin added around the ink bounding box. None means
            half of stroke_width.
        min_size: Larger box sides below this are scaled up to it.
        max_size: Larger box sides above this are scaled down to it.
        top_k: Maximum number of results returned.
        alphabet_range: Inclusive (first, last) code points of the target
            alphabet.
        luma_weights: (R, G, B) weights for the luminance conversion.
            Must sum to 1.0.
        background_color: RGB fill of the raster.
        foreground_color: RGB ink colour.
    """
    canvas_size: int = CANVAS_SIZE
    input_size: int = INPUT_SIZE
    stroke_width: float = STROKE_WIDTH
    padding: Optional[float] = None
    min_size: float = MIN_SIZE
    max_size: float = MAX_SIZE
    top_k: int = TOP_K
    alphabet_range: Tuple[int, int] = ALPHABET_RANGE
    luma_weights: Tuple[float, float, float] = LUMA_WEIGHTS
    background_color: Tuple[int, int, int] = BACKGROUND_COLOR
    foreground_color: Tuple[int, int, int] = FOREGROUND_COLOR

    def __post_init__(self):
        if self.padding is None:
            object.__setattr__(self, 'padding', self.stroke_width / 2)
        # JSON gives lists; keep tuples so the config stays hashable
        for name in ('alphabet_range', 'luma_weights',
                     'background_color', 'foreground_color'):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        self.validate()

    def validate(self) -> None:
        """Check parameter consistency.

        Raises:
            ValueError: If any parameter is out of range.
        """
        if self.canvas_size <= 0:
            raise ValueError(f"canvas_size must be positive, got {self.canvas_size}")
        if self.input_size <= 0:
            raise ValueError(f"input_size must be positive, got {self.input_size}")
        if self.stroke_width <= 0:
            raise ValueError(f"stroke_width must be positive, got {self.stroke_width}")
        if self.padding < 0:
            raise ValueError(f"padding must be non-negative, got {self.padding}")
        if not 0 < self.min_size <= self.max_size:
            raise ValueError(
                f"need 0 < min_size <= max_size, got {self.min_size}, {self.max_size}")
        if self.top_k <= 0:
            raise ValueError(f"top_k must be positive, got {self.top_k}")
        if len(self.alphabet_range) != 2 or self.alphabet_range[0] > self.alphabet_range[1]:
            raise ValueError(f"alphabet_range must be (first, last), got {self.alphabet_range}")
        if len(self.luma_weights) != 3 or abs(sum(self.luma_weights) - 1.0) > 1e-6:
            raise ValueError(f"luma_weights must be 3 values summing to 1.0, got {self.luma_weights}")

    def replace(self, **changes: Any) -> RecognizerConfig:
        """Return a copy with the given fields overridden.

        A derived padding is re-derived when stroke_width changes and
        padding is not given explicitly.
        """
        if ('stroke_width' in changes and 'padding' not in changes
                and self.padding == self.stroke_width / 2):
            changes['padding'] = None
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RecognizerConfig:
        """Build a config from a mapping, ignoring nothing silently.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_json_file(cls, path: str | Path) -> RecognizerConfig:
        """Load overrides from a JSON object file."""
        with open(path, encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls.from_dict(data)


DEFAULT_CONFIG = RecognizerConfig()
