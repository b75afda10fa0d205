"""Geometric value objects for pen input."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    """Immutable 2D point in input-surface space."""
    x: float
    y: float

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple for drawing APIs."""
        return (self.x, self.y)

    def to_list(self) -> List[float]:
        """Convert to list for JSON serialization."""
        return [float(self.x), float(self.y)]

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> Point:
        """Create from an (x, y) pair."""
        return cls(float(t[0]), float(t[1]))


@dataclass(frozen=True)
class BBox:
    """Immutable axis-aligned bounding box."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def size(self) -> float:
        """Larger of width and height."""
        return max(self.width, self.height)

    @property
    def center(self) -> Point:
        return Point(
            (self.x_min + self.x_max) / 2,
            (self.y_min + self.y_max) / 2
        )

    def contains(self, point: Point, eps: float = 0.0) -> bool:
        """Check if point is inside the box, with optional tolerance."""
        return (self.x_min - eps <= point.x <= self.x_max + eps and
                self.y_min - eps <= point.y <= self.y_max + eps)

    def expanded(self, margin: float) -> BBox:
        """Grow the box by margin on every side."""
        return BBox(self.x_min - margin, self.y_min - margin,
                    self.x_max + margin, self.y_max + margin)

    def clamped(self, lo: float, hi: float) -> BBox:
        """Clamp every edge into [lo, hi]."""
        return BBox(min(max(self.x_min, lo), hi), min(max(self.y_min, lo), hi),
                    min(max(self.x_max, lo), hi), min(max(self.y_max, lo), hi))

    def to_tuple(self) -> Tuple[float, float, float, float]:
        """Convert to tuple for compatibility."""
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> Optional[BBox]:
        """Create the tightest box containing all points.

        Returns None when there are no points.
        """
        x_min = y_min = float('inf')
        x_max = y_max = float('-inf')
        for p in points:
            if p.x < x_min:
                x_min = p.x
            if p.x > x_max:
                x_max = p.x
            if p.y < y_min:
                y_min = p.y
            if p.y > y_max:
                y_max = p.y
        if x_min == float('inf'):
            return None
        return cls(x_min, y_min, x_max, y_max)


@dataclass(frozen=True)
class Stroke:
    """A finalized pen-down to pen-up point sequence."""
    points: Tuple[Point, ...] = ()

    def __post_init__(self):
        if not isinstance(self.points, tuple):
            object.__setattr__(self, 'points', tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __getitem__(self, idx) -> Point:
        return self.points[idx]

    @property
    def bbox(self) -> Optional[BBox]:
        """Bounding box of stroke, None if empty."""
        return BBox.from_points(self.points)

    def to_list(self) -> List[List[float]]:
        """Convert to nested list for JSON serialization."""
        return [p.to_list() for p in self.points]

    @classmethod
    def from_list(cls, lst: Iterable[Sequence[float]]) -> Stroke:
        """Create from nested list of [x, y] pairs."""
        return cls(tuple(Point.from_tuple(p) for p in lst))


class AffineTransform:
    """2D affine transform stored as a 3x3 homogeneous matrix.

    Transforms compose left to right with then(): ``a.then(b)`` applies
    ``a`` first and ``b`` second, matching how the pipeline reads
    (translate, then scale, then translate).
    """

    __slots__ = ('_matrix',)

    def __init__(self, matrix: Optional[np.ndarray] = None):
        if matrix is None:
            matrix = np.eye(3)
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"Affine matrix must be 3x3, got {matrix.shape}")
        matrix = matrix.copy()
        matrix.setflags(write=False)
        self._matrix = matrix

    @property
    def matrix(self) -> np.ndarray:
        """Read-only 3x3 homogeneous matrix."""
        return self._matrix

    @property
    def scale_factor(self) -> float:
        """Uniform scale of the linear part (x axis)."""
        return float(self._matrix[0, 0])

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> AffineTransform:
        return cls(np.array([[1.0, 0.0, tx],
                             [0.0, 1.0, ty],
                             [0.0, 0.0, 1.0]]))

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> AffineTransform:
        if sy is None:
            sy = sx
        return cls(np.array([[sx, 0.0, 0.0],
                             [0.0, sy, 0.0],
                             [0.0, 0.0, 1.0]]))

    def then(self, other: AffineTransform) -> AffineTransform:
        """Compose: apply self, then other."""
        return AffineTransform(other.matrix @ self._matrix)

    def apply(self, point: Point) -> Point:
        m = self._matrix
        return Point(m[0, 0] * point.x + m[0, 1] * point.y + m[0, 2],
                     m[1, 0] * point.x + m[1, 1] * point.y + m[1, 2])

    def apply_array(self, pts: np.ndarray) -> np.ndarray:
        """Transform an Nx2 array of coordinates."""
        pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        return pts @ self._matrix[:2, :2].T + self._matrix[:2, 2]

    def __eq__(self, other) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return np.array_equal(self._matrix, other._matrix)

    def __hash__(self):
        return hash(self._matrix.tobytes())

    def __repr__(self) -> str:
        return f"AffineTransform({self._matrix[:2].tolist()})"
