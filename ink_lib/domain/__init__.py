"""Domain objects for pen input recognition.

This module provides the value objects and the session store used
throughout the package.

Geometry classes:
    Point: Immutable 2D point.
    BBox: Immutable axis-aligned bounding box.
    Stroke: Finalized, immutable point sequence.
    AffineTransform: 3x3 homogeneous transform with left-to-right composition.

Session classes:
    Session: Mutable stroke store driven by pointer events.
    SessionSnapshot: Immutable view handed to rendering.

Result classes:
    RecognitionResult: (glyph, confidence) pair.
    RecognitionOutcome: Result of one asynchronous request.

Example usage::

    from ink_lib.domain import Point, Session

    session = Session()
    session.begin_stroke(Point(10, 10))
    session.extend_stroke(Point(90, 10))
    session.end_stroke()
    print(session.snapshot().bbox)
"""

from .geometry import AffineTransform, BBox, Point, Stroke
from .results import RecognitionOutcome, RecognitionResult
from .session import Session, SessionSnapshot

__all__ = [
    'Point', 'BBox', 'Stroke', 'AffineTransform',
    'Session', 'SessionSnapshot',
    'RecognitionResult', 'RecognitionOutcome',
]
