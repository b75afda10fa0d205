"""Stroke capture session.

A Session owns the strokes of one recognition attempt. It is mutated by
pointer events in strict begin -> extend* -> end order from a single
writer. Rendering and recognition never read the live Session; they read
an immutable SessionSnapshot taken at request time, so later pointer
events cannot change a request that is already in flight.

Example:
    >>> session = Session()
    >>> session.begin_stroke(Point(10, 10))
    >>> session.extend_stroke(Point(50, 10))
    >>> session.end_stroke()
    >>> snap = session.snapshot()
    >>> len(snap.strokes)
    1
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from .geometry import BBox, Point, Stroke

logger = logging.getLogger(__name__)

Observer = Callable[['SessionSnapshot'], None]


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session at one instant.

    Attributes:
        strokes: Finalized strokes in drawing order.
        active: The in-progress stroke, or None when the pen is up.
    """
    strokes: Tuple[Stroke, ...] = ()
    active: Optional[Stroke] = None

    def __post_init__(self):
        if not isinstance(self.strokes, tuple):
            object.__setattr__(self, 'strokes', tuple(self.strokes))

    def all_strokes(self) -> Iterator[Stroke]:
        """Finalized strokes followed by the active stroke, if any."""
        yield from self.strokes
        if self.active is not None:
            yield self.active

    def points(self) -> Iterator[Point]:
        for stroke in self.all_strokes():
            yield from stroke

    def is_empty(self) -> bool:
        return not self.strokes and (self.active is None or len(self.active) == 0)

    @property
    def bbox(self) -> Optional[BBox]:
        """Unpadded bounds of all ink, None if empty."""
        return BBox.from_points(self.points())

    def to_list(self) -> List[List[List[float]]]:
        """Serialize finalized and active strokes as nested lists."""
        return [s.to_list() for s in self.all_strokes() if len(s)]

    @classmethod
    def from_list(cls, data: Sequence[Sequence[Sequence[float]]]) -> SessionSnapshot:
        """Build a snapshot of finalized strokes from nested lists.

        Empty strokes are dropped, mirroring Session.end_stroke().
        """
        strokes = tuple(Stroke.from_list(s) for s in data if len(s))
        return cls(strokes=strokes)


class Session:
    """Mutable stroke store for one input session.

    Observers registered with subscribe() are called with a fresh snapshot
    after every state change. They run synchronously on the writer's
    thread and must not mutate the session.
    """

    def __init__(self):
        self._strokes: List[Stroke] = []
        self._active: Optional[List[Point]] = None
        self._observers: List[Observer] = []

    # --- observers ---

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)
        return unsubscribe

    def _notify(self) -> None:
        if not self._observers:
            return
        snap = self.snapshot()
        for observer in list(self._observers):
            observer(snap)

    # --- pointer events ---

    def begin_stroke(self, point: Point) -> None:
        """Start a new active stroke, dropping any unfinished one."""
        if self._active:
            logger.debug("Discarding unfinished stroke of %d points", len(self._active))
        self._active = [point]
        self._notify()

    def extend_stroke(self, point: Point) -> None:
        """Append to the active stroke. No-op when the pen is up."""
        if self._active is None:
            return
        self._active.append(point)
        self._notify()

    def end_stroke(self) -> None:
        """Finalize the active stroke. No-op when the pen is up."""
        if self._active is None:
            return
        if self._active:
            self._strokes.append(Stroke(tuple(self._active)))
        self._active = None
        self._notify()

    def clear(self) -> None:
        """Discard every stroke, including the active one."""
        self._strokes.clear()
        self._active = None
        self._notify()

    # --- queries ---

    def is_empty(self) -> bool:
        return not self._strokes and not self._active

    @property
    def stroke_count(self) -> int:
        """Number of finalized strokes."""
        return len(self._strokes)

    @property
    def has_active_stroke(self) -> bool:
        return self._active is not None

    def snapshot(self) -> SessionSnapshot:
        """Immutable copy of the current state."""
        active = Stroke(tuple(self._active)) if self._active is not None else None
        return SessionSnapshot(strokes=tuple(self._strokes), active=active)

    @classmethod
    def from_strokes(cls, strokes: Sequence[Any]) -> Session:
        """Create a session pre-filled with finalized strokes.

        Each stroke may be a Stroke or a sequence of (x, y) pairs.
        """
        session = cls()
        for stroke in strokes:
            if not isinstance(stroke, Stroke):
                stroke = Stroke.from_list(stroke)
            if len(stroke):
                session._strokes.append(stroke)
        return session
