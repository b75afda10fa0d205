"""Recognition result value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class RecognitionResult:
    """One ranked guess.

    Attributes:
        glyph: The recognized character.
        confidence: Score in [0, 1], relative to the filtered alphabet only.
    """
    glyph: str
    confidence: float

    def to_dict(self) -> Dict[str, object]:
        return {'glyph': self.glyph, 'confidence': self.confidence}


@dataclass(frozen=True)
class RecognitionOutcome:
    """Outcome of one asynchronous recognition request.

    Exactly one of these holds: ``empty`` is True (nothing to recognize),
    ``error`` is set, or ``results`` carries the ranked guesses.

    Attributes:
        sequence: Monotonic request number assigned at submit time.
        results: Ranked guesses, best first.
        empty: True when the session had no ink.
        error: The exception raised by the pipeline, if any.
    """
    sequence: int
    results: Tuple[RecognitionResult, ...] = ()
    empty: bool = False
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None and not self.empty

    @property
    def best(self) -> Optional[RecognitionResult]:
        return self.results[0] if self.results else None
