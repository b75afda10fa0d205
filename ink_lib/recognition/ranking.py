"""Raw score post-processing.

Model scores are softmax-style over the whole vocabulary, so absolute
values are dominated by out-of-alphabet classes. Confidence is therefore
re-expressed relative to the filtered alphabet only: the best filtered
class gets 1.0 and the worst gets 0.0.

The module provides the following:
    ScorePolicy: Protocol for turning filtered raw scores into confidences.
    MinMaxScorePolicy: Default min-max renormalization.
    rank_scores: Filter, renormalize, stable-sort and truncate.

Example usage::

    from ink_lib.recognition.ranking import rank_scores

    results = rank_scores(raw, filtered_index, num_classes=len(labels), top_k=5)
    for r in results:
        print(f"{r.glyph}: {r.confidence:.1%}")
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

import numpy as np

from ..config import TOP_K
from ..domain.results import RecognitionResult
from ..errors import InvalidInputError, NotInitializedError
from .labels import FilteredIndex

logger = logging.getLogger(__name__)


class ScorePolicy(Protocol):
    """Maps the raw scores of the filtered candidates to [0, 1].

    ``normalize`` receives the raw scores in FilteredIndex order and
    returns one confidence per candidate in the same order.
    """

    def normalize(self, raw: np.ndarray) -> np.ndarray:
        ...


class MinMaxScorePolicy:
    """``(raw - min) / (max - min)`` over the filtered candidates.

    When every filtered score is equal the range is zero and every
    confidence is 0.0.
    """

    def normalize(self, raw: np.ndarray) -> np.ndarray:
        raw = np.asarray(raw, dtype=np.float64)
        if raw.size == 0:
            return raw
        lo = raw.min()
        hi = raw.max()
        spread = hi - lo
        if spread <= 0:
            return np.zeros_like(raw)
        return np.clip((raw - lo) / spread, 0.0, 1.0)


def rank_scores(scores: Sequence[float] | np.ndarray,
                filtered_index: Optional[FilteredIndex],
                num_classes: Optional[int] = None,
                top_k: int = TOP_K,
                policy: Optional[ScorePolicy] = None) -> List[RecognitionResult]:
    """Turn a raw score vector into ranked filtered results.

    Args:
        scores: One raw score per class. Extra leading singleton axes,
            e.g. shape (1, N), are flattened.
        filtered_index: Class index -> glyph for the target alphabet.
        num_classes: Expected vector length; defaults to no check beyond
            the filtered indices being in range.
        top_k: Maximum results returned.
        policy: Confidence strategy; defaults to MinMaxScorePolicy.

    Returns:
        Up to top_k results, confidence non-increasing. Ties keep
        FilteredIndex (class index) order.

    Raises:
        NotInitializedError: If filtered_index is None.
        InvalidInputError: On a length mismatch or non-finite scores.
    """
    if filtered_index is None:
        raise NotInitializedError("Label filter has not been built")
    if policy is None:
        policy = MinMaxScorePolicy()

    raw = np.asarray(scores, dtype=np.float64)
    if raw.ndim == 0:
        raise InvalidInputError("Score vector must have at least one dimension, got a scalar")
    if raw.ndim > 1:
        raw = raw.reshape(-1)
    if num_classes is not None and raw.shape[0] != num_classes:
        raise InvalidInputError(
            f"Score vector has {raw.shape[0]} entries, expected {num_classes}")

    indices = np.fromiter(filtered_index.keys(), dtype=np.int64, count=len(filtered_index))
    glyphs = list(filtered_index.values())
    if indices.size and indices.max() >= raw.shape[0]:
        raise InvalidInputError(
            f"Score vector has {raw.shape[0]} entries, label index needs {indices.max() + 1}")

    candidate_raw = raw[indices]
    if not np.all(np.isfinite(candidate_raw)):
        raise InvalidInputError("Score vector contains non-finite values")

    confidences = policy.normalize(candidate_raw)
    # Descending, ties in class-index order
    order = np.argsort(-confidences, kind='stable')[:top_k]

    results = [RecognitionResult(glyphs[i], float(confidences[i])) for i in order]
    if results:
        logger.debug("Top result %s (%.3f) of %d candidates",
                     results[0].glyph, results[0].confidence, len(glyphs))
    return results
