"""Handwritten character recognizer.

Composes the pipeline stages into one object:

    snapshot -> capture (bounds, fit, rasterize) -> encode_raster
             -> InferenceEngine.run -> rank_scores -> results

Strategies (label filter, score normalization, stroke rendering) and the
inference engine are injected at construction. The recognizer holds no
global state; the application builds one and passes it to whatever needs
it, e.g. RecognitionService.

Classes:
    Recognizer: Initialization plus the recognize_* entry points.

Usage:
    Basic recognition::

        recognizer = Recognizer.from_files('model.pt', 'labels.txt')
        results = recognizer.recognize_session(session)
        for r in results:
            print(f"{r.glyph}: {r.confidence:.1%}")

    Custom engine::

        recognizer = Recognizer(engine=CallableInferenceEngine(my_fn))
        recognizer.initialize(labels=['あ', 'い', 'A'])
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
from PIL import Image

from ..config import DEFAULT_CONFIG, RecognizerConfig
from ..domain.results import RecognitionResult
from ..domain.session import Session, SessionSnapshot
from ..errors import (
    EmptyCaptureError,
    InferenceEngineError,
    InitializationError,
    NotInitializedError,
)
from ..utils.rendering import RenderPolicy, capture
from ..utils.tensor import RasterLike, encode_raster
from .engine import InferenceEngine, TorchInferenceEngine
from .labels import (
    FilteredIndex,
    LabelFilterPolicy,
    LabelTable,
    UnicodeBlockFilter,
    build_filtered_index,
    load_labels,
)
from .ranking import ScorePolicy, rank_scores

logger = logging.getLogger(__name__)


class Recognizer:
    """Character recognizer over a filtered alphabet.

    Attributes:
        config: Pipeline parameters.
        engine: Inference engine, may be supplied at initialize() instead.
        label_policy: Decides which classes belong to the alphabet.
        score_policy: Confidence normalization; None for min-max.
        render_policy: Stroke drawing; None for round caps at the
            configured width.

    Example:
        >>> recognizer = Recognizer(engine=engine)
        >>> recognizer.initialize(labels_path='labels.txt')
        >>> recognizer.is_initialized
        True
    """

    def __init__(self, config: RecognizerConfig = DEFAULT_CONFIG,
                 engine: Optional[InferenceEngine] = None,
                 label_policy: Optional[LabelFilterPolicy] = None,
                 score_policy: Optional[ScorePolicy] = None,
                 render_policy: Optional[RenderPolicy] = None):
        self.config = config
        self.engine = engine
        self.label_policy = label_policy or UnicodeBlockFilter.from_range(config.alphabet_range)
        self.score_policy = score_policy
        self.render_policy = render_policy
        self._labels: Optional[LabelTable] = None
        self._filtered_index: Optional[FilteredIndex] = None

    @classmethod
    def from_files(cls, model_path: str | Path, labels_path: str | Path,
                   config: RecognizerConfig = DEFAULT_CONFIG,
                   device: Optional[str] = None) -> Recognizer:
        """Build and initialize a recognizer backed by a TorchScript model."""
        engine = TorchInferenceEngine.from_file(model_path, device=device)
        recognizer = cls(config=config, engine=engine)
        recognizer.initialize(labels_path=labels_path)
        return recognizer

    # --- initialization ---

    def initialize(self, labels: Optional[Sequence[str]] = None,
                   labels_path: Optional[str | Path] = None,
                   engine: Optional[InferenceEngine] = None) -> None:
        """Load labels and build the filtered index.

        Exactly one of ``labels`` or ``labels_path`` must be given. On any
        failure the recognizer is left uninitialized.

        Raises:
            InitializationError: Missing engine, missing/empty labels, or
                no label in the target alphabet.
        """
        self._labels = None
        self._filtered_index = None

        if engine is not None:
            self.engine = engine
        if self.engine is None:
            raise InitializationError("No inference engine configured")
        if (labels is None) == (labels_path is None):
            raise InitializationError("Pass exactly one of labels or labels_path")

        table = load_labels(labels_path) if labels_path is not None else tuple(labels)
        index = build_filtered_index(table, self.label_policy)

        self._labels = table
        self._filtered_index = index
        logger.info("Recognizer ready: %d classes, %d in alphabet",
                    len(table), len(index))

    @property
    def is_initialized(self) -> bool:
        return self._filtered_index is not None and self.engine is not None

    @property
    def labels(self) -> Optional[LabelTable]:
        return self._labels

    @property
    def filtered_index(self) -> Optional[FilteredIndex]:
        return self._filtered_index

    @property
    def num_classes(self) -> int:
        self._require_initialized()
        return len(self._labels)

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise NotInitializedError("Recognizer not initialized. Call initialize() first.")

    # --- pipeline stages ---

    def capture(self, source: Session | SessionSnapshot) -> Optional[Image.Image]:
        """Render the session as a recognition raster, None if empty."""
        snapshot = source.snapshot() if isinstance(source, Session) else source
        return capture(snapshot, self.config, self.render_policy)

    def encode(self, raster: RasterLike) -> np.ndarray:
        return encode_raster(raster, self.config.input_size, self.config.luma_weights)

    def recognize_scores(self, scores: Sequence[float] | np.ndarray) -> List[RecognitionResult]:
        """Rank a raw score vector produced elsewhere."""
        self._require_initialized()
        return rank_scores(scores, self._filtered_index, len(self._labels),
                           self.config.top_k, self.score_policy)

    def recognize_tensor(self, tensor: np.ndarray) -> List[RecognitionResult]:
        """Run the engine on an encoded tensor and rank its output.

        Raises:
            NotInitializedError: Before initialize().
            InferenceEngineError: If the engine raises.
            InvalidInputError: If the engine returns the wrong length.
        """
        self._require_initialized()
        try:
            scores = self.engine.run(tensor)
        except Exception as exc:
            raise InferenceEngineError(f"Inference failed: {exc}") from exc
        return self.recognize_scores(scores)

    def recognize_raster(self, raster: RasterLike) -> List[RecognitionResult]:
        """Encode a C x C raster and recognize it."""
        self._require_initialized()
        return self.recognize_tensor(self.encode(raster))

    def recognize_session(self, source: Session | SessionSnapshot) -> List[RecognitionResult]:
        """Full pipeline from strokes to ranked results.

        Raises:
            NotInitializedError: Before initialize().
            EmptyCaptureError: If there is no ink.
            InferenceEngineError: If the engine raises.
        """
        self._require_initialized()
        raster = self.capture(source)
        if raster is None:
            raise EmptyCaptureError("Nothing to recognize: session has no strokes")
        return self.recognize_raster(raster)
