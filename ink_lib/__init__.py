"""Handwritten character capture and recognition.

Captures freehand pen strokes, normalizes them into a fixed-size raster,
encodes the raster for a character model and turns the model's raw
scores into a ranked, confidence-scored list of glyphs restricted to one
alphabet (Hiragana by default).

Architecture Overview:
    Pointer events feed a Session. Recognition reads an immutable
    SessionSnapshot and runs it through pure stages:

    - utils.geometry: padded bounding box and center/scale transform
    - utils.rendering: round-capped rasterization onto a C x C canvas
    - utils.tensor: bicubic resize, luma, inversion -> [1, M, M, 1]
    - recognition.engine: black-box inference engine contract
    - recognition.labels / recognition.ranking: alphabet filter and
      min-max renormalized top-K ranking

    recognition.Recognizer composes the stages, and api.RecognitionService
    runs them off the capture thread with stale-result discarding.

The package is organized into the following modules:
    domain: Point, BBox, Stroke, AffineTransform, Session, results.
    utils: Geometry, rendering and tensor encoding functions.
    recognition: Labels, ranking, engines and the Recognizer.
    api: Asynchronous RecognitionService.
    config: RecognizerConfig and default constants.
    errors: Exception hierarchy.

Example usage:
    Capturing and recognizing::

        from ink_lib import Point, Recognizer, Session

        recognizer = Recognizer.from_files('model.pt', 'labels.txt')

        session = Session()
        session.begin_stroke(Point(10, 10))
        session.extend_stroke(Point(50, 40))
        session.end_stroke()

        for result in recognizer.recognize_session(session):
            print(f"{result.glyph}: {result.confidence:.1%}")

Attributes:
    __version__ (str): Package version string.
    __all__ (list): List of public symbols exported by this package.
"""

from .api import RecognitionService
from .config import DEFAULT_CONFIG, RecognizerConfig
from .domain import (
    AffineTransform,
    BBox,
    Point,
    RecognitionOutcome,
    RecognitionResult,
    Session,
    SessionSnapshot,
    Stroke,
)
from .errors import (
    EmptyCaptureError,
    InferenceEngineError,
    InitializationError,
    InvalidInputError,
    NotInitializedError,
    RecognizerError,
)
from .recognition import (
    CallableInferenceEngine,
    MinMaxScorePolicy,
    Recognizer,
    TorchInferenceEngine,
    UnicodeBlockFilter,
)

__all__ = [
    # Domain objects
    'Point', 'BBox', 'Stroke', 'AffineTransform', 'Session', 'SessionSnapshot',
    'RecognitionResult', 'RecognitionOutcome',
    # Configuration
    'RecognizerConfig', 'DEFAULT_CONFIG',
    # Recognition
    'Recognizer', 'UnicodeBlockFilter', 'MinMaxScorePolicy',
    'CallableInferenceEngine', 'TorchInferenceEngine',
    # Services
    'RecognitionService',
    # Errors
    'RecognizerError', 'InitializationError', 'NotInitializedError',
    'InvalidInputError', 'EmptyCaptureError', 'InferenceEngineError',
]

__version__ = '1.0.0'
