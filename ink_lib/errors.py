"""Exception hierarchy for the recognition pipeline.

All errors raised by ink_lib derive from RecognizerError so callers can
catch the whole family with one clause. Geometry code never raises;
degenerate inputs there resolve to fallback values instead.

    RecognizerError
    ├── InitializationError   label/model asset missing or malformed
    ├── NotInitializedError   recognition before initialize()
    ├── InvalidInputError     bad score vector, zero-size raster, empty session
    │   └── EmptyCaptureError nothing drawn when a recognition was demanded
    └── InferenceEngineError  wraps whatever the engine raised
"""


class RecognizerError(Exception):
    """Base class for all recognition errors."""


class InitializationError(RecognizerError):
    """Label or model assets could not be loaded or are unusable.

    The recognizer instance stays uninitialized until initialize() succeeds.
    """


class NotInitializedError(RecognizerError):
    """Recognition was attempted before successful initialization."""


class InvalidInputError(RecognizerError):
    """A caller precondition was violated."""


class EmptyCaptureError(InvalidInputError):
    """The session holds no ink to recognize."""


class InferenceEngineError(RecognizerError):
    """The inference engine failed at runtime.

    The original exception is available as ``__cause__``.
    """
