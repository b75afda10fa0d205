"""Service layer for recognition.

RecognitionService runs recognition requests on a worker pool, tags them
with sequence numbers and discards stale completions.

Example usage::

    from ink_lib.api import RecognitionService

    with RecognitionService(recognizer) as service:
        outcome = service.submit(session).result()
"""

from .services import RecognitionService

__all__ = ['RecognitionService']
