"""Asynchronous recognition service.

Capture happens on the caller's (UI) thread; inference can take long, so
RecognitionService moves everything after the snapshot onto a worker pool.
Each submit() freezes the session into a snapshot and tags the request
with a monotonically increasing sequence number.

In-flight requests are never cancelled. A newer request may finish before
an older one, so the service only publishes an outcome if no newer one has
been published yet; older completions are dropped as stale.

Example usage::

    from ink_lib.api import RecognitionService

    service = RecognitionService(recognizer, on_result=show_candidates)
    future = service.submit(session)          # returns immediately
    outcome = future.result()                 # RecognitionOutcome
    if not service.is_stale(outcome.sequence):
        print(outcome.best)
    service.shutdown()
"""

from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from ..domain.results import RecognitionOutcome
from ..domain.session import Session, SessionSnapshot
from ..errors import RecognizerError
from ..recognition.recognizer import Recognizer

logger = logging.getLogger(__name__)

ResultCallback = Callable[[RecognitionOutcome], None]


class RecognitionService:
    """Runs recognition requests off the capture path.

    Attributes:
        recognizer: Initialized recognizer shared by all requests.
        on_result: Optional callback for fresh outcomes. Called from a
            worker thread.
        max_workers: Worker pool size.
    """

    def __init__(self, recognizer: Recognizer,
                 on_result: Optional[ResultCallback] = None,
                 max_workers: int = 1):
        self.recognizer = recognizer
        self.on_result = on_result
        self.max_workers = max_workers

        self._executor = ThreadPoolExecutor(max_workers=max_workers,
                                            thread_name_prefix='ink-recognize')
        self._lock = threading.Lock()
        # Held while on_result runs; only the current latest is delivered
        self._deliver_lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest: Optional[RecognitionOutcome] = None
        self._latest_submitted = 0

    def submit(self, source: Session | SessionSnapshot) -> Future:
        """Queue a recognition of the current strokes.

        The snapshot is taken before returning, so strokes drawn after
        this call do not affect the request.

        Returns:
            Future resolving to a RecognitionOutcome. Pipeline errors are
            reported in ``outcome.error``, not raised from the future.
        """
        snapshot = source.snapshot() if isinstance(source, Session) else source
        with self._lock:
            seq = next(self._counter)
            self._latest_submitted = seq
        logger.debug("Submitting recognition request %d", seq)
        return self._executor.submit(self._process, seq, snapshot)

    def _process(self, seq: int, snapshot: SessionSnapshot) -> RecognitionOutcome:
        outcome = self._recognize(seq, snapshot)
        if self._publish(outcome) and self.on_result is not None:
            self._deliver(outcome)
        return outcome

    def _recognize(self, seq: int, snapshot: SessionSnapshot) -> RecognitionOutcome:
        raster = self.recognizer.capture(snapshot)
        if raster is None:
            return RecognitionOutcome(sequence=seq, empty=True)
        try:
            results = self.recognizer.recognize_raster(raster)
        except RecognizerError as exc:
            logger.warning("Recognition request %d failed: %s", seq, exc)
            return RecognitionOutcome(sequence=seq, error=exc)
        return RecognitionOutcome(sequence=seq, results=tuple(results))

    def _publish(self, outcome: RecognitionOutcome) -> bool:
        with self._lock:
            if self._latest is not None and self._latest.sequence > outcome.sequence:
                logger.debug("Dropping stale result %d (have %d)",
                             outcome.sequence, self._latest.sequence)
                return False
            self._latest = outcome
            return True

    def _deliver(self, outcome: RecognitionOutcome) -> None:
        with self._deliver_lock:
            with self._lock:
                current = self._latest
            if current is not outcome:
                logger.debug("Not delivering result %d, superseded by %d",
                             outcome.sequence, current.sequence)
                return
            self.on_result(outcome)

    def latest(self) -> Optional[RecognitionOutcome]:
        """Newest published outcome, or None before the first completes."""
        with self._lock:
            return self._latest

    def is_stale(self, sequence: int) -> bool:
        """True if a newer request has been submitted since ``sequence``."""
        with self._lock:
            return sequence < self._latest_submitted

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> RecognitionService:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()
