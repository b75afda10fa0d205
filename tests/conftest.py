"""Shared pytest fixtures for the ink_lib test suite.

Fixtures:
    labels: Mixed-script label table (latin, hiragana, kanji)
    filtered_index: Hiragana FilteredIndex built from ``labels``
    horizontal_snapshot: One three-point horizontal stroke
    fixed_engine: Engine returning a preset score vector
    recognizer: Initialized Recognizer backed by ``fixed_engine``

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test
"""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ink_lib.domain import Point, Session  # noqa: E402
from ink_lib.recognition import (  # noqa: E402
    CallableInferenceEngine,
    Recognizer,
    UnicodeBlockFilter,
    build_filtered_index,
)

# Class index -> label. Hiragana at 1, 2, 4, 6, 7.
LABELS = ('A', 'あ', 'い', '亜', 'う', 'B', 'え', 'おお')
HIRAGANA_INDICES = (1, 2, 4, 6, 7)


def make_session(*strokes):
    """Build a Session from lists of (x, y) tuples via pointer events."""
    session = Session()
    for stroke in strokes:
        session.begin_stroke(Point(*stroke[0]))
        for xy in stroke[1:]:
            session.extend_stroke(Point(*xy))
        session.end_stroke()
    return session


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# -----------------------------------------------------------------------------
# Label Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def labels():
    """Return the mixed-script label table."""
    return LABELS


@pytest.fixture
def filtered_index():
    """Return the Hiragana FilteredIndex for LABELS."""
    return build_filtered_index(LABELS, UnicodeBlockFilter(0x3040, 0x309F))


# -----------------------------------------------------------------------------
# Stroke Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def horizontal_snapshot():
    """Return a snapshot holding (10,10)-(50,10)-(90,10)."""
    return make_session([(10, 10), (50, 10), (90, 10)]).snapshot()


# -----------------------------------------------------------------------------
# Engine Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def fixed_engine():
    """Return an engine whose scores favour class 4 ('う')."""
    scores = np.array([0.02, 0.10, 0.05, 0.30, 0.40, 0.01, 0.07, 0.05], dtype=np.float32)
    return CallableInferenceEngine(lambda tensor: scores)


@pytest.fixture
def recognizer(fixed_engine):
    """Return an initialized Recognizer over LABELS."""
    rec = Recognizer(engine=fixed_engine)
    rec.initialize(labels=LABELS)
    return rec
