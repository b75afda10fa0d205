"""Recognition: labels, ranking, engines and the recognizer.

The module exports the following:
    Labels (labels.py):
        LabelFilterPolicy, UnicodeBlockFilter, parse_labels, load_labels,
        build_filtered_index.
    Ranking (ranking.py):
        ScorePolicy, MinMaxScorePolicy, rank_scores.
    Engines (engine.py):
        InferenceEngine, CallableInferenceEngine, TorchInferenceEngine.
    Recognizer (recognizer.py):
        Recognizer, the composition of all pipeline stages.
"""

from .engine import CallableInferenceEngine, InferenceEngine, TorchInferenceEngine
from .labels import (
    LabelFilterPolicy,
    UnicodeBlockFilter,
    build_filtered_index,
    load_labels,
    parse_labels,
)
from .ranking import MinMaxScorePolicy, ScorePolicy, rank_scores
from .recognizer import Recognizer

__all__ = [
    'LabelFilterPolicy', 'UnicodeBlockFilter', 'parse_labels', 'load_labels',
    'build_filtered_index',
    'ScorePolicy', 'MinMaxScorePolicy', 'rank_scores',
    'InferenceEngine', 'CallableInferenceEngine', 'TorchInferenceEngine',
    'Recognizer',
]
