from .probability import DEFAULT_LOG_TOTAL, ProbabilityDistribution
from .segmenter import (
    DEFAULT_MAX_TOKEN_LENGTH,
    SENTENCE_START,
    BigramSegmenter,
    ProbTuple,
    max_prob_tuple,
)

__all__ = [
    "DEFAULT_LOG_TOTAL",
    "DEFAULT_MAX_TOKEN_LENGTH",
    "SENTENCE_START",
    "BigramSegmenter",
    "ProbTuple",
    "ProbabilityDistribution",
    "max_prob_tuple",
]
