"""
Comment Translator - Data Models
"""
from comment_translator.models.radix_tree import (
    RadixNode,
    PhraseRadixTree,
    Match
)
from comment_translator.models.phrase import (
    TextRange,
    Word,
    Comment,
    SampledPhrase,
    Decoration,
    CycleResult
)
from comment_translator.models.schemas import (
    AnnotateRequest,
    HealthStatus,
    MetricsData,
    ModelInfo
)

__all__ = [
    "RadixNode",
    "PhraseRadixTree",
    "Match",
    "TextRange",
    "Word",
    "Comment",
    "SampledPhrase",
    "Decoration",
    "CycleResult",
    "AnnotateRequest",
    "HealthStatus",
    "MetricsData",
    "ModelInfo"
]
