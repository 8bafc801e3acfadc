"""String similarity for pyfulmen.

Edit distances, similarity scores, Unicode normalization and ranked suggestions,
kept in conformance with the shared Crucible fixture corpus.
"""

from pyfulmen.similarity.engine import (
    Algorithm,
    MatchRange,
    ScoreOptions,
    distance,
    distance_with_algorithm,
    score,
    score_with_algorithm,
    substring_match,
)
from pyfulmen.similarity.errors import (
    InvalidAlgorithmError,
    SimilarityError,
    WrongAPIError,
)
from pyfulmen.similarity.normalize import (
    NormalizationPreset,
    NormalizeOptions,
    apply_preset,
    casefold,
    equals_ignore_case,
    normalize,
    strip_accents,
)
from pyfulmen.similarity.suggest import (
    Suggestion,
    SuggestOptions,
    suggest,
)

__all__ = [
    # Engine
    "Algorithm",
    "MatchRange",
    "ScoreOptions",
    "distance",
    "distance_with_algorithm",
    "score",
    "score_with_algorithm",
    "substring_match",
    # Errors
    "InvalidAlgorithmError",
    "SimilarityError",
    "WrongAPIError",
    # Normalization
    "NormalizationPreset",
    "NormalizeOptions",
    "apply_preset",
    "casefold",
    "equals_ignore_case",
    "normalize",
    "strip_accents",
    # Suggestions
    "Suggestion",
    "SuggestOptions",
    "suggest",
]
