"""Ranked "did you mean" suggestions."""

from dataclasses import dataclass
from typing import Iterable, Optional

from pyfulmen.similarity.engine import (
    Algorithm,
    AlgorithmLike,
    resolve_algorithm,
    score_with_algorithm,
)
from pyfulmen.similarity.normalize import normalize


@dataclass(frozen=True)
class Suggestion:
    """A candidate and its similarity to the input."""

    value: str
    score: float


@dataclass(frozen=True)
class SuggestOptions:
    """Options for ``suggest``.

    Attributes:
        min_score: Candidates scoring below this are dropped
        max_suggestions: Maximum number of suggestions returned
        normalize: Normalize input and candidates before scoring
        algorithm: Score-capable algorithm used for ranking
    """

    min_score: float = 0.6
    max_suggestions: int = 3
    normalize: bool = True
    algorithm: AlgorithmLike = Algorithm.LEVENSHTEIN

    def __post_init__(self):
        if not 0.0 <= self.min_score <= 1.0:
            raise ValueError(f"min_score must be in [0, 1], got {self.min_score}")
        if self.max_suggestions < 1:
            raise ValueError(f"max_suggestions must be at least 1, got {self.max_suggestions}")


DEFAULT_SUGGEST_OPTIONS = SuggestOptions()


def suggest(
    input: str,
    candidates: Iterable[str],
    options: Optional[SuggestOptions] = None,
) -> list[Suggestion]:
    """Rank candidates by similarity to ``input``.

    Results are sorted by score descending, then by the original candidate string
    ascending, and carry the original (un-normalized) candidate values.

    Args:
        input: The string the user typed
        candidates: Known valid values
        options: Ranking options; defaults to ``SuggestOptions()``

    Returns:
        Up to ``max_suggestions`` suggestions, possibly empty
    """
    opts = options or DEFAULT_SUGGEST_OPTIONS
    algorithm = resolve_algorithm(opts.algorithm)

    target = normalize(input) if opts.normalize else input

    matches: list[Suggestion] = []
    for candidate in candidates:
        compared = normalize(candidate) if opts.normalize else candidate
        candidate_score = score_with_algorithm(target, compared, algorithm)
        if candidate_score >= opts.min_score:
            matches.append(Suggestion(value=candidate, score=candidate_score))

    matches.sort(key=lambda suggestion: (-suggestion.score, suggestion.value))

    return matches[: opts.max_suggestions]
