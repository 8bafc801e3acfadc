"""Algorithm-dispatching entry points of the similarity engine.

Two capabilities exist, and not every algorithm has both:

  Algorithm              distance   score
  -----------------------------------------
  levenshtein            yes        yes (1 - d / max_len)
  damerau_osa            yes        yes (1 - d / max_len)
  damerau_unrestricted   yes        yes (1 - d / max_len)
  jaro_winkler           no         yes (direct)
  substring              no         yes (lcs / max_len), see substring_match

Asking for a distance from a score-only metric raises WrongAPIError naming the
entry point to use instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pyfulmen.similarity import metrics
from pyfulmen.similarity import telemetry as similarity_telemetry
from pyfulmen.similarity.errors import InvalidAlgorithmError, WrongAPIError


class Algorithm(str, Enum):
    """Supported similarity algorithms."""

    LEVENSHTEIN = "levenshtein"
    DAMERAU_OSA = "damerau_osa"
    DAMERAU_UNRESTRICTED = "damerau_unrestricted"
    JARO_WINKLER = "jaro_winkler"
    SUBSTRING = "substring"

    def __str__(self) -> str:
        return self.value


DISTANCE_ALGORITHMS = (
    Algorithm.LEVENSHTEIN,
    Algorithm.DAMERAU_OSA,
    Algorithm.DAMERAU_UNRESTRICTED,
)

AlgorithmLike = Union[Algorithm, str]


def resolve_algorithm(algorithm: AlgorithmLike) -> Algorithm:
    """Coerce a tag or enum member into an Algorithm.

    Raises:
        InvalidAlgorithmError: If the tag is not one of the supported algorithms
    """
    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm(algorithm)
    except ValueError:
        raise InvalidAlgorithmError(algorithm, [a.value for a in Algorithm]) from None


# --- Data Model ---


@dataclass(frozen=True)
class ScoreOptions:
    """Tuning for score-only metrics.

    Attributes:
        prefix_scale: Jaro-Winkler prefix weight, in [0, 0.25]
        max_prefix: Jaro-Winkler prefix cap, in [1, 8]
    """

    prefix_scale: float = 0.1
    max_prefix: int = 4

    def __post_init__(self):
        if not 0.0 <= self.prefix_scale <= 0.25:
            raise ValueError(f"prefix_scale must be in [0, 0.25], got {self.prefix_scale}")
        if not 1 <= self.max_prefix <= 8:
            raise ValueError(f"max_prefix must be in [1, 8], got {self.max_prefix}")


DEFAULT_SCORE_OPTIONS = ScoreOptions()


@dataclass(frozen=True)
class MatchRange:
    """Half-open [start, end) code point range inside the haystack."""

    start: int = 0
    end: int = 0
    valid: bool = False


# --- Entry Points ---


def distance_with_algorithm(a: str, b: str, algorithm: AlgorithmLike) -> int:
    """Compute the edit distance between two strings.

    Args:
        a: First string
        b: Second string
        algorithm: One of levenshtein, damerau_osa, damerau_unrestricted

    Returns:
        Number of edits needed to turn ``a`` into ``b``

    Raises:
        WrongAPIError: For jaro_winkler and substring, which have no distance
        InvalidAlgorithmError: For unknown algorithm tags
    """
    tag = algorithm.value if isinstance(algorithm, Algorithm) else str(algorithm)
    similarity_telemetry.emit_call("distance", tag, a, b)

    resolved = resolve_algorithm(algorithm)

    if resolved is Algorithm.LEVENSHTEIN:
        return metrics.levenshtein(a, b)
    if resolved is Algorithm.DAMERAU_OSA:
        return metrics.osa_distance(a, b)
    if resolved is Algorithm.DAMERAU_UNRESTRICTED:
        return metrics.damerau_distance(a, b)

    if resolved is Algorithm.JARO_WINKLER:
        similarity_telemetry.emit_error("wrong_api", tag, "score_with_algorithm")
        raise WrongAPIError(
            tag,
            "score_with_algorithm",
            "jaro_winkler metric produces similarity scores, not distances. "
            "Use score_with_algorithm(a, b, Algorithm.JARO_WINKLER) instead",
        )

    similarity_telemetry.emit_error("wrong_api", tag, "substring_match")
    raise WrongAPIError(
        tag,
        "substring_match",
        "substring metric does not produce distances. "
        "Use substring_match(needle, haystack) instead",
    )


def score_with_algorithm(
    a: str,
    b: str,
    algorithm: AlgorithmLike,
    options: Optional[ScoreOptions] = None,
) -> float:
    """Compute a normalized similarity score in [0, 1].

    Identical strings score exactly 1.0, as do two empty strings.

    Raises:
        InvalidAlgorithmError: For unknown algorithm tags
    """
    tag = algorithm.value if isinstance(algorithm, Algorithm) else str(algorithm)
    similarity_telemetry.emit_call("score", tag, a, b)

    resolved = resolve_algorithm(algorithm)

    max_len = max(len(a), len(b))
    if max_len == 0:
        similarity_telemetry.emit_edge_case("both_empty")
        return 1.0

    if a == b:
        similarity_telemetry.emit_fast_path("identical")
        return 1.0

    if resolved is Algorithm.JARO_WINKLER:
        opts = options or DEFAULT_SCORE_OPTIONS
        return metrics.jaro_winkler(a, b, opts.prefix_scale, opts.max_prefix)

    if resolved is Algorithm.SUBSTRING:
        _, substring_score = _substring_match(a, b)
        return substring_score

    distance_value = distance_with_algorithm(a, b, resolved)
    return 1.0 - distance_value / max_len


def substring_match(needle: str, haystack: str) -> tuple[MatchRange, float]:
    """Find the longest common substring of ``needle`` and ``haystack``.

    Returns:
        The match range in ``haystack`` code point indices and the score
        ``lcs_length / max(len(needle), len(haystack))``. An invalid range and a
        score of 0.0 mean the strings share nothing.
    """
    return _substring_match(needle, haystack)


def _substring_match(needle: str, haystack: str) -> tuple[MatchRange, float]:
    length, end = metrics.longest_common_substring(needle, haystack)
    if length == 0:
        return MatchRange(), 0.0
    return MatchRange(start=end - length, end=end, valid=True), length / max(
        len(needle), len(haystack)
    )


# --- Levenshtein shorthands ---


def distance(a: str, b: str) -> int:
    """Levenshtein distance between ``a`` and ``b``."""
    return distance_with_algorithm(a, b, Algorithm.LEVENSHTEIN)


def score(a: str, b: str) -> float:
    """Levenshtein similarity score between ``a`` and ``b``."""
    return score_with_algorithm(a, b, Algorithm.LEVENSHTEIN)
