"""Fixture conformance harness for the similarity engine.

The fixture corpus is shared by every Fulmen helper library. Each category of the
corpus is run against the matching engine entry point and every case produces a
FixtureResult, so a conformance run reports all failures at once instead of
stopping at the first.

Corpus layout:

    $schema: ...
    version: "2.0.0"
    test_cases:
      - category: levenshtein
        cases:
          - input_a: kitten
            input_b: sitting
            expected_distance: 3
            expected_score: 0.5714285714285714
            description: classic example
"""

import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from loguru import logger

from pyfulmen.similarity.engine import (
    Algorithm,
    ScoreOptions,
    distance_with_algorithm,
    score_with_algorithm,
    substring_match,
)
from pyfulmen.similarity.normalize import apply_preset
from pyfulmen.similarity.suggest import SuggestOptions, suggest

DEFAULT_FIXTURES_PATH = (
    Path(__file__).parent.parent / "data" / "fixtures" / "similarity" / "similarity-fixtures.yaml"
)

FIXTURES_SCHEMA_ID = "library/foundry/v2.0.0/similarity-fixtures"

DISTANCE_CATEGORIES = {
    "levenshtein": Algorithm.LEVENSHTEIN,
    "damerau_osa": Algorithm.DAMERAU_OSA,
    "damerau_unrestricted": Algorithm.DAMERAU_UNRESTRICTED,
}

# Jaro-Winkler expectations are published with four significant decimals
JARO_TOLERANCE = 1e-4
SCORE_TOLERANCE = 1e-9


# --- Data Model ---


@dataclass
class FixtureCategory:
    """All cases for one category of the corpus."""

    category: str
    cases: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class FixtureCorpus:
    """A parsed fixture file."""

    version: str
    schema: Optional[str] = None
    notes: Optional[str] = None
    groups: list[FixtureCategory] = field(default_factory=list)

    def categories(self) -> list[str]:
        return [group.category for group in self.groups]

    def cases_for(self, category: str) -> list[dict[str, Any]]:
        cases: list[dict[str, Any]] = []
        for group in self.groups:
            if group.category == category:
                cases.extend(group.cases)
        return cases


@dataclass
class FixtureResult:
    """Outcome of a single fixture case."""

    category: str
    description: str
    passed: bool
    detail: str = ""


# --- Loading ---


def load_fixtures(path: Optional[Union[str, Path]] = None) -> FixtureCorpus:
    """Load a fixture corpus from YAML.

    Args:
        path: Corpus location; defaults to the corpus bundled with pyfulmen

    Raises:
        FileNotFoundError: If the corpus does not exist
        ValueError: If the corpus is not shaped like a fixture file
    """
    fixtures_path = Path(path) if path is not None else DEFAULT_FIXTURES_PATH
    data = yaml.safe_load(fixtures_path.read_text(encoding="utf-8"))

    if not isinstance(data, dict) or not isinstance(data.get("test_cases"), list):
        raise ValueError(f"{fixtures_path} is not a similarity fixture corpus (missing test_cases)")

    groups = [
        FixtureCategory(category=str(group["category"]), cases=list(group.get("cases") or []))
        for group in data["test_cases"]
    ]
    logger.debug("Loaded similarity fixtures", path=str(fixtures_path), groups=len(groups))
    return FixtureCorpus(
        version=str(data.get("version", "")),
        schema=data.get("$schema"),
        notes=data.get("notes"),
        groups=groups,
    )


def validate_corpus(path: Optional[Union[str, Path]] = None, catalog=None) -> list:
    """Validate a fixture corpus file against its catalog schema.

    Returns:
        Diagnostics from the schema validator; empty means the corpus is well formed
    """
    from pyfulmen.schema.catalog import default_catalog

    schema_catalog = catalog or default_catalog()
    fixtures_path = Path(path) if path is not None else DEFAULT_FIXTURES_PATH
    return schema_catalog.validate_file_by_id(FIXTURES_SCHEMA_ID, fixtures_path)


# --- Running ---


def run_fixtures(corpus: FixtureCorpus) -> list[FixtureResult]:
    """Run every case in ``corpus`` and collect the results."""
    results: list[FixtureResult] = []
    for group in corpus.groups:
        runner = _RUNNERS.get(group.category)
        for case in group.cases:
            description = str(case.get("description", ""))
            if runner is None:
                results.append(
                    FixtureResult(group.category, description, False, "unknown category")
                )
                continue
            try:
                detail = runner(group.category, case)
            except Exception as e:
                detail = f"raised {type(e).__name__}: {e}"
            results.append(FixtureResult(group.category, description, detail == "", detail))

    failed = sum(1 for result in results if not result.passed)
    logger.debug("Similarity fixtures run", total=len(results), failed=failed)
    return results


def _close(actual: float, expected: float, tolerance: float) -> bool:
    return math.isclose(actual, expected, rel_tol=0.0, abs_tol=tolerance)


def _run_distance(category: str, case: dict[str, Any]) -> str:
    algorithm = DISTANCE_CATEGORIES[category]
    a, b = case["input_a"], case["input_b"]

    actual_distance = distance_with_algorithm(a, b, algorithm)
    if actual_distance != case["expected_distance"]:
        return f"distance({a!r}, {b!r}) = {actual_distance}, want {case['expected_distance']}"

    if "expected_score" in case:
        actual_score = score_with_algorithm(a, b, algorithm)
        if not _close(actual_score, float(case["expected_score"]), SCORE_TOLERANCE):
            return f"score({a!r}, {b!r}) = {actual_score}, want {case['expected_score']}"
    return ""


def _run_jaro_winkler(category: str, case: dict[str, Any]) -> str:
    options = ScoreOptions(
        prefix_scale=float(case.get("prefix_scale", 0.1)),
        max_prefix=int(case.get("max_prefix", 4)),
    )
    a, b = case["input_a"], case["input_b"]
    actual = score_with_algorithm(a, b, Algorithm.JARO_WINKLER, options)
    if not _close(actual, float(case["expected_score"]), JARO_TOLERANCE):
        return f"jaro_winkler({a!r}, {b!r}) = {actual:.6f}, want {case['expected_score']}"
    return ""


def _run_substring(category: str, case: dict[str, Any]) -> str:
    needle, haystack = case["needle"], case["haystack"]
    preset = case.get("normalize_preset")
    if preset:
        needle, haystack = apply_preset(needle, preset), apply_preset(haystack, preset)

    match_range, actual_score = substring_match(needle, haystack)
    expected_range = case.get("expected_range")

    if expected_range is None:
        if match_range.valid:
            return f"expected no match, got [{match_range.start}, {match_range.end})"
    elif (match_range.start, match_range.end) != (expected_range["start"], expected_range["end"]):
        return (
            f"range [{match_range.start}, {match_range.end}), "
            f"want [{expected_range['start']}, {expected_range['end']})"
        )

    if not _close(actual_score, float(case["expected_score"]), SCORE_TOLERANCE):
        return f"score {actual_score}, want {case['expected_score']}"
    return ""


def _run_normalization(category: str, case: dict[str, Any]) -> str:
    actual = apply_preset(case["input"], case["preset"])
    if actual != case["expected"]:
        return f"{case['preset']}({case['input']!r}) = {actual!r}, want {case['expected']!r}"
    return ""


def _run_suggestions(category: str, case: dict[str, Any]) -> str:
    raw_options = case.get("options") or {}
    options = SuggestOptions(
        min_score=float(raw_options.get("min_score", 0.6)),
        max_suggestions=int(raw_options.get("max_suggestions", 3)),
        normalize=bool(raw_options.get("normalize", True)),
        algorithm=raw_options.get("algorithm", Algorithm.LEVENSHTEIN),
    )
    actual = suggest(case["input"], case["candidates"], options)
    expected = case.get("expected") or []

    if [s.value for s in actual] != [e["value"] for e in expected]:
        return f"suggestions {[s.value for s in actual]}, want {[e['value'] for e in expected]}"
    for got, want in zip(actual, expected):
        if not _close(got.score, float(want["score"]), JARO_TOLERANCE):
            return f"score for {got.value!r} = {got.score}, want {want['score']}"
    return ""


_RUNNERS = {
    "levenshtein": _run_distance,
    "damerau_osa": _run_distance,
    "damerau_unrestricted": _run_distance,
    "jaro_winkler": _run_jaro_winkler,
    "substring": _run_substring,
    "normalization_presets": _run_normalization,
    "suggestions": _run_suggestions,
}
