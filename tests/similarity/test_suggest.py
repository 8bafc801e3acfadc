"""Tests for pyfulmen.similarity.suggest."""

import pytest

from pyfulmen.similarity import Algorithm, Suggestion, SuggestOptions, suggest


class TestSuggest:
    def test_single_close_match(self):
        result = suggest("docscrib", ["docscribe", "crucible", "foundry", "similarity"])
        assert result == [Suggestion("docscribe", pytest.approx(8 / 9))]

    def test_ties_sorted_alphabetically(self):
        result = suggest("abd", ["abe", "abc", "xyz"])
        assert [s.value for s in result] == ["abc", "abe"]

    def test_max_suggestions(self):
        result = suggest("config", ["conflict", "confi", "configs"], SuggestOptions(max_suggestions=1))
        assert [s.value for s in result] == ["configs"]

    def test_returns_original_values(self):
        result = suggest("  DOCSCRIBE ", ["docscribe", "Docscribe"])
        assert [s.value for s in result] == ["Docscribe", "docscribe"]
        assert all(s.score == 1.0 for s in result)

    def test_without_normalization(self):
        result = suggest("DOCSCRIBE", ["docscribe"], SuggestOptions(normalize=False))
        assert result == []

    def test_empty_when_nothing_matches(self):
        assert suggest("xyz", ["alpha", "beta"]) == []

    def test_default_algorithm_is_levenshtein(self):
        assert SuggestOptions().algorithm == Algorithm.LEVENSHTEIN
        assert suggest("hte", ["the", "hat"]) == []

    def test_transposition_aware_algorithm(self):
        result = suggest("hte", ["the", "hat"], SuggestOptions(algorithm=Algorithm.DAMERAU_OSA))
        assert [s.value for s in result] == ["the"]

    def test_ordering_is_stable(self):
        candidates = ["beta", "alpha", "gamma", "delta"]
        options = SuggestOptions(min_score=0.0, max_suggestions=10)
        result = suggest("alphx", candidates, options)
        keys = [(-s.score, s.value) for s in result]
        assert keys == sorted(keys)

    def test_invalid_options(self):
        with pytest.raises(ValueError):
            SuggestOptions(min_score=1.5)
        with pytest.raises(ValueError):
            SuggestOptions(max_suggestions=0)
