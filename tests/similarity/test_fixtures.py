"""Conformance run of the bundled similarity fixture corpus."""

import pytest
import yaml

from pyfulmen.similarity.fixtures import (
    DEFAULT_FIXTURES_PATH,
    load_fixtures,
    run_fixtures,
    validate_corpus,
)


@pytest.fixture(scope="module")
def corpus():
    return load_fixtures()


class TestFixtureCorpus:
    def test_loads_every_category(self, corpus):
        assert corpus.version == "2.0.0"
        assert set(corpus.categories()) == {
            "levenshtein",
            "damerau_osa",
            "damerau_unrestricted",
            "jaro_winkler",
            "substring",
            "normalization_presets",
            "suggestions",
        }

    def test_all_cases_pass(self, corpus):
        results = run_fixtures(corpus)
        failures = [f"{r.category}: {r.description}: {r.detail}" for r in results if not r.passed]
        assert results
        assert failures == []

    def test_corpus_matches_its_schema(self):
        assert validate_corpus() == []

    def test_unknown_category_is_reported(self, tmp_path):
        path = tmp_path / "fixtures.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "version": "2.0.0",
                    "test_cases": [{"category": "soundex", "cases": [{"description": "x"}]}],
                }
            ),
            encoding="utf-8",
        )
        results = run_fixtures(load_fixtures(path))
        assert len(results) == 1
        assert not results[0].passed
        assert results[0].detail == "unknown category"

    def test_failing_case_is_reported_not_raised(self, tmp_path):
        path = tmp_path / "fixtures.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "version": "2.0.0",
                    "test_cases": [
                        {
                            "category": "levenshtein",
                            "cases": [
                                {
                                    "input_a": "a",
                                    "input_b": "b",
                                    "expected_distance": 5,
                                    "description": "wrong on purpose",
                                }
                            ],
                        }
                    ],
                }
            ),
            encoding="utf-8",
        )
        (result,) = run_fixtures(load_fixtures(path))
        assert not result.passed
        assert "want 5" in result.detail

    def test_rejects_non_corpus_file(self, tmp_path):
        path = tmp_path / "other.yaml"
        path.write_text("just: a mapping\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_fixtures(path)

    def test_default_path_exists(self):
        assert DEFAULT_FIXTURES_PATH.is_file()
