from unittest.mock import MagicMock

import pytest

from greenprompt.core import metrics
from greenprompt.core.metrics import (
    MODELS, TokenCounter, build_report, estimate_tokens, green_score, reduction_percent, resolve_model,
)


class TestEstimates:
    @pytest.mark.parametrize("text,expected", [("", 0), ("abcd", 1), ("abcde", 2), ("a" * 40, 10)])
    def test_estimate_tokens(self, text, expected):
        assert estimate_tokens(text) == expected

    def test_unknown_model_resolves_to_default(self):
        assert resolve_model("mistral") is MODELS["gpt4"]
        assert resolve_model(None) is MODELS["gpt4"]

    def test_model_lookup_ignores_case(self):
        assert resolve_model(" Claude ") is MODELS["claude"]

    @pytest.mark.parametrize("original,optimized,expected", [(100, 75, 25), (0, 0, 0), (3, 2, 33), (8, 7, 13)])
    def test_reduction_percent(self, original, optimized, expected):
        assert reduction_percent(original, optimized) == expected

    def test_green_score(self):
        assert green_score(10) == 95
        assert green_score(500) == 20


class TestTokenCounter:
    def test_heuristic_by_default(self):
        assert TokenCounter().count("a" * 9) == 3

    def test_tiktoken_counter_caches_encodings(self, monkeypatch):
        encoding = MagicMock()
        encoding.encode.side_effect = lambda text: text.split()
        encoding_for_model = MagicMock(return_value=encoding)
        monkeypatch.setattr(metrics, "_tokenizers_cache", {})
        monkeypatch.setattr(metrics.tiktoken, "encoding_for_model", encoding_for_model)

        counter = TokenCounter("tiktoken", "gpt4")
        assert counter.count("three short words") == 3
        assert counter.count("two words") == 2
        encoding_for_model.assert_called_once_with("gpt-4")

    def test_tiktoken_unknown_model_uses_base_encoding(self, monkeypatch):
        encoding = MagicMock()
        encoding.encode.return_value = [1, 2]
        get_encoding = MagicMock(return_value=encoding)
        monkeypatch.setattr(metrics, "_tokenizers_cache", {})
        monkeypatch.setattr(metrics.tiktoken, "get_encoding", get_encoding)

        assert TokenCounter("tiktoken", "mistral").count("hi there") == 2
        get_encoding.assert_called_once_with("cl100k_base")


class TestBuildReport:
    def test_analysis_only(self):
        report = build_report("a" * 40, None, "gpt4", "none", TokenCounter())

        assert report["optimized"] is None
        assert report["savings"] is None
        assert report["method_used"] == "none"
        assert report["original"]["tokens"] == 10
        assert report["original"]["co2"] == pytest.approx(0.0004)
        assert report["green_score"] == 95

    def test_savings(self):
        report = build_report("a" * 40, "a" * 20, "gpt4", "rule-based", TokenCounter())

        assert report["optimized"]["tokens"] == 5
        assert report["optimized"]["reduction_percent"] == 50
        assert report["savings"]["tokens"] == 5
        assert report["savings"]["co2"] == pytest.approx(0.0002)
        assert report["savings"]["energy"] == pytest.approx(0.0001)
        assert report["savings"]["reduction_percent"] == 50
        assert report["green_score"] == 98
        assert report["model_used"] == "gpt4"

    def test_unknown_model_uses_default_factors(self):
        report = build_report("a" * 40, "a" * 40, "mistral", "rule-based", TokenCounter())
        assert report["original"]["co2"] == pytest.approx(10 * MODELS["gpt4"].co2_per_token)
