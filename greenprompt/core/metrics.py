import logging
import math
from typing import Any, Dict, NamedTuple, Optional

import tiktoken

logger = logging.getLogger(__name__)


class EmissionFactors(NamedTuple):
    name: str
    co2_per_token: float
    energy_per_token: float


MODELS: Dict[str, EmissionFactors] = {
    "gpt4": EmissionFactors("GPT-4", 0.00004, 0.00002),
    "gemini": EmissionFactors("Gemini", 0.00003, 0.000015),
    "claude": EmissionFactors("Claude", 0.00002, 0.00001),
    "llama": EmissionFactors("Llama", 0.000015, 0.000008),
}
DEFAULT_MODEL = "gpt4"

_TIKTOKEN_MODELS = {
    "gpt4": "gpt-4",
    "gemini": "gpt-4",
    "claude": "gpt-4",
    "llama": "gpt-3.5-turbo",
}
_tokenizers_cache: Dict[str, Any] = {}


def resolve_model(model_id: Optional[str]) -> EmissionFactors:
    return MODELS.get((model_id or "").lower().strip(), MODELS[DEFAULT_MODEL])


def estimate_tokens(text: str) -> int:
    return math.ceil(len(text) / 4)


def _get_tokenizer(model_id: str):
    key = _TIKTOKEN_MODELS.get(model_id)
    if key is None:
        logger.warning("Unknown model type '%s'. Using default 'cl100k_base' tokenizer.", model_id)
        key = "cl100k_base"
    if key not in _tokenizers_cache:
        if key == "cl100k_base":
            _tokenizers_cache[key] = tiktoken.get_encoding(key)
        else:
            _tokenizers_cache[key] = tiktoken.encoding_for_model(key)
    return _tokenizers_cache[key]


class TokenCounter:
    def __init__(self, tokenizer: str = "heuristic", model_id: str = DEFAULT_MODEL):
        self.tokenizer = tokenizer
        self.model_id = (model_id or DEFAULT_MODEL).lower().strip()

    def count(self, text: str) -> int:
        if self.tokenizer == "tiktoken":
            return len(_get_tokenizer(self.model_id).encode(text))
        return estimate_tokens(text)


def reduction_percent(original_tokens: int, optimized_tokens: int) -> int:
    if original_tokens <= 0:
        return 0
    return math.floor((1 - optimized_tokens / original_tokens) * 100 + 0.5)


def green_score(tokens: int) -> int:
    return max(20, 100 - math.floor(tokens * 0.5))


def _footprint(text: str, tokens: int, factors: EmissionFactors) -> Dict[str, Any]:
    return {
        "text": text,
        "tokens": tokens,
        "co2": round(tokens * factors.co2_per_token, 6),
        "energy": round(tokens * factors.energy_per_token, 6),
    }


def build_report(original: str, optimized: Optional[str], model_id: str, method_used: str,
                 counter: TokenCounter) -> Dict[str, Any]:
    factors = resolve_model(model_id)
    original_tokens = counter.count(original)
    report = {
        "original": _footprint(original, original_tokens, factors),
        "optimized": None,
        "savings": None,
        "method_used": method_used,
        "model_used": model_id,
        "green_score": green_score(original_tokens),
    }
    if optimized is None:
        return report

    optimized_tokens = counter.count(optimized)
    saved = original_tokens - optimized_tokens
    percent = reduction_percent(original_tokens, optimized_tokens)
    report["optimized"] = dict(_footprint(optimized, optimized_tokens, factors), reduction_percent=percent)
    report["savings"] = {
        "tokens": saved,
        "co2": round(saved * factors.co2_per_token, 6),
        "energy": round(saved * factors.energy_per_token, 6),
        "reduction_percent": percent,
    }
    report["green_score"] = green_score(optimized_tokens)
    return report
