from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict


class OptimizeRequest(BaseModel):
    prompt: str
    model: Optional[str] = None  # falls back to settings.default_model
    optimization_method: str = "remote"  # remote (alias gemini) or rule-based


class AnalyzeRequest(BaseModel):
    prompt: str
    model: Optional[str] = None  # falls back to settings.default_model
    use_rule_based: bool = False


class RuleTestRequest(BaseModel):
    prompt: str


class PromptFootprint(BaseModel):
    text: str
    tokens: int
    co2: float
    energy: float


class OptimizedFootprint(PromptFootprint):
    reduction_percent: int


class Savings(BaseModel):
    tokens: int
    co2: float
    energy: float
    reduction_percent: int


class OptimizeResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    original: PromptFootprint
    optimized: Optional[OptimizedFootprint] = None
    savings: Optional[Savings] = None
    method_used: str
    model_used: str
    green_score: int


class TextStats(BaseModel):
    text: str
    tokens: int
    length: int


class Reduction(BaseModel):
    tokens: int
    percent: int
    chars: int


class RuleTestResponse(BaseModel):
    original: TextStats
    optimized: TextStats
    reduction: Reduction
    message: str = "Rule-based optimization complete"


class ModelInfo(BaseModel):
    name: str
    co2_per_token: float
    energy_per_token: float


class MethodInfo(BaseModel):
    id: str
    name: str
    description: str


class ModelsResponse(BaseModel):
    ai_models: Dict[str, ModelInfo]
    optimization_methods: List[MethodInfo]
    remote_model: str
