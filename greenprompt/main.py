import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException

from .config import Settings, get_settings
from .core.fallback import FallbackOrchestrator, OptimizationMethod, optimize_with_method
from .core.metrics import MODELS, TokenCounter, build_report, reduction_percent
from .core.optimizer import RuleBasedOptimizer
from .core.remote import RemoteOptimizer
from .core.safety import SafetyValidator
from .schemas import (
    AnalyzeRequest, ModelsResponse, OptimizeRequest, OptimizeResponse,
    RuleTestRequest, RuleTestResponse,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = {
    "remote": OptimizationMethod.REMOTE,
    "gemini": OptimizationMethod.REMOTE,
    "rule-based": OptimizationMethod.RULE_BASED,
}

OPTIMIZATION_METHODS = [
    {"id": "remote", "name": "Gemini AI", "description": "AI-powered optimization with rule-based fallback"},
    {"id": "rule-based", "name": "Rule-Based", "description": "Local algorithm optimization"},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Remote optimizer %s", "configured" if settings.remote_configured else "not configured")
    yield


app = FastAPI(title="greenprompt", version="0.1", lifespan=lifespan)


def get_rule_based_optimizer(settings: Settings = Depends(get_settings)) -> RuleBasedOptimizer:
    return RuleBasedOptimizer(aggressive_typos=settings.aggressive_typos)


def get_remote_optimizer(settings: Settings = Depends(get_settings)) -> RemoteOptimizer:
    return RemoteOptimizer(settings)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    rule_based: RuleBasedOptimizer = Depends(get_rule_based_optimizer),
    remote: RemoteOptimizer = Depends(get_remote_optimizer),
) -> FallbackOrchestrator:
    validator = SafetyValidator(settings.min_word_ratio, settings.min_sentence_ratio)
    return FallbackOrchestrator(rule_based, remote, validator)


def _require_prompt(prompt: str):
    if not prompt or not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt is required")


@app.get("/")
def read_root(settings: Settings = Depends(get_settings)):
    return {
        "status": "greenprompt running",
        "time": datetime.now(timezone.utc).isoformat(),
        "remote_api": "configured" if settings.remote_configured else "not configured",
        "endpoints": [
            "POST /api/analyze",
            "POST /api/optimize",
            "POST /api/test-rules",
            "GET /api/models",
        ],
        "models": list(MODELS),
        "optimization_methods": [m["id"] for m in OPTIMIZATION_METHODS],
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


@app.post("/api/analyze", response_model=OptimizeResponse)
def analyze_prompt(request: AnalyzeRequest,
                   settings: Settings = Depends(get_settings),
                   rule_based: RuleBasedOptimizer = Depends(get_rule_based_optimizer)):
    _require_prompt(request.prompt)

    model = request.model or settings.default_model
    optimized = rule_based.optimize(request.prompt) if request.use_rule_based else None
    method_used = OptimizationMethod.RULE_BASED if request.use_rule_based else OptimizationMethod.NONE
    report = build_report(request.prompt, optimized, model, method_used.value,
                          TokenCounter(settings.tokenizer, model))
    return OptimizeResponse(**report)


@app.post("/api/optimize", response_model=OptimizeResponse)
def optimize_prompt(request: OptimizeRequest,
                    settings: Settings = Depends(get_settings),
                    rule_based: RuleBasedOptimizer = Depends(get_rule_based_optimizer),
                    orchestrator: FallbackOrchestrator = Depends(get_orchestrator)):
    _require_prompt(request.prompt)

    method = SUPPORTED_METHODS.get(request.optimization_method.lower().strip())
    if method is None:
        raise HTTPException(status_code=400,
                            detail=f"Unsupported optimization method. Must be one of: {list(SUPPORTED_METHODS)}")

    model = request.model or settings.default_model
    outcome = optimize_with_method(request.prompt, method, model, rule_based, orchestrator)
    report = build_report(outcome.original_text, outcome.optimized_text, model, outcome.method_used.value,
                          TokenCounter(settings.tokenizer, model))
    logger.info("Optimized with %s (requested %s): %d -> %d tokens, %d%% reduction",
                outcome.method_used.value, outcome.method_requested.value,
                report["original"]["tokens"], report["optimized"]["tokens"],
                report["savings"]["reduction_percent"])
    return OptimizeResponse(**report)


@app.post("/api/test-rules", response_model=RuleTestResponse)
def run_rule_test(request: RuleTestRequest,
                  settings: Settings = Depends(get_settings),
                  rule_based: RuleBasedOptimizer = Depends(get_rule_based_optimizer)):
    _require_prompt(request.prompt)

    optimized = rule_based.optimize(request.prompt)
    counter = TokenCounter(settings.tokenizer, settings.default_model)
    original_tokens = counter.count(request.prompt)
    optimized_tokens = counter.count(optimized)
    return RuleTestResponse(
        original={"text": request.prompt, "tokens": original_tokens, "length": len(request.prompt)},
        optimized={"text": optimized, "tokens": optimized_tokens, "length": len(optimized)},
        reduction={
            "tokens": original_tokens - optimized_tokens,
            "percent": reduction_percent(original_tokens, optimized_tokens),
            "chars": len(request.prompt) - len(optimized),
        },
    )


@app.get("/api/models", response_model=ModelsResponse)
def list_models(settings: Settings = Depends(get_settings)):
    return ModelsResponse(
        ai_models={key: factors._asdict() for key, factors in MODELS.items()},
        optimization_methods=OPTIMIZATION_METHODS,
        remote_model=settings.gemini_model,
    )
