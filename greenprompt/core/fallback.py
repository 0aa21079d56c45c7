import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from greenprompt.core.optimizer import RuleBasedOptimizer
from greenprompt.core.remote import RemoteFailure, RemoteOptimizer
from greenprompt.core.safety import SafetyValidator

logger = logging.getLogger(__name__)


class OptimizationMethod(str, Enum):
    RULE_BASED = "rule-based"
    REMOTE = "remote"
    NONE = "none"


@dataclass(frozen=True)
class RemoteAccepted:
    text: str


@dataclass(frozen=True)
class FellBack:
    text: str
    reason: str


FallbackDecision = Union[RemoteAccepted, FellBack]


@dataclass(frozen=True)
class OptimizationOutcome:
    original_text: str
    optimized_text: str
    method_requested: OptimizationMethod
    method_used: OptimizationMethod
    rejection_reason: Optional[str] = None


class FallbackOrchestrator:
    """Try the remote rewriter once, keep its output only if it passes validation."""

    def __init__(self, rule_based: RuleBasedOptimizer, remote: RemoteOptimizer, validator: SafetyValidator):
        self.rule_based = rule_based
        self.remote = remote
        self.validator = validator

    def decide(self, prompt: str, target_model: str) -> FallbackDecision:
        result = self.remote.rewrite(prompt, target_model)
        if isinstance(result, RemoteFailure):
            logger.warning("Remote optimizer unavailable (%s), using rule-based", result.reason.value)
            return FellBack(self.rule_based.optimize(prompt), result.reason.value)

        verdict = self.validator.validate(prompt, result.text)
        if not verdict.accepted:
            logger.warning("Remote rewrite rejected by %s check, using rule-based", verdict.failed_check.value)
            return FellBack(self.rule_based.optimize(prompt), verdict.failed_check.value)

        return RemoteAccepted(result.text)

    def run(self, prompt: str, target_model: str) -> OptimizationOutcome:
        decision = self.decide(prompt, target_model)
        if isinstance(decision, RemoteAccepted):
            return OptimizationOutcome(prompt, decision.text, OptimizationMethod.REMOTE, OptimizationMethod.REMOTE)
        return OptimizationOutcome(prompt, decision.text, OptimizationMethod.REMOTE, OptimizationMethod.RULE_BASED,
                                   rejection_reason=decision.reason)


def optimize_with_method(prompt: str, method: OptimizationMethod, target_model: str,
                         rule_based: RuleBasedOptimizer, orchestrator: FallbackOrchestrator) -> OptimizationOutcome:
    if method is OptimizationMethod.REMOTE:
        return orchestrator.run(prompt, target_model)
    return OptimizationOutcome(prompt, rule_based.optimize(prompt), method, OptimizationMethod.RULE_BASED)
