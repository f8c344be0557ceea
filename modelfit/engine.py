"""Compatibility engine: runs the four checks, merges them into a Verdict."""

from __future__ import annotations

import logging

from .checks import CHECKS, CheckResult
from .models import CapabilityProfile, PerformanceTier, RequirementsProfile
from .performance import classify_tier, estimate_performance
from .registry import RequirementsLookup, default_registry
from .remediation import CHOOSE_MODEL, AlternativeFinder, generate_recommendations
from .verdict import Verdict

logger = logging.getLogger(__name__)

COMPATIBLE_REASON = "Model is compatible with your system"


def run_checks(req: RequirementsProfile, cap: CapabilityProfile) -> list[CheckResult]:
    """Run every check. None short-circuits another; all findings are kept."""
    return [check_fn(req, cap) for check_fn in CHECKS.values()]


def unknown_model_verdict(model_id: str) -> Verdict:
    return Verdict(
        compatible=False,
        reason=f"Unknown model: {model_id}",
        issues=(f"Unknown model: {model_id}",),
        performance_tier=PerformanceTier.UNUSABLE,
        recommendations=(CHOOSE_MODEL,),
        missing_requirements=("model_definition",),
        model_id=model_id,
    )


def evaluate_profile(
    req: RequirementsProfile,
    cap: CapabilityProfile,
    alternatives: AlternativeFinder | None = None,
) -> Verdict:
    """Evaluate a requirements profile directly, without a registry."""
    issues: list[str] = []
    warnings: list[str] = []
    missing: list[str] = []
    for result in run_checks(req, cap):
        issues.extend(result.issues)
        warnings.extend(result.warnings)
        missing.extend(result.missing)

    compatible = not issues
    tier = classify_tier(req, cap, issues, warnings)
    estimate = estimate_performance(req, cap)
    recommendations = [] if compatible else generate_recommendations(req, cap, missing, alternatives)

    logger.debug(
        "Evaluated %s: compatible=%s tier=%s missing=%s",
        req.id, compatible, tier.value, ",".join(missing) or "-",
    )
    return Verdict(
        compatible=compatible,
        reason=COMPATIBLE_REASON if compatible else "; ".join(issues),
        performance_tier=tier,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
        missing_requirements=tuple(missing),
        performance_estimate=estimate,
        model_id=req.id,
        issues=tuple(issues),
    )


def evaluate(
    model_id: str,
    cap: CapabilityProfile,
    registry: RequirementsLookup | None = None,
    alternatives: AlternativeFinder | None = None,
) -> Verdict:
    """
    Look up model_id and evaluate it against the machine.
    An unknown id is the only early exit: it yields a terminal unusable verdict.
    """
    lookup = registry if registry is not None else default_registry()
    req = lookup(model_id)
    if req is None:
        logger.debug("Unknown model id %r", model_id)
        return unknown_model_verdict(model_id)
    return evaluate_profile(req, cap, alternatives)


class Evaluator:
    """Stateless evaluator bound to a registry and an alternative-model finder."""

    def __init__(self, registry: RequirementsLookup, alternatives: AlternativeFinder | None = None):
        self.registry = registry
        self.alternatives = alternatives

    def __call__(self, model_id: str, cap: CapabilityProfile) -> Verdict:
        return evaluate(model_id, cap, self.registry, self.alternatives)
