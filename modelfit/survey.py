"""Registry-wide evaluation: which models fit this machine, best first."""

from __future__ import annotations

from typing import Any

from .engine import evaluate_profile
from .models import CapabilityProfile, Category, RequirementsProfile
from .registry import ModelRegistry
from .remediation import AlternativeFinder
from .verdict import Verdict


def _sort_key(verdict: Verdict) -> tuple:
    return (not verdict.compatible, -verdict.performance_tier.rank, verdict.model_id)


def survey(
    cap: CapabilityProfile,
    registry: ModelRegistry,
    category: Category | str | None = None,
) -> list[Verdict]:
    """Evaluate every registered model (optionally one category); compatible and best tier first."""
    models = registry.by_category(category) if category else list(registry.values())
    verdicts = [evaluate_profile(m, cap) for m in models]
    return sorted(verdicts, key=_sort_key)


def registry_alternatives(registry: ModelRegistry, limit: int = 3) -> AlternativeFinder:
    """
    Finder that suggests other registry models which evaluate compatible on the machine.
    Same category first, then best tier.
    """

    def find(req: RequirementsProfile, cap: CapabilityProfile) -> list[RequirementsProfile]:
        scored = []
        for m in registry.values():
            if m.id == req.id:
                continue
            v = evaluate_profile(m, cap)
            if v.compatible:
                scored.append((m.category != req.category, -v.performance_tier.rank, m.id, m))
        scored.sort(key=lambda x: x[:3])
        return [m for *_, m in scored[:limit]]

    return find


def survey_summary(verdicts: list[Verdict]) -> dict[str, Any]:
    """Aggregate for JSON output: counts plus one row per model."""
    return {
        "total_models": len(verdicts),
        "compatible": sum(1 for v in verdicts if v.compatible),
        "models": [{"id": v.model_id, **v.to_dict()} for v in verdicts],
    }
