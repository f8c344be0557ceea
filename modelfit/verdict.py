"""Evaluation output: the verdict record and its wire form."""

from __future__ import annotations

import json
from dataclasses import dataclass

from .models import Bottleneck, PerformanceTier


@dataclass(frozen=True)
class PerformanceEstimate:
    tokens_per_second: float
    memory_usage_percent: float  # clamped to [0, 100]
    bottleneck: Bottleneck

    def to_dict(self) -> dict:
        return {
            "tokensPerSecond": self.tokens_per_second,
            "memoryUsagePercent": self.memory_usage_percent,
            "bottleneck": self.bottleneck.value,
        }


@dataclass(frozen=True)
class Verdict:
    """Graded answer to "will this model run on this machine?"."""

    compatible: bool  # True iff no hard issues
    reason: str
    performance_tier: PerformanceTier
    warnings: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    missing_requirements: tuple[str, ...] = ()  # tags of failed sub-checks
    performance_estimate: PerformanceEstimate | None = None
    model_id: str = ""
    issues: tuple[str, ...] = ()  # hard failures, one per missing tag; not part of the wire form

    def to_dict(self) -> dict:
        """Plain document with the field names downstream consumers parse."""
        return {
            "compatible": self.compatible,
            "reason": self.reason,
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
            "missingRequirements": list(self.missing_requirements),
            "performanceTier": self.performance_tier.value,
            "performanceEstimate": self.performance_estimate.to_dict() if self.performance_estimate else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
