"""Performance tier and throughput estimation: deterministic, explainable."""

from .checks.compute import missing_recommended_isa
from .models import Bottleneck, CapabilityProfile, PerformanceTier, RequirementsProfile
from .verdict import PerformanceEstimate

# Throughput multipliers; they compound
MEMORY_PENALTY = 0.7
CPU_PENALTY = 0.8
ISA_PENALTY = 0.6

# With no accelerator advantage, this many warnings or fewer still grades fair
FAIR_WARNING_LIMIT = 2


def _signals(req: RequirementsProfile, cap: CapabilityProfile) -> tuple[bool, bool, bool, bool]:
    """(accelerator, recommended memory, recommended cores, recommended ISA)."""
    return (
        cap.has_accelerator,
        cap.total_memory >= req.memory.recommended,
        cap.cpu.core_count >= req.compute.recommended_cores,
        not missing_recommended_isa(req, cap),
    )


def classify_tier(
    req: RequirementsProfile,
    cap: CapabilityProfile,
    issues: list[str],
    warnings: list[str],
) -> PerformanceTier:
    """
    Any hard issue -> unusable. Otherwise first match wins:
    all four signals -> excellent; accelerator + memory + cores -> good;
    accelerator + memory -> fair; <= 2 warnings -> fair; else poor.
    """
    if issues:
        return PerformanceTier.UNUSABLE
    accel, memory, cores, isa = _signals(req, cap)
    if accel and memory and cores and isa:
        return PerformanceTier.EXCELLENT
    if accel and memory and cores:
        return PerformanceTier.GOOD
    if accel and memory:
        return PerformanceTier.FAIR
    if len(warnings) <= FAIR_WARNING_LIMIT:
        return PerformanceTier.FAIR
    return PerformanceTier.POOR


def memory_usage_percent(req: RequirementsProfile, cap: CapabilityProfile) -> float:
    """Share of system RAM the model's minimum footprint takes, in [0, 100]."""
    if cap.total_memory <= 0:
        return 100.0
    pct = 100.0 * req.memory.minimum / cap.total_memory
    return max(0.0, min(100.0, pct))


def estimate_performance(req: RequirementsProfile, cap: CapabilityProfile) -> PerformanceEstimate:
    """Baseline tokens/s for the device in use, scaled down by every shortfall."""
    accel, memory, cores, isa = _signals(req, cap)
    perf = req.performance
    tps = perf.accelerator_tokens_per_second if accel else perf.cpu_tokens_per_second

    multiplier = 1.0
    if not memory:
        multiplier *= MEMORY_PENALTY
    if not cores:
        multiplier *= CPU_PENALTY
    if not isa:
        multiplier *= ISA_PENALTY

    if not memory:
        bottleneck = Bottleneck.MEMORY
    elif not cores:
        bottleneck = Bottleneck.CPU
    elif not accel and req.accelerator.requires_accelerator:
        bottleneck = Bottleneck.ACCELERATOR
    else:
        bottleneck = Bottleneck.NONE

    return PerformanceEstimate(
        tokens_per_second=tps * multiplier,
        memory_usage_percent=memory_usage_percent(req, cap),
        bottleneck=bottleneck,
    )
