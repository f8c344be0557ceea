"""Check: CPU core count and instruction sets."""

from ..models import CapabilityProfile, RequirementsProfile
from .base import CheckId, CheckResult


def missing_recommended_isa(req: RequirementsProfile, cap: CapabilityProfile) -> list[str]:
    """Recommended ISA tags the CPU lacks, in declaration order."""
    available = set(cap.cpu.instruction_sets)
    return [isa for isa in req.compute.recommended_isa if isa not in available]


def check(req: RequirementsProfile, cap: CapabilityProfile) -> CheckResult:
    """One hard failure per missing required ISA tag; one warning for all missing recommended tags."""
    result = CheckResult(CheckId.COMPUTE)
    compute = req.compute
    cores = cap.cpu.core_count

    if cores < compute.min_cores:
        result.fail(f"Insufficient CPU cores: need {compute.min_cores}, have {cores}", "cpu_cores")
    elif cores < compute.recommended_cores:
        result.warn(f"Limited CPU cores: recommended {compute.recommended_cores}, have {cores}")

    available = set(cap.cpu.instruction_sets)
    for isa in compute.required_isa:
        if isa not in available:
            result.fail(f"Missing required CPU instruction set: {isa}", f"cpu_{isa}")

    missing = missing_recommended_isa(req, cap)
    if missing:
        result.warn(f"Missing recommended CPU instruction sets: {', '.join(missing)}")
    return result
