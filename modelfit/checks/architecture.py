"""Check: CPU architecture is one the model ships for."""

from ..models import CapabilityProfile, RequirementsProfile
from .base import CheckId, CheckResult


def check(req: RequirementsProfile, cap: CapabilityProfile) -> CheckResult:
    result = CheckResult(CheckId.ARCHITECTURE)
    supported = req.compute.architectures
    if cap.architecture not in supported:
        result.fail(
            f"Unsupported architecture: {cap.architecture} (supported: {', '.join(supported)})",
            "architecture",
        )
    return result
