"""Check: compute accelerator presence, API version and device count."""

from ..devices import select_best_device, version_satisfies
from ..models import CapabilityProfile, RequirementsProfile
from .base import CheckId, CheckResult


def check(req: RequirementsProfile, cap: CapabilityProfile) -> CheckResult:
    """
    No accelerator: a hard failure only when the model requires one,
    otherwise a CPU-only warning and nothing else is checked.
    """
    result = CheckResult(CheckId.ACCELERATOR)
    accel = req.accelerator

    if not cap.accelerator_available:
        if accel.requires_accelerator:
            result.fail("A compute accelerator is required but not available on this system", "accelerator")
        else:
            result.warn("No compute accelerator available - will use CPU-only mode (slower)")
        return result

    if accel.minimum_api_version is not None:
        best = select_best_device(cap.devices)
        if best is not None and not version_satisfies(best.api_version, accel.minimum_api_version):
            result.fail(
                f"Accelerator API version too old: need {accel.minimum_api_version}, have {best.api_version}",
                "accelerator_version",
            )

    # available can be reported with zero usable devices
    if accel.requires_accelerator and cap.accelerator.device_count == 0:
        result.fail("Model requires an accelerator but no compatible device was found", "accelerator_device")
    return result
