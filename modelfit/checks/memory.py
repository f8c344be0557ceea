"""Check: system RAM and accelerator VRAM."""

from ..devices import select_best_device
from ..models import CapabilityProfile, RequirementsProfile
from .base import CheckId, CheckResult, format_bytes


def check(req: RequirementsProfile, cap: CapabilityProfile) -> CheckResult:
    """Hard failure below the minimum, warning between minimum and recommended."""
    result = CheckResult(CheckId.MEMORY)
    mem = req.memory

    if cap.total_memory < mem.minimum:
        result.fail(
            f"Insufficient system memory: need {format_bytes(mem.minimum)}, have {format_bytes(cap.total_memory)}",
            "system_memory",
        )
    elif cap.total_memory < mem.recommended:
        result.warn(
            f"Limited system memory: recommended {format_bytes(mem.recommended)}, have {format_bytes(cap.total_memory)}"
        )

    if not (cap.accelerator_available and mem.vram_minimum):
        return result

    best = select_best_device(cap.devices)
    if best is None:
        return result
    vram_recommended = mem.effective_vram_recommended
    if best.total_memory < mem.vram_minimum:
        result.fail(
            f"Insufficient VRAM: need {format_bytes(mem.vram_minimum)}, have {format_bytes(best.total_memory)}",
            "vram",
        )
    elif best.total_memory < vram_recommended:
        result.warn(
            f"Limited VRAM: recommended {format_bytes(vram_recommended)}, have {format_bytes(best.total_memory)}"
        )
    return result
