"""Independent compatibility checks, one module per resource."""

from . import accelerator, architecture, compute, memory
from .base import CheckId, CheckResult

# Run order; determines message and tag order in a Verdict
CHECKS = {
    CheckId.MEMORY: memory.check,
    CheckId.COMPUTE: compute.check,
    CheckId.ACCELERATOR: accelerator.check,
    CheckId.ARCHITECTURE: architecture.check,
}

__all__ = ["CHECKS", "CheckId", "CheckResult"]
