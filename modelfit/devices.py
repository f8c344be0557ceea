"""Accelerator device selection and API version comparison."""

from __future__ import annotations

from typing import Sequence

from .models import AcceleratorDevice, ApiVersion, DeviceKind


def select_best_device(devices: Sequence[AcceleratorDevice]) -> AcceleratorDevice | None:
    """
    Pick the device a model would run on.
    Largest-memory discrete device wins; ties go to the first seen.
    With no discrete device, the first enumerated device is used.
    """
    if not devices:
        return None
    best: AcceleratorDevice | None = None
    for d in devices:
        if d.kind != DeviceKind.DISCRETE:
            continue
        if best is None or d.total_memory > best.total_memory:
            best = d
    return best if best is not None else devices[0]


def version_satisfies(available: ApiVersion, required: ApiVersion) -> bool:
    """True if available >= required in (major, minor, patch) order."""
    return (available.major, available.minor, available.patch) >= (
        required.major,
        required.minor,
        required.patch,
    )
