"""Remediation advice keyed off missing-requirement tags."""

from __future__ import annotations

from typing import Callable

from .models import CapabilityProfile, RequirementsProfile

# (requirements, capability) -> other models that would fit this machine
AlternativeFinder = Callable[[RequirementsProfile, CapabilityProfile], list[RequirementsProfile]]

ACCELERATOR_TAGS = frozenset({"accelerator", "accelerator_version", "accelerator_device"})

FREE_MEMORY = "Close other applications to free up memory"
SMALLER_MODEL = "Consider using a smaller model with lower memory requirements"
CPU_ONLY = "Use CPU-only mode if available"
LOWER_VRAM = "Consider a model with lower VRAM requirements"
FREE_CPU = "Close background applications to free up CPU resources"
MODERN_CPU = "Consider upgrading to a CPU with modern instruction sets (AVX2, NEON)"
INSTALL_DRIVERS = "Install or update GPU drivers with Vulkan compute support"
GPU_COMPUTE = "Ensure your GPU supports Vulkan compute"
CHOOSE_MODEL = "Choose a model from the supported model list"

PLATFORM_DRIVER_HINTS = {
    "windows": "Ensure the Vulkan Runtime is installed (LunarG SDK or your GPU vendor's driver)",
    "linux": "Install mesa-vulkan-drivers or your GPU vendor's Vulkan driver",
    "macos": "Install MoltenVK to expose Vulkan compute on Apple GPUs",
}

# Tag -> explanation, used by `modelfit explain`
REMEDIATION_INFO: dict[str, dict] = {
    "model_definition": {
        "description": "The requested model id is not in the registry.",
        "when": "The id is misspelled or the model was never registered.",
        "fix": [CHOOSE_MODEL],
    },
    "system_memory": {
        "description": "Total system RAM is below the model's minimum.",
        "when": "totalMemory < memory.minimum",
        "fix": [FREE_MEMORY, SMALLER_MODEL],
    },
    "vram": {
        "description": "The selected accelerator has less memory than the model's VRAM minimum.",
        "when": "best device memory < memory.vramMinimum",
        "fix": [CPU_ONLY, LOWER_VRAM],
    },
    "cpu_cores": {
        "description": "Fewer CPU cores than the model's minimum.",
        "when": "cpu.coreCount < compute.minCores",
        "fix": [FREE_CPU, MODERN_CPU],
    },
    "cpu_<isa>": {
        "description": "A required CPU instruction set (e.g. cpu_avx2) is missing.",
        "when": "tag in compute.requiredInstructionSets but not in cpu.instructionSets",
        "fix": [MODERN_CPU],
    },
    "accelerator": {
        "description": "The model requires a compute accelerator and none is available.",
        "when": "no accelerator and accelerator.requiresAccelerator",
        "fix": [INSTALL_DRIVERS, GPU_COMPUTE],
    },
    "accelerator_version": {
        "description": "The accelerator API version is older than the model's minimum.",
        "when": "best device apiVersion < accelerator.minimumApiVersion",
        "fix": [INSTALL_DRIVERS, GPU_COMPUTE],
    },
    "accelerator_device": {
        "description": "An accelerator was reported but exposes no usable device.",
        "when": "accelerator.requiresAccelerator and deviceCount == 0",
        "fix": [INSTALL_DRIVERS, GPU_COMPUTE],
    },
    "architecture": {
        "description": "The machine's CPU architecture is not one the model supports.",
        "when": "architecture not in compute.architectures",
        "fix": ["Run the model on a machine with a supported architecture"],
    },
}


def explain(tag: str) -> dict | None:
    """Info for a tag; cpu_<isa> tags other than cpu_cores share one entry."""
    if tag in REMEDIATION_INFO:
        return REMEDIATION_INFO[tag]
    if tag.startswith("cpu_"):
        return REMEDIATION_INFO["cpu_<isa>"]
    return None


def no_alternatives(req: RequirementsProfile, cap: CapabilityProfile) -> list[RequirementsProfile]:
    return []


def _platform_key(platform: str) -> str:
    p = platform.lower()
    if p in ("darwin", "mac", "macos", "osx"):
        return "macos"
    if p.startswith("win"):
        return "windows"
    return p


def generate_recommendations(
    req: RequirementsProfile,
    cap: CapabilityProfile,
    missing: list[str],
    alternatives: AlternativeFinder | None = None,
) -> list[str]:
    """Deterministic advice; each tag family is checked independently."""
    tags = set(missing)
    recs: list[str] = []

    if "system_memory" in tags:
        recs += [FREE_MEMORY, SMALLER_MODEL]
    if "vram" in tags:
        recs += [CPU_ONLY, LOWER_VRAM]
    if "cpu_cores" in tags:
        recs.append(FREE_CPU)
    if any(t.startswith("cpu_") for t in tags):
        recs.append(MODERN_CPU)
    if tags & ACCELERATOR_TAGS:
        recs += [INSTALL_DRIVERS, GPU_COMPUTE]
        required = req.accelerator.minimum_api_version
        if "accelerator_version" in tags and required is not None:
            recs.append(f"Update GPU drivers to support accelerator API {required} or newer")
        hint = PLATFORM_DRIVER_HINTS.get(_platform_key(cap.platform))
        if hint:
            recs.append(hint)

    finder = alternatives or no_alternatives
    alts = finder(req, cap)
    if alts:
        recs.append(f"Consider these compatible alternatives: {', '.join(m.display_name for m in alts)}")

    return list(dict.fromkeys(recs))
