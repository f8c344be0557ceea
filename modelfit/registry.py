"""Model requirements registry.

Built once at process start from the built-in table plus optional user files,
then read-only. Anything callable as ``lookup(model_id)`` returning a
RequirementsProfile or None can stand in for a registry.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping, Optional

from .errors import UnknownModelError
from .loader import load_requirements_file, requirements_from_dict
from .models import Category, ModelTier, RequirementsProfile

logger = logging.getLogger(__name__)

RequirementsLookup = Callable[[str], Optional[RequirementsProfile]]

CONFIG_DIR = Path.home() / ".modelfit"
USER_MODELS_FILE = CONFIG_DIR / "models.yaml"
MODELS_ENV_VAR = "MODELFIT_MODELS"

GB = 1024**3

BUILTIN_MODELS: list[dict] = [
    # Small models - good for older hardware
    {
        "id": "qwen-1.5b",
        "displayName": "Qwen 1.5B Chat",
        "description": "Alibaba Qwen 1.5B - Small efficient model for general chat",
        "category": "llm",
        "memory": {"minimum": 2 * GB, "recommended": 4 * GB, "vramMinimum": 1 * GB, "vramRecommended": 2 * GB},
        "compute": {
            "architectures": ["x86_64", "arm64"],
            "requiredInstructionSets": [],
            "recommendedInstructionSets": ["avx2", "neon"],
            "minCores": 2,
            "recommendedCores": 4,
        },
        "accelerator": {
            "minimumApiVersion": "1.0",
            "optionalExtensions": ["VK_KHR_push_descriptor"],
            "requiresAccelerator": False,
        },
        "performance": {
            "tier": "low",
            "speed": "moderate",
            "contextLength": 32768,
            "tokensPerSecond": {"cpu": 8, "accelerator": 25},
        },
        "metadata": {
            "huggingfaceId": "Qwen/Qwen1.5-1.8B-Chat",
            "fileSize": int(1.2 * GB),
            "quantization": "Q4_K_M",
            "license": "Apache-2.0",
            "languages": ["en", "zh"],
            "tags": ["small", "efficient", "multilingual"],
        },
    },
    {
        "id": "phi-3-mini",
        "displayName": "Phi-3 Mini",
        "description": "Microsoft Phi-3 Mini 4K - High quality small model",
        "category": "llm",
        "memory": {"minimum": 3 * GB, "recommended": 6 * GB, "vramMinimum": 2 * GB, "vramRecommended": 4 * GB},
        "compute": {
            "architectures": ["x86_64", "arm64"],
            "requiredInstructionSets": ["avx"],
            "recommendedInstructionSets": ["avx2", "fma", "neon"],
            "minCores": 4,
            "recommendedCores": 6,
        },
        "accelerator": {
            "minimumApiVersion": "1.1",
            "optionalExtensions": ["VK_KHR_push_descriptor"],
            "requiresAccelerator": False,
        },
        "performance": {
            "tier": "medium",
            "speed": "moderate",
            "contextLength": 4096,
            "tokensPerSecond": {"cpu": 6, "accelerator": 20},
        },
        "metadata": {
            "huggingfaceId": "microsoft/Phi-3-mini-4k-instruct-gguf",
            "fileSize": int(4.2 * GB),
            "quantization": "Q4_K_M",
            "license": "MIT",
            "tags": ["small", "high-quality", "instruction-tuned"],
        },
    },
    {
        "id": "llama-3-8b",
        "displayName": "Llama 3 8B Instruct",
        "description": "Meta Llama 3 8B - High performance medium model",
        "category": "llm",
        "memory": {"minimum": 6 * GB, "recommended": 12 * GB, "vramMinimum": 4 * GB, "vramRecommended": 8 * GB},
        "compute": {
            "architectures": ["x86_64", "arm64"],
            "requiredInstructionSets": ["avx2"],
            "recommendedInstructionSets": ["avx2", "fma", "f16c", "neon"],
            "minCores": 6,
            "recommendedCores": 8,
        },
        "accelerator": {
            "minimumApiVersion": "1.2",
            "optionalExtensions": ["VK_KHR_push_descriptor"],
            "requiresAccelerator": True,
        },
        "performance": {
            "tier": "high",
            "speed": "fast",
            "contextLength": 8192,
            "tokensPerSecond": {"cpu": 3, "accelerator": 15},
        },
        "metadata": {
            "huggingfaceId": "meta-llama/Meta-Llama-3-8B-Instruct-GGUF",
            "fileSize": int(8.5 * GB),
            "quantization": "Q4_K_M",
            "license": "Llama-3",
            "tags": ["medium", "high-quality", "instruction-tuned", "reasoning"],
        },
    },
    {
        "id": "llama-3-70b",
        "displayName": "Llama 3 70B Instruct",
        "description": "Meta Llama 3 70B - Large high-performance model",
        "category": "llm",
        "memory": {"minimum": 24 * GB, "recommended": 48 * GB, "vramMinimum": 16 * GB, "vramRecommended": 32 * GB},
        "compute": {
            "architectures": ["x86_64"],
            "requiredInstructionSets": ["avx2"],
            "recommendedInstructionSets": ["avx512", "fma", "f16c", "avx512_vnni"],
            "minCores": 8,
            "recommendedCores": 16,
        },
        "accelerator": {
            "minimumApiVersion": "1.3",
            "requiredExtensions": ["VK_KHR_push_descriptor"],
            "optionalExtensions": ["VK_KHR_maintenance1"],
            "requiresAccelerator": True,
        },
        "performance": {
            "tier": "ultra",
            "speed": "very_fast",
            "contextLength": 8192,
            "tokensPerSecond": {"cpu": 0.5, "accelerator": 8},
        },
        "metadata": {
            "huggingfaceId": "meta-llama/Meta-Llama-3-70B-Instruct-GGUF",
            "fileSize": 42 * GB,
            "quantization": "Q4_K_M",
            "license": "Llama-3",
            "tags": ["large", "high-quality", "instruction-tuned", "reasoning", "advanced"],
        },
    },
    # Vision models
    {
        "id": "llava-1.5-7b",
        "displayName": "LLaVA 1.5 7B",
        "description": "Vision-Language model for image understanding",
        "category": "multimodal",
        "memory": {"minimum": 8 * GB, "recommended": 16 * GB, "vramMinimum": 6 * GB, "vramRecommended": 12 * GB},
        "compute": {
            "architectures": ["x86_64", "arm64"],
            "requiredInstructionSets": ["avx2"],
            "recommendedInstructionSets": ["avx2", "fma", "f16c", "neon"],
            "minCores": 6,
            "recommendedCores": 8,
        },
        "accelerator": {
            "minimumApiVersion": "1.2",
            "optionalExtensions": ["VK_KHR_push_descriptor"],
            "requiresAccelerator": True,
        },
        "performance": {
            "tier": "high",
            "speed": "fast",
            "contextLength": 4096,
            "tokensPerSecond": {"cpu": 2, "accelerator": 12},
        },
        "metadata": {
            "huggingfaceId": "liuhaotian/llava-v1.5-7b-gguf",
            "fileSize": int(8.7 * GB),
            "quantization": "Q4_K_M",
            "license": "Apache-2.0",
            "tags": ["vision", "multimodal", "image-understanding"],
        },
    },
]


class ModelRegistry(Mapping[str, RequirementsProfile]):
    """Read-only mapping of model id -> RequirementsProfile. Later profiles replace earlier ids."""

    def __init__(self, profiles: Iterable[RequirementsProfile] = ()):
        models: dict[str, RequirementsProfile] = {}
        for p in profiles:
            models[p.id] = p
        self._models = MappingProxyType(models)

    def __getitem__(self, model_id: str) -> RequirementsProfile:
        return self._models[model_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __call__(self, model_id: str) -> RequirementsProfile | None:
        return self.get_requirements(model_id)

    def get_requirements(self, model_id: str) -> RequirementsProfile | None:
        return self._models.get(model_id)

    def require(self, model_id: str) -> RequirementsProfile:
        """Strict lookup; raises UnknownModelError."""
        profile = self._models.get(model_id)
        if profile is None:
            raise UnknownModelError(model_id)
        return profile

    def ids(self) -> list[str]:
        return list(self._models)

    def by_category(self, category: Category | str) -> list[RequirementsProfile]:
        return [m for m in self._models.values() if m.category.value == Category(category).value]

    def by_tier(self, tier: ModelTier | str) -> list[RequirementsProfile]:
        return [m for m in self._models.values() if m.performance.tier.value == ModelTier(tier).value]

    def merged(self, profiles: Iterable[RequirementsProfile]) -> "ModelRegistry":
        """New registry with profiles layered over this one."""
        return ModelRegistry([*self._models.values(), *profiles])


def builtin_registry() -> ModelRegistry:
    return ModelRegistry(requirements_from_dict(d) for d in BUILTIN_MODELS)


def config_paths(extra_paths: Iterable[Path] = ()) -> tuple[Path, ...]:
    """User registry files in merge order: home config, $MODELFIT_MODELS, explicit paths."""
    paths: list[Path] = []
    if USER_MODELS_FILE.exists():
        paths.append(USER_MODELS_FILE)
    env_path = os.environ.get(MODELS_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    paths.extend(Path(p) for p in extra_paths)
    return tuple(paths)


@lru_cache(maxsize=None)
def _load_registry(paths: tuple[Path, ...]) -> ModelRegistry:
    registry = builtin_registry()
    for path in paths:
        profiles = load_requirements_file(path)
        logger.info("Loaded %d model(s) from %s", len(profiles), path)
        registry = registry.merged(profiles)
    logger.debug("Model registry ready: %s", ", ".join(registry.ids()))
    return registry


def default_registry(extra_paths: Iterable[Path] = ()) -> ModelRegistry:
    """Process-wide registry: built-ins plus user files. Built once per set of files."""
    return _load_registry(config_paths(extra_paths))
