"""Structured profiles for model requirements and machine capability."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    LLM = "llm"
    VISION = "vision"
    AUDIO = "audio"
    MULTIMODAL = "multimodal"


class ModelTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ULTRA = "ultra"


class Speed(str, Enum):
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"
    VERY_FAST = "very_fast"


class DeviceKind(str, Enum):
    DISCRETE = "discrete"
    INTEGRATED = "integrated"
    OTHER = "other"

    @classmethod
    def from_value(cls, value: str | None) -> "DeviceKind":
        """Map a scanner's device type string; virtual/cpu/unknown become OTHER."""
        try:
            return cls(str(value or "").lower())
        except ValueError:
            return cls.OTHER


class PerformanceTier(str, Enum):
    UNUSABLE = "unusable"
    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    EXCELLENT = "excellent"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {
    PerformanceTier.UNUSABLE: 0,
    PerformanceTier.POOR: 1,
    PerformanceTier.FAIR: 2,
    PerformanceTier.GOOD: 3,
    PerformanceTier.EXCELLENT: 4,
}


class Bottleneck(str, Enum):
    MEMORY = "memory"
    CPU = "cpu"
    ACCELERATOR = "accelerator"
    NONE = "none"


# ISA tags a hardware scanner can report
X86_ISA = ("avx", "fma", "f16c", "avx2", "avx_vnni", "avx512", "avx512_vnni", "avx512_bf16", "avx512_fp16")
ARM_ISA = ("neon", "asimdhp", "asimddp", "asimdfhm", "bf16", "i8mm", "sve", "sve2", "svebf16", "svei8mm")
RECOGNIZED_ISA = frozenset(X86_ISA + ARM_ISA)

DEFAULT_ARCHITECTURES = ("x86_64", "arm64")


@dataclass(frozen=True, order=True)
class ApiVersion:
    """Accelerator API version; ordering is (major, minor, patch)."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    string: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> "ApiVersion":
        """Parse "1.2" or "1.2.3"; missing or non-numeric parts count as 0."""
        parts = []
        for p in str(text).strip().split(".")[:3]:
            try:
                parts.append(int(p))
            except ValueError:
                parts.append(0)
        while len(parts) < 3:
            parts.append(0)
        return cls(parts[0], parts[1], parts[2], str(text).strip())

    def __str__(self) -> str:
        return self.string or f"{self.major}.{self.minor}.{self.patch}"


# --- requirements ---------------------------------------------------------


@dataclass(frozen=True)
class MemoryRequirements:
    minimum: int  # bytes of system RAM
    recommended: int
    vram_minimum: int | None = None
    vram_recommended: int | None = None

    @property
    def effective_vram_recommended(self) -> int | None:
        """Recommended VRAM, defaulting to twice the minimum."""
        if self.vram_recommended:
            return self.vram_recommended
        if self.vram_minimum:
            return self.vram_minimum * 2
        return None


@dataclass(frozen=True)
class ComputeRequirements:
    architectures: tuple[str, ...] = DEFAULT_ARCHITECTURES
    required_isa: tuple[str, ...] = ()  # all must be present
    recommended_isa: tuple[str, ...] = ()
    min_cores: int = 2
    recommended_cores: int = 4


@dataclass(frozen=True)
class AcceleratorRequirements:
    minimum_api_version: ApiVersion | None = None
    required_extensions: tuple[str, ...] = ()
    optional_extensions: tuple[str, ...] = ()
    requires_accelerator: bool = False


@dataclass(frozen=True)
class PerformanceProfile:
    tier: ModelTier
    context_length: int
    cpu_tokens_per_second: float = 0.0  # baseline at full capability
    accelerator_tokens_per_second: float = 0.0
    speed: Speed | None = None


@dataclass(frozen=True)
class ModelMetadata:
    huggingface_id: str | None = None
    file_size: int | None = None  # bytes
    quantization: str | None = None
    license: str | None = None
    languages: tuple[str, ...] = ("en",)
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class RequirementsProfile:
    """What a model needs from a machine. One per model id."""

    id: str
    display_name: str
    description: str
    category: Category
    memory: MemoryRequirements
    compute: ComputeRequirements
    accelerator: AcceleratorRequirements
    performance: PerformanceProfile
    metadata: ModelMetadata = field(default_factory=ModelMetadata)


# --- capability -----------------------------------------------------------


@dataclass(frozen=True)
class AcceleratorDevice:
    kind: DeviceKind
    total_memory: int  # bytes of device memory
    api_version: ApiVersion
    compatibility_level: str = "full"
    name: str = ""
    index: int = 0


@dataclass(frozen=True)
class AcceleratorInfo:
    available: bool
    device_count: int = 0
    devices: tuple[AcceleratorDevice, ...] = ()


@dataclass(frozen=True)
class CpuInfo:
    core_count: int
    instruction_sets: tuple[str, ...] = ()


@dataclass(frozen=True)
class CapabilityProfile:
    """Snapshot of one machine, produced by an external hardware scanner."""

    platform: str  # "Linux", "Windows", "macOS"
    architecture: str  # "x86_64", "arm64"
    total_memory: int  # bytes
    available_memory: int
    cpu: CpuInfo
    accelerator: AcceleratorInfo | None = None

    @property
    def accelerator_available(self) -> bool:
        return bool(self.accelerator and self.accelerator.available)

    @property
    def has_accelerator(self) -> bool:
        """Accelerator reported available with at least one device."""
        return self.accelerator_available and self.accelerator.device_count > 0

    @property
    def devices(self) -> tuple[AcceleratorDevice, ...]:
        return self.accelerator.devices if self.accelerator else ()
