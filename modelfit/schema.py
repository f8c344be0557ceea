"""Pydantic schemas for requirements and capability documents.

Documents arrive as JSON/YAML with camelCase names, and older scanners and
registries use snake_case or Vulkan-specific names. Both spellings are
accepted through ``AliasChoices``. Validated documents are turned into the
frozen dataclasses in ``models`` with ``to_profile()``/``to_capability()``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from .models import (
    DEFAULT_ARCHITECTURES,
    RECOGNIZED_ISA,
    AcceleratorDevice,
    AcceleratorInfo,
    AcceleratorRequirements,
    ApiVersion,
    CapabilityProfile,
    Category,
    ComputeRequirements,
    CpuInfo,
    DeviceKind,
    MemoryRequirements,
    ModelMetadata,
    ModelTier,
    PerformanceProfile,
    RequirementsProfile,
    Speed,
)

DEFAULT_MINIMUM_API_VERSION = "1.0"


def _unique(tags: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(tags))


class _Document(BaseModel):
    """Base for document sections: frozen, unknown keys ignored, null means 'use the default'."""

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class ApiVersionDoc(_Document):
    """Either "1.2.3" or {major, minor, patch, string}."""

    major: int = Field(0, ge=0)
    minor: int = Field(0, ge=0)
    patch: int = Field(0, ge=0)
    string: str = ""

    @model_validator(mode="before")
    @classmethod
    def from_string(cls, data: Any) -> Any:
        if isinstance(data, (str, int, float)) and not isinstance(data, bool):
            v = ApiVersion.parse(str(data))
            return {"major": v.major, "minor": v.minor, "patch": v.patch, "string": v.string}
        return data

    def to_version(self) -> ApiVersion:
        return ApiVersion(self.major, self.minor, self.patch, self.string or f"{self.major}.{self.minor}.{self.patch}")


# --- requirements ---------------------------------------------------------


class MemoryDoc(_Document):
    minimum: int = Field(ge=0, description="System RAM in bytes")
    recommended: int = Field(ge=0)
    vram_minimum: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("vramMinimum", "vram_minimum"))
    vram_recommended: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("vramRecommended", "vram_recommended")
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "MemoryDoc":
        if self.minimum > self.recommended:
            raise ValueError(f"memory minimum ({self.minimum}) exceeds recommended ({self.recommended})")
        if (
            self.vram_minimum is not None
            and self.vram_recommended is not None
            and self.vram_minimum > self.vram_recommended
        ):
            raise ValueError(
                f"vram minimum ({self.vram_minimum}) exceeds recommended ({self.vram_recommended})"
            )
        return self


class ComputeDoc(_Document):
    architectures: tuple[str, ...] = Field(
        DEFAULT_ARCHITECTURES, validation_alias=AliasChoices("architectures", "architecture")
    )
    required_isa: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("requiredInstructionSets", "required_isa")
    )
    recommended_isa: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("recommendedInstructionSets", "recommended_isa")
    )
    min_cores: int = Field(2, ge=0, validation_alias=AliasChoices("minCores", "min_cores"))
    recommended_cores: int = Field(4, ge=0, validation_alias=AliasChoices("recommendedCores", "recommended_cores"))

    @field_validator("architectures", "required_isa", "recommended_isa")
    @classmethod
    def dedupe_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _unique(v)

    @field_validator("required_isa")
    @classmethod
    def validate_required_isa(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        unknown = [isa for isa in v if isa not in RECOGNIZED_ISA]
        if unknown:
            raise ValueError(f"unrecognized required instruction set(s): {', '.join(unknown)}")
        return v

    @model_validator(mode="after")
    def validate_cores(self) -> "ComputeDoc":
        if self.min_cores > self.recommended_cores:
            raise ValueError(
                f"cores minimum ({self.min_cores}) exceeds recommended ({self.recommended_cores})"
            )
        return self


class AcceleratorRequirementsDoc(_Document):
    minimum_api_version: ApiVersionDoc = Field(
        DEFAULT_MINIMUM_API_VERSION,
        validate_default=True,
        validation_alias=AliasChoices("minimumApiVersion", "minimum_version", "minimum_api_version"),
    )
    required_extensions: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("requiredExtensions", "required_extensions")
    )
    optional_extensions: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("optionalExtensions", "optional_extensions")
    )
    requires_accelerator: bool = Field(
        False, validation_alias=AliasChoices("requiresAccelerator", "requires_gpu", "requires_accelerator")
    )

    @field_validator("required_extensions", "optional_extensions")
    @classmethod
    def dedupe_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _unique(v)


class TokensPerSecondDoc(_Document):
    cpu: float = Field(0.0, ge=0)
    accelerator: float = Field(0.0, ge=0, validation_alias=AliasChoices("accelerator", "gpu"))


class PerformanceDoc(_Document):
    tier: ModelTier = ModelTier.MEDIUM
    speed: Optional[Speed] = None
    context_length: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("contextLength", "context_length"))
    tokens_per_second: TokensPerSecondDoc = Field(
        default_factory=TokensPerSecondDoc,
        validation_alias=AliasChoices("tokensPerSecond", "tokens_per_second"),
    )


class MetadataDoc(_Document):
    huggingface_id: Optional[str] = Field(None, validation_alias=AliasChoices("huggingfaceId", "huggingface_id"))
    file_size: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("fileSize", "file_size"))
    quantization: Optional[str] = None
    license: Optional[str] = None
    languages: tuple[str, ...] = ("en",)
    tags: tuple[str, ...] = ()
    context_length: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("contextLength", "context_length"))


class RequirementsDocument(_Document):
    """One model entry of a registry file."""

    id: str = Field(min_length=1)
    display_name: Optional[str] = Field(None, validation_alias=AliasChoices("displayName", "display_name"))
    description: str = ""
    category: Category = Category.LLM
    memory: MemoryDoc
    compute: ComputeDoc = Field(default_factory=ComputeDoc, validation_alias=AliasChoices("compute", "cpu"))
    accelerator: AcceleratorRequirementsDoc = Field(
        default_factory=AcceleratorRequirementsDoc,
        validation_alias=AliasChoices("accelerator", "vulkan"),
    )
    performance: PerformanceDoc = Field(default_factory=PerformanceDoc)
    metadata: MetadataDoc = Field(default_factory=MetadataDoc)

    def to_profile(self) -> RequirementsProfile:
        perf, meta = self.performance, self.metadata
        context_length = perf.context_length if perf.context_length is not None else meta.context_length
        return RequirementsProfile(
            id=self.id,
            display_name=self.display_name or self.id,
            description=self.description,
            category=self.category,
            memory=MemoryRequirements(
                minimum=self.memory.minimum,
                recommended=self.memory.recommended,
                vram_minimum=self.memory.vram_minimum,
                vram_recommended=self.memory.vram_recommended,
            ),
            compute=ComputeRequirements(
                architectures=self.compute.architectures,
                required_isa=self.compute.required_isa,
                recommended_isa=self.compute.recommended_isa,
                min_cores=self.compute.min_cores,
                recommended_cores=self.compute.recommended_cores,
            ),
            accelerator=AcceleratorRequirements(
                minimum_api_version=self.accelerator.minimum_api_version.to_version(),
                required_extensions=self.accelerator.required_extensions,
                optional_extensions=self.accelerator.optional_extensions,
                requires_accelerator=self.accelerator.requires_accelerator,
            ),
            performance=PerformanceProfile(
                tier=perf.tier,
                context_length=context_length or 0,
                cpu_tokens_per_second=perf.tokens_per_second.cpu,
                accelerator_tokens_per_second=perf.tokens_per_second.accelerator,
                speed=perf.speed,
            ),
            metadata=ModelMetadata(
                huggingface_id=meta.huggingface_id,
                file_size=meta.file_size,
                quantization=meta.quantization,
                license=meta.license,
                languages=_unique(meta.languages),
                tags=_unique(meta.tags),
            ),
        )


# --- capability -----------------------------------------------------------


class DeviceDoc(_Document):
    kind: DeviceKind = Field(DeviceKind.OTHER, validation_alias=AliasChoices("kind", "type"))
    total_memory: int = Field(
        0, ge=0, validation_alias=AliasChoices("totalDeviceMemory", "totalVRAM", "total_memory")
    )
    api_version: ApiVersionDoc = Field(
        "0.0.0",
        validate_default=True,
        validation_alias=AliasChoices("apiVersion", "apiVersionInfo", "api_version"),
    )
    compatibility_level: str = Field(
        "full", validation_alias=AliasChoices("compatibilityLevel", "compatibility_level")
    )
    name: str = Field("", validation_alias=AliasChoices("name", "deviceName"))
    index: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices("index", "deviceIndex"))

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> DeviceKind:
        """virtual/cpu/unknown device types become OTHER."""
        return DeviceKind.from_value(v)

    def to_device(self, position: int) -> AcceleratorDevice:
        return AcceleratorDevice(
            kind=self.kind,
            total_memory=self.total_memory,
            api_version=self.api_version.to_version(),
            compatibility_level=self.compatibility_level,
            name=self.name,
            index=self.index if self.index is not None else position,
        )


class AcceleratorInfoDoc(_Document):
    available: Optional[bool] = None
    device_count: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("deviceCount", "gpuCount", "device_count")
    )
    devices: tuple[DeviceDoc, ...] = Field((), validation_alias=AliasChoices("devices", "gpus"))

    def to_info(self) -> AcceleratorInfo:
        devices = tuple(d.to_device(i) for i, d in enumerate(self.devices))
        return AcceleratorInfo(
            available=self.available if self.available is not None else bool(devices),
            device_count=self.device_count if self.device_count is not None else len(devices),
            devices=devices,
        )


class CpuDoc(_Document):
    core_count: int = Field(ge=0, validation_alias=AliasChoices("coreCount", "core_count"))
    instruction_sets: tuple[str, ...] = Field(
        (), validation_alias=AliasChoices("instructionSets", "instruction_sets")
    )

    @field_validator("instruction_sets")
    @classmethod
    def dedupe_tags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _unique(v)


class CapabilityDocument(_Document):
    """A machine snapshot from a hardware scanner."""

    platform: str = ""
    architecture: str = Field("", validation_alias=AliasChoices("architecture", "arch"))
    total_memory: int = Field(ge=0, validation_alias=AliasChoices("totalMemory", "total_memory"))
    available_memory: Optional[int] = Field(
        None, ge=0, validation_alias=AliasChoices("availableMemory", "available_memory")
    )
    cpu: CpuDoc
    accelerator: Optional[AcceleratorInfoDoc] = Field(None, validation_alias=AliasChoices("accelerator", "vulkan"))

    def to_capability(self) -> CapabilityProfile:
        return CapabilityProfile(
            platform=self.platform,
            architecture=self.architecture,
            total_memory=self.total_memory,
            available_memory=self.available_memory if self.available_memory is not None else self.total_memory,
            cpu=CpuInfo(core_count=self.cpu.core_count, instruction_sets=self.cpu.instruction_sets),
            accelerator=self.accelerator.to_info() if self.accelerator is not None else None,
        )
