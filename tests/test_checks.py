"""Tests for the four compatibility checks."""

from dataclasses import replace

from modelfit.checks import CHECKS, CheckId
from modelfit.checks.accelerator import check as check_accelerator
from modelfit.checks.architecture import check as check_architecture
from modelfit.checks.base import format_bytes
from modelfit.checks.compute import check as check_compute
from modelfit.checks.memory import check as check_memory
from modelfit.models import (
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
    ModelTier,
    PerformanceProfile,
    RequirementsProfile,
)

GB = 1024**3


def _make_req(**kwargs) -> RequirementsProfile:
    defaults = {
        "id": "test-model",
        "display_name": "Test Model",
        "description": "",
        "category": Category.LLM,
        "memory": MemoryRequirements(minimum=2 * GB, recommended=4 * GB),
        "compute": ComputeRequirements(recommended_isa=("avx2",), min_cores=2, recommended_cores=4),
        "accelerator": AcceleratorRequirements(minimum_api_version=ApiVersion.parse("1.0")),
        "performance": PerformanceProfile(tier=ModelTier.LOW, context_length=4096),
    }
    return RequirementsProfile(**{**defaults, **kwargs})


def _gpu(kind: str = "discrete", mem_gb: float = 8, version: str = "1.3.0") -> AcceleratorDevice:
    return AcceleratorDevice(kind=DeviceKind(kind), total_memory=int(mem_gb * GB), api_version=ApiVersion.parse(version))


def _make_cap(devices=None, **kwargs) -> CapabilityProfile:
    defaults = {
        "platform": "Linux",
        "architecture": "x86_64",
        "total_memory": 8 * GB,
        "available_memory": 4 * GB,
        "cpu": CpuInfo(core_count=8, instruction_sets=("avx", "avx2", "fma")),
        "accelerator": None,
    }
    if devices is not None:
        defaults["accelerator"] = AcceleratorInfo(available=True, device_count=len(devices), devices=tuple(devices))
    return CapabilityProfile(**{**defaults, **kwargs})


# --- memory ---


def test_memory_below_minimum_is_hard_failure():
    """RAM under the minimum fails with system_memory."""
    r = check_memory(_make_req(), _make_cap(total_memory=1 * GB))
    assert r.check == CheckId.MEMORY
    assert r.missing == ["system_memory"]
    assert "need 2.0GB, have 1.0GB" in r.issues[0]
    assert r.warnings == []


def test_memory_between_minimum_and_recommended_warns():
    """RAM between minimum and recommended is only a warning."""
    r = check_memory(_make_req(), _make_cap(total_memory=3 * GB))
    assert r.issues == []
    assert len(r.warnings) == 1
    assert "Limited system memory" in r.warnings[0]


def test_memory_at_recommended_is_clean():
    """RAM equal to the recommended amount raises nothing."""
    r = check_memory(_make_req(), _make_cap(total_memory=4 * GB))
    assert r.issues == [] and r.warnings == []


def test_vram_below_minimum_is_hard_failure():
    """Best device under vramMinimum fails with vram."""
    req = _make_req(memory=MemoryRequirements(2 * GB, 4 * GB, vram_minimum=4 * GB, vram_recommended=8 * GB))
    r = check_memory(req, _make_cap(devices=[_gpu(mem_gb=2)]))
    assert r.missing == ["vram"]
    assert "Insufficient VRAM" in r.issues[0]


def test_vram_recommended_defaults_to_twice_minimum():
    """Without vramRecommended, anything under 2x minimum warns."""
    req = _make_req(memory=MemoryRequirements(2 * GB, 4 * GB, vram_minimum=4 * GB))
    r = check_memory(req, _make_cap(devices=[_gpu(mem_gb=6)]))
    assert r.issues == []
    assert r.warnings == ["Limited VRAM: recommended 8.0GB, have 6.0GB"]
    assert check_memory(req, _make_cap(devices=[_gpu(mem_gb=8)])).warnings == []


def test_vram_uses_best_device():
    """VRAM is judged on the largest discrete device, not the first one."""
    req = _make_req(memory=MemoryRequirements(2 * GB, 4 * GB, vram_minimum=4 * GB, vram_recommended=4 * GB))
    r = check_memory(req, _make_cap(devices=[_gpu("integrated", 1), _gpu("discrete", 6)]))
    assert r.issues == [] and r.warnings == []


def test_vram_not_checked_without_accelerator():
    """No accelerator: only system memory is judged."""
    req = _make_req(memory=MemoryRequirements(2 * GB, 4 * GB, vram_minimum=64 * GB))
    r = check_memory(req, _make_cap())
    assert r.issues == [] and r.missing == []


# --- compute ---


def test_cores_below_minimum_is_hard_failure():
    """Too few cores fails with cpu_cores."""
    r = check_compute(_make_req(), _make_cap(cpu=CpuInfo(1, ("avx2",))))
    assert r.missing == ["cpu_cores"]


def test_cores_below_recommended_warns():
    """Between min and recommended cores is a warning."""
    r = check_compute(_make_req(), _make_cap(cpu=CpuInfo(3, ("avx2",))))
    assert r.issues == []
    assert r.warnings == ["Limited CPU cores: recommended 4, have 3"]


def test_each_missing_required_isa_is_its_own_failure():
    """One hard failure and one cpu_<tag> per missing required ISA tag."""
    req = _make_req(compute=ComputeRequirements(required_isa=("avx", "avx2", "f16c"), min_cores=2, recommended_cores=4))
    r = check_compute(req, _make_cap(cpu=CpuInfo(8, ("avx",))))
    assert r.missing == ["cpu_avx2", "cpu_f16c"]
    assert len(r.issues) == 2


def test_missing_recommended_isa_is_one_warning():
    """All missing recommended tags are listed in a single warning."""
    req = _make_req(compute=ComputeRequirements(recommended_isa=("avx2", "fma", "neon"), min_cores=2, recommended_cores=4))
    r = check_compute(req, _make_cap(cpu=CpuInfo(8, ("avx2",))))
    assert r.issues == []
    assert r.warnings == ["Missing recommended CPU instruction sets: fma, neon"]


# --- accelerator ---


def test_no_accelerator_required_is_hard_failure():
    """A required accelerator that is absent fails with accelerator."""
    req = _make_req(accelerator=AcceleratorRequirements(requires_accelerator=True))
    r = check_accelerator(req, _make_cap())
    assert r.missing == ["accelerator"]
    assert r.warnings == []


def test_no_accelerator_optional_warns_cpu_only():
    """An optional accelerator that is absent is a single CPU-only warning."""
    r = check_accelerator(_make_req(), _make_cap())
    assert r.issues == []
    assert len(r.warnings) == 1
    assert "CPU-only" in r.warnings[0]


def test_unavailable_accelerator_skips_version_check():
    """Reported-but-unavailable accelerator ends the check at the fallback warning."""
    req = _make_req(accelerator=AcceleratorRequirements(minimum_api_version=ApiVersion.parse("9.9")))
    cap = _make_cap(accelerator=AcceleratorInfo(available=False, device_count=1, devices=(_gpu(version="1.0.0"),)))
    r = check_accelerator(req, cap)
    assert r.missing == []


def test_old_api_version_is_hard_failure():
    """Best device older than minimumApiVersion fails with accelerator_version."""
    req = _make_req(accelerator=AcceleratorRequirements(minimum_api_version=ApiVersion.parse("1.2")))
    r = check_accelerator(req, _make_cap(devices=[_gpu(version="1.1.0")]))
    assert r.missing == ["accelerator_version"]
    assert "need 1.2, have 1.1.0" in r.issues[0]


def test_api_version_uses_best_device():
    """Version is read from the selected device, not any device."""
    req = _make_req(accelerator=AcceleratorRequirements(minimum_api_version=ApiVersion.parse("1.2")))
    devices = [_gpu("integrated", 2, "1.3.0"), _gpu("discrete", 8, "1.1.0")]
    assert check_accelerator(req, _make_cap(devices=devices)).missing == ["accelerator_version"]


def test_available_but_zero_devices_when_required():
    """available=True with deviceCount 0 still fails a required accelerator."""
    req = _make_req(accelerator=AcceleratorRequirements(minimum_api_version=ApiVersion.parse("1.0"), requires_accelerator=True))
    cap = _make_cap(accelerator=AcceleratorInfo(available=True, device_count=0, devices=()))
    r = check_accelerator(req, cap)
    assert r.missing == ["accelerator_device"]


def test_accelerator_ok():
    """Modern device satisfies the accelerator check."""
    req = _make_req(accelerator=AcceleratorRequirements(minimum_api_version=ApiVersion.parse("1.3"), requires_accelerator=True))
    r = check_accelerator(req, _make_cap(devices=[_gpu(version="1.3.0")]))
    assert r.issues == [] and r.warnings == []


# --- architecture ---


def test_unsupported_architecture():
    """Architecture outside the supported set fails with architecture."""
    req = _make_req(compute=replace(_make_req().compute, architectures=("x86_64",)))
    r = check_architecture(req, _make_cap(architecture="arm64"))
    assert r.missing == ["architecture"]
    assert "arm64" in r.issues[0] and "x86_64" in r.issues[0]


def test_supported_architecture():
    """Listed architecture passes."""
    assert check_architecture(_make_req(), _make_cap(architecture="arm64")).issues == []


def test_all_checks_registered():
    """Engine order: memory, compute, accelerator, architecture."""
    assert list(CHECKS) == [CheckId.MEMORY, CheckId.COMPUTE, CheckId.ACCELERATOR, CheckId.ARCHITECTURE]


def test_format_bytes():
    """1024-based units with one decimal."""
    assert format_bytes(0) == "0.0B"
    assert format_bytes(1536) == "1.5KB"
    assert format_bytes(2 * GB) == "2.0GB"
