"""Base types for compatibility checks."""

from dataclasses import dataclass, field
from enum import Enum


class CheckId(str, Enum):
    MEMORY = "memory"
    COMPUTE = "compute"
    ACCELERATOR = "accelerator"
    ARCHITECTURE = "architecture"


@dataclass
class CheckResult:
    """Output of a single check. Issues are hard failures, warnings are soft."""

    check: CheckId
    issues: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)  # e.g. "system_memory", "cpu_avx2"

    def fail(self, message: str, tag: str) -> None:
        self.issues.append(message)
        self.missing.append(tag)

    def warn(self, message: str) -> None:
        self.warnings.append(message)


_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(n: float) -> str:
    """1024-based size with one decimal, e.g. 2147483648 -> '2.0GB'."""
    size = float(n)
    i = 0
    while size >= 1024 and i < len(_UNITS) - 1:
        size /= 1024
        i += 1
    return f"{size:.1f}{_UNITS[i]}"
