"""
Context models — what the engine knows about the machine it runs on.

DetectedContext is the raw output of live probes. Context is the fused
view after persisted preferences have been layered on top; it is the
only input the scoring engine reads besides the candidate itself.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class GpuType(StrEnum):
    NVIDIA = "nvidia"
    AMD = "amd"
    INTEL = "intel"
    INTEGRATED = "integrated"


class PackageManager(StrEnum):
    """Supported system package managers, in detection order."""

    PACMAN = "pacman"
    APT = "apt"
    DNF = "dnf"
    APK = "apk"
    ZYPPER = "zypper"
    EMERGE = "emerge"


class DetectedContext(BaseModel):
    """Facts gathered from live probes, before preferences are applied."""

    current_kernel: str = "Unknown"
    package_manager: PackageManager | None = None
    gpu_type: GpuType | None = None
    use_cases: set[str] = Field(default_factory=set)
    has_nvidia_driver: bool = False
    has_audio_hardware: bool = False


class Context(BaseModel):
    """Fused context consumed by the scoring engine.

    Rebuilt every run. ``gpu_type`` and ``use_cases`` come from the
    preference record when it has them, ``problematic_kernels`` only
    ever comes from there.
    """

    current_kernel: str = "Unknown"
    package_manager: PackageManager | None = None
    gpu_type: GpuType | None = None
    use_cases: set[str] = Field(default_factory=set)
    has_nvidia_driver: bool = False
    has_audio_hardware: bool = False
    problematic_kernels: set[str] = Field(default_factory=set)
    preferred_kernel: str | None = None

    def has_use_case(self, *tags: str) -> bool:
        """Whether any of ``tags`` is among the active use-cases."""
        return any(tag in self.use_cases for tag in tags)

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        data["use_cases"] = sorted(self.use_cases)
        data["problematic_kernels"] = sorted(self.problematic_kernels)
        return data
