"""
Domain models — Pydantic types for the kernel advisor and system reports.

All models are re-exported here for convenient access:

    from nephyra.core.models import Context, KernelCandidate, PreferenceRecord
"""

from nephyra.core.models.context import (
    Context,
    DetectedContext,
    GpuType,
    PackageManager,
)
from nephyra.core.models.kernel import KernelCandidate, ScoredCandidate, Variant
from nephyra.core.models.preferences import PreferenceRecord
from nephyra.core.models.recommendation import Recommendation
from nephyra.core.models.system import (
    BatteryStatus,
    BootloaderInfo,
    CpuInfo,
    HardwareInfo,
    MemoryInfo,
    PowerStatus,
    StorageDevice,
    UpdateReport,
)

__all__ = [
    # context.py
    "Context",
    "DetectedContext",
    "GpuType",
    "PackageManager",
    # kernel.py
    "KernelCandidate",
    "ScoredCandidate",
    "Variant",
    # preferences.py
    "PreferenceRecord",
    # recommendation.py
    "Recommendation",
    # system.py
    "BatteryStatus",
    "BootloaderInfo",
    "CpuInfo",
    "HardwareInfo",
    "MemoryInfo",
    "PowerStatus",
    "StorageDevice",
    "UpdateReport",
]
