"""
System models — hardware, power, bootloader and package update facts.

Plain read-only snapshots; every field has an "unknown" default so a
failed probe still yields a complete model.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from nephyra.core.models.context import PackageManager

UNKNOWN = "Unknown"


class CpuInfo(BaseModel):
    model: str = UNKNOWN
    cpus: str = UNKNOWN
    threads_per_core: str = UNKNOWN


class MemoryInfo(BaseModel):
    """Memory counters in KiB, as /proc/meminfo reports them."""

    total_kib: int
    available_kib: int


class StorageDevice(BaseModel):
    name: str
    size: str
    type: str
    mountpoint: str = ""


class HardwareInfo(BaseModel):
    """CPU, memory, running kernel and block devices."""

    cpu: CpuInfo = Field(default_factory=CpuInfo)
    memory: MemoryInfo | None = None
    kernel: str = UNKNOWN
    storage: list[StorageDevice] = Field(default_factory=list)


class BatteryStatus(BaseModel):
    index: int
    status: str = UNKNOWN
    capacity: str = UNKNOWN
    health: str = UNKNOWN


class PowerStatus(BaseModel):
    """Batteries found plus AC adapter state.

    ``ac_online`` is None when there is no adapter or its state is unreadable.
    """

    batteries: list[BatteryStatus] = Field(default_factory=list)
    ac_present: bool = False
    ac_online: bool | None = None

    @property
    def ac_state(self) -> str:
        if self.ac_online is True:
            return "Connected (Charging)"
        if self.ac_online is False:
            return "Disconnected (On battery)"
        return UNKNOWN


class BootloaderInfo(BaseModel):
    bootloader_type: str = UNKNOWN
    config_path: str | None = None
    extra_info: str | None = None


class UpdateReport(BaseModel):
    """Pending package updates.

    ``checked`` is False when no manager was detected or its listing
    command could not run; ``updates`` is then empty but meaningless.
    """

    package_manager: PackageManager | None = None
    checked: bool = False
    updates: list[str] = Field(default_factory=list)
