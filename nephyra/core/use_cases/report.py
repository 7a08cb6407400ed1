"""
Report use case — one combined summary of kernel, hardware, power, boot.

Runs each read-only check once and keeps both the structured results
(for ``--json``) and their one-paragraph summaries (for text output).
"""

from __future__ import annotations

from dataclasses import dataclass

from nephyra.adapters.system import SystemProbe
from nephyra.core.config.loader import Settings
from nephyra.core.models.system import BootloaderInfo, HardwareInfo, PowerStatus
from nephyra.core.services.bootloader import bootloader_summary, detect_bootloader
from nephyra.core.services.hardware_info import collect_hardware, hardware_summary
from nephyra.core.services.power_status import collect_power, power_summary
from nephyra.core.use_cases.kernel_check import (
    KernelCheckResult,
    kernel_summary,
    run_kernel_check,
)


@dataclass
class SystemReport:
    """Result of the report use case."""

    kernel: KernelCheckResult
    hardware: HardwareInfo
    power: PowerStatus
    bootloader: BootloaderInfo

    def sections(self) -> list[str]:
        return [
            kernel_summary(self.kernel),
            hardware_summary(self.hardware),
            power_summary(self.power),
            bootloader_summary(self.bootloader),
        ]

    def to_dict(self) -> dict:
        power = self.power.model_dump(mode="json")
        power["ac_state"] = self.power.ac_state
        return {
            "kernel": self.kernel.to_dict(),
            "hardware": self.hardware.model_dump(mode="json"),
            "power": power,
            "bootloader": self.bootloader.model_dump(mode="json"),
        }


def run_report(settings: Settings, probe: SystemProbe) -> SystemReport:
    return SystemReport(
        kernel=run_kernel_check(settings, probe),
        hardware=collect_hardware(probe),
        power=collect_power(probe),
        bootloader=detect_bootloader(probe),
    )
