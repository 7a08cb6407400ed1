"""
Kernel check use case — running kernel, installed kernels, headers.

Reports which kernel is running, which ones are installed under the
modules directory, and whether the headers package for the running
kernel is installed, with an install hint when it is not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nephyra.adapters.system import SystemProbe
from nephyra.core.config.loader import Settings
from nephyra.core.models.context import PackageManager
from nephyra.core.services.context_detect import detect_package_manager
from nephyra.core.services.recommend_render import kernel_package_name

logger = logging.getLogger(__name__)

# Headers packages are named differently per distribution.
_HEADERS_HINTS: dict[PackageManager, str] = {
    PackageManager.PACMAN: "sudo pacman -S {pkg}",
    PackageManager.APT: "sudo apt install {pkg}",
    PackageManager.DNF: "sudo dnf install kernel-headers",
    PackageManager.APK: "sudo apk add linux-headers",
    PackageManager.ZYPPER: "sudo zypper install kernel-devel",
    PackageManager.EMERGE: "sudo emerge --ask sys-kernel/linux-headers",
}


def headers_install_hint(pm: PackageManager, headers_pkg: str) -> str:
    return _HEADERS_HINTS[pm].format(pkg=headers_pkg)


@dataclass
class KernelCheckResult:
    """Result of the kernel check use case."""

    current_kernel: str = "Unknown"
    installed_kernels: list[str] = field(default_factory=list)
    package_manager: PackageManager | None = None
    headers_package: str = ""
    headers_installed: bool = False
    install_hint: str | None = None

    def to_dict(self) -> dict:
        return {
            "current_kernel": self.current_kernel,
            "installed_kernels": [
                {"name": name, "running": name == self.current_kernel}
                for name in self.installed_kernels
            ],
            "package_manager": self.package_manager.value if self.package_manager else None,
            "headers_package": self.headers_package,
            "headers_installed": self.headers_installed,
            "install_hint": self.install_hint,
        }


def run_kernel_check(settings: Settings, probe: SystemProbe) -> KernelCheckResult:
    """Inspect the running kernel and its headers package."""
    current = probe.current_kernel()
    result = KernelCheckResult(
        current_kernel=current,
        installed_kernels=probe.installed_kernel_names(settings.modules_dir),
        package_manager=detect_package_manager(probe.resolver),
        headers_package=f"{kernel_package_name(current)}-headers",
    )

    if result.package_manager is None:
        logger.info("No package manager detected; skipping headers check")
        return result

    result.headers_installed = probe.package_installed(result.package_manager, result.headers_package)
    if not result.headers_installed:
        result.install_hint = headers_install_hint(result.package_manager, result.headers_package)
    return result


def kernel_summary(result: KernelCheckResult) -> str:
    """Running kernel plus the installed list, the running one starred."""
    lines = [f"Kernel: {result.current_kernel}", "Installed Kernels:"]
    for name in result.installed_kernels:
        if name == result.current_kernel:
            lines.append(f"  * {name} (running)")
        else:
            lines.append(f"  - {name}")
    return "\n".join(lines)
