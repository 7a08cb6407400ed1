"""
Bootloader check — identify the bootloader from its configuration file.

Known config locations are tested in a fixed order; the first one that
exists decides the type.
"""

from __future__ import annotations

import logging

from nephyra.adapters.system import SystemProbe
from nephyra.core.models.system import BootloaderInfo

logger = logging.getLogger(__name__)

# (type, config path, extra note) in detection order
BOOTLOADERS: tuple[tuple[str, str, str | None], ...] = (
    ("GRUB", "/boot/grub/grub.cfg", None),
    ("systemd-boot", "/boot/loader/loader.conf", None),
    ("rEFInd", "/boot/efi/EFI/refind/refind.conf", None),
    ("Syslinux", "/boot/syslinux/syslinux.cfg", None),
    ("LILO", "/etc/lilo.conf", None),
    ("U-Boot", "/boot/boot.scr", "U-Boot script detected. Kernel parsing not implemented."),
)


def detect_bootloader(probe: SystemProbe) -> BootloaderInfo:
    for bootloader_type, config_path, extra in BOOTLOADERS:
        if probe.boot_file_exists(config_path):
            logger.info("Bootloader: %s (%s)", bootloader_type, config_path)
            return BootloaderInfo(
                bootloader_type=bootloader_type,
                config_path=config_path,
                extra_info=extra,
            )

    logger.info("Bootloader: no known configuration found")
    return BootloaderInfo()


def bootloader_summary(info: BootloaderInfo) -> str:
    summary = f"Bootloader: {info.bootloader_type}"
    if info.config_path:
        summary += f" (Config: {info.config_path})"
    if info.extra_info and "permission denied" not in info.extra_info.lower():
        summary += f" [{info.extra_info}]"
    return summary
