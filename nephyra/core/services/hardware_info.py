"""
Hardware info — CPU, memory and storage from lscpu, /proc/meminfo, lsblk.

Parsers are pure functions over probe text. ``collect_hardware`` wires
them to a SystemProbe; ``hardware_dump`` assembles the raw outputs for
a detailed log file.
"""

from __future__ import annotations

import logging
from datetime import datetime

from nephyra.adapters.system import SystemProbe
from nephyra.core.models.system import CpuInfo, HardwareInfo, MemoryInfo, StorageDevice

logger = logging.getLogger(__name__)

_LSCPU_FIELDS = {
    "Model name": "model",
    "CPU(s)": "cpus",
    "Thread(s) per core": "threads_per_core",
}

# lsblk draws the device tree with these (unicode and --ascii forms)
_TREE_CHARS = "├└│─|`- "


def parse_cpu_info(lscpu_text: str) -> CpuInfo:
    """Model, logical CPU count and threads per core from lscpu output."""
    fields: dict[str, str] = {}
    for line in lscpu_text.splitlines():
        key, sep, value = line.partition(":")
        attr = _LSCPU_FIELDS.get(key.strip()) if sep else None
        if attr and value.strip():
            fields[attr] = value.strip()
    return CpuInfo(**fields)


def parse_meminfo(meminfo_text: str) -> MemoryInfo | None:
    """Total and available memory, or None if either is missing."""
    counters: dict[str, int] = {}
    for line in meminfo_text.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] in ("MemTotal:", "MemAvailable:"):
            try:
                counters[parts[0]] = int(parts[1])
            except ValueError:
                continue

    total = counters.get("MemTotal:", 0)
    available = counters.get("MemAvailable:", 0)
    if total <= 0 or available <= 0:
        return None
    return MemoryInfo(total_kib=total, available_kib=available)


def format_mem_kib(kib: int) -> str:
    """``16777216`` -> ``"16.00 GiB"``; below 1 GiB, MiB is used."""
    if kib >= 1024 * 1024:
        return f"{kib / 1024 / 1024:.2f} GiB"
    return f"{kib / 1024:.2f} MiB"


def parse_storage(lsblk_text: str) -> list[StorageDevice]:
    """Block devices from ``lsblk -o NAME,SIZE,TYPE,MOUNTPOINT``.

    The header line is skipped. Rows need at least name, size and type;
    the mountpoint may be blank.
    """
    devices: list[StorageDevice] = []
    for line in lsblk_text.splitlines()[1:]:
        parts = line.split(maxsplit=3)
        if len(parts) < 3:
            continue
        name = parts[0].lstrip(_TREE_CHARS)
        if not name:
            continue
        devices.append(StorageDevice(
            name=name,
            size=parts[1],
            type=parts[2],
            mountpoint=parts[3].strip() if len(parts) > 3 else "",
        ))
    return devices


def collect_hardware(probe: SystemProbe) -> HardwareInfo:
    info = HardwareInfo(
        cpu=parse_cpu_info(probe.cpu_listing()),
        memory=parse_meminfo(probe.meminfo()),
        kernel=probe.current_kernel(),
        storage=parse_storage(probe.block_devices()),
    )
    logger.info(
        "Hardware: cpu=%s memory=%s devices=%d",
        info.cpu.model, "yes" if info.memory else "no", len(info.storage),
    )
    return info


def hardware_summary(info: HardwareInfo) -> str:
    cpu = info.cpu
    lines = [f"CPU: {cpu.model} ({cpu.cpus} CPUs, {cpu.threads_per_core} threads per core)"]
    if info.memory:
        lines.append(
            f"RAM: {format_mem_kib(info.memory.total_kib)} total, "
            f"{format_mem_kib(info.memory.available_kib)} available"
        )
    else:
        lines.append("RAM: unavailable")
    return "\n".join(lines)


def hardware_dump(probe: SystemProbe, now: datetime | None = None) -> str:
    """Raw probe outputs under a timestamped header, for a log file."""
    stamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    sections = [
        ("lscpu", probe.cpu_listing()),
        ("lsblk", probe.block_devices()),
        ("uname -r", probe.current_kernel()),
        ("lspci -v", probe.pci_listing(verbose=True)),
    ]

    parts = [f"===== Hardware Info Log at {stamp} ====="]
    for title, output in sections:
        parts.append(f"[{title} output]")
        parts.append(output.rstrip("\n") if output.strip() else "(unavailable)")
    return "\n".join(parts) + "\n"
