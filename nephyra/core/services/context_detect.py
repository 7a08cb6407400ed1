"""
Context detection — GPU, drivers, audio, package manager, use-cases.

Read-only probes over lspci output, the loaded-module listing and the
executable search path. Each helper is a pure function over probe text
or a ToolResolver; ``detect_context`` wires them to a SystemProbe.
None of them raise: a missing tool yields the empty/unknown answer.
"""

from __future__ import annotations

import logging
import re

from nephyra.adapters.base import ToolResolver
from nephyra.adapters.system import SystemProbe
from nephyra.core.models.context import DetectedContext, GpuType, PackageManager

logger = logging.getLogger(__name__)


# Marker tools per use-case tag. Any one present fires the tag.
USE_CASE_MARKERS: dict[str, tuple[str, ...]] = {
    "audio": ("ardour", "jackd"),
    "dev": ("gcc", "clang", "rustc"),
    "gaming": ("steam",),
    "server": ("nginx", "apache2", "httpd"),
    "security": ("firejail", "apparmor_status"),
}

DEFAULT_USE_CASE = "desktop"

# Probe order matters: first resolvable wins.
PACKAGE_MANAGER_ORDER: tuple[PackageManager, ...] = (
    PackageManager.PACMAN,
    PackageManager.APT,
    PackageManager.DNF,
    PackageManager.APK,
    PackageManager.ZYPPER,
    PackageManager.EMERGE,
)

# Vendor patterns in priority order.
_GPU_PATTERNS: tuple[tuple[GpuType, re.Pattern[str]], ...] = (
    (GpuType.NVIDIA, re.compile(r"nvidia", re.IGNORECASE)),
    (GpuType.AMD, re.compile(r"amd|\bati\b", re.IGNORECASE)),
    (GpuType.INTEL, re.compile(r"intel", re.IGNORECASE)),
    (GpuType.INTEGRATED, re.compile(r"integrated", re.IGNORECASE)),
)

_DISPLAY_CLASSES = ("VGA", "3D controller", "Display controller")


# ── GPU helpers ────────────────────────────────────────────

def _display_lines(pci_text: str) -> list[str]:
    """Display-controller lines of an lspci listing.

    Falls back to every line when nothing is tagged as a display class.
    """
    lines = [line for line in pci_text.splitlines() if line.strip()]
    display = [line for line in lines if any(cls in line for cls in _DISPLAY_CLASSES)]
    return display or lines


def detect_gpu_type(pci_text: str) -> GpuType | None:
    """Classify the GPU vendor from an lspci listing.

    Vendors are tried in priority order over the whole listing, so a
    hybrid NVIDIA + Intel laptop reports ``nvidia``.
    """
    lines = _display_lines(pci_text)
    for gpu_type, pattern in _GPU_PATTERNS:
        if any(pattern.search(line) for line in lines):
            return gpu_type
    return None


def has_nvidia_driver(modules_text: str) -> bool:
    """True iff the loaded-module listing mentions nvidia."""
    return "nvidia" in modules_text


def has_audio_hardware(pci_text: str) -> bool:
    return "audio" in pci_text.lower()


# ── Tool-presence helpers ──────────────────────────────────

def infer_use_cases(resolver: ToolResolver) -> set[str]:
    """Infer use-case tags from installed marker tools.

    Returns exactly ``{"desktop"}`` when no tag fires.
    """
    found: set[str] = set()
    for tag, tools in USE_CASE_MARKERS.items():
        if any(resolver.has(tool) for tool in tools):
            found.add(tag)

    if not found:
        found.add(DEFAULT_USE_CASE)
    return found


def detect_package_manager(resolver: ToolResolver) -> PackageManager | None:
    for pm in PACKAGE_MANAGER_ORDER:
        if resolver.has(pm.value):
            return pm
    return None


# ── Composite ──────────────────────────────────────────────

def detect_context(probe: SystemProbe) -> DetectedContext:
    """Run every probe once and collect the results."""
    pci_text = probe.pci_listing()
    modules_text = probe.loaded_modules()

    detected = DetectedContext(
        current_kernel=probe.current_kernel(),
        package_manager=detect_package_manager(probe.resolver),
        gpu_type=detect_gpu_type(pci_text),
        use_cases=infer_use_cases(probe.resolver),
        has_nvidia_driver=has_nvidia_driver(modules_text),
        has_audio_hardware=has_audio_hardware(pci_text),
    )
    logger.info(
        "Detected kernel=%s pm=%s gpu=%s use_cases=%s nvidia_driver=%s audio=%s",
        detected.current_kernel,
        detected.package_manager,
        detected.gpu_type,
        sorted(detected.use_cases),
        detected.has_nvidia_driver,
        detected.has_audio_hardware,
    )
    return detected
