"""
Kernel catalog — installed and available kernels as one candidate list.

Installed kernels come from the kernel modules directory, available ones
from the package manager's repository search. The union is keyed by
name: installed entries come first and an available entry is only added
when its name is new.

An optional enhancement pass annotates each candidate from detailed
package metadata (dependencies, provides, conflicts, build date).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path

from nephyra.adapters.system import SystemProbe
from nephyra.core.models.context import PackageManager
from nephyra.core.models.kernel import KernelCandidate, Variant

logger = logging.getLogger(__name__)


# Variant markers in priority order; first match wins.
_VARIANT_MARKERS: tuple[tuple[Variant, tuple[str, ...]], ...] = (
    (Variant.REALTIME, ("rt", "real")),
    (Variant.LTS, ("lts",)),
    (Variant.ZEN, ("zen",)),
    (Variant.HARDENED, ("hardened",)),
    (Variant.MAINLINE, ("mainline",)),
)

# <repo>/<name> <version> [flags] <description...>
_LISTING_RE = re.compile(r"^(?P<repo>[^\s/]+)/(?P<name>\S+)\s+(?P<version>\S+)(?P<rest>.*)$")
_FLAG_RE = re.compile(r"\[[^\]]*\]")
_INSTALLED_FLAG_RE = re.compile(r"\[installed(?::[^\]]*)?\]")
_LEADING_GROUP_RE = re.compile(r"^\s*\([^)]*\)")

# The ^linux search also matches headers, docs, firmware and tooling.
_NON_KERNEL_SUFFIXES = ("-headers", "-docs")
_NON_KERNEL_PREFIXES = ("linux-firmware", "linux-tools", "linux-api-headers")
_NON_KERNEL_NAMES = frozenset({"linux-atm"})


def classify_variant(name: str) -> Variant:
    """Classify a kernel by case-insensitive substring tests on its name."""
    lowered = name.lower()
    for variant, markers in _VARIANT_MARKERS:
        if any(marker in lowered for marker in markers):
            return variant
    return Variant.STANDARD


def is_kernel_package(name: str) -> bool:
    """Whether a ``linux*`` package is a bootable kernel.

    Headers, docs, firmware and userspace tools share the prefix but are
    never candidates.
    """
    lowered = name.lower()
    if lowered in _NON_KERNEL_NAMES:
        return False
    if lowered.endswith(_NON_KERNEL_SUFFIXES):
        return False
    return not lowered.startswith(_NON_KERNEL_PREFIXES)


# ── Parsing ────────────────────────────────────────────────

def _clean_description(rest: str) -> str:
    rest = _FLAG_RE.sub("", rest)
    # pacman prints "(size info)" / "(group)" right after the version
    while True:
        stripped = _LEADING_GROUP_RE.sub("", rest, count=1)
        if stripped == rest:
            break
        rest = stripped
    return " ".join(rest.split())


def parse_available_listing(text: str) -> list[KernelCandidate]:
    """Parse repository search output into candidates.

    Indented lines continue the previous entry's description. Lines
    that match neither form are skipped, as are packages that are not
    kernels (along with their description lines). An ``[installed]``
    flag marks the candidate as installed.
    """
    candidates: list[KernelCandidate] = []
    current: KernelCandidate | None = None

    for line in text.splitlines():
        if not line.strip():
            continue

        if line[0].isspace():
            if current is not None:
                current.description = " ".join(f"{current.description} {line.strip()}".split())
            continue

        current = None
        m = _LISTING_RE.match(line)
        if not m:
            logger.debug("Skipping unparseable listing line: %r", line)
            continue

        name = m.group("name")
        if not is_kernel_package(name):
            logger.debug("Skipping non-kernel package %s", name)
            continue

        rest = m.group("rest")
        current = KernelCandidate(
            name=name,
            version=m.group("version"),
            description=_clean_description(rest),
            variant=classify_variant(name),
            installed=bool(_INSTALLED_FLAG_RE.search(rest)),
        )
        candidates.append(current)

    return candidates


def installed_candidates(names: Iterable[str]) -> list[KernelCandidate]:
    """Candidates for kernels present under the modules directory."""
    return [
        KernelCandidate(
            name=name,
            version=name,
            description="Installed kernel",
            variant=classify_variant(name),
            installed=True,
        )
        for name in names
    ]


def build_catalog(
    installed: Iterable[KernelCandidate],
    available: Iterable[KernelCandidate],
) -> list[KernelCandidate]:
    """Deduplicated union, installed first.

    An available candidate whose name is already present is dropped,
    so installed status always wins.
    """
    catalog: list[KernelCandidate] = []
    seen: set[str] = set()

    for candidate in list(installed) + list(available):
        if candidate.name in seen:
            continue
        seen.add(candidate.name)
        catalog.append(candidate)

    return catalog


# ── Enhancement ────────────────────────────────────────────

def enhance_candidate(candidate: KernelCandidate, info: Mapping[str, str]) -> KernelCandidate:
    """Annotate ``candidate`` in place from detailed package metadata.

    Rules run in a fixed order. Description notes accumulate; variant
    overrides are last-write-wins.
    """
    if not info:
        return candidate

    depends = info.get("Depends On", "").lower()
    provides = info.get("Provides", "").lower()
    conflicts = info.get("Conflicts With", "").lower()
    build_date = info.get("Build Date", "").strip()

    if "nvidia" in depends:
        candidate.description = _append(candidate.description, "(Includes NVIDIA support)")
    if "virtualbox-guest-modules" in provides:
        candidate.description = _append(candidate.description, "(VirtualBox guest support)")

    if "linux-rt" in conflicts:
        candidate.variant = Variant.REALTIME
    described = f"{candidate.description} {provides}".lower()
    if "hardened" in described:
        candidate.variant = Variant.HARDENED
    if "zen" in described:
        candidate.variant = Variant.ZEN

    if build_date and build_date.lower() != "none":
        candidate.description = _append(candidate.description, f"(Built: {build_date})")

    return candidate


def _append(description: str, note: str) -> str:
    return f"{description} {note}".strip()


# ── Composite ──────────────────────────────────────────────

def load_catalog(
    probe: SystemProbe,
    modules_dir: Path,
    package_manager: PackageManager | None,
    enhance: bool = True,
) -> list[KernelCandidate]:
    """Build the full candidate list from the running system."""
    installed = installed_candidates(probe.installed_kernel_names(modules_dir))
    available = parse_available_listing(probe.available_kernel_listing(package_manager))
    catalog = build_catalog(installed, available)
    logger.info(
        "Catalog: %d installed, %d available, %d unique",
        len(installed), len(available), len(catalog),
    )

    if enhance and package_manager == PackageManager.PACMAN:
        for candidate in catalog:
            enhance_candidate(candidate, probe.detailed_package_info(package_manager, candidate.name))

    return catalog
