"""
Package updates — list pending updates for the detected package manager.

Each manager prints its pending list differently; ``parse_update_listing``
reduces every format to one line per package. Orphan cleanup is out of
scope: nothing here changes the system.
"""

from __future__ import annotations

import logging

from nephyra.adapters.system import SystemProbe
from nephyra.core.models.context import PackageManager
from nephyra.core.models.system import UpdateReport
from nephyra.core.services.context_detect import detect_package_manager

logger = logging.getLogger(__name__)


def _pacman(lines: list[str]) -> list[str]:
    # checkupdates: "name old -> new"
    return [line for line in lines if " -> " in line]


def _apt(lines: list[str]) -> list[str]:
    # "Listing..." header, then "name/suite version arch [upgradable from: x]"
    return [line for line in lines if "[upgradable from:" in line]


def _dnf(lines: list[str]) -> list[str]:
    updates: list[str] = []
    for line in lines:
        if line.startswith("Obsoleting Packages"):
            break
        if line.startswith("Last metadata expiration check"):
            continue
        if len(line.split()) == 3:
            updates.append(line)
    return updates


def _apk(lines: list[str]) -> list[str]:
    # "Installed: Available:" header, then "name-ver < newver"
    return [line for line in lines if " < " in line]


def _zypper(lines: list[str]) -> list[str]:
    # S | Repository | Name | Current Version | Available Version | Arch
    updates: list[str] = []
    for line in lines:
        cols = [c.strip() for c in line.split("|")]
        if len(cols) >= 6 and cols[0] == "v":
            updates.append(f"{cols[2]} {cols[3]} -> {cols[4]}")
    return updates


def _emerge(lines: list[str]) -> list[str]:
    return [line for line in lines if line.startswith("[ebuild")]


_PARSERS = {
    PackageManager.PACMAN: _pacman,
    PackageManager.APT: _apt,
    PackageManager.DNF: _dnf,
    PackageManager.APK: _apk,
    PackageManager.ZYPPER: _zypper,
    PackageManager.EMERGE: _emerge,
}


def parse_update_listing(pm: PackageManager, text: str) -> list[str]:
    """One line per pending update, in the manager's own wording."""
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    return _PARSERS[pm](lines)


def check_updates(probe: SystemProbe, pm: PackageManager | None = None) -> UpdateReport:
    """Pending updates for ``pm`` (detected when not given)."""
    if pm is None:
        pm = detect_package_manager(probe.resolver)
    if pm is None:
        logger.info("No package manager detected; skipping update check")
        return UpdateReport()

    listing = probe.update_listing(pm)
    if listing is None:
        logger.warning("Could not list pending updates with %s", pm.value)
        return UpdateReport(package_manager=pm)

    updates = parse_update_listing(pm, listing)
    logger.info("%d pending updates (%s)", len(updates), pm.value)
    return UpdateReport(package_manager=pm, checked=True, updates=updates)
