"""
Power status — batteries and AC adapter from /sys/class/power_supply.
"""

from __future__ import annotations

import logging

from nephyra.adapters.system import SystemProbe
from nephyra.core.models.system import UNKNOWN, BatteryStatus, PowerStatus

logger = logging.getLogger(__name__)

BATTERY_INDEXES = (0, 1)
AC_ADAPTER = "AC"


def collect_power(probe: SystemProbe) -> PowerStatus:
    """Read BAT0/BAT1 and the AC adapter. Missing attributes read as Unknown."""
    status = PowerStatus()

    for idx in BATTERY_INDEXES:
        attrs = probe.power_supply(f"BAT{idx}")
        if attrs is None:
            continue
        status.batteries.append(BatteryStatus(
            index=idx,
            status=attrs.get("status") or UNKNOWN,
            capacity=attrs.get("capacity") or UNKNOWN,
            health=attrs.get("health") or UNKNOWN,
        ))

    ac = probe.power_supply(AC_ADAPTER)
    if ac is not None:
        status.ac_present = True
        online = ac.get("online")
        status.ac_online = {"1": True, "0": False}.get(online or "")

    logger.info("Power: %d batteries, AC %s", len(status.batteries), status.ac_state)
    return status


def power_summary(status: PowerStatus) -> str:
    if not status.batteries:
        lines = ["Battery: Not detected"]
    else:
        lines = [
            f"Battery {b.index}: {b.status}, {b.capacity}% (health: {b.health})"
            for b in status.batteries
        ]
    if status.ac_present:
        lines.append(f"AC Adapter: {status.ac_state}")
    return "\n".join(lines)
