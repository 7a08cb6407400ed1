"""
System probe — the read-only queries the engine makes of the machine.

Each method wraps one external interface (uname, lspci, lscpu, lsblk,
/proc, /sys/class/power_supply, the boot partition, the kernel modules
directory, the package manager) and degrades to an empty or "Unknown"
value on failure. Nothing here raises.
"""

from __future__ import annotations

import logging
from pathlib import Path

from nephyra.adapters.base import CommandResult, CommandRunner, ToolResolver
from nephyra.core.models.context import PackageManager

logger = logging.getLogger(__name__)

PROC_MODULES = Path("/proc/modules")
PROC_MEMINFO = Path("/proc/meminfo")
POWER_SUPPLY_DIR = Path("/sys/class/power_supply")

POWER_SUPPLY_ATTRS = ("status", "capacity", "health", "online")

# Pending-update listing per manager, with the exit codes that mean "ran".
# checkupdates exits 2 when nothing is pending; dnf check-update exits 100
# when something is.
UPDATE_COMMANDS: dict[PackageManager, tuple[list[str], tuple[int, ...]]] = {
    PackageManager.PACMAN: (["checkupdates"], (0, 2)),
    PackageManager.APT: (["apt", "list", "--upgradable"], (0,)),
    PackageManager.DNF: (["dnf", "check-update"], (0, 100)),
    PackageManager.APK: (["apk", "version", "-l", "<"], (0,)),
    PackageManager.ZYPPER: (["zypper", "lu"], (0,)),
    PackageManager.EMERGE: (["emerge", "-uDNp", "@world"], (0,)),
}


def parse_package_info(text: str) -> dict[str, str]:
    """Parse ``Key : Value`` package metadata (pacman -Si / -Qi format).

    Continuation lines (indented, no key) are folded into the previous
    value. Only the first package block is read.
    """
    info: dict[str, str] = {}
    last_key: str | None = None

    for line in text.splitlines():
        if not line.strip():
            if info:
                break
            continue

        key, sep, value = line.partition(" : ")
        if sep and not line[0].isspace():
            last_key = key.strip()
            info[last_key] = value.strip()
        elif last_key is not None:
            info[last_key] = f"{info[last_key]} {line.strip()}".strip()

    return info


class SystemProbe:
    """Read-only access to the running system.

    Args:
        runner: Executes probe commands.
        resolver: Answers tool-presence questions.
        proc_modules: Loaded-module listing (``/proc/modules``).
        proc_meminfo: Memory counters (``/proc/meminfo``).
        power_supply_dir: Power supply class directory in sysfs.
        root: Filesystem root that absolute boot paths are resolved under.
    """

    def __init__(
        self,
        runner: CommandRunner,
        resolver: ToolResolver,
        proc_modules: Path = PROC_MODULES,
        proc_meminfo: Path = PROC_MEMINFO,
        power_supply_dir: Path = POWER_SUPPLY_DIR,
        root: Path = Path("/"),
    ):
        self.runner = runner
        self.resolver = resolver
        self._proc_modules = proc_modules
        self._proc_meminfo = proc_meminfo
        self._power_supply_dir = power_supply_dir
        self._root = root

    def _run(self, args: list[str]) -> CommandResult:
        r = self.runner.run(args)
        logger.debug(
            "%s -> rc=%s in %dms%s",
            " ".join(args), r.returncode, r.duration_ms,
            f" ({r.error})" if r.error else "",
        )
        return r

    def _read_text(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Cannot read %s: %s", path, e)
            return None

    # ── Kernel ──────────────────────────────────────────────────

    def current_kernel(self) -> str:
        """Running kernel release, or ``"Unknown"``."""
        r = self._run(["uname", "-r"])
        release = r.stdout.strip() if r.ok else ""
        return release or "Unknown"

    def installed_kernel_names(self, modules_dir: Path) -> list[str]:
        """One name per immediate subdirectory of the modules dir, sorted."""
        try:
            names = [p.name for p in modules_dir.iterdir() if p.is_dir()]
        except OSError as e:
            logger.warning("Cannot read %s: %s", modules_dir, e)
            return []
        return sorted(names)

    # ── Hardware ────────────────────────────────────────────────

    def pci_listing(self, verbose: bool = False) -> str:
        r = self._run(["lspci", "-v"] if verbose else ["lspci"])
        return r.stdout if r.ok else ""

    def loaded_modules(self) -> str:
        """Loaded kernel module listing; falls back to ``lsmod``."""
        text = self._read_text(self._proc_modules)
        if text is not None:
            return text

        r = self._run(["lsmod"])
        return r.stdout if r.ok else ""

    def cpu_listing(self) -> str:
        r = self._run(["lscpu"])
        return r.stdout if r.ok else ""

    def meminfo(self) -> str:
        return self._read_text(self._proc_meminfo) or ""

    def block_devices(self) -> str:
        """``lsblk`` table with NAME, SIZE, TYPE and MOUNTPOINT columns."""
        r = self._run(["lsblk", "-o", "NAME,SIZE,TYPE,MOUNTPOINT"])
        return r.stdout if r.ok else ""

    # ── Power / boot ────────────────────────────────────────────

    def power_supply(self, name: str) -> dict[str, str] | None:
        """Readable attributes of one power supply, or None if it is absent."""
        device = self._power_supply_dir / name
        if not device.is_dir():
            return None

        attrs: dict[str, str] = {}
        for attr in POWER_SUPPLY_ATTRS:
            value = self._read_text(device / attr)
            if value is not None:
                attrs[attr] = value.strip()
        return attrs

    def boot_file_exists(self, path: str) -> bool:
        """Whether absolute ``path`` exists under the probe's root."""
        return (self._root / path.lstrip("/")).exists()

    # ── Package manager ─────────────────────────────────────────

    def available_kernel_listing(self, pm: PackageManager | None) -> str:
        """Repository search output in ``<repo>/<name> <version> ...`` form.

        Only pacman prints this format; other managers yield "".
        """
        if pm != PackageManager.PACMAN:
            logger.debug("No kernel listing for package manager %s", pm)
            return ""

        r = self._run(["pacman", "-Ss", "^linux"])
        # pacman -Ss exits 1 when nothing matches
        return r.stdout if r.ok else ""

    def detailed_package_info(self, pm: PackageManager | None, name: str) -> dict[str, str]:
        if pm != PackageManager.PACMAN:
            return {}

        r = self._run(["pacman", "-Si", name])
        if not r.ok:
            r = self._run(["pacman", "-Qi", name])
        if not r.ok:
            return {}
        return parse_package_info(r.stdout)

    def package_installed(self, pm: PackageManager | None, name: str) -> bool:
        """Whether package ``name`` is installed according to ``pm``."""
        if pm is None:
            return False

        if pm == PackageManager.PACMAN:
            r = self._run(["pacman", "-Qs", name])
            return r.ok and bool(r.stdout.strip())

        if pm == PackageManager.APT:
            r = self._run(["dpkg-query", "-W", "-f=${Status}", name])
            return "installed" in r.stdout and "not-installed" not in r.stdout

        if pm == PackageManager.DNF:
            r = self._run(["dnf", "list", "installed", name])
            return r.ok and name in r.stdout

        if pm == PackageManager.APK:
            r = self._run(["apk", "info", name])
            return r.ok and bool(r.stdout.strip())

        if pm == PackageManager.ZYPPER:
            r = self._run(["zypper", "se", "--installed-only", name])
            return r.ok and name in r.stdout

        if pm == PackageManager.EMERGE:
            r = self._run(["emerge", "-s", name])
            return r.ok and name in r.stdout

        return False

    def update_listing(self, pm: PackageManager | None) -> str | None:
        """Raw pending-update output, or None if it could not be obtained."""
        if pm is None:
            return None

        args, ok_codes = UPDATE_COMMANDS[pm]
        r = self._run(args)
        if r.returncode not in ok_codes:
            return None
        return r.stdout
