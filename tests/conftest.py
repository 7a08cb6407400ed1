"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from nephyra.adapters.mock import MockCommandRunner, StaticToolResolver
from nephyra.adapters.system import SystemProbe
from nephyra.core.config.loader import Settings


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def read_fixture(fixtures_dir: Path):
    """Read a fixture file by name."""
    def _read(name: str) -> str:
        return (fixtures_dir / name).read_text(encoding="utf-8")
    return _read


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    """An empty stand-in for /lib/modules."""
    path = tmp_path / "lib" / "modules"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Return a temporary config directory (not created)."""
    return tmp_path / "config" / "nephyra"


@pytest.fixture
def settings(config_dir: Path, modules_dir: Path) -> Settings:
    return Settings(config_dir=config_dir, modules_dir=modules_dir)


@pytest.fixture
def runner() -> MockCommandRunner:
    """Command runner with no canned outputs: every probe fails."""
    return MockCommandRunner()


@pytest.fixture
def resolver() -> StaticToolResolver:
    """Tool resolver that finds nothing until tools are added."""
    return StaticToolResolver()


@pytest.fixture
def sys_root(tmp_path: Path) -> Path:
    """An empty filesystem root for /proc, /sys and /boot lookups."""
    path = tmp_path / "root"
    path.mkdir()
    return path


@pytest.fixture
def probe(sys_root: Path, runner: MockCommandRunner, resolver: StaticToolResolver) -> SystemProbe:
    """System probe over the mocks and an empty root; nothing exists by default."""
    return SystemProbe(
        runner,
        resolver,
        proc_modules=sys_root / "proc" / "modules",
        proc_meminfo=sys_root / "proc" / "meminfo",
        power_supply_dir=sys_root / "sys" / "class" / "power_supply",
        root=sys_root,
    )
