"""
Tests for the recommend use case — detection, catalog, ranking, persistence.
"""

from pathlib import Path

import pytest
import yaml

from nephyra.core.config.loader import Settings
from nephyra.core.models.context import GpuType
from nephyra.core.use_cases.recommend import build_context, run_recommend


@pytest.fixture
def arch_amd_gamer(runner, resolver, modules_dir: Path, read_fixture):
    """An Arch machine with an AMD GPU and Steam installed."""
    resolver.add("pacman")
    resolver.add("steam")
    runner.set_output(["uname", "-r"], "6.9.7-arch1-1\n")
    runner.set_output(["lspci"], read_fixture("lspci_amd.txt"))
    runner.set_output(["pacman", "-Ss"], read_fixture("pacman_ss_linux.txt"))
    (modules_dir / "6.9.7-arch1-1").mkdir()


class TestBuildContext:

    def test_seeds_and_saves(self, settings: Settings, probe, arch_amd_gamer):
        result = build_context(settings, probe)

        assert result.context.gpu_type == GpuType.AMD
        assert result.context.use_cases == {"gaming"}
        assert result.preferences_saved is True
        assert settings.preferences_path.is_file()

    def test_no_save(self, settings: Settings, probe, arch_amd_gamer):
        result = build_context(settings, probe, save=False)
        assert result.preferences_saved is False
        assert not settings.preferences_path.exists()

    def test_to_dict(self, settings: Settings, probe, arch_amd_gamer):
        data = build_context(settings, probe, save=False).to_dict()
        assert data["context"]["gpu_type"] == "amd"
        assert data["detected"]["package_manager"] == "pacman"
        assert data["preferences_path"] == str(settings.preferences_path)


class TestRunRecommend:

    def test_full_run(self, settings: Settings, probe, arch_amd_gamer):
        result = run_recommend(settings, probe)

        assert result.candidate_count == 5
        names = [r.candidate.name for r in result.recommendations]
        assert names == ["linux-cachyos-eevdf-lto", "6.9.7-arch1-1", "linux"]

        top = result.recommendations[0]
        assert top.score == 6
        assert "EEVDF recommended" in top.explanation
        assert top.install_command == "sudo pacman -S linux-cachyos-eevdf-lto"

        assert result.recommendations[1].candidate.installed is True
        assert result.recommendations[1].install_command is None
        assert result.recommendations[2].candidate.installed is True
        assert result.recommendations[2].install_command is None

    def test_zen_ranks_last_on_amd(self, settings: Settings, probe, arch_amd_gamer):
        result = run_recommend(settings, probe)
        last = result.ranked[-1]
        assert last.name == "linux-zen"
        assert last.score == -4
        assert "WARNING: Zen causes overheating" in last.explanation

    def test_preferences_persisted(self, settings: Settings, probe, arch_amd_gamer):
        result = run_recommend(settings, probe)

        assert result.preferences_saved is True
        data = yaml.safe_load(settings.preferences_path.read_text())
        assert data["gpu_type"] == "amd"
        assert data["use_cases"] == ["gaming"]

    def test_saved_preferences_are_sticky(
        self, settings: Settings, probe, runner, resolver, arch_amd_gamer, read_fixture,
    ):
        run_recommend(settings, probe)

        # GPU swapped and a compiler installed since the first run
        runner.set_output(["lspci"], read_fixture("lspci_hybrid.txt"))
        resolver.add("gcc")
        result = run_recommend(settings, probe)

        assert result.context.gpu_type == GpuType.AMD
        assert result.context.use_cases == {"gaming"}
        assert result.recommendations[0].candidate.name == "linux-cachyos-eevdf-lto"

    def test_no_save(self, settings: Settings, probe, arch_amd_gamer):
        result = run_recommend(settings, probe, save=False)
        assert result.preferences_saved is False
        assert not settings.preferences_path.exists()

    def test_top_n_override(self, settings: Settings, probe, arch_amd_gamer):
        result = run_recommend(settings, probe, top_n=1)
        assert len(result.recommendations) == 1

    def test_settings_top_n(self, config_dir: Path, modules_dir: Path, probe, arch_amd_gamer):
        settings = Settings(config_dir=config_dir, modules_dir=modules_dir, top_n=5)
        assert len(run_recommend(settings, probe).recommendations) == 5

    def test_no_enhance_skips_package_info(self, settings: Settings, probe, runner, arch_amd_gamer):
        run_recommend(settings, probe, enhance=False)
        assert not any(cmd[:2] == ["pacman", "-Si"] for cmd in runner.call_log)

    def test_enhance_queries_package_info(self, settings: Settings, probe, runner, arch_amd_gamer):
        run_recommend(settings, probe)
        assert ["pacman", "-Si", "linux-zen"] in runner.call_log

    def test_problematic_kernel_sinks(self, settings: Settings, probe, arch_amd_gamer):
        settings.preferences_path.parent.mkdir(parents=True)
        settings.preferences_path.write_text("problematic_kernels:\n  - cachyos\n")

        result = run_recommend(settings, probe)
        top = result.recommendations[0]
        assert top.candidate.name == "6.9.7-arch1-1"
        cachy = next(s for s in result.ranked if s.name == "linux-cachyos-eevdf-lto")
        assert cachy.score == -4

    def test_bare_system(self, settings: Settings, probe):
        """Nothing resolvable, no modules: empty but well-formed result."""
        result = run_recommend(settings, probe, save=False)

        assert result.context.current_kernel == "Unknown"
        assert result.context.package_manager is None
        assert result.context.use_cases == {"desktop"}
        assert result.recommendations == []

    def test_to_dict(self, settings: Settings, probe, arch_amd_gamer):
        data = run_recommend(settings, probe, save=False).to_dict()
        assert data["candidates"] == 5
        assert data["recommendations"][0]["name"] == "linux-cachyos-eevdf-lto"
        assert data["preferences_saved"] is False


class TestFullRepositorySearch:
    """A stock Arch desktop whose search also returns headers, docs and firmware."""

    @pytest.fixture
    def arch_desktop(self, runner, resolver, modules_dir: Path, read_fixture):
        resolver.add("pacman")
        runner.set_output(["uname", "-r"], "6.9.7-arch1-1\n")
        runner.set_output(["lspci"], read_fixture("lspci_amd.txt"))
        runner.set_output(["pacman", "-Ss"], read_fixture("pacman_ss_linux_arch.txt"))
        (modules_dir / "6.9.7-arch1-1").mkdir()

    def test_only_kernels_are_ranked(self, settings: Settings, probe, arch_desktop):
        result = run_recommend(settings, probe, save=False)

        names = {s.candidate.name for s in result.ranked}
        assert names == {
            "6.9.7-arch1-1", "linux", "linux-lts", "linux-hardened", "linux-rt", "linux-zen",
        }

    def test_top_three(self, settings: Settings, probe, arch_desktop):
        result = run_recommend(settings, probe, save=False)

        top = [(r.candidate.name, r.score, r.install_command) for r in result.recommendations]
        assert top == [
            ("6.9.7-arch1-1", 2, None),
            ("linux", 2, None),
            ("linux-lts", 0, "sudo pacman -S linux-lts"),
        ]
