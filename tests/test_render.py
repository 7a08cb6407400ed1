"""
Tests for the recommendation renderer — package names, install commands, top-N.
"""

import pytest

from nephyra.core.models.context import Context, PackageManager
from nephyra.core.models.kernel import KernelCandidate, ScoredCandidate, Variant
from nephyra.core.services.recommend_render import (
    install_command,
    kernel_package_name,
    render_text,
    select_recommendations,
)


def _scored(name: str, score: int, installed: bool = False, variant=Variant.STANDARD) -> ScoredCandidate:
    return ScoredCandidate(
        candidate=KernelCandidate(name=name, variant=variant, installed=installed),
        score=score,
        explanation=f"why {name}",
    )


class TestKernelPackageName:

    @pytest.mark.parametrize("kernel_id,expected", [
        ("linux-zen", "linux-zen"),
        ("linux-cachyos-eevdf-lto", "linux-cachyos-eevdf-lto"),
        ("linux", "linux"),
        ("6.15.2-2-cachyos-eevdf-lto", "linux-cachyos-eevdf-lto"),
        ("6.9.7-arch1-1", "linux-arch1-1"),
        ("6.6.36-1-lts", "linux-lts"),
        ("12345", "linux-12345"),
    ])
    def test_derivation(self, kernel_id, expected):
        assert kernel_package_name(kernel_id) == expected


class TestInstallCommand:

    def test_pacman(self):
        assert install_command("linux-zen", PackageManager.PACMAN) == "sudo pacman -S linux-zen"

    @pytest.mark.parametrize("use_case", ["dev", "server"])
    def test_headers_for_dev_or_server(self, use_case):
        cmd = install_command("linux-lts", PackageManager.PACMAN, {use_case, "desktop"})
        assert cmd == "sudo pacman -S linux-lts linux-lts-headers"

    def test_no_headers_for_gaming(self):
        cmd = install_command("linux-zen", PackageManager.PACMAN, ["gaming"])
        assert cmd == "sudo pacman -S linux-zen"

    @pytest.mark.parametrize("pm,prefix", [
        (PackageManager.APT, "sudo apt install"),
        (PackageManager.DNF, "sudo dnf install"),
        (PackageManager.APK, "sudo apk add"),
        (PackageManager.ZYPPER, "sudo zypper install"),
        (PackageManager.EMERGE, "sudo emerge --ask"),
    ])
    def test_other_managers(self, pm, prefix):
        assert install_command("linux-lts", pm) == f"{prefix} linux-lts"

    def test_derived_name(self):
        cmd = install_command("6.15.2-2-cachyos-eevdf-lto", PackageManager.PACMAN, ["dev"])
        assert cmd == "sudo pacman -S linux-cachyos-eevdf-lto linux-cachyos-eevdf-lto-headers"

    def test_no_package_manager(self):
        assert install_command("linux-zen", None, ["dev"]) is None


class TestSelectRecommendations:

    def test_top_three(self):
        ranked = [_scored(n, s) for n, s in [("a", 5), ("b", 4), ("c", 3), ("d", 2), ("e", 1)]]
        recs = select_recommendations(ranked, Context(package_manager=PackageManager.PACMAN))
        assert [r.candidate.name for r in recs] == ["a", "b", "c"]
        assert [r.rank for r in recs] == [1, 2, 3]
        assert [r.score for r in recs] == [5, 4, 3]

    def test_custom_top_n(self):
        ranked = [_scored("a", 1), _scored("b", 0)]
        assert len(select_recommendations(ranked, Context(), top_n=1)) == 1

    def test_fewer_than_top_n(self):
        recs = select_recommendations([_scored("linux", 2)], Context())
        assert len(recs) == 1

    def test_installed_has_no_command(self):
        ranked = [_scored("6.9.7-arch1-1", 2, installed=True), _scored("linux-lts", 1)]
        recs = select_recommendations(ranked, Context(package_manager=PackageManager.PACMAN))
        assert recs[0].install_command is None
        assert recs[1].install_command == "sudo pacman -S linux-lts"

    def test_unknown_package_manager_has_no_command(self):
        recs = select_recommendations([_scored("linux-lts", 1)], Context())
        assert recs[0].install_command is None

    def test_headers_follow_context_use_cases(self):
        ctx = Context(package_manager=PackageManager.APT, use_cases={"server"})
        recs = select_recommendations([_scored("linux-lts", 4)], ctx)
        assert recs[0].install_command == "sudo apt install linux-lts linux-lts-headers"

    def test_preferred_marker(self):
        ctx = Context(preferred_kernel="b")
        recs = select_recommendations([_scored("a", 2), _scored("b", 1)], ctx)
        assert [r.preferred for r in recs] == [False, True]


class TestRenderText:

    def test_block(self):
        ranked = [_scored("linux-lts", 4, variant=Variant.LTS), _scored("6.9.7-arch1-1", 2, installed=True)]
        recs = select_recommendations(ranked, Context(package_manager=PackageManager.PACMAN))
        text = render_text(recs)

        assert "1. linux-lts [LTS] score 4 (available)" in text
        assert "2. 6.9.7-arch1-1 [Standard] score 2 (installed)" in text
        assert "why linux-lts" in text
        assert "Install: sudo pacman -S linux-lts" in text
        assert text.count("Install:") == 1

    def test_multiline_explanation_is_indented(self):
        scored = ScoredCandidate(
            candidate=KernelCandidate(name="linux-lts", variant=Variant.LTS),
            score=3,
            explanation="Stable\n  Note: install headers",
        )
        text = render_text(select_recommendations([scored], Context()))
        assert text.splitlines()[1:] == ["   Stable", "   Note: install headers"]

    def test_empty(self):
        assert render_text([]) == "No kernel candidates found."

    def test_to_dict(self):
        [rec] = select_recommendations([_scored("linux-zen", -4, variant=Variant.ZEN)], Context())
        data = rec.to_dict()
        assert data["name"] == "linux-zen"
        assert data["variant"] == "Zen"
        assert data["score"] == -4
        assert data["install_command"] is None
