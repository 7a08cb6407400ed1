"""
Recommendation renderer — turn the ranked list into user-facing output.

Takes the top-N scored candidates, attaches an install command to each
one that is not installed yet, and formats the block printed by the
CLI. Commands are proposed as text only; nothing is executed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from nephyra.core.models.context import Context, PackageManager
from nephyra.core.models.kernel import ScoredCandidate
from nephyra.core.models.recommendation import Recommendation

DEFAULT_TOP_N = 3

INSTALL_PREFIX: dict[PackageManager, str] = {
    PackageManager.PACMAN: "sudo pacman -S",
    PackageManager.APT: "sudo apt install",
    PackageManager.DNF: "sudo dnf install",
    PackageManager.APK: "sudo apk add",
    PackageManager.ZYPPER: "sudo zypper install",
    PackageManager.EMERGE: "sudo emerge --ask",
}

_HEADERS_USE_CASES = ("dev", "server")


def kernel_package_name(kernel_id: str) -> str:
    """Derive the kernel package base name from a kernel identifier.

    ``"linux-zen"`` stays as is; ``"6.15.2-2-cachyos-eevdf-lto"`` becomes
    ``"linux-cachyos-eevdf-lto"`` (suffix from the first letter on).
    Identifiers with no letters get ``"linux-"`` prefixed whole.
    """
    if kernel_id == "linux" or kernel_id.startswith("linux-"):
        return kernel_id

    for pos, ch in enumerate(kernel_id):
        if ch.isalpha():
            return f"linux-{kernel_id[pos:]}"
    return f"linux-{kernel_id}"


def install_command(
    name: str,
    package_manager: PackageManager | None,
    use_cases: Iterable[str] = (),
) -> str | None:
    """Install command for kernel ``name``, or None without a package manager."""
    if package_manager is None:
        return None

    base = kernel_package_name(name)
    packages = [base]
    if any(tag in _HEADERS_USE_CASES for tag in use_cases):
        packages.append(f"{base}-headers")

    return f"{INSTALL_PREFIX[package_manager]} {' '.join(packages)}"


def select_recommendations(
    ranked: Sequence[ScoredCandidate],
    context: Context,
    top_n: int = DEFAULT_TOP_N,
) -> list[Recommendation]:
    """Top ``top_n`` of an already-ranked list, with install commands."""
    recommendations: list[Recommendation] = []

    for rank, scored in enumerate(ranked[:top_n], start=1):
        candidate = scored.candidate
        command = None
        if not candidate.installed:
            command = install_command(candidate.name, context.package_manager, context.use_cases)

        recommendations.append(Recommendation(
            rank=rank,
            candidate=candidate,
            score=scored.score,
            explanation=scored.explanation,
            install_command=command,
            preferred=bool(context.preferred_kernel) and candidate.name == context.preferred_kernel,
        ))

    return recommendations


def render_text(recommendations: Sequence[Recommendation]) -> str:
    """Human-readable block; not a stable machine format."""
    if not recommendations:
        return "No kernel candidates found."

    lines: list[str] = []
    for rec in recommendations:
        c = rec.candidate
        status = "installed" if c.installed else "available"
        marker = " ★ preferred" if rec.preferred else ""
        lines.append(f"{rec.rank}. {c.name} [{c.variant.value}] score {rec.score} ({status}){marker}")
        lines.extend(f"   {line.strip()}" for line in rec.explanation.split("\n"))
        if rec.install_command:
            lines.append(f"   Install: {rec.install_command}")
    return "\n".join(lines)
