"""
Nephyra — CLI entrypoint.

Usage:
    nephyra --help
    nephyra recommend
    nephyra kernel
    nephyra report
    nephyra prefs show
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from nephyra import __version__
from nephyra.core.config.loader import ConfigError, load_settings
from nephyra.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)
from nephyra.ui.cli.common import get_probe, get_settings


@click.group()
@click.version_option(version=__version__, prog_name="nephyra")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to config.yml (default: <config dir>/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """Nephyra — smart system assistant for choosing a Linux kernel."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )

    if "settings" not in ctx.obj:
        try:
            ctx.obj["settings"] = load_settings(Path(config_path) if config_path else None)
        except ConfigError as e:
            click.secho(f"❌ {e}", fg="red")
            sys.exit(1)


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--top", "top_n", type=click.IntRange(min=1), default=None, help="How many to show.")
@click.option("--no-save", is_flag=True, help="Don't write detected values to preferences.")
@click.option("--no-enhance", is_flag=True, help="Skip detailed package metadata queries.")
@click.pass_context
def recommend(
    ctx: click.Context,
    as_json: bool,
    top_n: int | None,
    no_save: bool,
    no_enhance: bool,
) -> None:
    """Recommend which kernel to run on this machine."""
    from nephyra.core.use_cases.recommend import run_recommend

    result = run_recommend(
        get_settings(ctx),
        get_probe(ctx),
        save=not no_save,
        enhance=False if no_enhance else None,
        top_n=top_n,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    from nephyra.core.services.recommend_render import render_text

    context = result.context

    if not ctx.obj.get("quiet", False):
        click.secho("\n🧠 Nephyra: Kernel Recommendation", fg="cyan", bold=True)
        click.echo(f"   Running kernel: {context.current_kernel}")
        click.echo(f"   GPU: {context.gpu_type.value if context.gpu_type else 'unknown'}")
        click.echo(f"   Use-cases: {', '.join(sorted(context.use_cases)) or '-'}")
        click.echo(f"   Candidates: {result.candidate_count}")
        click.echo()

    text = render_text(result.recommendations)
    if not result.recommendations:
        click.secho(f"⚠️  {text}", fg="yellow")
        return

    click.echo(text)
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def kernel(ctx: click.Context, as_json: bool) -> None:
    """Show running and installed kernels, and headers status."""
    from nephyra.core.use_cases.kernel_check import run_kernel_check

    result = run_kernel_check(get_settings(ctx), get_probe(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho("\n📦 Nephyra: Kernel Check", fg="cyan", bold=True)
    click.echo(f"   🧠 Running kernel: {result.current_kernel}")
    click.echo("   📚 Installed kernels:")
    if not result.installed_kernels:
        click.echo("      (none found)")
    for name in result.installed_kernels:
        marker = "✅" if name == result.current_kernel else "🔸"
        click.echo(f"      {marker} {name}")

    click.echo()
    if result.package_manager is None:
        click.secho(
            "   ⚠️  Could not detect package manager; cannot check headers package.",
            fg="yellow",
        )
    elif result.headers_installed:
        click.secho(f"   🧵 Kernel headers package '{result.headers_package}' is installed.", fg="green")
    else:
        click.secho(f"   ⚠️  Kernel headers package '{result.headers_package}' is NOT installed.", fg="yellow")
        click.echo("   💡 Try installing it with:")
        click.echo(f"      {result.install_hint}")

    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--no-save", is_flag=True, help="Don't write detected values to preferences.")
@click.pass_context
def context(ctx: click.Context, as_json: bool, no_save: bool) -> None:
    """Show the detected context merged with saved preferences."""
    from nephyra.core.use_cases.recommend import build_context

    result = build_context(get_settings(ctx), get_probe(ctx), save=not no_save)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    c = result.context
    d = result.detected
    click.secho("\n🔍 Nephyra: Context", fg="cyan", bold=True)
    click.echo(f"   Running kernel:   {c.current_kernel}")
    click.echo(f"   Package manager:  {c.package_manager.value if c.package_manager else 'none'}")

    gpu = c.gpu_type.value if c.gpu_type else "unknown"
    detected_gpu = d.gpu_type.value if d.gpu_type else "unknown"
    gpu_note = f" (detected: {detected_gpu})" if gpu != detected_gpu else ""
    click.echo(f"   GPU:              {gpu}{gpu_note}")

    click.echo(f"   Use-cases:        {', '.join(sorted(c.use_cases))}")
    click.echo(f"   NVIDIA driver:    {'yes' if c.has_nvidia_driver else 'no'}")
    click.echo(f"   Audio hardware:   {'yes' if c.has_audio_hardware else 'no'}")
    if c.problematic_kernels:
        click.echo(f"   Problematic:      {', '.join(sorted(c.problematic_kernels))}")
    if c.preferred_kernel:
        click.echo(f"   Preferred kernel: {c.preferred_kernel}")

    if result.preferences_saved:
        click.echo()
        click.secho(f"   💾 Preferences saved to {result.store.path}", fg="cyan")

    click.echo()


# ── Register sub-command groups from nephyra/ui/cli/ ──────────────

from nephyra.ui.cli.prefs import prefs
from nephyra.ui.cli.system import bootloader, hardware, power, report, updates

cli.add_command(prefs)
cli.add_command(hardware)
cli.add_command(power)
cli.add_command(bootloader)
cli.add_command(updates)
cli.add_command(report)


if __name__ == "__main__":
    cli()
