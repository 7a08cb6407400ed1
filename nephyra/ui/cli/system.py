"""
CLI commands for system checks — hardware, power, bootloader, updates, report.

Thin wrappers over the read-only services in ``nephyra.core.services``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from nephyra.ui.cli.common import get_probe, get_settings


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option(
    "--dump",
    "dump_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append raw lscpu/lsblk/lspci output to this file.",
)
@click.pass_context
def hardware(ctx: click.Context, as_json: bool, dump_path: str | None) -> None:
    """Show CPU, memory and storage."""
    from nephyra.core.services.hardware_info import (
        collect_hardware,
        format_mem_kib,
        hardware_dump,
    )

    probe = get_probe(ctx)
    info = collect_hardware(probe)

    if dump_path:
        try:
            with open(dump_path, "a", encoding="utf-8") as fh:
                fh.write(hardware_dump(probe))
        except OSError as e:
            click.secho(f"❌ Failed to write {dump_path}: {e}", fg="red")
            sys.exit(1)

    if as_json:
        click.echo(json.dumps(info.model_dump(mode="json"), indent=2))
        return

    click.secho("\n🧠 Nephyra: Hardware Info", fg="cyan", bold=True)
    click.echo(f"   💻 CPU: {info.cpu.model}")
    click.echo(f"   🧮 CPUs: {info.cpu.cpus}, threads per core: {info.cpu.threads_per_core}")
    if info.memory:
        click.echo(
            f"   🧠 RAM: total {format_mem_kib(info.memory.total_kib)}, "
            f"available {format_mem_kib(info.memory.available_kib)}"
        )
    else:
        click.secho("   🧠 RAM: information unavailable", fg="yellow")
    click.echo(f"   🗄️  Kernel: {info.kernel}")

    click.echo("\n   💽 Storage devices:")
    if not info.storage:
        click.echo("      (none found)")
    for dev in info.storage:
        mount = f" mounted at {dev.mountpoint}" if dev.mountpoint else ""
        click.echo(f"      - {dev.name}: {dev.size} [{dev.type}]{mount}")

    if dump_path:
        click.echo(f"\n   🔎 Detailed hardware info appended to {Path(dump_path)}")
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def power(ctx: click.Context, as_json: bool) -> None:
    """Show battery and AC adapter status."""
    from nephyra.core.services.power_status import collect_power

    status = collect_power(get_probe(ctx))

    if as_json:
        data = status.model_dump(mode="json")
        data["ac_state"] = status.ac_state
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("\n🔋 Nephyra: Power Status", fg="cyan", bold=True)
    if not status.batteries:
        click.echo("   Battery: not detected")
    for b in status.batteries:
        click.echo(f"   Battery {b.index}:")
        click.echo(f"      Status   : {b.status}")
        click.echo(f"      Capacity : {b.capacity}%")
        click.echo(f"      Health   : {b.health}")
    if status.ac_present:
        click.echo(f"   🔌 AC adapter: {status.ac_state}")
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def bootloader(ctx: click.Context, as_json: bool) -> None:
    """Identify the bootloader and its config file."""
    from nephyra.core.services.bootloader import detect_bootloader

    info = detect_bootloader(get_probe(ctx))

    if as_json:
        click.echo(json.dumps(info.model_dump(mode="json"), indent=2))
        return

    click.secho("\n🥾 Nephyra: Bootloader", fg="cyan", bold=True)
    if info.config_path is None:
        click.secho("   ⚠️  No known bootloader configuration found", fg="yellow")
    else:
        click.echo(f"   Type:   {info.bootloader_type}")
        click.echo(f"   Config: {info.config_path}")
    if info.extra_info:
        click.echo(f"   ℹ️  {info.extra_info}")
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def updates(ctx: click.Context, as_json: bool) -> None:
    """List pending package updates (read-only)."""
    from nephyra.core.services.package_updates import check_updates

    report = check_updates(get_probe(ctx))

    if as_json:
        click.echo(json.dumps(report.model_dump(mode="json"), indent=2))
        return

    click.secho("\n📦 Nephyra: Package Updates", fg="cyan", bold=True)
    if report.package_manager is None:
        click.secho("   ⚠️  Could not detect a supported package manager", fg="yellow")
    elif not report.checked:
        click.secho(f"   ❌ Could not list updates with {report.package_manager.value}", fg="red")
    elif not report.updates:
        click.secho("   ✅ All packages up to date", fg="green")
    else:
        click.secho(f"   {len(report.updates)} updates available ({report.package_manager.value}):", fg="yellow")
        for line in report.updates:
            click.echo(f"      {line}")
    click.echo()


@click.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def report(ctx: click.Context, as_json: bool) -> None:
    """Combined kernel, hardware, power and bootloader summary."""
    from nephyra.core.use_cases.report import run_report

    result = run_report(get_settings(ctx), get_probe(ctx))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    click.secho("\n🧠 Nephyra System Report", fg="cyan", bold=True)
    click.echo("-----------------------------------")
    for section in result.sections():
        click.echo(section)
    click.echo("-----------------------------------")
    click.echo("For detailed info, run: nephyra <command>")
