"""
CLI commands for the preference record.

Thin wrappers over ``nephyra.core.services.preferences.PreferenceStore``.
Every editing command loads the file, changes one field, and saves.
"""

from __future__ import annotations

import json
import sys

import click

from nephyra.core.models.context import GpuType
from nephyra.core.services.preferences import PreferenceStore
from nephyra.ui.cli.common import get_settings

_GPU_CHOICES = [g.value for g in GpuType] + ["auto"]


def _open_store(ctx: click.Context) -> PreferenceStore:
    return PreferenceStore.open(get_settings(ctx).preferences_path)


def _save(store: PreferenceStore) -> None:
    if not store.save():
        click.secho(f"❌ Could not write {store.path}", fg="red")
        sys.exit(1)


@click.group()
def prefs() -> None:
    """Preferences — sticky GPU type, use-cases, problematic kernels."""


@prefs.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, as_json: bool) -> None:
    """Show saved preferences."""
    store = _open_store(ctx)
    record = store.record

    if as_json:
        data = record.model_dump(mode="json")
        data["path"] = str(store.path)
        click.echo(json.dumps(data, indent=2))
        return

    click.secho(f"⚙️  Preferences ({store.path})", fg="cyan", bold=True)
    click.echo(f"   GPU type:         {record.gpu_type.value if record.gpu_type else '(auto-detect)'}")
    click.echo(f"   Use-cases:        {', '.join(record.use_cases) or '(auto-detect)'}")
    click.echo(f"   Preferred kernel: {record.preferred_kernel or '-'}")
    if record.problematic_kernels:
        click.echo("   Problematic kernels:")
        for name in record.problematic_kernels:
            click.echo(f"     • {name}")
    else:
        click.echo("   Problematic kernels: -")


@prefs.command("set-gpu")
@click.argument("gpu_type", type=click.Choice(_GPU_CHOICES))
@click.pass_context
def set_gpu(ctx: click.Context, gpu_type: str) -> None:
    """Pin the GPU type (``auto`` re-enables detection)."""
    store = _open_store(ctx)
    store.set_gpu_type(None if gpu_type == "auto" else GpuType(gpu_type))
    _save(store)
    click.secho(f"✅ GPU type set to {gpu_type}", fg="green")


@prefs.command("set-use-cases")
@click.argument("use_cases", nargs=-1)
@click.pass_context
def set_use_cases(ctx: click.Context, use_cases: tuple[str, ...]) -> None:
    """Pin use-cases (no arguments re-enables detection).

    Examples:

        nephyra prefs set-use-cases dev gaming

        nephyra prefs set-use-cases server,battery
    """
    tags = [tag for arg in use_cases for tag in arg.split(",")]
    store = _open_store(ctx)
    store.set_use_cases(tags)
    _save(store)
    shown = ", ".join(store.record.use_cases) or "auto-detect"
    click.secho(f"✅ Use-cases set to {shown}", fg="green")


@prefs.command()
@click.argument("name", required=False)
@click.pass_context
def prefer(ctx: click.Context, name: str | None) -> None:
    """Remember a preferred kernel (no argument clears it)."""
    store = _open_store(ctx)
    store.set_preferred_kernel(name)
    _save(store)
    if name:
        click.secho(f"✅ Preferred kernel: {name}", fg="green")
    else:
        click.secho("✅ Preferred kernel cleared", fg="green")


@prefs.command("mark-problematic")
@click.argument("name")
@click.pass_context
def mark_problematic(ctx: click.Context, name: str) -> None:
    """Mark kernels matching NAME as problematic."""
    store = _open_store(ctx)
    if not store.mark_problematic(name):
        click.echo(f"ℹ️  {name} is already marked problematic")
        return
    _save(store)
    click.secho(f"✅ Marked {name} as problematic", fg="green")


@prefs.command("unmark-problematic")
@click.argument("name")
@click.pass_context
def unmark_problematic(ctx: click.Context, name: str) -> None:
    """Remove NAME from the problematic list."""
    store = _open_store(ctx)
    if not store.unmark_problematic(name):
        click.secho(f"⚠️  {name} is not marked problematic", fg="yellow")
        return
    _save(store)
    click.secho(f"✅ Unmarked {name}", fg="green")


@prefs.command()
@click.confirmation_option(prompt="Reset all saved preferences?")
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Forget every saved preference."""
    store = _open_store(ctx)
    store.reset()
    _save(store)
    click.secho("✅ Preferences reset; values will be re-detected on the next run", fg="green")
