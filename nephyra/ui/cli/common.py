"""
Shared helpers for CLI commands — settings and the system probe.
"""

from __future__ import annotations

import click

from nephyra.adapters.system import SystemProbe
from nephyra.core.config.loader import Settings


def get_settings(ctx: click.Context) -> Settings:
    """Settings stored on the context by the root group."""
    return ctx.obj["settings"]


def get_probe(ctx: click.Context) -> SystemProbe:
    """System probe for this invocation (tests may pre-seed one)."""
    probe = ctx.obj.get("probe")
    if probe is None:
        from nephyra.adapters.shell.command import PathToolResolver, SubprocessRunner

        probe = SystemProbe(
            runner=SubprocessRunner(timeout=get_settings(ctx).probe_timeout),
            resolver=PathToolResolver(),
        )
        ctx.obj["probe"] = probe
    return probe
