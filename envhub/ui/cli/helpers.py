"""
CLI shared helpers.

Used across the command groups under ``envhub/ui/cli/``.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click

from envhub.core.errors import EnvHubError


def state_path(ctx: click.Context) -> Path:
    """State file chosen by the root command."""
    return ctx.obj["state_path"]


def fail(error: EnvHubError) -> NoReturn:
    """Print ``❌ <kind>: <message>`` and exit 1."""
    click.secho(f"❌ {error}", fg="red", err=True)
    sys.exit(1)


def ok(message: str, ctx: click.Context) -> None:
    """Success line, suppressed by --quiet."""
    if not ctx.obj.get("quiet"):
        click.secho(f"✅ {message}", fg="green")
