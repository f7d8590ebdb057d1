"""
EnvHub — CLI entrypoint.

Usage:
    envhub --help
    envhub app register tool /usr/bin/tool-bin
    envhub profile add tool work
    envhub env set tool work KEY VALUE
    envhub shim install tool
    envhub state check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from envhub import __version__
from envhub.core.observability.logging_config import setup_logging_from_env


@click.group()
@click.version_option(version=__version__, prog_name="envhub")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--state",
    "-s",
    "state_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to state.json (default: per-user config dir, or $ENVHUB_STATE_FILE).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    state_path: str | None,
) -> None:
    """EnvHub — per-alias environment profiles for command-line tools."""
    from envhub.core.persistence.state_file import default_state_path

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["environ"] = dict(os.environ)
    ctx.obj["state_path"] = (
        Path(state_path) if state_path else default_state_path(ctx.obj["environ"])
    )

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = None

    setup_logging_from_env(ctx.obj["environ"], level=level)


@cli.group()
def state() -> None:
    """State file commands."""


@state.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def state_check(ctx: click.Context, as_json: bool) -> None:
    """Validate state.json without modifying it."""
    from envhub.core.use_cases.state_check import check_state

    result = check_state(ctx.obj["state_path"])

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.secho("✅ State is valid", fg="green", bold=True)
        click.echo(f"   File: {result.state_path}{'' if result.exists else ' (not created yet)'}")
        click.echo(f"   Apps: {result.to_dict()['app_count']}")
    else:
        click.secho("❌ State errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)


@state.command("path")
@click.pass_context
def state_path_cmd(ctx: click.Context) -> None:
    """Print the state file location."""
    click.echo(str(ctx.obj["state_path"]))


# ── Register sub-command groups from envhub/ui/cli/ ──────────────

from envhub.ui.cli.apps import app
from envhub.ui.cli.env import env
from envhub.ui.cli.profiles import profile
from envhub.ui.cli.shims import shim

cli.add_command(app)
cli.add_command(profile)
cli.add_command(env)
cli.add_command(shim)


if __name__ == "__main__":
    cli()
