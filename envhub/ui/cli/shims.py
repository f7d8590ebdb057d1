"""
CLI commands for shims and the launcher binary.

Thin wrappers over ``envhub.core.services.shim_install``.
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from envhub.core.errors import EnvHubError, MissingLauncherError
from envhub.core.platform import LAUNCHER_NAME
from envhub.ui.cli.helpers import fail, ok, state_path


def _mode(global_install: bool):
    from envhub.core.services.shim_install import InstallMode

    return InstallMode.GLOBAL if global_install else InstallMode.USER


def _launcher_source(ctx: click.Context, launcher: str | None) -> Path:
    """Explicit --launcher, else envhub-launcher found on PATH."""
    from envhub.core.services.shim_install import find_launcher

    if launcher:
        return Path(launcher)
    found = find_launcher(ctx.obj["environ"])
    if found is None:
        raise MissingLauncherError(path=LAUNCHER_NAME)
    return found


@click.group()
def shim() -> None:
    """Shims — alias stubs that start envhub-launcher."""


@shim.command("install")
@click.argument("name")
@click.option("--launcher", "-l", default=None, help="Launcher binary to link (default: from PATH).")
@click.option("--global", "global_install", is_flag=True, help="Install into /usr/local/bin.")
@click.pass_context
def install(ctx: click.Context, name: str, launcher: str | None, global_install: bool) -> None:
    """Install the shim for registered app NAME."""
    from envhub.core.persistence.state_file import load_state
    from envhub.core.services.profile_registry import mark_installed
    from envhub.core.services.shim_install import install_shim_for_state

    path = state_path(ctx)
    try:
        source = _launcher_source(ctx, launcher)
        state = load_state(path)
        dest = install_shim_for_state(
            state, name, _mode(global_install), source, ctx.obj["environ"],
        )
        mark_installed(path, name, True)
    except EnvHubError as e:
        fail(e)
    ok(f"Installed {dest}", ctx)


@shim.command("status")
@click.argument("name")
@click.option("--global", "global_install", is_flag=True, help="Check /usr/local/bin.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def status(ctx: click.Context, name: str, global_install: bool, as_json: bool) -> None:
    """Check on disk whether NAME's shim exists."""
    from envhub.core.persistence.state_file import load_state
    from envhub.core.services.shim_install import (
        install_dir_for_app,
        is_shim_installed,
        shim_path_for_state,
    )

    environ = ctx.obj["environ"]
    try:
        state = load_state(state_path(ctx))
        mode = _mode(global_install)
        installed = is_shim_installed(name, install_dir_for_app(state, name, mode, environ))
        shim_file = shim_path_for_state(state, name, mode, environ)
    except EnvHubError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps({"name": name, "installed": installed, "path": str(shim_file)}, indent=2))
        return

    if installed:
        click.secho(f"✓ {name}: {shim_file}", fg="green")
    else:
        click.secho(f"✗ {name}: not installed ({shim_file})", fg="yellow")


@shim.command("install-launcher")
@click.option("--launcher", "-l", default=None, help="Launcher binary to copy (default: from PATH).")
@click.option("--global", "global_install", is_flag=True, help="Install into /usr/local/bin.")
@click.pass_context
def install_launcher_cmd(ctx: click.Context, launcher: str | None, global_install: bool) -> None:
    """Copy envhub-launcher into the install directory."""
    from envhub.core.services.shim_install import install_launcher

    try:
        source = _launcher_source(ctx, launcher)
        dest = install_launcher(_mode(global_install), source, ctx.obj["environ"])
    except EnvHubError as e:
        fail(e)
    ok(f"Installed {dest}", ctx)


@shim.command("path-check")
@click.pass_context
def path_check(ctx: click.Context) -> None:
    """Check that the user install directory and the launcher are on PATH."""
    from envhub.core.services.shim_install import (
        InstallMode,
        detect_platform,
        find_launcher,
        is_user_path_configured,
    )

    environ = ctx.obj["environ"]
    try:
        install_dir = detect_platform(InstallMode.USER, environ).install_dir
    except EnvHubError as e:
        fail(e)

    configured = is_user_path_configured(environ)
    launcher = find_launcher(environ)

    if configured:
        click.secho(f"✓ {install_dir} is on PATH", fg="green")
    else:
        click.secho(f"✗ {install_dir} is not on PATH", fg="yellow")
        click.echo(f'   Add it, e.g.: export PATH="{install_dir}:$PATH"')

    if launcher:
        click.secho(f"✓ {LAUNCHER_NAME}: {launcher}", fg="green")
    else:
        click.secho(f"✗ {LAUNCHER_NAME} not found on PATH", fg="yellow")
