"""
CLI commands for registered apps.

Thin wrappers over ``envhub.core.services.profile_registry``.
"""

from __future__ import annotations

import json

import click

from envhub.core.errors import EnvHubError
from envhub.ui.cli.helpers import fail, ok, state_path


@click.group()
def app() -> None:
    """Registered aliases — register, inspect, pick a profile."""


@app.command("register")
@click.argument("name")
@click.argument("target")
@click.pass_context
def register(ctx: click.Context, name: str, target: str) -> None:
    """Register NAME as an alias for TARGET (path or command name)."""
    from envhub.core.services.profile_registry import register_app

    try:
        register_app(state_path(ctx), name, target)
    except EnvHubError as e:
        fail(e)
    ok(f"Registered {name} → {target}", ctx)


@app.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, as_json: bool) -> None:
    """List registered aliases."""
    from envhub.core.persistence.state_file import load_state
    from envhub.core.services.shim_install import (
        InstallMode,
        install_dir_for_app,
        is_shim_installed,
    )

    try:
        state = load_state(state_path(ctx))
    except EnvHubError as e:
        fail(e)

    rows = []
    for name, cfg in state.apps.items():
        try:
            install_dir = install_dir_for_app(state, name, InstallMode.USER, ctx.obj["environ"])
            installed = is_shim_installed(name, install_dir)
        except EnvHubError:
            installed = False
        rows.append({
            "name": name,
            "target_binary": cfg.target_binary,
            "active_profile": cfg.active_profile,
            "profiles": list(cfg.profiles),
            "installed": installed,
        })

    if as_json:
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No apps registered.")
        return

    for row in rows:
        marker = click.style(" ✓", fg="green") if row["installed"] else ""
        click.secho(f"• {row['name']}", bold=True, nl=False)
        click.echo(f"{marker}  → {row['target_binary']}  [{row['active_profile'] or '-'}]")


@app.command("show")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show an app's target, install path and profiles."""
    from envhub.core.services.profile_registry import get_app

    try:
        cfg = get_app(state_path(ctx), name)
    except EnvHubError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(cfg.model_dump(mode="json"), indent=2))
        return

    click.secho(f"\n📦 {name}", fg="cyan", bold=True)
    click.echo(f"   Target:       {cfg.target_binary}")
    click.echo(f"   Install path: {cfg.install_path or '(default)'}")
    click.echo()
    for pname, prof in cfg.profiles.items():
        marker = " ← active" if pname == cfg.active_profile else ""
        click.secho(f"   • {pname}{marker}", bold=bool(marker))
        for key, value in prof.env.items():
            click.echo(f"       {key}={value}")
        if prof.args:
            click.echo(f"       args: {' '.join(prof.args)}")
    click.echo()


@app.command("use")
@click.argument("name")
@click.argument("profile_name")
@click.pass_context
def use(ctx: click.Context, name: str, profile_name: str) -> None:
    """Make PROFILE_NAME the active profile of NAME."""
    from envhub.core.services.profile_registry import set_active_profile

    try:
        set_active_profile(state_path(ctx), name, profile_name)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}: active profile is now {profile_name}", ctx)


@app.command("install-path")
@click.argument("name")
@click.argument("directory", required=False)
@click.pass_context
def install_path(ctx: click.Context, name: str, directory: str | None) -> None:
    """Override (or, without DIRECTORY, reset) where NAME's shim is placed."""
    from envhub.core.services.profile_registry import set_install_path

    try:
        set_install_path(state_path(ctx), name, directory)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}: install path {'→ ' + directory if directory else 'reset to default'}", ctx)
