"""
CLI commands for profiles.

Thin wrappers over ``envhub.core.services.profile_registry``.
"""

from __future__ import annotations

import json

import click

from envhub.core.errors import EnvHubError
from envhub.ui.cli.helpers import fail, ok, state_path


@click.group()
def profile() -> None:
    """Profiles — named sets of env overrides and extra arguments."""


@profile.command("list")
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, name: str, as_json: bool) -> None:
    """List the profiles of app NAME in order."""
    from envhub.core.services.profile_registry import get_app

    try:
        cfg = get_app(state_path(ctx), name)
    except EnvHubError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(
            {"active": cfg.active_profile, "profiles": list(cfg.profiles)}, indent=2,
        ))
        return

    for pname in cfg.profiles:
        marker = " ← active" if pname == cfg.active_profile else ""
        click.echo(f"• {pname}{marker}")


@profile.command("add")
@click.argument("name")
@click.argument("profile_name")
@click.pass_context
def add(ctx: click.Context, name: str, profile_name: str) -> None:
    """Add an empty profile PROFILE_NAME to app NAME."""
    from envhub.core.services.profile_registry import add_profile

    try:
        add_profile(state_path(ctx), name, profile_name)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}: added profile {profile_name}", ctx)


@profile.command("remove")
@click.argument("name")
@click.argument("profile_name")
@click.pass_context
def remove(ctx: click.Context, name: str, profile_name: str) -> None:
    """Remove profile PROFILE_NAME from app NAME."""
    from envhub.core.services.profile_registry import remove_profile

    try:
        remove_profile(state_path(ctx), name, profile_name)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}: removed profile {profile_name}", ctx)


@profile.command("clone")
@click.argument("name")
@click.argument("source")
@click.argument("target")
@click.pass_context
def clone(ctx: click.Context, name: str, source: str, target: str) -> None:
    """Copy profile SOURCE of app NAME into a new profile TARGET."""
    from envhub.core.services.profile_registry import clone_profile

    try:
        clone_profile(state_path(ctx), name, source, target)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}: cloned {source} → {target}", ctx)


@profile.command("args", context_settings={"ignore_unknown_options": True})
@click.argument("name")
@click.argument("profile_name")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def set_args(ctx: click.Context, name: str, profile_name: str, args: tuple[str, ...]) -> None:
    """Set the extra arguments prepended at launch (none clears them).

    Use ``--`` before arguments that start with a dash:

        envhub profile args tool work -- --verbose --color=always
    """
    from envhub.core.services.profile_registry import set_profile_args

    try:
        set_profile_args(state_path(ctx), name, profile_name, list(args))
    except EnvHubError as e:
        fail(e)
    ok(f"{name}/{profile_name}: {len(args)} extra argument(s)", ctx)
