"""
CLI commands for profile environment bindings.

Thin wrappers over ``envhub.core.services.profile_registry``.
"""

from __future__ import annotations

import json

import click

from envhub.core.errors import EnvHubError, ProfileNotFoundError
from envhub.ui.cli.helpers import fail, ok, state_path


@click.group()
def env() -> None:
    """Environment bindings of a profile."""


@env.command("set")
@click.argument("name")
@click.argument("profile_name")
@click.argument("key")
@click.argument("value")
@click.pass_context
def set_cmd(ctx: click.Context, name: str, profile_name: str, key: str, value: str) -> None:
    """Bind KEY=VALUE in profile PROFILE_NAME of app NAME."""
    from envhub.core.services.profile_registry import set_profile_env

    try:
        set_profile_env(state_path(ctx), name, profile_name, key, value)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}/{profile_name}: {key} set", ctx)


@env.command("unset")
@click.argument("name")
@click.argument("profile_name")
@click.argument("key")
@click.pass_context
def unset(ctx: click.Context, name: str, profile_name: str, key: str) -> None:
    """Remove KEY from profile PROFILE_NAME of app NAME."""
    from envhub.core.services.profile_registry import remove_profile_env

    try:
        remove_profile_env(state_path(ctx), name, profile_name, key)
    except EnvHubError as e:
        fail(e)
    ok(f"{name}/{profile_name}: {key} removed", ctx)


@env.command("list")
@click.argument("name")
@click.argument("profile_name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_cmd(ctx: click.Context, name: str, profile_name: str, as_json: bool) -> None:
    """Show the bindings of profile PROFILE_NAME."""
    from envhub.core.services.profile_registry import get_app

    try:
        cfg = get_app(state_path(ctx), name)
        prof = cfg.profiles.get(profile_name)
        if prof is None:
            raise ProfileNotFoundError(alias=name, profile=profile_name)
    except EnvHubError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(prof.env, indent=2))
        return

    for key, value in prof.env.items():
        click.echo(f"{key}={value}")
