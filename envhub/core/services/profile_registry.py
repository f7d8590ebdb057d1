"""
Profile registry — CRUD over apps, profiles and env bindings.

Every mutating call follows the same cycle against the state file it is
given:

    load → mutate → validate → save

so no partially-edited state is ever written.  Failures raise one of the
``envhub.core.errors`` kinds naming the offending app, profile or key.
There is no cross-process locking; concurrent writers resolve as
last-write-wins at the file level.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from envhub.core.errors import AppNotFoundError, InvalidStateError, ProfileNotFoundError
from envhub.core.models.state import DEFAULT_PROFILE, AppConfig, Profile, State
from envhub.core.persistence.state_file import load_state, save_state
from envhub.core.services.state_validate import validate_state

logger = logging.getLogger(__name__)


# ── Internals ───────────────────────────────────────────────────


def _mutate(state_path: Path, change: Callable[[State], None]) -> State:
    """Apply ``change`` to freshly loaded state, validate it, save it."""
    state = load_state(state_path)
    change(state)
    state = validate_state(state)
    save_state(state, state_path)
    return state


def _require_app(state: State, name: str) -> AppConfig:
    app = state.apps.get(name)
    if app is None:
        raise AppNotFoundError(alias=name)
    return app


def _require_profile(app: AppConfig, name: str, profile: str) -> Profile:
    found = app.profiles.get(profile)
    if found is None:
        raise ProfileNotFoundError(alias=name, profile=profile)
    return found


def _require_non_blank(value: str, reason: str, **context: str) -> None:
    if not value or not value.strip():
        raise InvalidStateError(reason, **context)


# ── Apps ────────────────────────────────────────────────────────


def register_app(state_path: Path, name: str, target: str) -> AppConfig:
    """Register ``name`` as an alias for ``target`` (or re-point it).

    Existing profiles and the install path override are kept; the
    ``installed`` cache is reset because the shim must be re-verified.
    """
    _require_non_blank(name, "App name must be non-empty")
    _require_non_blank(target, "Target binary must be non-empty", alias=name)

    def change(state: State) -> None:
        app = state.apps.setdefault(name, AppConfig())
        app.target_binary = target
        app.installed = False
        if not app.profiles:
            app.profiles[DEFAULT_PROFILE] = Profile()
        if app.active_profile is None:
            app.active_profile = DEFAULT_PROFILE if DEFAULT_PROFILE in app.profiles else app.first_profile()

    state = _mutate(state_path, change)
    logger.info("Registered app %s → %s", name, target)
    return state.apps[name]


def list_apps(state_path: Path) -> list[str]:
    """Registered aliases in insertion order."""
    return load_state(state_path).app_names()


def get_app(state_path: Path, name: str) -> AppConfig:
    return _require_app(load_state(state_path), name)


def set_install_path(state_path: Path, name: str, install_path: str | None) -> None:
    """Set (or clear with ``None``) the per-app shim directory override."""

    def change(state: State) -> None:
        app = _require_app(state, name)
        app.install_path = install_path.strip() if install_path and install_path.strip() else None

    _mutate(state_path, change)


def mark_installed(state_path: Path, name: str, installed: bool = True) -> None:
    """Update the ``installed`` cache flag.  Never used as the source of truth."""

    def change(state: State) -> None:
        _require_app(state, name).installed = installed

    _mutate(state_path, change)


# ── Profiles ────────────────────────────────────────────────────


def list_profiles(state_path: Path, name: str) -> list[str]:
    """Profile names of ``name`` in insertion order."""
    app = _require_app(load_state(state_path), name)
    return list(app.profiles)


def set_active_profile(state_path: Path, name: str, profile: str) -> None:

    def change(state: State) -> None:
        app = _require_app(state, name)
        _require_profile(app, name, profile)
        app.active_profile = profile

    _mutate(state_path, change)
    logger.info("App %s: active profile → %s", name, profile)


def add_profile(state_path: Path, name: str, profile: str) -> None:
    """Create an empty profile.  An existing profile is left as is."""
    _require_non_blank(profile, "Profile name must be non-empty", alias=name)

    def change(state: State) -> None:
        app = _require_app(state, name)
        app.profiles.setdefault(profile, Profile())
        if app.active_profile is None:
            app.active_profile = profile

    _mutate(state_path, change)


def remove_profile(state_path: Path, name: str, profile: str) -> None:
    """Delete a profile.

    When it was the active one, the first remaining profile becomes
    active; if none remain, validation re-creates ``default``.
    """

    def change(state: State) -> None:
        app = _require_app(state, name)
        _require_profile(app, name, profile)
        del app.profiles[profile]
        if app.active_profile == profile:
            app.active_profile = app.first_profile()

    _mutate(state_path, change)
    logger.info("App %s: removed profile %s", name, profile)


def clone_profile(state_path: Path, name: str, source: str, target: str) -> None:
    """Deep-copy ``source`` into a new profile called ``target``."""
    _require_non_blank(target, "Target profile name must be non-empty", alias=name)

    def change(state: State) -> None:
        app = _require_app(state, name)
        original = _require_profile(app, name, source)
        if target in app.profiles:
            raise InvalidStateError(
                "Target profile already exists", alias=name, profile=target,
            )
        app.profiles[target] = original.model_copy(deep=True)
        if app.active_profile is None:
            app.active_profile = target

    _mutate(state_path, change)


def set_profile_args(state_path: Path, name: str, profile: str, args: Sequence[str]) -> None:
    """Replace the extra arguments of a profile (an empty list clears them)."""

    def change(state: State) -> None:
        app = _require_app(state, name)
        _require_profile(app, name, profile).args = list(args)

    _mutate(state_path, change)


# ── Environment bindings ────────────────────────────────────────


def set_profile_env(state_path: Path, name: str, profile: str, key: str, value: str) -> None:
    """Bind ``key=value``.  Re-setting a key keeps its position."""
    _require_non_blank(key, "Environment key must be non-empty", alias=name, profile=profile)

    def change(state: State) -> None:
        app = _require_app(state, name)
        _require_profile(app, name, profile).env[key] = value

    _mutate(state_path, change)


def remove_profile_env(state_path: Path, name: str, profile: str, key: str) -> None:

    def change(state: State) -> None:
        app = _require_app(state, name)
        env = _require_profile(app, name, profile).env
        if key not in env:
            raise InvalidStateError(
                "Environment key not found", alias=name, profile=profile, key=key,
            )
        del env[key]

    _mutate(state_path, change)
