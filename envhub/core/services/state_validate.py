"""
State validation — restore the state invariants before every save.

Two outcomes, never mixed:

- a repaired copy of the state (missing profiles synthesized, dangling
  active profile reset), which is silent and never reported as an error;
- ``InvalidStateError`` when an app has no usable ``target_binary``.

The input state is never mutated.
"""

from __future__ import annotations

import logging

from envhub.core.errors import InvalidStateError
from envhub.core.models.state import DEFAULT_PROFILE, AppConfig, Profile, State

logger = logging.getLogger(__name__)


def validate_state(state: State) -> State:
    """Return a copy of ``state`` with every app invariant restored.

    Raises:
        InvalidStateError: An app's ``target_binary`` is blank.
    """
    for name, app in state.apps.items():
        if not app.target_binary.strip():
            raise InvalidStateError("App is missing target_binary", alias=name)

    repaired = state.model_copy(deep=True)
    for name, app in repaired.apps.items():
        _repair_app(name, app)
    return repaired


def _repair_app(name: str, app: AppConfig) -> None:
    if not app.profiles:
        logger.info("App %s has no profiles — adding '%s'", name, DEFAULT_PROFILE)
        app.profiles[DEFAULT_PROFILE] = Profile()

    if app.active_profile is None or app.active_profile not in app.profiles:
        resolved = app.first_profile()
        if app.active_profile is not None:
            logger.info(
                "App %s: active profile '%s' no longer exists — using '%s'",
                name, app.active_profile, resolved,
            )
        app.active_profile = resolved
