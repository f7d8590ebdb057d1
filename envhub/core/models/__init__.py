"""
Domain models — Pydantic types for the persisted state.

    from envhub.core.models import State, AppConfig, Profile
"""

from envhub.core.models.state import DEFAULT_PROFILE, AppConfig, Profile, State

__all__ = [
    "AppConfig",
    "DEFAULT_PROFILE",
    "Profile",
    "State",
]
