"""
State — the root document persisted to state.json.

One document holds every registered app, its profiles and the active
profile selection.  It is loaded on every operation; there is no resident
daemon.  Unknown fields at every level are kept (``extra="allow"``) so a
newer or hand-edited document survives a load/save cycle untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

DEFAULT_PROFILE = "default"

# Keys that mark a profile as the canonical {env, args} shape.
_PROFILE_KEYS = {"env": dict, "args": list, "command_args": list}


def _is_canonical_profile(data: dict[str, Any]) -> bool:
    return any(
        key in data and isinstance(data[key], kind)
        for key, kind in _PROFILE_KEYS.items()
    )


class Profile(BaseModel):
    """Environment overrides and extra arguments for one app.

    Older documents stored a profile as a flat ``{KEY: VALUE}`` mapping.
    Such a mapping is read as ``env`` with no extra arguments and is
    written back in the canonical shape.
    """

    model_config = ConfigDict(extra="allow")

    env: dict[str, str] = Field(default_factory=dict)
    args: list[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if not _is_canonical_profile(data):
            return {"env": data}
        data = dict(data)
        if "command_args" in data:
            legacy_args = data.pop("command_args")
            data.setdefault("args", legacy_args)
        return data


class AppConfig(BaseModel):
    """A registered alias and everything needed to launch it."""

    model_config = ConfigDict(extra="allow")

    installed: bool = False          # cache only, the filesystem is authoritative
    target_binary: str = ""
    install_path: str | None = None  # overrides the platform install dir
    active_profile: str | None = None
    profiles: dict[str, Profile] = Field(default_factory=dict)

    def first_profile(self) -> str | None:
        """Name of the first profile in insertion order."""
        return next(iter(self.profiles), None)


class State(BaseModel):
    """Root state model — serialized to state.json."""

    model_config = ConfigDict(extra="allow")

    apps: dict[str, AppConfig] = Field(default_factory=dict)

    def app_names(self) -> list[str]:
        return list(self.apps)
