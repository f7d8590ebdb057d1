"""
Error taxonomy — one exception class per failure kind.

Every registry, installer and launcher failure is raised as a subclass of
``EnvHubError``.  Exceptions carry structured context (alias, profile, key,
path) and render their message from it, so front ends can either print
``str(err)`` (``"<code>: <message>"``) or inspect the fields.

    try:
        set_active_profile(path, "tool", "work")
    except ProfileNotFoundError as e:
        print(e.code, e.alias, e.profile)
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path


class ErrorCode(StrEnum):
    """Stable identifiers printed in front of every error message."""

    IO = "io_error"
    PARSE = "parse_error"
    SERIALIZE = "serialize_error"
    INVALID_STATE = "invalid_state"
    APP_NOT_FOUND = "app_not_found"
    PROFILE_NOT_FOUND = "profile_not_found"
    PERMISSION = "permission_error"
    INSTALL_PATH = "install_path_error"
    MISSING_LAUNCHER = "missing_launcher"
    TARGET_NOT_FOUND = "target_not_found"


class EnvHubError(Exception):
    """Base class for all EnvHub failures."""

    code: ErrorCode = ErrorCode.INVALID_STATE

    def __init__(
        self,
        reason: str = "",
        *,
        alias: str | None = None,
        profile: str | None = None,
        key: str | None = None,
        target: str | None = None,
        path: Path | str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.reason = reason
        self.alias = alias
        self.profile = profile
        self.key = key
        self.target = target
        self.path = Path(path) if path is not None else None
        self.cause = cause
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Human-readable message rendered from the structured context."""
        return self._render()

    def _render(self) -> str:
        parts = [self.reason] if self.reason else []
        if self.path is not None:
            parts.append(str(self.path))
        text = ": ".join(parts)
        if self.cause is not None:
            text = f"{text} ({self.cause})" if text else str(self.cause)
        return text

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "alias": self.alias,
            "profile": self.profile,
            "key": self.key,
            "target": self.target,
            "path": str(self.path) if self.path else None,
        }

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class StateIOError(EnvHubError):
    """A file could not be read, written or executed."""

    code = ErrorCode.IO


class ParseError(EnvHubError):
    """The state document is not valid JSON or does not match the schema."""

    code = ErrorCode.PARSE


class SerializeError(EnvHubError):
    """The in-memory state could not be serialized."""

    code = ErrorCode.SERIALIZE


class InvalidStateError(EnvHubError):
    """Blank required input, duplicate profile target, missing key, etc."""

    code = ErrorCode.INVALID_STATE

    def _render(self) -> str:
        text = self.reason or "Invalid state"
        context = []
        if self.alias is not None:
            context.append(f'app "{self.alias}"')
        if self.profile is not None:
            context.append(f'profile "{self.profile}"')
        if self.key is not None:
            context.append(f'key "{self.key}"')
        if context:
            text = f"{text} ({', '.join(context)})"
        return text


class AppNotFoundError(EnvHubError):
    code = ErrorCode.APP_NOT_FOUND

    def _render(self) -> str:
        return f'App "{self.alias}" is not registered'


class ProfileNotFoundError(EnvHubError):
    code = ErrorCode.PROFILE_NOT_FOUND

    def _render(self) -> str:
        return f'Profile "{self.profile}" not found for app "{self.alias}"'


class InstallPermissionError(EnvHubError):
    """Access denied while creating an install directory or writing a stub."""

    code = ErrorCode.PERMISSION


class InstallPathError(EnvHubError):
    """The install directory cannot be determined or created."""

    code = ErrorCode.INSTALL_PATH


class MissingLauncherError(EnvHubError):
    code = ErrorCode.MISSING_LAUNCHER

    def _render(self) -> str:
        return f"Launcher not found at {self.path}"


class TargetNotFoundError(EnvHubError):
    """The target binary does not exist, or resolves to the launcher itself."""

    code = ErrorCode.TARGET_NOT_FOUND

    def _render(self) -> str:
        text = self.reason or "Target not found"
        if self.target is not None:
            text = f'{text}: "{self.target}"'
        return text
