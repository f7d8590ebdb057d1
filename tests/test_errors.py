"""
Tests for the error taxonomy.
"""

from pathlib import Path

import pytest

from envhub.core.errors import (
    AppNotFoundError,
    EnvHubError,
    ErrorCode,
    InstallPathError,
    InstallPermissionError,
    InvalidStateError,
    MissingLauncherError,
    ParseError,
    ProfileNotFoundError,
    SerializeError,
    StateIOError,
    TargetNotFoundError,
)


class TestErrorCodes:

    @pytest.mark.parametrize("cls,code", [
        (StateIOError, "io_error"),
        (ParseError, "parse_error"),
        (SerializeError, "serialize_error"),
        (InvalidStateError, "invalid_state"),
        (AppNotFoundError, "app_not_found"),
        (ProfileNotFoundError, "profile_not_found"),
        (InstallPermissionError, "permission_error"),
        (InstallPathError, "install_path_error"),
        (MissingLauncherError, "missing_launcher"),
        (TargetNotFoundError, "target_not_found"),
    ])
    def test_code(self, cls, code):
        err = cls()
        assert isinstance(err, EnvHubError)
        assert err.code == ErrorCode(code)
        assert str(err).startswith(f"{code}: ")


class TestMessages:

    def test_app_not_found(self):
        assert str(AppNotFoundError(alias="tool")) == 'app_not_found: App "tool" is not registered'

    def test_profile_not_found(self):
        err = ProfileNotFoundError(alias="tool", profile="work")
        assert err.message == 'Profile "work" not found for app "tool"'

    def test_invalid_state_context(self):
        err = InvalidStateError("Target profile already exists", alias="tool", profile="work")
        assert err.message == 'Target profile already exists (app "tool", profile "work")'

    def test_invalid_state_default(self):
        assert InvalidStateError().message == "Invalid state"

    def test_target_not_found(self):
        err = TargetNotFoundError("Target not found in PATH", target="tool-bin")
        assert err.message == 'Target not found in PATH: "tool-bin"'

    def test_missing_launcher(self):
        err = MissingLauncherError(path="/opt/envhub-launcher")
        assert err.message == f"Launcher not found at {Path('/opt/envhub-launcher')}"

    def test_io_with_path_and_cause(self):
        cause = OSError("disk full")
        err = StateIOError("Failed to write state file", path="/tmp/state.json", cause=cause)
        assert err.message == f"Failed to write state file: {Path('/tmp/state.json')} (disk full)"
        assert err.cause is cause

    def test_to_dict(self):
        err = ProfileNotFoundError(alias="tool", profile="work")
        assert err.to_dict() == {
            "code": "profile_not_found",
            "message": 'Profile "work" not found for app "tool"',
            "alias": "tool",
            "profile": "work",
            "key": None,
            "target": None,
            "path": None,
        }
