"""
Tests for CLI commands — app, profile, env, shim, state and global options.
"""

import errno
import json
import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from envhub.core.persistence.state_file import load_state
from envhub.main import cli

posix_only = pytest.mark.skipif(os.name == "nt", reason="POSIX symlink shims")


@pytest.fixture
def run(state_path: Path):
    """Invoke the CLI against an isolated state file."""
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(cli, ["--state", str(state_path), *args])

    return _run


@pytest.fixture
def registered(run):
    result = run("app", "register", "tool", "/usr/bin/tool-bin")
    assert result.exit_code == 0, result.output
    return run


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "EnvHub" in result.output
        for group in ("app", "profile", "env", "shim", "state"):
            assert group in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_state_path_option(self, run, state_path: Path):
        result = run("state", "path")
        assert result.exit_code == 0
        assert result.output.strip() == str(state_path)

    def test_state_path_from_env(self, tmp_path: Path, monkeypatch):
        custom = tmp_path / "custom.json"
        monkeypatch.setenv("ENVHUB_STATE_FILE", str(custom))
        result = CliRunner().invoke(cli, ["state", "path"])
        assert result.output.strip() == str(custom)


class TestAppCommands:

    def test_register(self, registered, state_path: Path):
        app = load_state(state_path).apps["tool"]
        assert app.target_binary == "/usr/bin/tool-bin"
        assert app.active_profile == "default"

    def test_register_blank_target(self, run, state_path: Path):
        result = run("app", "register", "tool", " ")
        assert result.exit_code == 1
        assert "invalid_state" in result.output
        assert not state_path.exists()

    def test_list_empty(self, run):
        result = run("app", "list")
        assert result.exit_code == 0
        assert "No apps registered" in result.output

    def test_list_json(self, registered, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        registered("app", "register", "other", "other-bin")

        result = registered("app", "list", "--json")

        assert result.exit_code == 0
        rows = json.loads(result.output)
        assert [r["name"] for r in rows] == ["tool", "other"]
        assert rows[0] == {
            "name": "tool",
            "target_binary": "/usr/bin/tool-bin",
            "active_profile": "default",
            "profiles": ["default"],
            "installed": False,
        }

    def test_show_json(self, registered):
        result = registered("app", "show", "tool", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["target_binary"] == "/usr/bin/tool-bin"
        assert data["profiles"] == {"default": {"env": {}, "args": []}}

    def test_show_text(self, registered):
        registered("env", "set", "tool", "default", "KEY", "VALUE")
        result = registered("app", "show", "tool")
        assert result.exit_code == 0
        assert "KEY=VALUE" in result.output
        assert "← active" in result.output

    def test_show_unknown(self, run):
        result = run("app", "show", "ghost")
        assert result.exit_code == 1
        assert 'app_not_found: App "ghost" is not registered' in result.output

    def test_use(self, registered, state_path: Path):
        registered("profile", "add", "tool", "work")
        result = registered("app", "use", "tool", "work")
        assert result.exit_code == 0
        assert load_state(state_path).apps["tool"].active_profile == "work"

    def test_use_unknown_profile(self, registered):
        result = registered("app", "use", "tool", "nope")
        assert result.exit_code == 1
        assert "profile_not_found" in result.output

    def test_install_path(self, registered, state_path: Path):
        registered("app", "install-path", "tool", "/opt/shims")
        assert load_state(state_path).apps["tool"].install_path == "/opt/shims"
        registered("app", "install-path", "tool")
        assert load_state(state_path).apps["tool"].install_path is None

    def test_quiet_suppresses_success(self, state_path: Path):
        result = CliRunner().invoke(
            cli, ["--quiet", "--state", str(state_path), "app", "register", "tool", "tool-bin"],
        )
        assert result.exit_code == 0
        assert result.output == ""


class TestProfileCommands:

    def test_add_list(self, registered):
        registered("profile", "add", "tool", "work")
        result = registered("profile", "list", "tool", "--json")
        assert json.loads(result.output) == {"active": "default", "profiles": ["default", "work"]}

    def test_remove(self, registered, state_path: Path):
        registered("profile", "add", "tool", "work")
        result = registered("profile", "remove", "tool", "work")
        assert result.exit_code == 0
        assert list(load_state(state_path).apps["tool"].profiles) == ["default"]

    def test_clone(self, registered, state_path: Path):
        registered("env", "set", "tool", "default", "KEY", "VALUE")
        result = registered("profile", "clone", "tool", "default", "copy")
        assert result.exit_code == 0
        assert load_state(state_path).apps["tool"].profiles["copy"].env == {"KEY": "VALUE"}

    def test_clone_existing(self, registered):
        registered("profile", "add", "tool", "work")
        result = registered("profile", "clone", "tool", "default", "work")
        assert result.exit_code == 1
        assert "Target profile already exists" in result.output

    def test_args(self, registered, state_path: Path):
        result = registered("profile", "args", "tool", "default", "--", "--verbose", "-x", "a b")
        assert result.exit_code == 0, result.output
        assert load_state(state_path).apps["tool"].profiles["default"].args == ["--verbose", "-x", "a b"]

    def test_args_clear(self, registered, state_path: Path):
        registered("profile", "args", "tool", "default", "--", "--verbose")
        registered("profile", "args", "tool", "default")
        assert load_state(state_path).apps["tool"].profiles["default"].args == []


class TestEnvCommands:

    def test_set_and_list(self, registered):
        registered("env", "set", "tool", "default", "B", "2")
        registered("env", "set", "tool", "default", "A", "1")
        result = registered("env", "list", "tool", "default")
        assert result.exit_code == 0
        assert result.output == "B=2\nA=1\n"

    def test_list_json(self, registered):
        registered("env", "set", "tool", "default", "KEY", "VALUE")
        result = registered("env", "list", "tool", "default", "--json")
        assert json.loads(result.output) == {"KEY": "VALUE"}

    def test_list_unknown_profile(self, registered):
        result = registered("env", "list", "tool", "nope")
        assert result.exit_code == 1
        assert "profile_not_found" in result.output

    def test_unset(self, registered, state_path: Path):
        registered("env", "set", "tool", "default", "KEY", "VALUE")
        result = registered("env", "unset", "tool", "default", "KEY")
        assert result.exit_code == 0
        assert load_state(state_path).apps["tool"].profiles["default"].env == {}

    def test_unset_missing_key(self, registered):
        result = registered("env", "unset", "tool", "default", "NOPE")
        assert result.exit_code == 1
        assert "invalid_state: Environment key not found" in result.output


class TestStateCommands:

    def test_check_missing_file(self, run):
        result = run("state", "check")
        assert result.exit_code == 0
        assert "State is valid" in result.output
        assert "not created yet" in result.output
        assert "No apps registered" in result.output

    def test_check_corrupt(self, run, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{nope")
        result = run("state", "check")
        assert result.exit_code == 1
        assert "parse_error" in result.output

    def test_check_unreadable(self, run, state_path: Path, monkeypatch):
        state_path.parent.mkdir(parents=True)
        state_path.write_text("{}")
        real_read_text = Path.read_text

        def read_text(self, *args, **kwargs):
            if self == state_path:
                raise PermissionError(errno.EACCES, "Permission denied", str(self))
            return real_read_text(self, *args, **kwargs)

        monkeypatch.setattr(Path, "read_text", read_text)
        result = run("state", "check", "--json")

        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["valid"] is False
        assert data["exists"] is True
        assert any("io_error" in e for e in data["errors"])

    def test_check_json_with_repairs(self, run, state_path: Path):
        state_path.parent.mkdir(parents=True)
        raw = json.dumps({"apps": {"tool": {"target_binary": "tool-bin", "active_profile": "gone"}}})
        state_path.write_text(raw)

        result = run("state", "check", "--json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["app_count"] == 1
        assert len(data["warnings"]) == 2
        assert state_path.read_text() == raw

    def test_check_blank_target(self, run, state_path: Path):
        state_path.parent.mkdir(parents=True)
        state_path.write_text(json.dumps({"apps": {"tool": {"target_binary": ""}}}))
        result = run("state", "check", "--json")
        assert result.exit_code == 1
        assert json.loads(result.output)["valid"] is False


@posix_only
class TestShimCommands:

    @pytest.fixture
    def home(self, tmp_path: Path, monkeypatch) -> Path:
        home = tmp_path / "home"
        monkeypatch.setenv("HOME", str(home))
        return home

    @pytest.fixture
    def launcher(self, tmp_path: Path, make_executable) -> Path:
        return make_executable(tmp_path / "dist", "envhub-launcher")

    def test_install(self, registered, home: Path, launcher: Path, state_path: Path):
        result = registered("shim", "install", "tool", "--launcher", str(launcher))

        assert result.exit_code == 0, result.output
        shim = home / ".envhub" / "bin" / "tool"
        assert shim.is_symlink()
        assert load_state(state_path).apps["tool"].installed is True

    def test_install_with_override(self, registered, home: Path, launcher: Path, tmp_path: Path):
        registered("app", "install-path", "tool", str(tmp_path / "custom"))
        result = registered("shim", "install", "tool", "-l", str(launcher))
        assert result.exit_code == 0, result.output
        assert (tmp_path / "custom" / "tool").is_symlink()

    def test_install_unknown_app(self, run, home: Path, launcher: Path):
        result = run("shim", "install", "ghost", "--launcher", str(launcher))
        assert result.exit_code == 1
        assert "app_not_found" in result.output

    def test_install_missing_launcher(self, registered, home: Path, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATH", str(tmp_path))
        result = registered("shim", "install", "tool")
        assert result.exit_code == 1
        assert "missing_launcher" in result.output

    def test_status(self, registered, home: Path, launcher: Path):
        before = json.loads(registered("shim", "status", "tool", "--json").output)
        assert before["installed"] is False

        registered("shim", "install", "tool", "--launcher", str(launcher))
        after = json.loads(registered("shim", "status", "tool", "--json").output)
        assert after == {
            "name": "tool",
            "installed": True,
            "path": str(home / ".envhub" / "bin" / "tool"),
        }

    def test_install_launcher(self, run, home: Path, launcher: Path):
        result = run("shim", "install-launcher", "--launcher", str(launcher))
        assert result.exit_code == 0, result.output
        assert (home / ".envhub" / "bin" / "envhub-launcher").is_file()

    def test_path_check(self, run, home: Path, launcher: Path, monkeypatch):
        monkeypatch.setenv("PATH", f"{launcher.parent}:{home / '.envhub' / 'bin'}")
        result = run("shim", "path-check")
        assert result.exit_code == 0
        assert "is on PATH" in result.output
        assert str(launcher) in result.output

    def test_path_check_missing(self, run, home: Path, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("PATH", str(tmp_path))
        result = run("shim", "path-check")
        assert "is not on PATH" in result.output
        assert "envhub-launcher not found" in result.output
