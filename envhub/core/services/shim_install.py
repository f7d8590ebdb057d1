"""
Shim installation — place alias stubs that start the launcher.

A one-time setup action, not on the launch hot path:

    install_shim_for_state(state, "tool", InstallMode.USER, launcher)
    → ~/.envhub/bin/tool → envhub-launcher

Whether a shim is installed is always re-derived from the filesystem;
the ``installed`` flag in the state file is only a cache.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from envhub.adapters.registry import shim_installer_for
from envhub.adapters.shim.copy import CopyShimInstaller
from envhub.core.errors import (
    AppNotFoundError,
    InstallPathError,
    InstallPermissionError,
    InvalidStateError,
    MissingLauncherError,
)
from envhub.core.models.state import State
from envhub.core.platform import EXE_SUFFIX, IS_WINDOWS, LAUNCHER_NAME

logger = logging.getLogger(__name__)

GLOBAL_INSTALL_DIR = Path("/usr/local/bin")


class InstallMode(StrEnum):
    GLOBAL = "global"
    USER = "user"


@dataclass
class PlatformInfo:
    """Where stubs go on this platform."""

    is_windows: bool
    install_dir: Path


def detect_platform(
    mode: InstallMode,
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> PlatformInfo:
    """Resolve the default install directory for ``mode``.

    Windows always installs per user under ``%LOCALAPPDATA%\\EnvHub\\bin``.

    Raises:
        InstallPathError: The base directory cannot be determined.
    """
    environ = os.environ if environ is None else environ

    if windows:
        base = environ.get("LOCALAPPDATA")
        if not base:
            raise InstallPathError("LOCALAPPDATA is not set")
        return PlatformInfo(is_windows=True, install_dir=Path(base) / "EnvHub" / "bin")

    if mode == InstallMode.GLOBAL:
        return PlatformInfo(is_windows=False, install_dir=GLOBAL_INSTALL_DIR)

    home = environ.get("HOME")
    try:
        home_dir = Path(home) if home else Path.home()
    except RuntimeError as e:
        raise InstallPathError("Failed to resolve home directory", cause=e) from e
    return PlatformInfo(is_windows=False, install_dir=home_dir / ".envhub" / "bin")


def _is_present(path: Path, follow: bool = True) -> bool:
    try:
        os.stat(path, follow_symlinks=follow)
    except OSError:
        return False
    return True


def _ensure_install_dir(install_dir: Path) -> None:
    try:
        install_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise InstallPermissionError(
            "Failed to create install directory", path=install_dir, cause=e,
        ) from e
    except OSError as e:
        raise InstallPathError(
            "Failed to create install directory", path=install_dir, cause=e,
        ) from e


# ── Shims ───────────────────────────────────────────────────────


def install_shim_in(
    name: str,
    install_dir: Path,
    launcher_path: Path,
    windows: bool = IS_WINDOWS,
) -> Path:
    """Place the stub for ``name`` in ``install_dir``.

    Reinstalling replaces an existing stub atomically.

    Returns:
        Path of the installed stub.
    """
    if not name or not name.strip():
        raise InvalidStateError("App name must be non-empty")
    if not _is_present(launcher_path):
        raise MissingLauncherError(path=launcher_path)

    _ensure_install_dir(install_dir)
    installer = shim_installer_for(windows)
    # An absolute link target keeps the shim valid wherever it is called from
    return installer.place(name, install_dir, launcher_path.absolute())


def install_dir_for_app(
    state: State,
    name: str,
    mode: InstallMode,
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> Path:
    """The app's ``install_path`` override, else the platform default."""
    app = state.apps.get(name)
    if app is None:
        raise AppNotFoundError(alias=name)
    if app.install_path:
        return Path(app.install_path).expanduser()
    return detect_platform(mode, environ, windows).install_dir


def install_shim_for_state(
    state: State,
    name: str,
    mode: InstallMode,
    launcher_path: Path,
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> Path:
    install_dir = install_dir_for_app(state, name, mode, environ, windows)
    return install_shim_in(name, install_dir, launcher_path, windows)


def shim_path_for_state(
    state: State,
    name: str,
    mode: InstallMode,
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> Path:
    install_dir = install_dir_for_app(state, name, mode, environ, windows)
    return shim_installer_for(windows).shim_path(name, install_dir)


def is_shim_installed(name: str, install_dir: Path, windows: bool = IS_WINDOWS) -> bool:
    """Pure filesystem test: does the stub for ``name`` exist?"""
    if not name or not name.strip():
        return False
    shim = shim_installer_for(windows).shim_path(name, install_dir)
    # A dangling link is still an installed shim, just a broken one
    return _is_present(shim, follow=False)


# ── Launcher ────────────────────────────────────────────────────


def install_launcher(
    mode: InstallMode,
    launcher_path: Path,
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> Path:
    """Copy the launcher itself into the install directory."""
    if not _is_present(launcher_path):
        raise MissingLauncherError(path=launcher_path)

    platform_info = detect_platform(mode, environ, windows)
    _ensure_install_dir(platform_info.install_dir)

    installer = CopyShimInstaller(
        suffix=EXE_SUFFIX if windows else "",
        mode=None if windows else 0o755,
    )
    return installer.place(LAUNCHER_NAME, platform_info.install_dir, launcher_path)


def find_launcher(environ: Mapping[str, str] | None = None) -> Path | None:
    """Locate ``envhub-launcher`` on PATH."""
    environ = os.environ if environ is None else environ
    found = shutil.which(LAUNCHER_NAME, path=environ.get("PATH"))
    return Path(found) if found else None


def is_launcher_installed(environ: Mapping[str, str] | None = None) -> bool:
    return find_launcher(environ) is not None


def is_user_path_configured(
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> bool:
    """Whether the user install directory appears verbatim on PATH.

    A plain string comparison; good enough for a setup hint.
    """
    environ = os.environ if environ is None else environ
    try:
        install_dir = str(detect_platform(InstallMode.USER, environ, windows).install_dir)
    except InstallPathError:
        return False
    separator = ";" if windows else ":"
    return any(entry == install_dir for entry in environ.get("PATH", "").split(separator))
