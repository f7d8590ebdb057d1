"""
Launch resolution — turn an invoked alias into a concrete launch plan.

Hot path, executed once per launcher invocation:

    1. alias discovery      argv[0] → "tool"
    2. configuration lookup  state.apps["tool"].target_binary, or pass-through
    3. profile selection     active profile, else first by insertion order
    4. target resolution     absolute / relative / PATH search
    5. environment merge     inherited env overlaid by profile bindings
    6. argument assembly     profile args + user args, untouched

Every function here is pure with respect to its inputs: the environment,
working directory and the launcher's own path are passed in, never read
from the process.  Transferring control lives in ``envhub.adapters.process``.

The self-reference guard is what keeps an alias from re-invoking the
launcher forever: a shim named ``tool`` sits on PATH next to (or before)
the real ``tool``, and the search must skip it.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path, PureWindowsPath

from envhub.core.errors import InvalidStateError, TargetNotFoundError
from envhub.core.models.state import AppConfig, Profile, State
from envhub.core.platform import DEFAULT_PATH_EXTENSIONS, EXE_SUFFIX, IS_WINDOWS

logger = logging.getLogger(__name__)


@dataclass
class LaunchPlan:
    """Everything needed to hand control to the target."""

    alias: str
    target: Path
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    profile: str | None = None
    registered: bool = False

    def to_dict(self) -> dict:
        return {
            "alias": self.alias,
            "target": str(self.target),
            "args": self.args,
            "profile": self.profile,
            "registered": self.registered,
        }


# ── 1. Alias discovery ──────────────────────────────────────────


def discover_alias(argv0: str | None, windows: bool = IS_WINDOWS) -> str:
    """The file name the launcher was invoked through.

    Raises:
        InvalidStateError: ``argv[0]`` is missing or has no file name.
    """
    if not argv0:
        raise InvalidStateError("Missing argv[0]")

    # Both separators count on Windows
    raw = argv0.replace("\\", "/") if windows else argv0
    name = raw.rstrip("/").rsplit("/", 1)[-1]
    if windows and name.lower().endswith(EXE_SUFFIX):
        name = name[: -len(EXE_SUFFIX)]
    if not name:
        raise InvalidStateError("Cannot determine alias from argv[0]")
    return name


# ── 2-3. Configuration lookup and profile selection ─────────────


def select_profile(app: AppConfig) -> tuple[str | None, Profile]:
    """Pick the profile to inject.

    The active profile when it still exists, else the first profile in
    insertion order, else nothing.
    """
    if not app.profiles:
        return None, Profile()

    name = app.active_profile
    if name is None or name not in app.profiles:
        name = app.first_profile()
    return name, app.profiles[name]


def lookup_app(state: State, alias: str) -> tuple[str, AppConfig | None]:
    """Target binary for ``alias``; unknown aliases pass through as-is.

    Raises:
        InvalidStateError: The alias is registered with a blank target.
    """
    app = state.apps.get(alias)
    if app is None:
        logger.debug("Alias %s is not registered — passing through", alias)
        return alias, None

    if not app.target_binary.strip():
        raise InvalidStateError("App is missing target_binary", alias=alias)
    return app.target_binary, app


# ── 4. Target resolution ────────────────────────────────────────


def same_executable(candidate: Path, self_path: Path | None) -> bool:
    """Whether ``candidate`` is the launcher itself.

    Canonical paths first; when they differ or cannot be computed, the
    underlying file identity (device + inode), which also catches hard
    links and copies reached through a different mount.
    """
    if self_path is None:
        return False

    try:
        if candidate.resolve(strict=True) == self_path.resolve(strict=True):
            return True
    except (OSError, RuntimeError):
        pass

    try:
        a = os.stat(candidate)
        b = os.stat(self_path)
    except OSError:
        return False
    return (a.st_dev, a.st_ino) == (b.st_dev, b.st_ino)


def _ensure_not_self(candidate: Path, self_path: Path | None, target: str) -> Path:
    if same_executable(candidate, self_path):
        raise TargetNotFoundError("Target binary resolves to envhub-launcher", target=target)
    return candidate


def _has_separator(target: str, windows: bool) -> bool:
    if "/" in target:
        return True
    return windows and "\\" in target


def _is_absolute(target: str, windows: bool) -> bool:
    if windows:
        return PureWindowsPath(target).is_absolute()
    return os.path.isabs(target)


def _exists(path: Path, *, regular: bool = False) -> bool:
    """Existence test that treats unreachable locations as absent."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) if regular else True


def is_executable(path: Path) -> bool:
    """POSIX: a regular file with any execute bit set."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) and bool(mode & 0o111)


def path_extensions(environ: Mapping[str, str]) -> list[str]:
    """Extensions tried after the bare name on Windows (``PATHEXT``)."""
    raw = environ.get("PATHEXT", "")
    exts = [ext for ext in raw.split(";") if ext]
    return exts or list(DEFAULT_PATH_EXTENSIONS)


def _path_candidates(directory: Path, target: str, environ: Mapping[str, str], windows: bool):
    if not windows:
        candidate = directory / target
        if is_executable(candidate):
            yield candidate
        return

    candidate = directory / target
    if _exists(candidate, regular=True):
        yield candidate
    for ext in path_extensions(environ):
        candidate = directory / f"{target}{ext}"
        if _exists(candidate, regular=True):
            yield candidate


def find_executable_in_path(
    target: str,
    *,
    environ: Mapping[str, str],
    self_path: Path | None,
    windows: bool = IS_WINDOWS,
) -> Path | None:
    """First acceptable ``target`` on PATH, skipping the launcher itself."""
    path_var = environ.get("PATH", "")
    separator = ";" if windows else os.pathsep

    for entry in path_var.split(separator):
        if not entry:
            continue
        for candidate in _path_candidates(Path(entry), target, environ, windows):
            if same_executable(candidate, self_path):
                logger.debug("Skipping %s, it is the launcher", candidate)
                continue
            return candidate
    return None


def resolve_target(
    target: str,
    *,
    environ: Mapping[str, str],
    cwd: Path,
    self_path: Path | None,
    windows: bool = IS_WINDOWS,
) -> Path:
    """Turn a configured target into the executable to run.

    - absolute path: used as-is;
    - path with a separator: relative to ``cwd``, must exist;
    - bare name: searched on ``PATH``.

    Raises:
        TargetNotFoundError: Nothing found, or the only match is the launcher.
    """
    if _is_absolute(target, windows):
        return _ensure_not_self(Path(target), self_path, target)

    if _has_separator(target, windows):
        candidate = cwd / target
        if not _exists(candidate):
            raise TargetNotFoundError("Target not found", target=target)
        return _ensure_not_self(candidate, self_path, target)

    found = find_executable_in_path(target, environ=environ, self_path=self_path, windows=windows)
    if found is None:
        raise TargetNotFoundError("Target not found in PATH", target=target)
    return found


def launcher_path(argv0: str, environ: Mapping[str, str], cwd: Path) -> Path | None:
    """Best-effort path of the running launcher, from ``argv[0]``.

    Shells pass the full path for PATH lookups, but a bare name is
    resolved through PATH the same way the shell would have.
    """
    if not argv0:
        return None
    if os.sep in argv0 or (os.altsep and os.altsep in argv0):
        path = Path(argv0)
        return path if path.is_absolute() else cwd / path

    found = shutil.which(argv0, path=environ.get("PATH"))
    if found is None:
        logger.debug("Cannot locate launcher %r on PATH; self-reference guard is off", argv0)
        return None
    return Path(found)


# ── 5-6. Environment and arguments ──────────────────────────────


def merge_env(base: Mapping[str, str], overrides: Mapping[str, str]) -> dict[str, str]:
    """Inherited environment overlaid by ``overrides``.  Nothing is removed."""
    env = dict(base)
    env.update(overrides)
    return env


def assemble_args(profile_args: Sequence[str], user_args: Sequence[str]) -> list[str]:
    """Profile arguments first, then the user's, verbatim and in order."""
    return [*profile_args, *user_args]


# ── Whole plan ──────────────────────────────────────────────────


def plan_launch(
    state: State,
    alias: str,
    user_args: Sequence[str],
    *,
    environ: Mapping[str, str],
    cwd: Path,
    self_path: Path | None,
    windows: bool = IS_WINDOWS,
) -> LaunchPlan:
    """Resolve everything the launcher needs for ``alias``."""
    target, app = lookup_app(state, alias)

    profile_name: str | None = None
    profile = Profile()
    if app is not None:
        profile_name, profile = select_profile(app)

    resolved = resolve_target(
        target, environ=environ, cwd=cwd, self_path=self_path, windows=windows,
    )
    logger.debug(
        "Resolved %s → %s (profile=%s, %d env overrides)",
        alias, resolved, profile_name, len(profile.env),
    )

    return LaunchPlan(
        alias=alias,
        target=resolved,
        args=assemble_args(profile.args, user_args),
        env=merge_env(environ, profile.env),
        profile=profile_name,
        registered=app is not None,
    )
