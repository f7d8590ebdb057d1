"""
State file persistence — read/write for State.

State is stored as JSON in a per-user config directory.  Writes go to a
temp file in the same directory which is then renamed over the target, so
a reader never observes a half-written document.  There is no locking:
two writers racing each other resolve as last-write-wins.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import ValidationError

from envhub.core.errors import ParseError, SerializeError, StateIOError
from envhub.core.models.state import State
from envhub.core.platform import IS_WINDOWS

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"
STATE_PATH_ENV = "ENVHUB_STATE_FILE"


def default_state_path(
    environ: Mapping[str, str] | None = None,
    windows: bool = IS_WINDOWS,
) -> Path:
    """Get the default state file path for the current user.

    ``ENVHUB_STATE_FILE`` in ``environ`` overrides the platform location.
    """
    environ = os.environ if environ is None else environ
    override = environ.get(STATE_PATH_ENV, "").strip()
    if override:
        return Path(override).expanduser()

    app_dir = "EnvHub" if windows else "envhub"
    return Path(user_config_dir(app_dir, appauthor=False, roaming=True)) / STATE_FILE


def load_state(path: Path) -> State:
    """Load state from a JSON file.

    Args:
        path: Path to the state JSON file.

    Returns:
        State model. If the file doesn't exist, returns an empty state.

    Raises:
        StateIOError: The file exists but cannot be read, or its
            directory cannot be searched.
        ParseError: The content is not JSON or does not match the schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError):
        logger.debug("No state file at %s, starting empty", path)
        return State()
    except UnicodeDecodeError as e:
        raise ParseError("Failed to decode state file", path=path, cause=e) from e
    except OSError as e:
        raise StateIOError("Failed to read state file", path=path, cause=e) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError("Failed to parse state file", path=path, cause=e) from e

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}", path=path,
        )

    try:
        state = State.model_validate(data)
    except ValidationError as e:
        raise ParseError("State file does not match the schema", path=path, cause=e) from e

    logger.debug("Loaded state from %s (%d apps)", path, len(state.apps))
    return state


def save_state(state: State, path: Path) -> None:
    """Save state to a JSON file.

    Uses write-to-temp-then-rename so a failed write leaves the previous
    file in place.

    Args:
        state: The state to save.
        path: Target path for the state file.

    Raises:
        SerializeError: The model cannot be dumped to JSON.
        StateIOError: The directory or file cannot be written.
    """
    try:
        data = state.model_dump(mode="json")
        content = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        raise SerializeError("Failed to serialize state", path=path, cause=e) from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StateIOError("Failed to create state directory", path=path.parent, cause=e) from e

    tmp_path: str | None = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".state_",
            suffix=".tmp",
        )
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_path, path)
        logger.debug("State saved to %s", path)
    except OSError as e:
        if tmp_path is not None:
            Path(tmp_path).unlink(missing_ok=True)
        logger.error("Failed to save state to %s: %s", path, e)
        raise StateIOError("Failed to write state file", path=path, cause=e) from e
