"""
State check use case — validate state.json and report what would change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from envhub.core.errors import EnvHubError
from envhub.core.models.state import State
from envhub.core.persistence.state_file import load_state
from envhub.core.services.state_validate import validate_state


@dataclass
class StateCheckResult:
    """Result of state validation."""

    valid: bool = False
    state_path: Path | None = None
    exists: bool = False
    state: State | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "state_path": str(self.state_path) if self.state_path else None,
            "exists": self.exists,
            "errors": self.errors,
            "warnings": self.warnings,
            "app_count": len(self.state.apps) if self.state else 0,
        }


def _file_present(path: Path) -> bool:
    """Whether something is at ``path``.  Access errors are left to load_state."""
    try:
        path.stat()
    except OSError:
        return False
    return True


def check_state(state_path: Path) -> StateCheckResult:
    """Load and validate the state file without writing anything.

    Self-healing that the next save would apply (missing profiles,
    dangling active profile) is reported as warnings.
    """
    result = StateCheckResult(state_path=state_path, exists=_file_present(state_path))

    try:
        state = load_state(state_path)
    except EnvHubError as e:
        result.errors.append(str(e))
        return result
    result.state = state

    try:
        repaired = validate_state(state)
    except EnvHubError as e:
        result.errors.append(str(e))
        return result

    for name, app in state.apps.items():
        fixed = repaired.apps[name]
        if not app.profiles:
            result.warnings.append(f"App '{name}' has no profiles; 'default' will be added.")
        if app.active_profile != fixed.active_profile:
            result.warnings.append(
                f"App '{name}' active profile {app.active_profile!r} "
                f"will become {fixed.active_profile!r}."
            )

    if not state.apps:
        result.warnings.append("No apps registered.")

    result.valid = not result.errors
    return result
