"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Return a state file location inside a not-yet-created directory."""
    return tmp_path / "config" / "envhub" / "state.json"


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """Return an empty directory for fake executables."""
    path = tmp_path / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_executable():
    """Factory: write a shell script and mark it executable."""

    def _make(directory: Path, name: str, body: str = "exit 0\n", mode: int = 0o755) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(mode)
        return path

    return _make
