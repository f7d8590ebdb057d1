"""
Symlink shim — ``<install-dir>/<alias>`` → launcher (POSIX).

The launcher recovers the alias from the file name it was invoked
through.  The link is created under a temporary name and renamed over
the old one, so a reinstall never leaves the alias missing.
"""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from envhub.adapters.base import ShimInstaller
from envhub.core.errors import InstallPermissionError, StateIOError

logger = logging.getLogger(__name__)


class SymlinkShimInstaller(ShimInstaller):

    @property
    def name(self) -> str:
        return "symlink"

    def shim_path(self, alias: str, install_dir: Path) -> Path:
        return install_dir / alias

    def place(self, alias: str, install_dir: Path, launcher: Path) -> Path:
        dest = self.shim_path(alias, install_dir)
        tmp = install_dir / f".{alias}.{uuid.uuid4().hex[:8]}.tmp"

        try:
            os.symlink(launcher, tmp)
            os.replace(tmp, dest)
        except PermissionError as e:
            tmp.unlink(missing_ok=True)
            raise InstallPermissionError("Failed to create shim", path=dest, cause=e) from e
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StateIOError("Failed to create shim", path=dest, cause=e) from e

        logger.info("Linked %s → %s", dest, launcher)
        return dest
