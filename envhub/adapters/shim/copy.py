"""
Copy shim — ``<install-dir>/<alias>.exe``, a full copy of the launcher.

Used where symlinks are not cheap (Windows).  The copy is written under
a temporary name and renamed into place.
"""

from __future__ import annotations

import logging
import os
import shutil
import uuid
from pathlib import Path

from envhub.adapters.base import ShimInstaller
from envhub.core.errors import InstallPermissionError, StateIOError
from envhub.core.platform import EXE_SUFFIX

logger = logging.getLogger(__name__)


class CopyShimInstaller(ShimInstaller):

    def __init__(self, suffix: str = EXE_SUFFIX, mode: int | None = None):
        self._suffix = suffix
        self._mode = mode

    @property
    def name(self) -> str:
        return "copy"

    def shim_path(self, alias: str, install_dir: Path) -> Path:
        return install_dir / f"{alias}{self._suffix}"

    def place(self, alias: str, install_dir: Path, launcher: Path) -> Path:
        dest = self.shim_path(alias, install_dir)
        tmp = install_dir / f".{alias}.{uuid.uuid4().hex[:8]}.tmp"

        try:
            shutil.copy2(launcher, tmp)
            if self._mode is not None:
                os.chmod(tmp, self._mode)
            os.replace(tmp, dest)
        except PermissionError as e:
            tmp.unlink(missing_ok=True)
            raise InstallPermissionError("Failed to copy shim", path=dest, cause=e) from e
        except OSError as e:
            tmp.unlink(missing_ok=True)
            raise StateIOError("Failed to copy shim", path=dest, cause=e) from e

        logger.info("Copied %s → %s", launcher, dest)
        return dest
