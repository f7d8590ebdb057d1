"""
Adapter registry — pick the platform implementation of each contract.
"""

from __future__ import annotations

from envhub.adapters.base import ProcessTransfer, ShimInstaller
from envhub.adapters.process.exec_replace import ExecReplaceTransfer
from envhub.adapters.process.spawn_wait import SpawnWaitTransfer
from envhub.adapters.shim.copy import CopyShimInstaller
from envhub.adapters.shim.symlink import SymlinkShimInstaller
from envhub.core.platform import IS_WINDOWS


def process_transfer_for(windows: bool = IS_WINDOWS) -> ProcessTransfer:
    """Exec in place on POSIX, spawn and wait elsewhere."""
    return SpawnWaitTransfer() if windows else ExecReplaceTransfer()


def shim_installer_for(windows: bool = IS_WINDOWS) -> ShimInstaller:
    """Symlinks on POSIX, ``.exe`` copies elsewhere."""
    return CopyShimInstaller() if windows else SymlinkShimInstaller()
