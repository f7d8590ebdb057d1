"""
Adapter base — the platform contracts behind the launcher and installer.

Two side effects differ per platform:

- handing control to the target binary (replace the process image, or
  spawn a child and wait for it);
- placing an alias stub in an install directory (symlink, or a copy).

The core only talks to these through the abstract classes below; one
concrete implementation per platform lives under ``envhub.adapters``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path


class ProcessTransfer(ABC):
    """Transfer control to a resolved target binary."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The strategy identifier (e.g., 'exec', 'spawn')."""

    @abstractmethod
    def transfer(self, target: Path, args: Sequence[str], env: Mapping[str, str]) -> int:
        """Run ``target`` with ``args`` and ``env``.

        Returns the exit code the launcher should exit with.  Strategies
        that replace the current process never return on success.

        Raises:
            StateIOError: The target could not be started.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ShimInstaller(ABC):
    """Place an alias-named stub that starts the launcher."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The strategy identifier (e.g., 'symlink', 'copy')."""

    @abstractmethod
    def shim_path(self, alias: str, install_dir: Path) -> Path:
        """Where the stub for ``alias`` lives inside ``install_dir``."""

    @abstractmethod
    def place(self, alias: str, install_dir: Path, launcher: Path) -> Path:
        """Create or atomically replace the stub and return its path.

        ``install_dir`` already exists when this is called.

        Raises:
            InstallPermissionError: Access denied.
            StateIOError: Any other write failure.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
