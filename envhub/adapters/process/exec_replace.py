"""
Exec transfer — replace the launcher process with the target (POSIX).

No fork: the target inherits the launcher's PID and standard streams, so
the exit code the caller observes is exactly the target's.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path

from envhub.adapters.base import ProcessTransfer
from envhub.core.errors import StateIOError

logger = logging.getLogger(__name__)


class ExecReplaceTransfer(ProcessTransfer):

    @property
    def name(self) -> str:
        return "exec"

    def transfer(self, target: Path, args: Sequence[str], env: Mapping[str, str]) -> int:
        argv = [str(target), *args]
        logger.debug("exec %s (%d args)", target, len(args))

        # Buffered output would be lost once the image is replaced
        sys.stdout.flush()
        sys.stderr.flush()

        try:
            os.execve(str(target), argv, dict(env))
        except OSError as e:
            raise StateIOError("Failed to exec target", path=target, cause=e) from e
        raise AssertionError("unreachable")  # pragma: no cover
