"""
Spawn-wait transfer — run the target as a child and wait (Windows).

Standard streams are inherited; the launcher waits unconditionally and
exits with the child's code.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

from envhub.adapters.base import ProcessTransfer
from envhub.core.errors import StateIOError

logger = logging.getLogger(__name__)

# Exit code when the child ended without a reportable status
ABNORMAL_EXIT_CODE = 1


class SpawnWaitTransfer(ProcessTransfer):

    @property
    def name(self) -> str:
        return "spawn"

    def transfer(self, target: Path, args: Sequence[str], env: Mapping[str, str]) -> int:
        cmd = [str(target), *args]
        logger.debug("spawn %s (%d args)", target, len(args))

        try:
            result = subprocess.run(cmd, env=dict(env), check=False)
        except OSError as e:
            raise StateIOError("Failed to launch target", path=target, cause=e) from e

        code = result.returncode
        if code is None or code < 0:
            logger.debug("Target %s terminated abnormally (%s)", target, code)
            return ABNORMAL_EXIT_CODE
        return code
