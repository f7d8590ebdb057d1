"""
envhub-launcher — entry point reached through alias shims.

Usage:
    <alias> [args...]            (via a shim in the install directory)
    envhub-launcher --version
    envhub-launcher --help

Arguments after the alias belong to the target binary and are forwarded
untouched, so nothing here parses them.  Logging is configured from the
environment only (``ENVHUB_LOG_LEVEL``, ``ENVHUB_LOG_FILE``,
``ENVHUB_LOG_FILE_LEVEL``).
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from envhub.core.observability.logging_config import setup_logging_from_env
from envhub.core.use_cases.launch import run_launch


def main() -> None:
    environ = dict(os.environ)

    setup_logging_from_env(environ)

    sys.exit(run_launch(sys.argv, environ, Path.cwd()))


if __name__ == "__main__":
    main()
