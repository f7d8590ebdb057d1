"""
Launch use case — what ``envhub-launcher`` does when started through a shim.

State is read exactly once, never written, and never re-read.  Any
failure is terminal for this invocation: it is reported on stderr as
``envhub-launcher error: <kind>: <message>`` and the launcher exits 1.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TextIO

import click

from envhub import __version__
from envhub.adapters.base import ProcessTransfer
from envhub.adapters.registry import process_transfer_for
from envhub.core.engine.resolver import discover_alias, launcher_path, plan_launch
from envhub.core.errors import EnvHubError
from envhub.core.persistence.state_file import default_state_path, load_state
from envhub.core.platform import IS_WINDOWS, LAUNCHER_NAME

logger = logging.getLogger(__name__)

# Exit code for internal resolution failures
FAILURE_EXIT_CODE = 1

HELP_TEXT = f"""\
{LAUNCHER_NAME} {__version__}

ABOUT:
  A lightweight shim that intercepts command calls and injects environment
  variables based on EnvHub's active profile configuration.

USAGE:
  This binary should NOT be run directly. It is designed to be used as a shim:

  1. Register an app:     envhub app register iclaude /usr/local/bin/claude
  2. Install the shim:    envhub shim install iclaude
  3. Run your alias:      iclaude code

  The launcher will:
    - Read your EnvHub state to find the active profile
    - Inject environment variables and extra arguments from that profile
    - Execute the original binary with the modified environment

OPTIONS:
  -h, --help       Show this help message
  -v, --version    Show version information
"""

DIRECT_RUN_TEXT = f"""\
Error: {LAUNCHER_NAME} should not be run directly.
This binary is meant to be symlinked/copied with your app name.

Usage:
  1. Register an app with 'envhub app register'
  2. Install the shim for that app with 'envhub shim install'
  3. Run your app by its alias name (e.g., 'iclaude', 'inode')

For more information, run: {LAUNCHER_NAME} --help
"""


def _run_self(args: Sequence[str], out: TextIO, err: TextIO) -> int:
    """Handle invocation under the launcher's own name."""
    if args:
        if args[0] in ("--version", "-v"):
            click.echo(f"{LAUNCHER_NAME} {__version__}", file=out)
            return 0
        if args[0] in ("--help", "-h"):
            click.echo(HELP_TEXT, file=out, nl=False)
            return 0
    click.echo(DIRECT_RUN_TEXT, file=err, nl=False)
    return FAILURE_EXIT_CODE


def run_launch(
    argv: Sequence[str],
    environ: Mapping[str, str],
    cwd: Path,
    *,
    state_path: Path | None = None,
    self_path: Path | None = None,
    transfer: ProcessTransfer | None = None,
    windows: bool = IS_WINDOWS,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> int:
    """Resolve the invoked alias and hand control to its target.

    Args:
        argv: The launcher's full argv; ``argv[0]`` names the alias.
        environ: Snapshot of the inherited environment.
        cwd: Working directory used for relative targets.
        state_path: State file (default: from ``environ``).
        self_path: The launcher's own executable (default: from ``argv[0]``).
        transfer: Process transfer strategy (default: per platform).

    Returns:
        The exit code to exit with.  On POSIX a successful launch never
        returns: the process image is replaced.
    """
    out = out or click.get_text_stream("stdout")
    err = err or click.get_text_stream("stderr")

    argv0 = argv[0] if argv else ""
    user_args = list(argv[1:])

    try:
        alias = discover_alias(argv0, windows)
        if alias == LAUNCHER_NAME:
            return _run_self(user_args, out, err)

        path = state_path or default_state_path(environ, windows)
        state = load_state(path)

        if self_path is None:
            self_path = launcher_path(argv0, environ, cwd)

        plan = plan_launch(
            state,
            alias,
            user_args,
            environ=environ,
            cwd=cwd,
            self_path=self_path,
            windows=windows,
        )
        strategy = transfer or process_transfer_for(windows)
        logger.debug("Launching %s via %s", plan.target, strategy.name)
        return strategy.transfer(plan.target, plan.args, plan.env)

    except EnvHubError as e:
        click.echo(f"{LAUNCHER_NAME} error: {e}", file=err)
        return FAILURE_EXIT_CODE
