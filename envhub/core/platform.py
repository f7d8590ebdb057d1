"""
Platform constants shared by the installer and the launch engine.

Functions that behave differently per platform take an explicit
``windows`` argument defaulting to ``IS_WINDOWS``, so tests can exercise
both branches on any host.
"""

from __future__ import annotations

import os

IS_WINDOWS = os.name == "nt"

# Suffix of copied shims and of the launcher itself on Windows
EXE_SUFFIX = ".exe"

LAUNCHER_NAME = "envhub-launcher"

# PATHEXT fallback when the variable is unset
DEFAULT_PATH_EXTENSIONS = (".EXE",)

