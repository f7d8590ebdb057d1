"""Adapters — platform bindings for process transfer and shim placement.

Public re-exports for convenient access.
"""

from envhub.adapters.base import ProcessTransfer, ShimInstaller
from envhub.adapters.registry import process_transfer_for, shim_installer_for

__all__ = [
    "ProcessTransfer",
    "ShimInstaller",
    "process_transfer_for",
    "shim_installer_for",
]
