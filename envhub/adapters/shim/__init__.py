"""Shim placement strategies."""
