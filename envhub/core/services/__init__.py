"""Services — registry, validation and shim installation."""
