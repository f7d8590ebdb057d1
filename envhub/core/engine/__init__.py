"""Launch resolution engine."""
