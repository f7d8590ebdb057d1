"""Click command groups registered by envhub.main."""
