"""State file persistence."""
