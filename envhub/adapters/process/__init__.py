"""Process transfer strategies."""
