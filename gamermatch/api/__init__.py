"""HTTP API package for GamerMatch."""
