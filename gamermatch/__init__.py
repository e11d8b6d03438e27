"""GamerMatch: compatibility scoring and match detection for a gamer dating app."""

__version__ = "1.0.0"
