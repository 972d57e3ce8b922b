"""Template function plugins."""
