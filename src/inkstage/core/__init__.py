"""Path resolution core."""
