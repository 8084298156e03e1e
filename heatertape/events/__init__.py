"""Session logs and alerts."""
