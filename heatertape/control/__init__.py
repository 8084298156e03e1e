"""Commands that mutate the installation state."""
