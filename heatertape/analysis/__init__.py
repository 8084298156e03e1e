"""Aggregate metrics derived from the installation state."""
