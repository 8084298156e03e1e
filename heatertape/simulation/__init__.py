"""Periodic simulation of segment temperatures."""
