"""Persistence of the System record: stores, codec and migrations."""
