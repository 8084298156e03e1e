"""Simulated monitoring and control panel for heater tape de-icing installations."""

__version__ = "0.1.0"
