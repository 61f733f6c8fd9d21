"""Traffic monitoring backend: device state, analytics rollups and live fan-out."""

__version__ = "1.0.0"
