"""portstat: per-connection ephemeral port headroom monitor."""

__version__ = "0.1.0"
