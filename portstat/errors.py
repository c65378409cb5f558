"""Base exception for portstat."""


class PortstatError(Exception):
    """Base class for every error that aborts a snapshot."""

    pass
