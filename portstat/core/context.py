"""Execution context for testability."""

import time
from pathlib import Path


class Context:
    """
    Wraps filesystem reads and sleeping.

    In production: reads the real /proc files
    In tests: can be replaced with MockContext
    """

    def read_file(self, path: str) -> str:
        """Read file contents."""
        return Path(path).read_text()

    def sleep(self, seconds: float) -> None:
        """Pause between snapshots."""
        time.sleep(seconds)
