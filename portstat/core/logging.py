"""JSONL run log."""

import json
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any


PROGRAM = "portstat"


def get_log_path(base_path: Path, day: date | None = None) -> Path:
    """
    Get the log file path for a run.

    Args:
        base_path: Base directory for logs
        day: Date of the run (default: today)

    Returns:
        Path to the log file: {base}/{date}/portstat.jsonl
    """
    day = day or date.today()
    return base_path / day.isoformat() / f"{PROGRAM}.jsonl"


class RunLogger:
    """
    JSONL logger for portstat runs.

    Writes one JSON object per line. A disabled logger accepts every call
    and writes nothing.
    """

    def __init__(self, log_path: Path | None = None, enabled: bool = True):
        """
        Initialize logger.

        Args:
            log_path: Path to log file
            enabled: Write entries at all
        """
        self.log_path = log_path
        self.enabled = enabled and log_path is not None
        self._file = None

    def open(self) -> None:
        """
        Create the log directory and open the file.

        Raises:
            OSError: If the directory or file cannot be created
        """
        if self.enabled:
            self._ensure_file()

    def _ensure_file(self) -> None:
        """Ensure log file is open."""
        if self._file is None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.log_path, "a")

    def _log(self, level: str, message: str, **extra: Any) -> None:
        """Write a log entry."""
        if not self.enabled:
            return
        self._ensure_file()
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "program": PROGRAM,
            "message": message,
            **extra,
        }
        self._file.write(json.dumps(entry, default=str) + "\n")
        self._file.flush()

    def debug(self, message: str, **extra: Any) -> None:
        """Log debug message."""
        self._log("debug", message, **extra)

    def info(self, message: str, **extra: Any) -> None:
        """Log info message."""
        self._log("info", message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Log warning message."""
        self._log("warning", message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Log error message."""
        self._log("error", message, **extra)

    def close(self) -> None:
        """Close the log file."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
