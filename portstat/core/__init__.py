"""Core portstat functionality."""

from portstat.core.config import Settings, SettingsError, load_settings
from portstat.core.context import Context
from portstat.core.logging import RunLogger, get_log_path
from portstat.core.output import Output
from portstat.core.select import select_top_n
from portstat.core.snapshot import aggregate_family, take_snapshot

__all__ = [
    "Context",
    "Output",
    "RunLogger",
    "Settings",
    "SettingsError",
    "aggregate_family",
    "get_log_path",
    "load_settings",
    "select_top_n",
    "take_snapshot",
]
