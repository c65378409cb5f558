"""Settings loading with layered overrides.

Precedence, lowest first: built-in defaults, user config
(~/.config/portstat/config.yaml), project config (.portstat.yaml), an
explicit --config file, then command-line flags.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from portstat.errors import PortstatError
from portstat.lib.portrange import PORT_RANGE_PATH
from portstat.lib.procnet import PROC_NET_PATHS


PROJECT_CONFIG = Path(".portstat.yaml")

OUTPUT_FORMATS = ("plain", "json")

IP_VERSIONS = (0, 4, 6)


class SettingsError(PortstatError):
    """Invalid config file or option value."""

    pass


def user_config_path() -> Path:
    """Path of the per-user config file."""
    return Path.home() / ".config" / "portstat" / "config.yaml"


def default_log_dir() -> Path:
    """Base directory for run logs."""
    return Path.home() / "var" / "log" / "portstat"


@dataclass(frozen=True)
class Settings:
    """Immutable run settings, built once at startup."""

    interval: float = 3
    number: int = 10
    prom: bool = False
    ip_version: int = 0
    format: str = "plain"
    port_range_path: str = PORT_RANGE_PATH
    tcp_path: str = PROC_NET_PATHS[4]
    tcp6_path: str = PROC_NET_PATHS[6]
    log: bool = True
    log_dir: str | None = None

    def __post_init__(self):
        if self.interval <= 0:
            raise SettingsError(f"interval must be positive, got {self.interval}")
        if self.number < 1:
            raise SettingsError(f"number must be at least 1, got {self.number}")
        if self.ip_version not in IP_VERSIONS:
            raise SettingsError(f"ip_version must be 0, 4 or 6, got {self.ip_version}")
        if self.format not in OUTPUT_FORMATS:
            raise SettingsError(
                f"format must be one of {', '.join(OUTPUT_FORMATS)}, got {self.format!r}"
            )

    @property
    def once(self) -> bool:
        """Prometheus output is a single snapshot; the interval is ignored."""
        return self.prom

    @property
    def output_mode(self) -> str:
        """Renderer to use: table, prom or json."""
        if self.prom:
            return "prom"
        if self.format == "json":
            return "json"
        return "table"

    @property
    def log_path_base(self) -> Path:
        return Path(self.log_dir) if self.log_dir else default_log_dir()

    def table_path(self, family: int) -> str:
        """Socket table path for a family."""
        return self.tcp6_path if family == 6 else self.tcp_path


# Coercions for values read from YAML or the command line
FIELD_TYPES = {
    "interval": float,
    "number": int,
    "prom": bool,
    "ip_version": int,
    "format": str,
    "port_range_path": str,
    "tcp_path": str,
    "tcp6_path": str,
    "log": bool,
    "log_dir": str,
}


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML config file if it exists.

    Args:
        path: Config file path

    Returns:
        Mapping of config keys, empty if the file does not exist

    Raises:
        SettingsError: If the file cannot be read or is not a YAML mapping
    """
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SettingsError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Config must be a YAML mapping: {path}")
    return data


def coerce_values(data: dict[str, Any], source: str) -> dict[str, Any]:
    """Check keys and convert values to the Settings field types."""
    values = {}
    for key, value in data.items():
        if key not in FIELD_TYPES:
            raise SettingsError(f"Unknown config key '{key}' in {source}")
        if value is None:
            continue
        expected = FIELD_TYPES[key]
        if expected is bool:
            if not isinstance(value, bool):
                raise SettingsError(f"'{key}' must be true or false in {source}")
            values[key] = value
            continue
        if isinstance(value, bool):
            raise SettingsError(f"'{key}' must be {expected.__name__} in {source}")
        if expected is int and isinstance(value, float) and not value.is_integer():
            raise SettingsError(f"'{key}' must be a whole number in {source}, got {value!r}")
        try:
            values[key] = expected(value)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"Invalid value for '{key}' in {source}: {value!r}") from e
    return values


def load_settings(
    overrides: dict[str, Any] | None = None,
    config_path: Path | None = None,
    search_paths: list[Path] | None = None,
) -> Settings:
    """
    Build Settings from config files and command-line overrides.

    Args:
        overrides: Values given on the command line; None values are ignored
        config_path: Explicit config file, must exist
        search_paths: Config files to layer, lowest precedence first
            (default: user config, then project config)

    Returns:
        Settings

    Raises:
        SettingsError: On unreadable or invalid config, or bad values
    """
    if search_paths is None:
        search_paths = [user_config_path(), PROJECT_CONFIG]

    values: dict[str, Any] = {}
    for path in search_paths:
        values.update(coerce_values(load_config_file(path), str(path)))

    if config_path is not None:
        if not config_path.exists():
            raise SettingsError(f"Config not found: {config_path}")
        values.update(coerce_values(load_config_file(config_path), str(config_path)))

    if overrides:
        cli_values = {k: v for k, v in overrides.items() if v is not None}
        values.update(coerce_values(cli_values, "command line"))

    return Settings(**values)


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Settings as a plain mapping, for logging."""
    return {f.name: getattr(settings, f.name) for f in fields(settings)}
