"""Ephemeral port range from /proc/sys/net/ipv4/ip_local_port_range."""

from typing import TYPE_CHECKING

from portstat.errors import PortstatError
from portstat.lib.models import PortRange

if TYPE_CHECKING:
    from portstat.core.context import Context


PORT_RANGE_PATH = "/proc/sys/net/ipv4/ip_local_port_range"


class ConfigReadError(PortstatError):
    """Port range source cannot be read."""

    pass


class ConfigFormatError(PortstatError):
    """Port range source is not two integers."""

    pass


class ConfigRangeError(PortstatError):
    """Port range start is above its end."""

    pass


def parse_port_range(content: str) -> PortRange:
    """
    Parse ``start end`` into a PortRange.

    The pool size is ``end - start``, one less than the number of ports in
    the inclusive range. Existing dashboards are built on that figure, so it
    stays.

    Args:
        content: File content

    Returns:
        PortRange

    Raises:
        ConfigFormatError: If content is not exactly two unsigned integers
        ConfigRangeError: If start > end
    """
    parts = content.split()
    if len(parts) != 2 or not all(p.isascii() and p.isdigit() for p in parts):
        raise ConfigFormatError(f"invalid local port range: {content!r}")

    start, end = int(parts[0]), int(parts[1])
    if start > end:
        raise ConfigRangeError(f"invalid local port range: {content!r}")

    return PortRange(start=start, end=end, pool_size=end - start)


def read_port_range(context: "Context", path: str = PORT_RANGE_PATH) -> PortRange:
    """
    Read the kernel's ephemeral port range.

    Args:
        context: Execution context
        path: Range source, normally /proc/sys/net/ipv4/ip_local_port_range

    Returns:
        PortRange

    Raises:
        ConfigReadError: If the file cannot be read
        ConfigFormatError: If the content does not parse
        ConfigRangeError: If start > end
    """
    try:
        content = context.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigReadError(f"Cannot read {path}: {e}") from e

    return parse_port_range(content)
