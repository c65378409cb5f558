"""Scanner for the kernel TCP socket tables (/proc/net/tcp, /proc/net/tcp6).

Each data row looks like::

    sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode
    0: 0100007F:0CEA 00000000:0000 0A 00000000:00000000 00:00000000 00000000   112        0 21339 1 ...

Listening sockets are indexed by local IP. Every other row counts against the
connection tuple (local IP, remote IP, remote port) it belongs to.
"""

from typing import TYPE_CHECKING

from portstat.errors import PortstatError
from portstat.lib.address import AddressFormatError, HexDecodeError, decode_port, split_endpoint
from portstat.lib.models import PortCounter, PortRange, TableScan, connection_key

if TYPE_CHECKING:
    from portstat.core.context import Context


PROC_NET_PATHS = {
    4: "/proc/net/tcp",
    6: "/proc/net/tcp6",
}

# Wildcard bind address as printed for each family
ZERO_IPS = {
    4: "0" * 8,
    6: "0" * 32,
}

TCP_LISTEN = "0A"

MIN_FIELDS = 12


class UnsupportedFamilyError(PortstatError):
    """Address family other than 4 or 6."""

    pass


class TableOpenError(PortstatError):
    """Socket table cannot be opened."""

    pass


class TableFormatError(PortstatError):
    """Socket table row does not parse."""

    pass


def check_family(family: int) -> None:
    """Raise UnsupportedFamilyError unless family is 4 or 6."""
    if family not in PROC_NET_PATHS:
        raise UnsupportedFamilyError(
            f"NetVersion err, only support 4 or 6, wrong version: {family}"
        )


def _split_address(address: str, line: str) -> tuple[str, str, int]:
    """Split a raw endpoint into hex IP, hex port and numeric port."""
    try:
        hex_ip, hex_port = split_endpoint(address)
        return hex_ip, hex_port, decode_port(hex_port)
    except (AddressFormatError, HexDecodeError) as e:
        raise TableFormatError(f"error parsing address {address!r} in {line!r}: {e}") from e


def parse_table(content: str, family: int, port_range: PortRange) -> TableScan:
    """
    Count port usage per connection tuple from socket table content.

    Args:
        content: Full table content including the header line
        family: 4 or 6
        port_range: Ephemeral port range

    Returns:
        TableScan with counters in discovery order

    Raises:
        UnsupportedFamilyError: If family is not 4 or 6
        TableFormatError: If a row is short or an address does not parse
    """
    check_family(family)
    scan = TableScan(family=family, port_range=port_range)
    zero_ip = ZERO_IPS[family]

    # Trailing newlines are not rows; a blank line between rows is
    for line in content.rstrip("\n").splitlines()[1:]:  # Skip header
        fields = line.split()
        if len(fields) < MIN_FIELDS:
            raise TableFormatError(
                f"error parsing table: less than {MIN_FIELDS} columns found {line!r}"
            )

        local_address = fields[1]
        remote_address = fields[2]
        state = fields[3].upper()

        # Accepted side of a socket we already know is listening
        if local_address in scan.listen_sockets:
            continue

        local_ip, hex_port, local_port = _split_address(local_address, line)

        # Same port already listening on the wildcard address
        if f"{zero_ip}:{hex_port}" in scan.listen_sockets:
            continue

        if state == TCP_LISTEN:
            scan.listen_sockets.add(local_address)
            scan.listen_ports.setdefault(local_ip, []).append(local_port)
            continue

        _split_address(remote_address, line)

        key = connection_key(local_ip, remote_address)
        counter = scan.counters.get(key)
        if counter is None:
            counter = PortCounter(
                connect_id=key,
                used_ports=1,
                available_ports=port_range.pool_size,
            )
            scan.counters[key] = counter
        else:
            counter.used_ports += 1

        if local_port in port_range:
            counter.available_ports -= 1

    return scan


def scan_table(
    family: int,
    port_range: PortRange,
    context: "Context",
    path: str | None = None,
) -> TableScan:
    """
    Read and parse one socket table.

    Args:
        family: 4 or 6
        port_range: Ephemeral port range
        context: Execution context
        path: Table path (default: /proc/net/tcp or /proc/net/tcp6)

    Returns:
        TableScan for the family

    Raises:
        UnsupportedFamilyError: If family is not 4 or 6
        TableOpenError: If the table cannot be read
        TableFormatError: If a row does not parse
    """
    check_family(family)
    path = path or PROC_NET_PATHS[family]

    try:
        content = context.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        raise TableOpenError(f"open {path} err: {e}") from e

    return parse_table(content, family, port_range)
