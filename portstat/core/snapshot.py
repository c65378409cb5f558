"""Snapshot of the tuples closest to ephemeral port exhaustion.

Per family the scanner's counters are ranked first and listening ports are
folded in afterwards, only for the tuples that made the cut. A tuple whose
local IP carries many listening ports can therefore miss the per-family
top N even though it would rank inside it once those ports are counted.
The cross-family ranking then runs on the folded values.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from portstat.core.select import select_top_n
from portstat.lib.address import decode_address, decode_endpoint
from portstat.lib.models import JOINT_MARK, PortCounter, Snapshot, TableScan
from portstat.lib.portrange import read_port_range
from portstat.lib.procnet import scan_table

if TYPE_CHECKING:
    from portstat.core.config import Settings
    from portstat.core.context import Context


def families_for(ip_version: int) -> tuple[int, ...]:
    """Map the --ip-version value to the families to scan (0 means both)."""
    if ip_version == 4:
        return (4,)
    if ip_version == 6:
        return (6,)
    return (4, 6)


def fold_listen_ports(counter: PortCounter, scan: TableScan) -> None:
    """Charge the listening ports of the counter's local IP to the counter."""
    ports = scan.listen_ports.get(counter.local_ip)
    if not ports:
        return
    counter.used_ports += len(ports)
    for port in ports:
        if port in scan.port_range:
            counter.available_ports -= 1


def decoded_connect_id(raw_key: str) -> str:
    """Turn ``HEXIP->HEXIP:HEXPORT`` into ``ip->ip:port``."""
    local_ip, remote_address = raw_key.split(JOINT_MARK, 1)
    remote_ip, remote_port = decode_endpoint(remote_address)
    return f"{decode_address(local_ip)}{JOINT_MARK}{remote_ip}:{remote_port}"


def aggregate_family(scan: TableScan, top_n: int) -> list[PortCounter]:
    """
    Select a family's top N tuples and finish their counters.

    Args:
        scan: Output of scan_table for one family
        top_n: Number of tuples wanted

    Returns:
        Selected counters with listening ports folded in and decoded ids
    """
    selected = select_top_n(scan.counters.values(), top_n)
    for counter in selected:
        fold_listen_ports(counter, scan)
        counter.connect_id = decoded_connect_id(counter.connect_id)
    return selected


def take_snapshot(settings: "Settings", context: "Context") -> Snapshot:
    """
    Scan every requested family and pick the global top N.

    Args:
        settings: Run settings
        context: Execution context

    Returns:
        Snapshot with counters sorted ascending by available ports

    Raises:
        PortstatError: On any read or parse failure; nothing is returned
    """
    port_range = read_port_range(context, settings.port_range_path)
    families = families_for(settings.ip_version)

    merged: list[PortCounter] = []
    for family in families:
        scan = scan_table(family, port_range, context, settings.table_path(family))
        merged.extend(aggregate_family(scan, settings.number))

    return Snapshot(
        timestamp=datetime.now(timezone.utc).isoformat(),
        port_range=port_range,
        families=families,
        counters=select_top_n(merged, settings.number),
    )
