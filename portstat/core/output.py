"""Renderers for snapshots: fixed-width table, Prometheus exposition, JSON."""

import json
import sys
from typing import TextIO

from portstat.lib.models import PortCounter, Snapshot


TABLE_HEADER_FORMAT = "%-98s %-10s %-5s"
TABLE_ROW_FORMAT = "%-98s %-10d %-5d"

USED_METRIC = "tcp_used_ports_total"
AVAILABLE_METRIC = "tcp_available_ports_total"


def format_table_header() -> str:
    return TABLE_HEADER_FORMAT % ("Connect", "UsedPorts", "AvailablePorts")


def format_table(counters: list[PortCounter]) -> str:
    """One fixed-width row per tuple."""
    return "\n".join(
        TABLE_ROW_FORMAT % (c.connect_id, c.used_ports, c.available_ports)
        for c in counters
    )


def format_prom(counters: list[PortCounter]) -> str:
    """Two exposition lines per tuple."""
    lines = []
    for counter in counters:
        lines.append(f'{USED_METRIC}{{connect="{counter.connect_id}"}} {counter.used_ports}')
        lines.append(
            f'{AVAILABLE_METRIC}{{connect="{counter.connect_id}"}} {counter.available_ports}'
        )
    return "\n".join(lines)


def format_json(snapshot: Snapshot) -> str:
    """Single-line JSON document for one snapshot."""
    return json.dumps(snapshot.to_dict())


class Output:
    """Writes snapshots and errors to the terminal."""

    def __init__(self, stream: TextIO | None = None, err_stream: TextIO | None = None):
        self.stream = stream
        self.err_stream = err_stream
        self.errors: list[str] = []
        self._header_printed = False

    def _write(self, text: str, err: bool = False) -> None:
        # Resolve lazily so pytest's capsys sees the output
        stream = (self.err_stream or sys.stderr) if err else (self.stream or sys.stdout)
        print(text, file=stream, flush=True)

    def header(self, mode: str) -> None:
        """Print the table header once; other modes have none."""
        if mode != "table" or self._header_printed:
            return
        self._header_printed = True
        self._write(format_table_header())

    def render(self, snapshot: Snapshot, mode: str = "table") -> None:
        """
        Print a snapshot.

        Args:
            snapshot: Snapshot to print
            mode: "table", "prom" or "json"
        """
        if mode == "json":
            self._write(format_json(snapshot))
            return

        if not snapshot.counters:
            return

        if mode == "prom":
            self._write(format_prom(snapshot.counters))
        else:
            self._write(format_table(snapshot.counters))

    def error(self, message: str) -> None:
        """Record and print an error message."""
        self.errors.append(message)
        self._write(f"portstat: {message}", err=True)
