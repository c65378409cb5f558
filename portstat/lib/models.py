"""Data model shared by the scanner, aggregator and renderers."""

from dataclasses import dataclass, field

# Joins the local IP to the remote endpoint in a connection key
JOINT_MARK = "->"


@dataclass(frozen=True)
class PortRange:
    """Ephemeral port range as configured in the kernel."""

    start: int
    end: int
    pool_size: int

    def __contains__(self, port: int) -> bool:
        """True if port is inside [start, end]."""
        return self.start <= port <= self.end


@dataclass
class PortCounter:
    """Port usage for one (local IP, remote IP, remote port) tuple."""

    connect_id: str
    used_ports: int
    available_ports: int

    @property
    def local_ip(self) -> str:
        """Local IP part of the connection key."""
        return self.connect_id.split(JOINT_MARK, 1)[0]

    @property
    def remote_address(self) -> str:
        """Remote endpoint part of the connection key."""
        return self.connect_id.split(JOINT_MARK, 1)[1]

    def to_dict(self) -> dict:
        return {
            "connect": self.connect_id,
            "used_ports": self.used_ports,
            "available_ports": self.available_ports,
        }


@dataclass
class TableScan:
    """Raw counters and listening index read from one socket table."""

    family: int
    port_range: PortRange
    # Insertion order is discovery order and decides ties in selection
    counters: dict[str, PortCounter] = field(default_factory=dict)
    listen_sockets: set[str] = field(default_factory=set)
    listen_ports: dict[str, list[int]] = field(default_factory=dict)


def connection_key(local_ip: str, remote_address: str) -> str:
    """Build the raw connection key ``localIP->remoteIP:remotePort``."""
    return f"{local_ip}{JOINT_MARK}{remote_address}"


@dataclass
class Snapshot:
    """Result of one scan, handed to the renderers."""

    timestamp: str
    port_range: PortRange
    families: tuple[int, ...]
    counters: list[PortCounter]

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "families": list(self.families),
            "port_range": {
                "start": self.port_range.start,
                "end": self.port_range.end,
                "pool_size": self.port_range.pool_size,
            },
            "connections": [c.to_dict() for c in self.counters],
        }
