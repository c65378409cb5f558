"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PORT_RANGE_PATH = "/proc/sys/net/ipv4/ip_local_port_range"
TCP_PATH = "/proc/net/tcp"
TCP6_PATH = "/proc/net/tcp6"

TCP_HEADER = (
    "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when "
    "retrnsmt   uid  timeout inode"
)


class MockContext:
    """Mock Context for testing without real /proc access."""

    def __init__(
        self,
        file_contents: dict[str, str | Exception] | None = None,
        max_sleeps: int | None = None,
    ):
        """
        Args:
            file_contents: Path -> content, or an exception to raise on read
            max_sleeps: Raise KeyboardInterrupt on the sleep after this many
        """
        self.file_contents = file_contents or {}
        self.max_sleeps = max_sleeps
        self.files_read: list[str] = []
        self.sleeps: list[float] = []

    def read_file(self, path: str) -> str:
        """Return mocked file content."""
        self.files_read.append(path)
        if path not in self.file_contents:
            raise FileNotFoundError(f"No mock content for: {path}")
        content = self.file_contents[path]
        if isinstance(content, Exception):
            raise content
        return content

    def sleep(self, seconds: float) -> None:
        """Record the sleep instead of sleeping."""
        if self.max_sleeps is not None and len(self.sleeps) >= self.max_sleeps:
            raise KeyboardInterrupt
        self.sleeps.append(seconds)


def load_fixture(category: str, name: str) -> str:
    """Load a fixture file by category and name."""
    fixture_path = FIXTURES_DIR / category / name
    if not fixture_path.exists():
        raise FileNotFoundError(f"Fixture not found: {fixture_path}")
    return fixture_path.read_text()


def tcp_row(index: int, local: str, remote: str, state: str = "01") -> str:
    """Build one /proc/net/tcp data row with the usual trailing columns."""
    return (
        f"{index:>4}: {local} {remote} {state} 00000000:00000000 00:00000000 "
        f"00000000  1000        0 {30000 + index} 1 0000000000000000 20 4 30 10 -1"
    )


def tcp_table(*rows: str) -> str:
    """Header plus rows, newline terminated like the kernel prints it."""
    return "\n".join([TCP_HEADER, *rows]) + "\n"


def proc_files(
    tcp: str | None = None,
    tcp6: str | None = None,
    port_range: str = "32768\t60999\n",
) -> dict[str, str]:
    """File contents for a MockContext, defaulting both tables to empty."""
    return {
        PORT_RANGE_PATH: port_range,
        TCP_PATH: tcp if tcp is not None else tcp_table(),
        TCP6_PATH: tcp6 if tcp6 is not None else tcp_table(),
    }


@pytest.fixture
def mock_context():
    """Factory fixture for creating MockContext instances."""
    def _create(**kwargs) -> MockContext:
        return MockContext(**kwargs)
    return _create


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def host_context() -> MockContext:
    """Context serving the recorded host tables under fixtures/proc."""
    return MockContext(
        file_contents={
            PORT_RANGE_PATH: load_fixture("proc", "ip_local_port_range"),
            TCP_PATH: load_fixture("proc", "net_tcp.txt"),
            TCP6_PATH: load_fixture("proc", "net_tcp6.txt"),
        }
    )
