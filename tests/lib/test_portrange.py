"""Tests for portstat.lib.portrange."""

import pytest

from portstat.lib.models import PortRange
from portstat.lib.portrange import (
    PORT_RANGE_PATH,
    ConfigFormatError,
    ConfigRangeError,
    ConfigReadError,
    parse_port_range,
    read_port_range,
)
from tests.conftest import MockContext


class TestParsePortRange:
    """Tests for parse_port_range."""

    def test_default_linux_range(self):
        """Pool size is end - start, not the inclusive count."""
        result = parse_port_range("32768\t60999\n")
        assert result == PortRange(start=32768, end=60999, pool_size=28231)

    def test_space_separated(self):
        assert parse_port_range("1024 65535").pool_size == 64511

    def test_single_port_range(self):
        """start == end is allowed and gives an empty pool."""
        assert parse_port_range("40000 40000") == PortRange(40000, 40000, 0)

    def test_end_is_in_range(self):
        """Ports at both bounds count as ephemeral."""
        port_range = parse_port_range("32768 60999")
        assert 32768 in port_range
        assert 60999 in port_range
        assert 32767 not in port_range
        assert 61000 not in port_range

    @pytest.mark.parametrize("content", ["", "32768", "32768 60999 1", "a b", "-1 5", "1.5 3"])
    def test_bad_format_raises(self, content):
        with pytest.raises(ConfigFormatError):
            parse_port_range(content)

    def test_reversed_range_raises(self):
        with pytest.raises(ConfigRangeError):
            parse_port_range("60999 32768")


class TestReadPortRange:
    """Tests for read_port_range."""

    def test_reads_proc_file(self):
        context = MockContext(file_contents={PORT_RANGE_PATH: "32768\t60999\n"})

        result = read_port_range(context)

        assert result.pool_size == 28231
        assert context.files_read == [PORT_RANGE_PATH]

    def test_custom_path(self):
        context = MockContext(file_contents={"/tmp/range": "10000 20000"})
        assert read_port_range(context, "/tmp/range").pool_size == 10000

    def test_missing_file_raises(self):
        with pytest.raises(ConfigReadError):
            read_port_range(MockContext())

    def test_permission_error_raises(self):
        context = MockContext(file_contents={PORT_RANGE_PATH: PermissionError("denied")})
        with pytest.raises(ConfigReadError, match="denied"):
            read_port_range(context)
