"""Readers and decoders for the kernel's /proc networking files."""

from portstat.lib.address import (
    AddressFormatError,
    HexDecodeError,
    decode_address,
    decode_endpoint,
    encode_address,
)
from portstat.lib.portrange import (
    ConfigFormatError,
    ConfigRangeError,
    ConfigReadError,
    read_port_range,
)
from portstat.lib.procnet import (
    TableFormatError,
    TableOpenError,
    UnsupportedFamilyError,
    parse_table,
    scan_table,
)

__all__ = [
    "AddressFormatError",
    "ConfigFormatError",
    "ConfigRangeError",
    "ConfigReadError",
    "HexDecodeError",
    "TableFormatError",
    "TableOpenError",
    "UnsupportedFamilyError",
    "decode_address",
    "decode_endpoint",
    "encode_address",
    "parse_table",
    "scan_table",
    "read_port_range",
]
