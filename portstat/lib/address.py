"""Decoding of the hex addresses found in /proc/net/tcp and /proc/net/tcp6.

The kernel prints each address as the raw in-memory bytes of the socket
structure, one 32-bit word at a time in host (little-endian) order. IPv4
addresses are a single word (8 hex digits) and IPv6 addresses are four words
(32 hex digits), so every 4-byte group has to be reversed on its own to get
back to network byte order.
"""

import binascii
import ipaddress

from portstat.errors import PortstatError


WORD_SIZE = 4


class HexDecodeError(PortstatError):
    """Address is not valid hexadecimal."""

    pass


class AddressFormatError(PortstatError):
    """Decoded address has the wrong length or shape."""

    pass


def _swap_words(raw: bytes) -> bytes:
    """Reverse the byte order of every 32-bit word."""
    return b"".join(raw[i : i + WORD_SIZE][::-1] for i in range(0, len(raw), WORD_SIZE))


def decode_address(hex_ip: str) -> str:
    """
    Decode a kernel hex address into an IP literal.

    Args:
        hex_ip: 8 or 32 hex digits as printed by /proc/net/tcp{,6}

    Returns:
        Dotted-quad or colon-hex address. IPv4-mapped IPv6 addresses are
        printed in their dotted IPv4 form.

    Raises:
        HexDecodeError: If hex_ip has odd length or non-hex characters
        AddressFormatError: If hex_ip is not 4 or 16 bytes long
    """
    try:
        raw = binascii.unhexlify(hex_ip)
    except (binascii.Error, ValueError) as e:
        raise HexDecodeError(f"Cannot decode address {hex_ip!r}: {e}") from e

    if len(raw) not in (4, 16):
        raise AddressFormatError(
            f"Unable to parse IP {hex_ip!r}: expected 4 or 16 bytes, got {len(raw)}"
        )

    packed = _swap_words(raw)
    if len(packed) == 4:
        return str(ipaddress.IPv4Address(packed))

    address = ipaddress.IPv6Address(packed)
    if address.ipv4_mapped is not None:
        return str(address.ipv4_mapped)
    return str(address)


def encode_address(ip: str, family: int | None = None) -> str:
    """
    Encode an IP literal into the kernel's hex form.

    Args:
        ip: IPv4 or IPv6 address
        family: Force 6 to encode an IPv4 address as IPv4-mapped IPv6

    Returns:
        Uppercase hex string as /proc/net/tcp{,6} would print it

    Raises:
        AddressFormatError: If ip is not a valid address
    """
    try:
        address = ipaddress.ip_address(ip)
    except ValueError as e:
        raise AddressFormatError(str(e)) from e

    if family == 6 and address.version == 4:
        address = ipaddress.IPv6Address(f"::ffff:{address}")

    return binascii.hexlify(_swap_words(address.packed)).decode("ascii").upper()


def decode_port(hex_port: str) -> int:
    """Parse a hex port number."""
    # int() accepts signs, underscores and 0x prefixes; the kernel never prints those
    if not hex_port or not all(c in "0123456789abcdefABCDEF" for c in hex_port):
        raise HexDecodeError(f"Cannot parse port {hex_port!r}")
    return int(hex_port, 16)


def split_endpoint(endpoint: str) -> tuple[str, str]:
    """Split ``HEXIP:HEXPORT`` into its two raw parts."""
    parts = endpoint.split(":")
    if len(parts) != 2:
        raise AddressFormatError(f"Expected IP:port, got {endpoint!r}")
    return parts[0], parts[1]


def decode_endpoint(endpoint: str) -> tuple[str, int]:
    """
    Decode a raw ``HEXIP:HEXPORT`` endpoint.

    Args:
        endpoint: Address field from /proc/net/tcp{,6}

    Returns:
        tuple: (ip, port)
    """
    hex_ip, hex_port = split_endpoint(endpoint)
    return decode_address(hex_ip), decode_port(hex_port)
