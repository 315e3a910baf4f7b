"""ICMP echo encoding/decoding for icmpping.

Echo messages use the RFC 792 layout, all fields big-endian:
  [1-byte type][1-byte code][2-byte checksum][2-byte identifier][2-byte sequence][payload]

The checksum is the RFC 1071 internet checksum over the whole message.
"""

import struct
from dataclasses import dataclass

from common.errors import PingError
from common.protocol import ICMP_HEADER_SIZE, IcmpType

_HEADER_FORMAT = "!BBHHH"
_UINT16_MAX = 0xFFFF

# Smallest valid IPv4 header (IHL=5)
_IPV4_MIN_HEADER_SIZE = 20


class EncodingError(PingError):
    """Raised when an echo request cannot be built from the given fields."""

    pass


class DecodingError(PingError):
    """Raised when a received buffer is not a parseable ICMP message."""

    pass


@dataclass(frozen=True)
class DecodedMessage:
    """Header fields of a received ICMP message.

    identifier and sequence are only meaningful for echo types; for other
    types they hold the raw "rest of header" words.
    """

    type: int
    code: int
    identifier: int
    sequence: int
    raw_length: int

    @property
    def is_echo_reply(self) -> bool:
        return self.type == IcmpType.ECHO_REPLY


def checksum(data: bytes) -> int:
    """Compute the RFC 1071 internet checksum."""
    if len(data) % 2:
        data += b"\x00"
    total = sum(int.from_bytes(data[i : i + 2], "big") for i in range(0, len(data), 2))
    total = (total >> 16) + (total & _UINT16_MAX)
    total += total >> 16
    return ~total & _UINT16_MAX


def encode(identifier: int, sequence: int, payload: bytes) -> bytes:
    """Encode an Echo Request message with a valid checksum."""
    if not 0 <= identifier <= _UINT16_MAX:
        raise EncodingError(f"Identifier out of range: {identifier}")
    if not 0 <= sequence <= _UINT16_MAX:
        raise EncodingError(f"Sequence out of range: {sequence}")

    header = struct.pack(_HEADER_FORMAT, IcmpType.ECHO_REQUEST, 0, 0, identifier, sequence)
    csum = checksum(header + payload)
    header = struct.pack(_HEADER_FORMAT, IcmpType.ECHO_REQUEST, 0, csum, identifier, sequence)
    return header + payload


def decode(data: bytes) -> DecodedMessage:
    """Decode the header of an ICMP message.

    Does not assume an Echo Reply; callers must inspect type and code.

    Raises:
        DecodingError: If the buffer is shorter than an ICMP header.
    """
    if len(data) < ICMP_HEADER_SIZE:
        raise DecodingError(
            f"ICMP message too short: {len(data)} bytes, need at least {ICMP_HEADER_SIZE}"
        )
    msg_type, code, _, identifier, sequence = struct.unpack(
        _HEADER_FORMAT, data[:ICMP_HEADER_SIZE]
    )
    return DecodedMessage(
        type=msg_type,
        code=code,
        identifier=identifier,
        sequence=sequence,
        raw_length=len(data),
    )


def strip_ipv4_header(datagram: bytes) -> bytes:
    """Return the ICMP message carried by a raw IPv4 datagram.

    Raises:
        DecodingError: If the datagram is not IPv4 or is truncated.
    """
    if len(datagram) < _IPV4_MIN_HEADER_SIZE:
        raise DecodingError(f"IPv4 datagram too short: {len(datagram)} bytes")

    version = datagram[0] >> 4
    if version != 4:
        raise DecodingError(f"Not an IPv4 datagram (version={version})")

    header_len = (datagram[0] & 0x0F) * 4
    if header_len < _IPV4_MIN_HEADER_SIZE or len(datagram) < header_len:
        raise DecodingError(
            f"Invalid IPv4 header length {header_len} for {len(datagram)}-byte datagram"
        )
    return datagram[header_len:]
