"""Protocol definitions for icmpping.

Contains:
- IcmpType enum for the ICMP message types we care about
- Transport Protocol for type checking
- EchoParams: per-run wire parameters
- Wire and timing constants
- Logging configuration
"""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol

# TRACE logging level (below DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Progress logging interval (configurable via envvar)
LOG_PROGRESS_INTERVAL = int(os.environ.get("ICMPPING_LOG_INTERVAL", "10"))


class IcmpType(IntEnum):
    """ICMP message types (RFC 792)."""

    ECHO_REPLY = 0
    DEST_UNREACHABLE = 3
    ECHO_REQUEST = 8
    TIME_EXCEEDED = 11


class Transport(Protocol):
    """Protocol for the raw ICMP capability driven by a session."""

    def send(self, payload: bytes, destination: str) -> int: ...
    def receive(self, deadline: float) -> tuple[bytes, str]: ...
    def close(self) -> None: ...


# ICMP header: type(1) code(1) checksum(2) identifier(2) sequence(2)
ICMP_HEADER_SIZE = 8

# Largest datagram read from the raw socket
RECV_BUFFER_SIZE = 1500

# Fixed wire parameters
ECHO_PAYLOAD = b"HELLO-R-U-THERE"
DEFAULT_TTL = 55
DEFAULT_TIMEOUT_S = 5.0  # Probe is dropped if no reply within this time
DEFAULT_DELAY_S = 1.0  # Pause after a reply before the next probe


@dataclass(frozen=True)
class EchoParams:
    """Parameters for an echo session."""

    timeout_s: float = DEFAULT_TIMEOUT_S
    delay_s: float = DEFAULT_DELAY_S
    ttl: int = DEFAULT_TTL
    payload: bytes = ECHO_PAYLOAD
